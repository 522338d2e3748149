"""
Network configuration for the ArbWallet SDK.

Presets ship in ``networks.json``. RPC URLs can be overridden per call or
with a ``<NETWORK>_RPC_URL`` environment variable (``arbitrum-one`` reads
``ARBITRUM_ONE_RPC_URL``).
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Environment variable naming the default network
NETWORK_ENV_VAR = "ARBWALLET_NETWORK"
DEFAULT_NETWORK = "arbitrum-sepolia"


class NetworkConfig:
    """Loads and queries the packaged network presets."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network presets, cached after the first read.

        Returns:
            Mapping of network name to its configuration
        """
        if cls._networks_cache is None:
            text = importlib.resources.files("arbwallet_sdk").joinpath("networks.json").read_text(encoding="utf-8")
            cls._networks_cache = json.loads(text)
            logger.debug("Loaded %d network presets", len(cls._networks_cache))
        return cls._networks_cache

    @classmethod
    def list_networks(cls) -> List[str]:
        return list(cls.load_networks().keys())

    @classmethod
    def get_network(cls, name: str) -> Dict[str, Any]:
        """
        Get the configuration for a network.

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if name not in networks:
            raise ValueError(
                f"Unknown network '{name}'. Available: {', '.join(networks.keys())}"
            )
        return networks[name]

    @classmethod
    def get_rpc_url(cls, name: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL for a network.

        Precedence: ``override``, then ``<NETWORK>_RPC_URL``, then the preset.
        """
        if override:
            return override

        env_var = f"{name.upper().replace('-', '_')}_RPC_URL"
        env_url = os.environ.get(env_var)
        if env_url:
            return env_url

        return cls.get_network(name)["rpc"]

    @classmethod
    def get_chain_id(cls, name: str) -> int:
        return int(cls.get_network(name)["chainId"])

    @classmethod
    def get_explorer_url(cls, name: str) -> str:
        return cls.get_network(name)["explorer"]

    @classmethod
    def default_network(cls) -> str:
        """Network named by ``ARBWALLET_NETWORK``, else ``arbitrum-sepolia``."""
        return os.environ.get(NETWORK_ENV_VAR, DEFAULT_NETWORK)
