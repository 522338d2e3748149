"""
Version information for the ArbWallet SDK.

Installed distributions report their metadata version. Source checkouts
read ``pyproject.toml`` next to the package.
"""
import importlib.metadata
import pathlib
from typing import Optional, Tuple

import tomli

DISTRIBUTION = "arbwallet-sdk"
FALLBACK_VERSION = "0.1.0"


def _pyproject_version(root: pathlib.Path) -> Optional[str]:
    path = root / "pyproject.toml"
    try:
        with path.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return None


def _resolve_version() -> str:
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return _pyproject_version(pathlib.Path(__file__).parent.parent) or FALLBACK_VERSION


__version__ = _resolve_version()
__version_info__: Tuple[int, ...] = tuple(int(p) for p in __version__.split(".")[:3] if p.isdigit())
