"""
Remote node access for the ArbWallet SDK.

``ChainClient`` is the abstract contract the wallet depends on;
``Web3ChainClient`` is the default implementation over web3.py.
"""
from .base import ChainClient
from .web3_client import Web3ChainClient, convert_receipt, validate_rpc_url

__all__ = ['ChainClient', 'Web3ChainClient', 'convert_receipt', 'validate_rpc_url']
