"""
ArbWallet SDK - client-side wallet for Arbitrum and other EVM chains.
"""
from .version import __version__
from .exceptions import (
    WalletError,
    InvalidAddress,
    InvalidAmount,
    InvalidKey,
    SigningError,
    UnknownToken,
    NetworkError,
    RemoteError,
    ContractReverted,
    NonceConflict,
    BroadcastUncertain,
)
from .models import (
    Amount,
    FeeParams,
    ChainContext,
    TransactionRequest,
    SignedTransaction,
    TransactionHandle,
    TxReceipt,
    TokenDescriptor,
)
from .units import ETHER_DECIMALS, to_base_units, to_decimal_string
from .signer import Signer, KeyMaterial
from .chain import ChainClient, Web3ChainClient
from .config import NetworkConfig
from .transactions import TransactionSender, NativeTransferBuilder
from .token import TokenClient
from .wallet import Wallet

__all__ = [
    "__version__",
    "Wallet",
    "KeyMaterial",
    "Signer",
    "ChainClient",
    "Web3ChainClient",
    "TokenClient",
    "TransactionSender",
    "NativeTransferBuilder",
    "NetworkConfig",
    "Amount",
    "FeeParams",
    "ChainContext",
    "TransactionRequest",
    "SignedTransaction",
    "TransactionHandle",
    "TxReceipt",
    "TokenDescriptor",
    "ETHER_DECIMALS",
    "to_base_units",
    "to_decimal_string",
    "WalletError",
    "InvalidAddress",
    "InvalidAmount",
    "InvalidKey",
    "SigningError",
    "UnknownToken",
    "NetworkError",
    "RemoteError",
    "ContractReverted",
    "NonceConflict",
    "BroadcastUncertain",
]
