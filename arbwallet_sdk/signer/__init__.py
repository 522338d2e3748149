"""
Signer interface for the ArbWallet SDK.
"""
from typing import Protocol, runtime_checkable

from ..models import ChainContext, SignedTransaction, TransactionRequest


@runtime_checkable
class Signer(Protocol):
    """Protocol for anything that can sign transactions for one account"""
    address: str

    def sign(self, request: TransactionRequest, context: ChainContext) -> SignedTransaction:
        """Sign a request with the given chain context. Must not do network I/O."""
        ...


from .local import KeyMaterial  # noqa: E402

__all__ = ["Signer", "KeyMaterial"]
