"""
Data models for the ArbWallet SDK.
"""
from decimal import Decimal
from typing import Dict, Any, Optional, List

from pydantic import BaseModel, Field, PrivateAttr

from .units import to_base_units, to_decimal_string, MAX_DECIMALS, UINT256_MAX


class Amount(BaseModel):
    """A non-negative quantity held as integer base units at a fixed precision"""
    value: int = Field(..., ge=0, le=UINT256_MAX, strict=True)
    decimals: int = Field(..., ge=0, le=MAX_DECIMALS, strict=True)

    class Config:
        frozen = True

    @classmethod
    def from_decimal_string(cls, amount: str, decimals: int) -> "Amount":
        """Parse a decimal string such as ``"10.5"`` at the given precision."""
        return cls(value=to_base_units(amount, decimals), decimals=decimals)

    def to_decimal(self) -> Decimal:
        """Exact ``Decimal`` equivalent of this amount."""
        return Decimal(str(self))

    def __str__(self) -> str:
        return to_decimal_string(self.value, self.decimals)


class FeeParams(BaseModel):
    """Fee parameters, either legacy gas price or EIP-1559"""
    gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    @property
    def is_eip1559(self) -> bool:
        return self.max_fee_per_gas is not None and self.max_priority_fee_per_gas is not None

    @property
    def is_complete(self) -> bool:
        return self.is_eip1559 or self.gas_price is not None


class ChainContext(BaseModel):
    """Chain parameters needed to sign one transaction"""
    nonce: Optional[int] = None
    chain_id: Optional[int] = None
    gas_limit: Optional[int] = None
    fees: Optional[FeeParams] = None

    def missing_fields(self) -> List[str]:
        """Names of the fields that prevent signing."""
        missing = [
            name for name in ("nonce", "chain_id", "gas_limit")
            if getattr(self, name) is None
        ]
        if self.fees is None or not self.fees.is_complete:
            missing.append("fees")
        return missing


class TransactionRequest(BaseModel):
    """Unsigned transfer or contract call; submitted exactly once"""
    to: str
    value: int = Field(0, ge=0)
    data: bytes = b""

    _consumed: bool = PrivateAttr(default=False)

    def mark_consumed(self) -> None:
        """
        Flag the request as handed to the signer.

        Raises:
            ValueError: If the request was already submitted
        """
        if self._consumed:
            raise ValueError("TransactionRequest has already been submitted")
        self._consumed = True


class SignedTransaction(BaseModel):
    """Raw signed transaction ready for broadcast"""
    raw_transaction: bytes
    tx_hash: str
    nonce: int


class TransactionHandle(BaseModel):
    """Reference to a broadcast transaction"""
    tx_hash: str
    nonce: int
    chain_id: int
    from_address: str
    to_address: str
    value: int
    data: str = "0x"


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain"""
    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    contract_address: Optional[str] = Field(None, alias="contractAddress")
    effective_gas_price: Optional[int] = Field(None, alias="effectiveGasPrice")
    logs: List[Dict[str, Any]] = []

    class Config:
        populate_by_name = True

    @property
    def success(self) -> bool:
        return self.status == 1


class TokenDescriptor(BaseModel):
    """ERC-20 contract address with its decimals, fetched per call"""
    address: str
    decimals: int = Field(..., ge=0, le=MAX_DECIMALS)
