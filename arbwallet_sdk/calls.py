"""
Encoded call shapes for the three supported ERC-20 functions.

Only ``balanceOf(address)``, ``decimals()`` and ``transfer(address,uint256)``
are supported. Each builder returns an opaque ``EncodedCall``.
"""
from dataclasses import dataclass

from web3 import Web3

from .exceptions import InvalidAmount
from .units import UINT256_MAX
from .utils import to_checksum_address, to_hex

BALANCE_OF_SIGNATURE = "balanceOf(address)"
DECIMALS_SIGNATURE = "decimals()"
TRANSFER_SIGNATURE = "transfer(address,uint256)"


def function_selector(signature: str) -> bytes:
    """First four bytes of the keccak-256 hash of a function signature."""
    return bytes(Web3.keccak(text=signature)[:4])


BALANCE_OF_SELECTOR = function_selector(BALANCE_OF_SIGNATURE)  # 0x70a08231
DECIMALS_SELECTOR = function_selector(DECIMALS_SIGNATURE)      # 0x313ce567
TRANSFER_SELECTOR = function_selector(TRANSFER_SIGNATURE)      # 0xa9059cbb


@dataclass(frozen=True)
class EncodedCall:
    """Selector plus packed arguments for one contract function call."""
    signature: str
    data: bytes

    @property
    def selector(self) -> bytes:
        return self.data[:4]

    def hex(self) -> str:
        return to_hex(self.data)


def _address_word(address: str) -> bytes:
    return bytes.fromhex(to_checksum_address(address)[2:]).rjust(32, b"\x00")


def _uint256_word(value: int) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"uint256 argument must be an int, got {type(value).__name__}")
    if not 0 <= value <= UINT256_MAX:
        raise InvalidAmount(f"Value {value} does not fit in uint256")
    return value.to_bytes(32, byteorder="big")


def balance_of_call(owner: str) -> EncodedCall:
    """Encode ``balanceOf(owner)``."""
    return EncodedCall(BALANCE_OF_SIGNATURE, BALANCE_OF_SELECTOR + _address_word(owner))


def decimals_call() -> EncodedCall:
    """Encode ``decimals()``."""
    return EncodedCall(DECIMALS_SIGNATURE, DECIMALS_SELECTOR)


def transfer_call(to: str, amount: int) -> EncodedCall:
    """Encode ``transfer(to, amount)`` with ``amount`` in base units."""
    return EncodedCall(
        TRANSFER_SIGNATURE,
        TRANSFER_SELECTOR + _address_word(to) + _uint256_word(amount)
    )


def decode_uint256(data: bytes) -> int:
    """
    Decode a single uint256 return value.

    Raises:
        ValueError: If the data is shorter than one 32-byte word
    """
    if len(data) < 32:
        raise ValueError(f"Expected a 32-byte word, got {len(data)} bytes")
    return int.from_bytes(data[:32], byteorder="big")


def decode_uint8(data: bytes) -> int:
    """
    Decode a single uint8 return value (ABI-padded to 32 bytes).

    Raises:
        ValueError: If the data is short or the value exceeds 255
    """
    value = decode_uint256(data)
    if value > 0xFF:
        raise ValueError(f"Value {value} does not fit in uint8")
    return value
