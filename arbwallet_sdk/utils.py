"""
Utility functions for the ArbWallet SDK.
"""
from typing import Any, Union

from eth_typing import ChecksumAddress
from web3 import Web3

from .exceptions import InvalidAddress


def to_checksum_address(value: Any) -> ChecksumAddress:
    """
    Validate an address and return its EIP-55 checksummed form.

    Lower-case and upper-case hex are accepted as-is. Mixed-case input
    must carry a valid checksum.

    Args:
        value: Address as a 0x-prefixed hex string

    Returns:
        Checksummed address

    Raises:
        InvalidAddress: If the value is not a well-formed address
    """
    if not isinstance(value, str):
        raise InvalidAddress(f"Address must be a string, got {type(value).__name__}")
    if not value.startswith(("0x", "0X")) or not Web3.is_address(value):
        raise InvalidAddress(f"Invalid address: {value!r}")
    return Web3.to_checksum_address(value)


def to_hex(data: Union[bytes, bytearray]) -> str:
    """Hex-encode bytes with a 0x prefix."""
    return "0x" + bytes(data).hex()


def hex_to_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    """Decode a 0x-prefixed (or bare) hex string; bytes pass through unchanged."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)
