"""
Local key material: secp256k1 private key held in process memory.
"""
import logging
from typing import Optional, Union

from eth_account import Account
from eth_typing import ChecksumAddress

from ..exceptions import InvalidKey, SigningError
from ..models import ChainContext, SignedTransaction, TransactionRequest
from ..utils import hex_to_bytes, to_hex

logger = logging.getLogger(__name__)

# Order of the secp256k1 curve; valid private keys are 1..N-1
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

DEFAULT_ACCOUNT_PATH = "m/44'/60'/0'/0/0"


def _hd_wallet_account():
    # Mnemonic support lives behind this flag in eth-account
    Account.enable_unaudited_hdwallet_features()
    return Account


def _parse_private_key(secret: Union[str, bytes, bytearray]) -> bytearray:
    if isinstance(secret, str):
        try:
            raw = hex_to_bytes(secret.strip())
        except ValueError:
            raise InvalidKey("Private key is not valid hex")
    elif isinstance(secret, (bytes, bytearray)):
        raw = bytes(secret)
    else:
        raise InvalidKey(f"Private key must be hex string or bytes, got {type(secret).__name__}")

    if len(raw) != 32:
        raise InvalidKey(f"Private key must be 32 bytes, got {len(raw)}")

    scalar = int.from_bytes(raw, byteorder="big")
    if not 1 <= scalar < SECP256K1_N:
        raise InvalidKey("Private key is outside the secp256k1 range")

    return bytearray(raw)


class KeyMaterial:
    """
    Signing capability for a single account.

    The secret is immutable after construction and is only revealed through
    ``export_private_key`` / ``export_mnemonic``. Use one of the
    ``from_private_key``, ``from_mnemonic`` or ``generate`` constructors.
    """

    def __init__(self, secret: bytearray, mnemonic: Optional[str] = None):
        self._secret = secret
        self._mnemonic = mnemonic
        self._destroyed = False
        self._address: ChecksumAddress = Account.from_key(bytes(secret)).address

    @classmethod
    def from_private_key(cls, secret: Union[str, bytes, bytearray]) -> "KeyMaterial":
        """
        Import an existing private key.

        Args:
            secret: 32-byte key as bytes or hex string (0x prefix optional)

        Raises:
            InvalidKey: If the key is malformed or not a valid secp256k1 scalar
        """
        return cls(_parse_private_key(secret))

    @classmethod
    def from_mnemonic(
        cls,
        phrase: str,
        account_path: str = DEFAULT_ACCOUNT_PATH,
        passphrase: str = ""
    ) -> "KeyMaterial":
        """
        Derive key material from a BIP-39 mnemonic phrase.

        Raises:
            InvalidKey: If the phrase or derivation path is invalid
        """
        try:
            account = _hd_wallet_account().from_mnemonic(
                phrase, passphrase=passphrase, account_path=account_path
            )
        except Exception:
            # The library message echoes the phrase
            raise InvalidKey("Invalid mnemonic phrase or derivation path") from None
        return cls(bytearray(account.key), mnemonic=phrase)

    @classmethod
    def generate(cls, num_words: int = 12, account_path: str = DEFAULT_ACCOUNT_PATH) -> "KeyMaterial":
        """
        Generate a fresh key from the OS random source, with a recoverable mnemonic.
        """
        account, phrase = _hd_wallet_account().create_with_mnemonic(num_words=num_words, account_path=account_path)
        material = cls(bytearray(account.key), mnemonic=phrase)
        logger.info("Generated new account %s", material.address)
        return material

    @property
    def address(self) -> ChecksumAddress:
        return self._address

    @property
    def has_mnemonic(self) -> bool:
        return self._mnemonic is not None

    def sign(self, request: TransactionRequest, context: ChainContext) -> SignedTransaction:
        """
        Sign a transaction request.

        Signing is deterministic for identical request and context.

        Args:
            request: Recipient, value and call data
            context: Nonce, chain id, gas limit and fee parameters

        Returns:
            Signed transaction with its raw bytes and hash

        Raises:
            SigningError: If the context is incomplete or the key was destroyed
        """
        if self._destroyed:
            raise SigningError("Key material has been destroyed")

        missing = context.missing_fields()
        if missing:
            raise SigningError(f"Incomplete chain context, missing: {', '.join(missing)}")

        tx = {
            "to": request.to,
            "value": request.value,
            "data": to_hex(request.data),
            "nonce": context.nonce,
            "chainId": context.chain_id,
            "gas": context.gas_limit,
        }
        fees = context.fees
        if fees.is_eip1559:
            tx["maxFeePerGas"] = fees.max_fee_per_gas
            tx["maxPriorityFeePerGas"] = fees.max_priority_fee_per_gas
            tx["type"] = 2
        else:
            tx["gasPrice"] = fees.gas_price

        try:
            signed = Account.sign_transaction(tx, bytes(self._secret))
        except Exception as e:
            raise SigningError(f"Failed to sign transaction: {e}") from e

        return SignedTransaction(
            raw_transaction=bytes(signed.raw_transaction),
            tx_hash=to_hex(signed.hash),
            nonce=context.nonce,
        )

    def export_private_key(self) -> str:
        """Reveal the private key as a 0x-prefixed hex string."""
        if self._destroyed:
            raise InvalidKey("Key material has been destroyed")
        return to_hex(self._secret)

    def export_mnemonic(self) -> Optional[str]:
        """Reveal the mnemonic phrase, or None for imported raw keys."""
        if self._destroyed:
            raise InvalidKey("Key material has been destroyed")
        return self._mnemonic

    def destroy(self) -> None:
        """Zero the secret buffer and forget the mnemonic."""
        for i in range(len(self._secret)):
            self._secret[i] = 0
        self._mnemonic = None
        self._destroyed = True

    def __repr__(self) -> str:
        return f"KeyMaterial(address={self._address})"
