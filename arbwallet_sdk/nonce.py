"""
Per-account nonce sequencing.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from .chain.base import ChainClient

logger = logging.getLogger(__name__)


class NonceManager:
    """
    Hands out nonces for one account, one transaction at a time.

    A nonce is held from reservation until the ``reserve()`` block exits, so
    concurrent senders queue on the lock and never sign with the same nonce.
    The next nonce is ``max(node pending count, last used + 1)``. Any
    exception inside the block clears the local counter so the following
    reservation trusts the node again.
    """

    def __init__(self, chain: ChainClient, address: str):
        self._chain = chain
        self._address = address
        self._lock = asyncio.Lock()
        self._next_nonce: Optional[int] = None

    @property
    def next_nonce(self) -> Optional[int]:
        """Locally tracked next nonce, or None if it must be fetched."""
        return self._next_nonce

    def invalidate(self) -> None:
        """Forget the local counter."""
        self._next_nonce = None

    @asynccontextmanager
    async def reserve(self) -> AsyncIterator[int]:
        """
        Reserve the next nonce for the duration of the block.

        Yields:
            Nonce to sign with
        """
        async with self._lock:
            remote = await self._chain.get_transaction_count(self._address)
            nonce = remote if self._next_nonce is None else max(remote, self._next_nonce)
            logger.debug("Reserved nonce %d for %s (node reports %d)", nonce, self._address, remote)
            try:
                yield nonce
            except BaseException:
                self.invalidate()
                raise
            self._next_nonce = nonce + 1
