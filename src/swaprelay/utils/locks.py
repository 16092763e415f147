"""Per-signing-key locking.

Two trades signed with the same key race each other at the mempool level. When
SERIALIZE_SIGNING is enabled the quote-to-broadcast section of a trade runs
under this lock so trades for one key go out one at a time. Disabled by default.
"""

import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Global lock registry: signer public key -> asyncio.Lock
_signing_locks: dict[str, asyncio.Lock] = {}


def get_signing_lock(pubkey: str) -> asyncio.Lock:
    """Get or create the lock for a signing key.

    Args:
        pubkey: Base58 public key of the signer

    Returns:
        asyncio.Lock for the key
    """
    if pubkey not in _signing_locks:
        _signing_locks[pubkey] = asyncio.Lock()
    return _signing_locks[pubkey]


class LockTimeoutError(Exception):
    """Raised when a lock cannot be acquired within the timeout period."""

    pass


class SigningKeyLock:
    """Context manager for exclusive use of a signing key.

    Example:
        async with SigningKeyLock(pubkey, timeout=60.0):
            quote = await aggregator.get_quote(...)
            ...
            txid = await broadcaster.submit(signed)
    """

    def __init__(
        self,
        pubkey: str,
        timeout: Optional[float] = 60.0,
        operation: str = "trade",
    ):
        """Initialize the lock.

        Args:
            pubkey: Signer public key
            timeout: Maximum time to wait for lock (None = wait forever)
            operation: Description of the operation for logging
        """
        self.pubkey = pubkey
        self.timeout = timeout
        self.operation = operation
        self._lock: Optional[asyncio.Lock] = None
        self._acquired = False

    async def _acquire(self, lock: asyncio.Lock) -> bool:
        """Wait up to `timeout` for the lock.

        A grant that lands while the wait is timing out still counts as
        acquired, so the lock is always released by whoever holds it.

        Returns:
            True if the lock is now held by this context
        """
        if not self.timeout:
            await lock.acquire()
            return True

        waiter = asyncio.ensure_future(lock.acquire())
        try:
            done, _ = await asyncio.wait({waiter}, timeout=self.timeout)
        except asyncio.CancelledError:
            waiter.cancel()
            if waiter.done() and not waiter.cancelled():
                lock.release()
            raise

        if waiter in done:
            return True

        waiter.cancel()
        try:
            await waiter
        except asyncio.CancelledError:
            return False
        return True

    async def __aenter__(self) -> "SigningKeyLock":
        """Acquire the lock.

        Raises:
            LockTimeoutError: If the lock is not acquired within the timeout
        """
        self._lock = get_signing_lock(self.pubkey)

        self._acquired = await self._acquire(self._lock)
        if not self._acquired:
            logger.warning(
                f"Signing lock timeout for {self.pubkey} after {self.timeout}s: {self.operation}"
            )
            raise LockTimeoutError(
                f"Could not acquire signing lock for {self.pubkey} within {self.timeout}s"
            )

        logger.debug(f"Signing lock acquired for {self.pubkey}: {self.operation}")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Release the lock."""
        if self._acquired and self._lock:
            self._lock.release()
            self._acquired = False
            logger.debug(f"Signing lock released for {self.pubkey}: {self.operation}")
        return False


def clear_signing_locks():
    """Clear all signing locks (for testing)."""
    _signing_locks.clear()
