"""
TransactionLock - single-admission guard for payment reconciliation.

Prevents concurrent reconciliation of the same gateway transaction when the
payment gateway redelivers a webhook while the first delivery is still
fanning out to the provider. Only the first delivery gets in; any delivery
arriving while the lock is held fails fast instead of waiting.

Usage:
    from app.utils.order_lock import LockAcquisitionError, TransactionLockRegistry

    locks = TransactionLockRegistry()
    try:
        async with locks.acquire("tx_123"):
            await reconcile(...)
    except LockAcquisitionError:
        # Another delivery is handling this transaction
        ...
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

logger = logging.getLogger(__name__)

__all__ = ["TransactionLockRegistry", "LockAcquisitionError"]


class LockAcquisitionError(Exception):
    """Raised when the transaction is already being reconciled."""

    def __init__(self, transaction_id: str):
        super().__init__(f"Transaction {transaction_id} is already being processed")
        self.transaction_id = transaction_id


class TransactionLockRegistry:
    """
    In-process registry of held transaction locks.

    The application runs on a single event loop and the check-and-set in
    acquire() has no await in between, so a plain dict is enough.
    """

    def __init__(self):
        self._held: Dict[str, float] = {}

    def is_locked(self, transaction_id: str) -> bool:
        return transaction_id in self._held

    @asynccontextmanager
    async def acquire(self, transaction_id: str) -> AsyncIterator[None]:
        """
        Hold the lock for a transaction for the duration of the block.

        Raises:
            LockAcquisitionError: If the transaction is already locked
        """
        if transaction_id in self._held:
            logger.debug(f"Lock for transaction {transaction_id} already held")
            raise LockAcquisitionError(transaction_id)

        self._held[transaction_id] = time.monotonic()
        logger.debug(f"Lock acquired for transaction {transaction_id}")
        try:
            yield
        finally:
            started = self._held.pop(transaction_id, None)
            duration = time.monotonic() - started if started is not None else 0.0
            logger.debug(f"Lock released for transaction {transaction_id} (held for {duration:.2f}s)")

    def __len__(self) -> int:
        return len(self._held)
