"""
In-memory order store keyed by payment gateway transaction id.

Orders live for the lifetime of the process. The store owns its records:
get() hands out a copy and put() stores a copy, so a caller's mutation is
only visible to other readers once it is written back with put().
"""

import copy
import logging
import threading

from app.domain.models import OrderDomain

logger = logging.getLogger(__name__)


class InMemoryOrderStore:
    """
    Thread-safe dict-backed implementation of IOrderStore.

    Each get/put is a single-key atomic operation; concurrent puts on the
    same key are last-write-wins.
    """

    def __init__(self):
        self._orders: dict[str, OrderDomain] = {}
        self._lock = threading.Lock()

    def get(self, transaction_id: str) -> OrderDomain | None:
        """
        Get the order stored under a transaction id.

        Args:
            transaction_id: Gateway transaction id

        Returns:
            OrderDomain | None: A copy of the stored order, or None if absent
        """
        with self._lock:
            order = self._orders.get(transaction_id)
            return copy.deepcopy(order) if order is not None else None

    def put(self, transaction_id: str, order: OrderDomain) -> None:
        """
        Insert or overwrite the order stored under a transaction id.

        Args:
            transaction_id: Gateway transaction id
            order: Order to store
        """
        with self._lock:
            self._orders[transaction_id] = copy.deepcopy(order)
        logger.debug(f"Stored order {order.id} for transaction {transaction_id} ({order.status.value})")

    def __contains__(self, transaction_id: object) -> bool:
        with self._lock:
            return transaction_id in self._orders

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)
