"""
Interfaces/Protocols for order services (Dependency Inversion Principle).

These protocols define contracts that services must implement,
allowing for loose coupling and easy testing.
"""

from typing import Protocol

from app.domain.models import OrderDomain


class IOrderStore(Protocol):
    """Protocol for order storage keyed by transaction id."""

    def get(self, transaction_id: str) -> OrderDomain | None:
        """Return the stored order, or None if absent."""
        ...

    def put(self, transaction_id: str, order: OrderDomain) -> None:
        """Insert or overwrite the stored order."""
        ...


class IFulfillmentClient(Protocol):
    """Protocol for the upstream provisioning client."""

    async def submit(
        self,
        provider_service_id: str,
        link: str,
        scaled_quantity: int,
        idempotency_key: str | None = None,
    ) -> str:
        """Submit one line item, return the provider order id."""
        ...
