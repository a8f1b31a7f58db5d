"""
Order domain model (Aggregate Root).

Represents a paid-for purchase linking a gateway transaction to the
line items that must be fulfilled upstream.
"""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from app.domain.value_objects.money import Money

from .customer import CustomerDomain
from .fulfillment import ItemFulfillment
from .line_item import LineItemDomain


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class OrderDomain:
    """
    Domain model representing an order (Aggregate Root).

    The total must match the sum of its line items at centavo precision.
    Status changes go through app.services.orders.state_machine.

    Attributes:
        transaction_id: Payment gateway transaction id (store key)
        customer: Buyer data
        items: Ordered, non-empty list of line items
        total: Order total amount
        status: Lifecycle state
        provider_order_id: Provider id of the first fulfilled item, set on completion
        fulfillments: Per-item outcomes of the last fulfillment attempt
        id: Internal order id
        created_at: Creation time (UTC)
        updated_at: Time of the last status transition (UTC)
    """

    transaction_id: str
    customer: CustomerDomain
    items: list[LineItemDomain]
    total: Money
    status: OrderStatus = OrderStatus.PENDING
    provider_order_id: str | None = None
    fulfillments: list[ItemFulfillment] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate order data after initialization."""
        if not self.transaction_id:
            raise ValueError("Transaction id is required")

        if not self.items:
            raise ValueError("Order must contain at least one line item")

        if not self.total.is_positive:
            raise ValueError(f"Order total must be positive: {self.total.amount}")

        expected_total = self.items_total
        if expected_total.amount != self.total.amount:
            raise ValueError(f"Order total {self.total.amount} doesn't match sum of items {expected_total.amount}")

    @property
    def items_total(self) -> Money:
        """Sum of unit_price * quantity over all items, rounded to centavos once."""
        return Money(amount=sum((item.subtotal for item in self.items), Decimal("0")), currency=self.total.currency)

    @property
    def items_count(self) -> int:
        return len(self.items)

    @property
    def failed_items(self) -> list[ItemFulfillment]:
        return [outcome for outcome in self.fulfillments if not outcome.succeeded]

    def to_dict(self) -> dict[str, Any]:
        """Convert order to its JSON representation."""
        return {
            "id": self.id,
            "transactionId": self.transaction_id,
            "customer": self.customer.to_dict(),
            "items": [item.to_dict() for item in self.items],
            "total": str(self.total.amount),
            "currency": self.total.currency,
            "status": self.status.value,
            "providerOrderId": self.provider_order_id,
            "fulfillments": [outcome.to_dict() for outcome in self.fulfillments],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
