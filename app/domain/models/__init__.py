"""
Domain models for business entities.

These models represent core business concepts and contain
business logic and invariants.
"""

from .customer import CustomerDomain
from .fulfillment import ItemFulfillment
from .line_item import QUANTITY_SCALE, LineItemDomain
from .order import OrderDomain, OrderStatus
from .payment_event import PaymentEvent

__all__ = [
    "OrderDomain",
    "OrderStatus",
    "LineItemDomain",
    "CustomerDomain",
    "ItemFulfillment",
    "QUANTITY_SCALE",
    "PaymentEvent",
]
