"""
Line item domain model.

Represents one purchasable unit of an order, fulfilled independently
through the provisioning API.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

# Orders count quantities in thousands; the provider counts single units.
QUANTITY_SCALE = 1000


@dataclass
class LineItemDomain:
    """
    Domain model representing an order line item.

    The unit price is kept at full precision: per-1000 catalog prices often
    carry fractions of a centavo, and only the order total is rounded.

    Attributes:
        provider_service_id: Upstream catalog entry to order
        link: Target resource the service is applied to
        quantity: Quantity in thousands
        unit_price: Price per 1000 units, in the order currency
    """

    provider_service_id: str
    link: str
    quantity: int
    unit_price: Decimal

    def __post_init__(self) -> None:
        """Validate line item data after initialization."""
        if not self.provider_service_id:
            raise ValueError("Line item provider service id is required")

        if not self.link:
            raise ValueError("Line item link is required")

        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError(f"Line item quantity must be a positive integer: {self.quantity}")

        if not isinstance(self.unit_price, Decimal):
            self.unit_price = Decimal(str(self.unit_price))

        if not self.unit_price.is_finite() or self.unit_price <= 0:
            raise ValueError(f"Line item unit price must be positive: {self.unit_price}")

    @property
    def scaled_quantity(self) -> int:
        """Quantity in provider units."""
        return self.quantity * QUANTITY_SCALE

    @property
    def subtotal(self) -> Decimal:
        """Unit price times quantity, unrounded."""
        return self.unit_price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        """Convert line item to its JSON representation."""
        return {
            "providerServiceId": self.provider_service_id,
            "link": self.link,
            "quantity": self.quantity,
            "unitPrice": str(self.unit_price),
        }
