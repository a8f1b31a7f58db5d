"""
Per-item fulfillment outcome.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ItemFulfillment:
    """
    Outcome of submitting one line item to the provisioning API.

    Exactly one of provider_order_id / error is set.
    """

    item_index: int
    provider_service_id: str
    scaled_quantity: int
    idempotency_key: str
    provider_order_id: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.provider_order_id is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "itemIndex": self.item_index,
            "providerServiceId": self.provider_service_id,
            "quantity": self.scaled_quantity,
            "idempotencyKey": self.idempotency_key,
            "providerOrderId": self.provider_order_id,
            "error": self.error,
            "succeeded": self.succeeded,
        }
