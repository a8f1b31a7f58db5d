"""
Payment event domain model.

Gateway notification as seen by the reconciler, independent of the
HTTP envelope it arrived in.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentEvent:
    """
    Payment gateway notification.

    Attributes:
        event: Event type (e.g. TRANSACTION_PAID)
        token: Shared secret sent by the gateway
        transaction_id: Gateway transaction id, if the event carries one
        transaction_status: Gateway transaction status, if the event carries one
    """

    event: str
    token: str | None = None
    transaction_id: str | None = None
    transaction_status: str | None = None

    @property
    def has_transaction(self) -> bool:
        return self.transaction_id is not None
