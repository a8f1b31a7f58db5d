"""
OrderValidator service for turning upsert payloads into domain orders.

This service follows SRP (Single Responsibility Principle) by focusing only on
validation and conversion of order payloads registered by the external
order-creation flow.
"""

import logging
from datetime import UTC

from app.api.v1.schemas.payment_schemas import OrderUpsertRequest
from app.domain.models import CustomerDomain, LineItemDomain, OrderDomain
from app.domain.value_objects import Money
from app.utils.error_handler import ErrorCode, ValidationException

logger = logging.getLogger(__name__)


class OrderValidator:
    """
    Validates order payloads and builds OrderDomain instances.

    Responsibilities:
    - Check the payload transaction id against the store key
    - Build customer, line items and money values
    - Surface domain invariant violations (e.g. total mismatch) as ValidationException
    """

    def validate(self, request: OrderUpsertRequest) -> OrderDomain:
        """
        Validate an upsert request and return the order to store.

        Args:
            request: Parsed upsert body

        Returns:
            OrderDomain: Order keyed by request.transaction_id

        Raises:
            ValidationException: If the order violates a domain invariant
        """
        payload = request.order
        transaction_id = request.transaction_id

        if payload.transaction_id and payload.transaction_id != transaction_id:
            raise ValidationException(
                message="Order transactionId doesn't match the upsert key",
                field="order.transactionId",
                invalid_value=payload.transaction_id,
                expected_format=transaction_id,
                error_code=ErrorCode.INVALID_ORDER_DATA,
            )

        try:
            currency = payload.currency.upper()
            order = OrderDomain(
                transaction_id=transaction_id,
                customer=CustomerDomain(
                    name=payload.customer.name,
                    email=payload.customer.email,
                    phone=payload.customer.phone,
                    identity_document=payload.customer.identity_document,
                ),
                items=[
                    LineItemDomain(
                        provider_service_id=item.provider_service_id,
                        link=item.link,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                    )
                    for item in payload.items
                ],
                total=Money(amount=payload.total, currency=currency),
                status=payload.status,
                provider_order_id=payload.provider_order_id,
            )
        except ValueError as e:
            raise ValidationException(
                message=str(e),
                field="order",
                invalid_value=transaction_id,
                error_code=ErrorCode.INVALID_ORDER_DATA,
            ) from e

        if payload.id:
            order.id = payload.id
        if payload.created_at:
            created_at = payload.created_at
            order.created_at = created_at if created_at.tzinfo else created_at.replace(tzinfo=UTC)

        logger.debug(f"Order payload for transaction {transaction_id} validated ({order.items_count} items)")
        return order
