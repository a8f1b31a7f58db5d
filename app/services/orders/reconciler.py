"""
WebhookReconciler - drives paid orders from the payment webhook to fulfillment.

Flow for an accepted payment event:
1. Authenticate the shared webhook token
2. Ignore anything that is not a completed TRANSACTION_PAID event
3. Look up the order by transaction id (unknown ids are acknowledged silently)
4. Admit a single delivery per transaction (duplicates are no-ops)
5. pending -> processing, persisted before any provider call
6. Submit every line item concurrently and wait for all of them
7. processing -> completed | failed, persisted after all calls settle
"""

import asyncio
import hmac
import logging
from dataclasses import dataclass
from enum import Enum

from app.core.logging_config import log_webhook_received
from app.domain.models import ItemFulfillment, LineItemDomain, OrderDomain, OrderStatus, PaymentEvent
from app.services.orders.interfaces import IFulfillmentClient, IOrderStore
from app.services.orders.state_machine import resolve_outcome, transition
from app.utils.error_handler import (
    AuthenticationException,
    UpstreamFulfillmentException,
    ValidationException,
    log_error,
)
from app.utils.order_lock import LockAcquisitionError, TransactionLockRegistry

logger = logging.getLogger(__name__)

PAID_EVENT = "TRANSACTION_PAID"
COMPLETED_TRANSACTION_STATUS = "COMPLETED"


class ReconciliationOutcome(str, Enum):
    """What a webhook delivery did."""

    IGNORED = "ignored"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ReconciliationResult:
    outcome: ReconciliationOutcome
    transaction_id: str | None = None
    status: OrderStatus | None = None


class WebhookReconciler:
    """
    Matches payment events to stored orders and fulfills their line items.

    Dependencies are injected so the store and the provider client can be
    swapped (tests, other storage backends).
    """

    def __init__(
        self,
        store: IOrderStore,
        fulfillment_client: IFulfillmentClient,
        webhook_token: str,
        lock_registry: TransactionLockRegistry | None = None,
    ):
        """
        Initialize reconciler with its collaborators.

        Args:
            store: Order store keyed by transaction id
            fulfillment_client: Provisioning API client
            webhook_token: Shared secret expected in every event
            lock_registry: Per-transaction admission locks
        """
        if not webhook_token:
            raise ValueError("webhook_token is required")

        self.store = store
        self.fulfillment_client = fulfillment_client
        self._webhook_token = webhook_token.encode("utf-8")
        self.locks = lock_registry or TransactionLockRegistry()

    def authenticate(self, token: str | None) -> None:
        """
        Check the event token against the shared secret in constant time.

        Raises:
            AuthenticationException: If the token is missing or wrong
        """
        if not token or not hmac.compare_digest(token.encode("utf-8"), self._webhook_token):
            logger.warning("Webhook rejected: invalid token")
            raise AuthenticationException()

    async def handle_event(self, event: PaymentEvent) -> ReconciliationResult:
        """
        Process one webhook delivery.

        Args:
            event: Gateway notification

        Returns:
            ReconciliationResult: What the delivery did

        Raises:
            AuthenticationException: On token mismatch (no state change)
            ValidationException: If a paid event carries no transaction
        """
        self.authenticate(event.token)

        transaction_id = event.transaction_id
        log_webhook_received(event.event, transaction_id)

        if event.event != PAID_EVENT:
            logger.info(f"Ignoring webhook event {event.event}")
            return ReconciliationResult(ReconciliationOutcome.IGNORED, transaction_id)

        if not event.has_transaction:
            raise ValidationException(
                message=f"{PAID_EVENT} event without transaction",
                field="transaction",
                expected_format="{id, status}",
            )

        if event.transaction_status != COMPLETED_TRANSACTION_STATUS:
            logger.info(f"Ignoring transaction {transaction_id} with status {event.transaction_status}")
            return ReconciliationResult(ReconciliationOutcome.IGNORED, transaction_id)

        if self.store.get(transaction_id) is None:
            logger.warning(f"No order found for transaction {transaction_id}, acknowledging without changes")
            return ReconciliationResult(ReconciliationOutcome.NOT_FOUND, transaction_id)

        try:
            async with self.locks.acquire(transaction_id):
                return await self._reconcile(transaction_id)
        except LockAcquisitionError:
            logger.info(f"Transaction {transaction_id} is already being reconciled, skipping duplicate delivery")
            return ReconciliationResult(ReconciliationOutcome.DUPLICATE, transaction_id, OrderStatus.PROCESSING)

    async def _reconcile(self, transaction_id: str) -> ReconciliationResult:
        order = self.store.get(transaction_id)
        if order is None:
            return ReconciliationResult(ReconciliationOutcome.NOT_FOUND, transaction_id)

        if order.status != OrderStatus.PENDING:
            logger.info(
                f"Order for transaction {transaction_id} already {order.status.value}, skipping duplicate delivery"
            )
            return ReconciliationResult(ReconciliationOutcome.DUPLICATE, transaction_id, order.status)

        transition(order, OrderStatus.PROCESSING)
        self.store.put(transaction_id, order)
        logger.info(f"Order {order.id} for transaction {transaction_id} processing {order.items_count} items")

        outcomes = await self._fulfill_items(order)

        resolve_outcome(order, outcomes)
        self.store.put(transaction_id, order)

        if order.status == OrderStatus.COMPLETED:
            logger.info(
                f"Order {transaction_id} completed (provider order {order.provider_order_id}, "
                f"{order.items_count} items)"
            )
            return ReconciliationResult(ReconciliationOutcome.COMPLETED, transaction_id, order.status)

        succeeded = order.items_count - len(order.failed_items)
        if succeeded:
            # Provider-side successes of a failed order are not rolled back
            logger.error(
                f"Order {transaction_id} failed with {succeeded}/{order.items_count} items already "
                f"fulfilled upstream; manual reconciliation required"
            )
        else:
            logger.error(f"Order {transaction_id} failed: no item could be fulfilled")
        return ReconciliationResult(ReconciliationOutcome.FAILED, transaction_id, order.status)

    async def _fulfill_items(self, order: OrderDomain) -> list[ItemFulfillment]:
        """
        Submit every item concurrently and wait for all calls to settle.

        Upstream failures become failed outcomes; any other exception is
        re-raised once every call has settled.
        """
        results = await asyncio.gather(
            *(self._fulfill_item(order, index, item) for index, item in enumerate(order.items)),
            return_exceptions=True,
        )

        outcomes: list[ItemFulfillment] = []
        for result in results:
            if isinstance(result, BaseException):
                raise result
            outcomes.append(result)
        return outcomes

    async def _fulfill_item(self, order: OrderDomain, index: int, item: LineItemDomain) -> ItemFulfillment:
        idempotency_key = f"{order.transaction_id}:{index}"
        scaled_quantity = item.scaled_quantity

        try:
            provider_order_id = await self.fulfillment_client.submit(
                item.provider_service_id,
                item.link,
                scaled_quantity,
                idempotency_key=idempotency_key,
            )
        except UpstreamFulfillmentException as e:
            log_error(e, {"transaction_id": order.transaction_id, "item_index": index})
            return ItemFulfillment(
                item_index=index,
                provider_service_id=item.provider_service_id,
                scaled_quantity=scaled_quantity,
                idempotency_key=idempotency_key,
                error=e.message,
            )

        logger.debug(f"Item {index} of {order.transaction_id} fulfilled as provider order {provider_order_id}")
        return ItemFulfillment(
            item_index=index,
            provider_service_id=item.provider_service_id,
            scaled_quantity=scaled_quantity,
            idempotency_key=idempotency_key,
            provider_order_id=str(provider_order_id),
        )
