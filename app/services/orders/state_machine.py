"""
Order lifecycle state machine.

pending -> processing -> completed | failed

Transitions are forward-only; completed and failed are terminal.
"""

import logging
from datetime import UTC, datetime

from app.domain.models import ItemFulfillment, OrderDomain, OrderStatus
from app.utils.error_handler import InvalidStatusTransition

logger = logging.getLogger(__name__)

VALID_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.FAILED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.FAILED: frozenset(),
}


def is_terminal(status: OrderStatus) -> bool:
    """True if no transition leaves the status."""
    return not VALID_TRANSITIONS[status]


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in VALID_TRANSITIONS[current]


def transition(order: OrderDomain, target: OrderStatus) -> OrderDomain:
    """
    Move an order to a new status.

    Args:
        order: Order to mutate
        target: Desired status

    Returns:
        OrderDomain: The same order, updated

    Raises:
        InvalidStatusTransition: If the move is not allowed from the current status
    """
    if not can_transition(order.status, target):
        raise InvalidStatusTransition(order.status.value, target.value, order.transaction_id)

    logger.debug(f"Order {order.transaction_id}: {order.status.value} -> {target.value}")
    order.status = target
    order.updated_at = datetime.now(UTC)
    return order


def resolve_outcome(order: OrderDomain, outcomes: list[ItemFulfillment]) -> OrderDomain:
    """
    Apply the settled fan-out results to a processing order.

    The order completes only if every item succeeded; the provider order id is
    then the first success in item order. Any failed item fails the whole
    order and leaves provider_order_id unset. Per-item outcomes are kept
    in both cases.

    Args:
        order: Order in processing status
        outcomes: One outcome per line item

    Returns:
        OrderDomain: The order in a terminal status
    """
    order.fulfillments = sorted(outcomes, key=lambda outcome: outcome.item_index)

    if order.fulfillments and all(outcome.succeeded for outcome in order.fulfillments):
        order.provider_order_id = order.fulfillments[0].provider_order_id
        return transition(order, OrderStatus.COMPLETED)

    order.provider_order_id = None
    return transition(order, OrderStatus.FAILED)
