"""Tests unitarios para la máquina de estados del pedido."""

import pytest

from app.domain.models import ItemFulfillment, OrderStatus
from app.services.orders.state_machine import can_transition, is_terminal, resolve_outcome, transition
from app.utils.error_handler import InvalidStatusTransition


def _outcome(index, provider_order_id=None, error=None):
    return ItemFulfillment(
        item_index=index,
        provider_service_id=str(100 + index),
        scaled_quantity=1000,
        idempotency_key=f"tx_123:{index}",
        provider_order_id=provider_order_id,
        error=error,
    )


class TestTransitions:
    """Tests para las transiciones de estado."""

    def test_forward_path(self, make_order):
        """Debe avanzar pending → processing → completed."""
        order = make_order()

        transition(order, OrderStatus.PROCESSING)
        assert order.status == OrderStatus.PROCESSING
        assert order.updated_at is not None

        transition(order, OrderStatus.COMPLETED)
        assert order.status == OrderStatus.COMPLETED

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.COMPLETED),
            (OrderStatus.PENDING, OrderStatus.FAILED),
            (OrderStatus.PROCESSING, OrderStatus.PENDING),
            (OrderStatus.COMPLETED, OrderStatus.PROCESSING),
            (OrderStatus.FAILED, OrderStatus.PENDING),
        ],
    )
    def test_invalid_transitions_raise(self, make_order, current, target):
        """Transiciones hacia atrás o saltos deben fallar sin cambiar el estado."""
        order = make_order(status=current)

        with pytest.raises(InvalidStatusTransition) as exc_info:
            transition(order, target)

        assert order.status == current
        assert exc_info.value.status_code == 409

    def test_terminal_statuses(self):
        """completed y failed son terminales."""
        assert is_terminal(OrderStatus.COMPLETED)
        assert is_terminal(OrderStatus.FAILED)
        assert not is_terminal(OrderStatus.PENDING)
        assert not can_transition(OrderStatus.PROCESSING, OrderStatus.PROCESSING)


class TestResolveOutcome:
    """Tests para la agregación de resultados por línea."""

    def test_all_succeeded_completes_with_first_provider_id(self, make_order):
        """Si todas las líneas tienen éxito, el pedido se completa con el primer id."""
        order = make_order(lines=[("101", 1, "1.00"), ("102", 1, "1.00")], status=OrderStatus.PROCESSING)

        # Llegan en orden inverso: se ordenan por índice de línea
        resolve_outcome(order, [_outcome(1, "B-2"), _outcome(0, "A-1")])

        assert order.status == OrderStatus.COMPLETED
        assert order.provider_order_id == "A-1"
        assert [f.item_index for f in order.fulfillments] == [0, 1]

    def test_any_failure_fails_order(self, make_order):
        """Una sola línea fallida marca el pedido como failed."""
        order = make_order(lines=[("101", 1, "1.00"), ("102", 1, "1.00")], status=OrderStatus.PROCESSING)

        resolve_outcome(order, [_outcome(0, "A-1"), _outcome(1, error="HTTP error! status: 500")])

        assert order.status == OrderStatus.FAILED
        assert order.provider_order_id is None
        assert len(order.failed_items) == 1
        assert order.fulfillments[0].provider_order_id == "A-1"
