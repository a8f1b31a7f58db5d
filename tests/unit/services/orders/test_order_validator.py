"""Tests unitarios para OrderValidator."""

from datetime import UTC
from decimal import Decimal

import pytest

from app.api.v1.schemas.payment_schemas import OrderUpsertRequest
from app.domain.models import OrderStatus
from app.services.orders.validators import OrderValidator
from app.utils.error_handler import ErrorCode, ValidationException


def test_valid_payload_builds_order(order_payload):
    """Un payload válido produce un OrderDomain con montos y fechas normalizados."""
    order = OrderValidator().validate(OrderUpsertRequest.model_validate(order_payload))

    assert order.transaction_id == "tx_123"
    assert order.id == "ord_1"
    assert order.status == OrderStatus.PENDING
    assert order.total.amount == Decimal("34.80")
    assert order.items[0].provider_service_id == "101"
    assert order.items[0].scaled_quantity == 2000
    assert order.created_at.tzinfo == UTC


def test_status_is_taken_from_payload(order_payload):
    """El upsert respeta el estado enviado."""
    order_payload["order"]["status"] = "completed"
    order_payload["order"]["providerOrderId"] = "P-9"

    order = OrderValidator().validate(OrderUpsertRequest.model_validate(order_payload))

    assert order.status == OrderStatus.COMPLETED
    assert order.provider_order_id == "P-9"


def test_total_mismatch_raises(order_payload):
    """Un total que no coincide con las líneas es un 400."""
    order_payload["order"]["total"] = "34.81"

    with pytest.raises(ValidationException) as exc_info:
        OrderValidator().validate(OrderUpsertRequest.model_validate(order_payload))

    assert exc_info.value.error_code == ErrorCode.INVALID_ORDER_DATA
    assert exc_info.value.status_code == 400


def test_transaction_id_mismatch_raises(order_payload):
    """El transactionId del pedido debe coincidir con la clave."""
    order_payload["order"]["transactionId"] = "tx_other"

    with pytest.raises(ValidationException, match="transactionId"):
        OrderValidator().validate(OrderUpsertRequest.model_validate(order_payload))


def test_invalid_customer_email_raises(order_payload):
    """Errores de dominio del cliente se convierten en ValidationException."""
    order_payload["order"]["customer"]["email"] = "not-an-email"

    with pytest.raises(ValidationException):
        OrderValidator().validate(OrderUpsertRequest.model_validate(order_payload))


def test_fractional_unit_prices_are_not_rounded_before_summing(order_payload):
    """Precios por mil con fracciones de centavo validan contra el total redondeado."""
    order_payload["order"]["items"] = [
        {"providerServiceId": "101", "link": "https://instagram.com/a", "quantity": 8, "unitPrice": "0.125"},
        {"providerServiceId": "102", "link": "https://instagram.com/b", "quantity": 5, "unitPrice": "0.004"},
    ]
    order_payload["order"]["total"] = "1.02"

    order = OrderValidator().validate(OrderUpsertRequest.model_validate(order_payload))

    assert order.items[0].unit_price == Decimal("0.125")
    assert order.items[1].unit_price == Decimal("0.004")
    assert order.total.amount == Decimal("1.02")
