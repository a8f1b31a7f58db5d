"""Fixtures compartidos para los tests del webhook de pagos."""

import os

# Los secretos deben existir antes de importar app.core.config
os.environ.setdefault("WEBHOOK_TOKEN", "test-webhook-token")
os.environ.setdefault("PROVIDER_API_URL", "https://provider.test/api/v2")
os.environ.setdefault("PROVIDER_API_KEY", "test-provider-key")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ["LOG_FILE_PATH"] = ""

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from app.domain.models import CustomerDomain, LineItemDomain, OrderDomain  # noqa: E402
from app.domain.value_objects import Money  # noqa: E402

WEBHOOK_TOKEN = os.environ["WEBHOOK_TOKEN"]


@pytest.fixture
def webhook_token():
    return WEBHOOK_TOKEN


@pytest.fixture
def customer():
    return CustomerDomain(
        name="Maria Silva",
        email="maria@example.com",
        phone="+5511999990000",
        identity_document="12345678909",
    )


@pytest.fixture
def make_order(customer):
    """Construye pedidos pendientes con líneas (service_id, quantity, unit_price)."""

    def _make(transaction_id="tx_123", lines=(("101", 2, "9.90"),), **kwargs):
        items = [
            LineItemDomain(
                provider_service_id=service_id,
                link=f"https://instagram.com/profile_{index}",
                quantity=quantity,
                unit_price=Decimal(price),
            )
            for index, (service_id, quantity, price) in enumerate(lines)
        ]
        total = Money(sum((item.subtotal for item in items), Decimal("0")))
        return OrderDomain(transaction_id=transaction_id, customer=customer, items=items, total=total, **kwargs)

    return _make


@pytest.fixture
def order_payload():
    """Cuerpo válido para POST /update-order."""
    return {
        "transactionId": "tx_123",
        "order": {
            "id": "ord_1",
            "transactionId": "tx_123",
            "customer": {
                "name": "Maria Silva",
                "email": "maria@example.com",
                "phone": "+5511999990000",
                "identityDocument": "12345678909",
            },
            "items": [
                {"providerServiceId": 101, "link": "https://instagram.com/a", "quantity": 2, "unitPrice": "9.90"},
                {"providerServiceId": "202", "link": "https://instagram.com/b", "quantity": 1, "unitPrice": "15.00"},
            ],
            "total": "34.80",
            "status": "pending",
            "createdAt": "2024-05-01T12:00:00",
        },
    }


@pytest.fixture
def paid_event(webhook_token):
    def _make(transaction_id="tx_123", status="COMPLETED", event="TRANSACTION_PAID", token=None):
        return {
            "event": event,
            "token": token if token is not None else webhook_token,
            "transaction": {"id": transaction_id, "status": status},
        }

    return _make
