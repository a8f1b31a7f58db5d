"""Tests de integración de los endpoints HTTP con TestClient."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.db.order_store import InMemoryOrderStore
from app.main import create_application
from app.services.orders.reconciler import WebhookReconciler
from app.utils.error_handler import UpstreamFulfillmentException


@pytest.fixture
def provider():
    provider = AsyncMock()
    provider.submit = AsyncMock(return_value="P-1")
    return provider


@pytest.fixture
def store():
    return InMemoryOrderStore()


@pytest.fixture
def http_client(store, provider, webhook_token):
    # Sin lifespan: los servicios se inyectan directamente en app.state
    app = create_application()
    app.state.order_store = store
    app.state.reconciler = WebhookReconciler(store=store, fulfillment_client=provider, webhook_token=webhook_token)
    return TestClient(app, raise_server_exceptions=False)


class TestWebhookEndpoint:
    """Tests para POST /webhook."""

    def test_invalid_token_returns_401(self, http_client, store, provider, make_order, paid_event):
        """Un token inválido responde 401 sin tocar el pedido."""
        store.put("tx_123", make_order())

        response = http_client.post("/webhook", json=paid_event(token="wrong"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"
        assert store.get("tx_123").status.value == "pending"
        provider.submit.assert_not_called()

    def test_repeated_invalid_token_is_idempotent(self, http_client, store, provider, make_order, paid_event):
        """Repetir un token inválido siempre responde 401 y nunca cambia el pedido."""
        store.put("tx_123", make_order())
        before = http_client.get("/api/v1/orders/tx_123").json()

        responses = [http_client.post("/webhook", json=paid_event(token="wrong")) for _ in range(2)]

        assert [r.status_code for r in responses] == [401, 401]
        assert http_client.get("/api/v1/orders/tx_123").json() == before
        provider.submit.assert_not_called()

    def test_malformed_payload_returns_400(self, http_client):
        """Un sobre sin event responde 400."""
        response = http_client.post("/webhook", json={"token": "x"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_paid_event_without_transaction_returns_400(self, http_client, webhook_token):
        """Un TRANSACTION_PAID sin transacción responde 400."""
        response = http_client.post("/webhook", json={"event": "TRANSACTION_PAID", "token": webhook_token})

        assert response.status_code == 400

    def test_unknown_transaction_is_acknowledged(self, http_client, provider, paid_event):
        """Una transacción desconocida responde 200 sin llamar al proveedor."""
        response = http_client.post("/webhook", json=paid_event(transaction_id="tx_unknown"))

        assert response.status_code == 200
        assert response.text == "Webhook received"
        provider.submit.assert_not_called()

    def test_ignored_event_is_acknowledged(self, http_client, paid_event):
        """Eventos que no son de pago responden 200."""
        response = http_client.post("/webhook", json=paid_event(event="TRANSACTION_CREATED"))

        assert response.status_code == 200
        assert response.text == "Webhook received"

    def test_paid_order_is_fulfilled(self, http_client, store, provider, make_order, paid_event):
        """Un pago completado aprovisiona todas las líneas y completa el pedido."""
        store.put("tx_123", make_order(lines=[("101", 2, "9.90"), ("202", 1, "15.00")]))
        provider.submit.side_effect = ["P-1", "P-2"]

        response = http_client.post("/webhook", json=paid_event())

        assert response.status_code == 200
        order = http_client.get("/api/v1/orders/tx_123").json()
        assert order["status"] == "completed"
        assert order["providerOrderId"] == "P-1"
        assert [f["quantity"] for f in order["fulfillments"]] == [2000, 1000]

    def test_provider_failure_still_returns_200(self, http_client, store, provider, make_order, paid_event):
        """Un fallo del proveedor marca el pedido failed pero responde 200."""
        store.put("tx_123", make_order())
        provider.submit.side_effect = UpstreamFulfillmentException("HTTP error! status: 503", api_response_code=503)

        response = http_client.post("/webhook", json=paid_event())

        assert response.status_code == 200
        assert store.get("tx_123").status.value == "failed"

    def test_unexpected_error_returns_500(self, http_client, store, provider, make_order, paid_event):
        """Un error inesperado responde 500 y deja el pedido en processing."""
        store.put("tx_123", make_order())
        provider.submit.side_effect = RuntimeError("boom")

        response = http_client.post("/webhook", json=paid_event())

        assert response.status_code == 500
        assert store.get("tx_123").status.value == "processing"


class TestOrderEndpoints:
    """Tests para POST /update-order y GET /api/v1/orders/{transaction_id}."""

    def test_update_order_stores_payload(self, http_client, store, order_payload):
        """Un pedido válido se guarda y responde Order updated."""
        response = http_client.post("/update-order", json=order_payload)

        assert response.status_code == 200
        assert response.text == "Order updated"
        assert store.get("tx_123").total.amount.to_eng_string() == "34.80"

    def test_update_order_accepts_fractional_unit_prices(self, http_client, store, order_payload):
        """Precios por mil con fracciones de centavo no se rechazan."""
        order_payload["order"]["items"] = [
            {"providerServiceId": "101", "link": "https://instagram.com/a", "quantity": 8, "unitPrice": "0.125"},
        ]
        order_payload["order"]["total"] = "1.00"

        response = http_client.post("/update-order", json=order_payload)

        assert response.status_code == 200
        order = http_client.get("/api/v1/orders/tx_123").json()
        assert order["items"][0]["unitPrice"] == "0.125"
        assert order["total"] == "1.00"

    def test_update_order_overwrites_status(self, http_client, store, make_order, order_payload):
        """El upsert sobrescribe el pedido existente, estado incluido."""
        store.put("tx_123", make_order(lines=[("999", 1, "1.00")]))
        order_payload["order"]["status"] = "failed"

        http_client.post("/update-order", json=order_payload)

        stored = store.get("tx_123")
        assert stored.status.value == "failed"
        assert stored.items[0].provider_service_id == "101"

    def test_update_order_with_wrong_total_returns_400(self, http_client, store, order_payload):
        """Un total inconsistente responde 400 y no guarda nada."""
        order_payload["order"]["total"] = "1.00"

        response = http_client.post("/update-order", json=order_payload)

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ORDER_DATA"
        assert store.get("tx_123") is None

    def test_update_order_without_items_returns_400(self, http_client, order_payload):
        """Un pedido sin líneas responde 400."""
        order_payload["order"]["items"] = []

        response = http_client.post("/update-order", json=order_payload)

        assert response.status_code == 400

    def test_get_unknown_order_returns_404(self, http_client):
        """Consultar una transacción desconocida responde 404."""
        response = http_client.get("/api/v1/orders/tx_missing")

        assert response.status_code == 404


class TestRootEndpoints:
    """Tests para los endpoints base."""

    def test_ping(self, http_client):
        """/ping responde pong."""
        assert http_client.get("/ping").json()["message"] == "pong"

    def test_health_reports_services(self, http_client):
        """/health reporta servicios e información del entorno."""
        response = http_client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["services"]["reconciler"]["ready"] is True
        assert body["app"]["app_name"] == "Pix Fulfillment Webhook"
