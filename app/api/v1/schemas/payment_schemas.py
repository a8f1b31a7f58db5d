"""
Modelos Pydantic para los payloads de la pasarela de pago y de pedidos.

Incluye el sobre de eventos del webhook y el cuerpo del upsert
administrativo de pedidos.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.models import OrderStatus, PaymentEvent
from app.domain.value_objects.money import DEFAULT_CURRENCY

# Webhook models


class WebhookTransaction(BaseModel):
    """Transacción incluida en el evento de la pasarela."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    status: str


class PaymentWebhookEvent(BaseModel):
    """Sobre de evento enviado por la pasarela de pago."""

    model_config = ConfigDict(extra="allow")

    event: str
    token: Optional[str] = None
    # Eventos distintos de TRANSACTION_PAID pueden no traer transacción
    transaction: Optional[WebhookTransaction] = None

    def to_domain(self) -> PaymentEvent:
        """Convierte el sobre HTTP en el evento de dominio."""
        return PaymentEvent(
            event=self.event,
            token=self.token,
            transaction_id=self.transaction.id if self.transaction else None,
            transaction_status=self.transaction.status if self.transaction else None,
        )


# Order models


class CustomerPayload(BaseModel):
    """Datos del cliente."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    identity_document: str = Field(..., min_length=1, alias="identityDocument")


class LineItemPayload(BaseModel):
    """Línea de pedido."""

    model_config = ConfigDict(populate_by_name=True)

    provider_service_id: str = Field(..., min_length=1, alias="providerServiceId")
    link: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0, description="Cantidad en miles")
    unit_price: Decimal = Field(..., gt=0, alias="unitPrice", description="Precio por cada 1000 unidades")

    @field_validator("provider_service_id", mode="before")
    @classmethod
    def coerce_service_id(cls, v):
        """Los catálogos suelen usar IDs numéricos."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class OrderPayload(BaseModel):
    """Pedido tal como lo registra el flujo externo de creación."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")
    customer: CustomerPayload
    items: List[LineItemPayload] = Field(..., min_length=1)
    total: Decimal = Field(..., gt=0)
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=3, max_length=3)
    status: OrderStatus = OrderStatus.PENDING
    provider_order_id: Optional[str] = Field(default=None, alias="providerOrderId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class OrderUpsertRequest(BaseModel):
    """Cuerpo del upsert administrativo de pedidos."""

    model_config = ConfigDict(populate_by_name=True)

    transaction_id: str = Field(..., min_length=1, alias="transactionId")
    order: OrderPayload
