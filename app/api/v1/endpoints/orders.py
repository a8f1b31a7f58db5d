"""
Endpoints de pedidos.

- POST /update-order: upsert administrativo usado por el flujo externo de
  creación de pedidos para sembrar el almacén.
- GET /api/v1/orders/{transaction_id}: consulta de estado.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from app.api.v1.endpoints.dependencies import get_order_store, get_order_validator
from app.api.v1.schemas.payment_schemas import OrderUpsertRequest
from app.services.orders.interfaces import IOrderStore
from app.services.orders.validators import OrderValidator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/update-order",
    status_code=status.HTTP_200_OK,
    response_class=PlainTextResponse,
    responses={400: {"description": "Malformed order payload"}},
)
async def upsert_order(
    body: OrderUpsertRequest,
    store: IOrderStore = Depends(get_order_store),
    validator: OrderValidator = Depends(get_order_validator),
) -> PlainTextResponse:
    """
    Sobrescribe incondicionalmente el pedido almacenado para una transacción.

    Args:
        body: transactionId y pedido

    Returns:
        PlainTextResponse: Acuse de recibo
    """
    order = validator.validate(body)
    store.put(body.transaction_id, order)
    logger.info(f"Order {order.id} stored for transaction {body.transaction_id} ({order.status.value})")

    return PlainTextResponse("Order updated", status_code=200)


@router.get("/api/v1/orders/{transaction_id}", status_code=status.HTTP_200_OK)
async def get_order(transaction_id: str, store: IOrderStore = Depends(get_order_store)) -> Dict[str, Any]:
    """
    Obtiene el estado actual de un pedido.

    Args:
        transaction_id: ID de la transacción de la pasarela

    Returns:
        Dict: Pedido serializado
    """
    order = store.get(transaction_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"No order for transaction {transaction_id}")

    return order.to_dict()
