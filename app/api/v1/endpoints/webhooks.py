"""
Endpoint para webhooks de la pasarela de pago.

La pasarela reenvía el evento si recibe un código distinto de 200, así que
una vez autenticado y bien formado el evento siempre se responde 200,
sin importar el resultado del aprovisionamiento.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from app.api.v1.endpoints.dependencies import get_reconciler
from app.api.v1.schemas.payment_schemas import PaymentWebhookEvent
from app.services.orders.reconciler import WebhookReconciler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/webhook",
    status_code=status.HTTP_200_OK,
    response_class=PlainTextResponse,
    responses={
        400: {"description": "Malformed event payload"},
        401: {"description": "Invalid token"},
        500: {"description": "Webhook processing failed"},
    },
)
async def receive_payment_webhook(
    event: PaymentWebhookEvent,
    reconciler: WebhookReconciler = Depends(get_reconciler),
) -> PlainTextResponse:
    """
    Recibe un evento de pago y, si corresponde, aprovisiona el pedido.

    Args:
        event: Sobre del evento (event, token, transaction)
        reconciler: Reconciliador de pedidos

    Returns:
        PlainTextResponse: Acuse de recibo
    """
    result = await reconciler.handle_event(event.to_domain())
    logger.info(f"Webhook handled: {result.outcome.value} (transaction {result.transaction_id})")

    return PlainTextResponse("Webhook received", status_code=200)
