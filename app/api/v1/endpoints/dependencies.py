"""
Dependencias compartidas por los endpoints.

Los servicios se construyen en el lifespan y viven en app.state.
"""

from fastapi import Request

from app.services.orders.interfaces import IOrderStore
from app.services.orders.reconciler import WebhookReconciler
from app.services.orders.validators import OrderValidator


def get_reconciler(request: Request) -> WebhookReconciler:
    return request.app.state.reconciler


def get_order_store(request: Request) -> IOrderStore:
    return request.app.state.order_store


def get_order_validator() -> OrderValidator:
    return OrderValidator()
