"""
Módulo de acceso a datos y servicios externos.

- InMemoryOrderStore: almacenamiento de pedidos por transacción
- ProviderFulfillmentClient: cliente de la API de aprovisionamiento
"""

from app.db.order_store import InMemoryOrderStore
from app.db.provider_client import ProviderFulfillmentClient

__all__ = [
    "InMemoryOrderStore",
    "ProviderFulfillmentClient",
]
