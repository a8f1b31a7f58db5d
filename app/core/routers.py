"""
Configuración centralizada de routers para la aplicación FastAPI.

Este módulo se encarga de registrar los routers de la API y
configurar los endpoints base (raíz, ping y health).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.v1.endpoints.orders import router as orders_router
from app.api.v1.endpoints.webhooks import router as webhooks_router
from app.core.config import get_environment_info, get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def create_root_endpoints(app: FastAPI) -> None:
    """
    Crea endpoints raíz de la aplicación.

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/", tags=["Root"], summary="API Info")
    async def root():
        """
        Endpoint raíz que proporciona información básica de la API.

        Returns:
            Dict con información de la API
        """
        return {
            "message": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": get_router_info(),
        }

    @app.get("/ping", tags=["Root"], summary="Simple Ping")
    async def ping():
        """
        Endpoint simple para verificar que la API responde.

        Returns:
            Dict con pong y timestamp
        """
        return {"message": "pong", "timestamp": datetime.now(timezone.utc).isoformat()}


def create_health_endpoints(app: FastAPI) -> None:
    """
    Crea el endpoint de health check.

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/health", tags=["Health"], summary="Health Check")
    async def health_check(request: Request):
        """
        Verifica que los servicios del lifespan estén construidos.

        Returns:
            JSONResponse con estado de salud
        """
        order_store = getattr(request.app.state, "order_store", None)
        provider_client = getattr(request.app.state, "provider_client", None)
        reconciler = getattr(request.app.state, "reconciler", None)

        services = {
            "order_store": {"ready": order_store is not None, "orders": len(order_store) if order_store is not None else 0},
            "provider_client": provider_client.get_info() if provider_client else {"initialized": False},
            "reconciler": {"ready": reconciler is not None},
        }
        healthy = order_store is not None and reconciler is not None

        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "status": "healthy" if healthy else "unhealthy",
                "app": get_environment_info(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "services": services,
            },
        )


def configure_api_routers(app: FastAPI) -> None:
    """
    Configura los routers de webhooks y pedidos.

    Las rutas /webhook y /update-order se exponen en la raíz porque la
    pasarela y el frontend ya están configurados con esas URLs.

    Args:
        app: Instancia de FastAPI
    """
    app.include_router(webhooks_router, tags=["Webhooks"])
    logger.info("✅ Router de webhooks configurado")

    app.include_router(orders_router, tags=["Orders"])
    logger.info("✅ Router de pedidos configurado")


def configure_all_routers(app: FastAPI) -> None:
    """
    Configura todos los routers de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando todos los routers...")

    create_root_endpoints(app)
    create_health_endpoints(app)
    configure_api_routers(app)

    logger.info("✅ Todos los routers configurados correctamente")


def get_router_info() -> Dict[str, Any]:
    """
    Obtiene información sobre las rutas configuradas.

    Returns:
        Dict con información de rutas
    """
    return {
        "health": "/health",
        "webhook": "/webhook",
        "update_order": "/update-order",
        "orders": "/api/v1/orders/{transaction_id}",
        "docs": "/docs" if (settings.DEBUG or settings.ENABLE_DOCS) else None,
    }
