"""
Gestión del ciclo de vida de la aplicación FastAPI.

Este módulo maneja los eventos de startup y shutdown de la aplicación:
logging, verificación de configuración, construcción de servicios
(almacén, cliente del proveedor, reconciliador) y limpieza.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import get_settings, validate_required_settings
from app.core.logging_config import setup_logging
from app.db.order_store import InMemoryOrderStore
from app.db.provider_client import ProviderFulfillmentClient
from app.services.orders.reconciler import WebhookReconciler
from app.utils.order_lock import TransactionLockRegistry

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestión del ciclo de vida de la aplicación.
    Maneja eventos de startup y shutdown de manera ordenada.

    Args:
        app: Instancia de FastAPI
    """
    # === STARTUP ===
    try:
        # 1. Configurar logging
        await startup_configure_logging()

        logger.info(f"🚀 Iniciando {settings.APP_NAME}...")

        # 2. Verificar configuración (sin secretos no arrancamos)
        await startup_verify_configuration()

        # 3. Inicializar servicios
        await startup_initialize_services(app)

        logger.info("🎉 Aplicación iniciada correctamente")

    except Exception as e:
        logger.error(f"❌ Error durante el startup: {e}")
        await shutdown_cleanup_services(app)
        sys.exit(1)

    # === YIELD (aplicación corriendo) ===
    yield

    # === SHUTDOWN ===
    logger.info(f"🛑 Cerrando {settings.APP_NAME}...")

    try:
        await shutdown_cleanup_services(app)
        logger.info("👋 Aplicación cerrada correctamente")

    except Exception as e:
        logger.error(f"❌ Error durante el shutdown: {e}")


# === FUNCIONES DE STARTUP ===


async def startup_configure_logging():
    """Configura el sistema de logging."""
    try:
        setup_logging()
    except Exception as e:
        print(f"Error configurando logging: {e}")
        raise


async def startup_verify_configuration():
    """Verifica que los secretos obligatorios estén configurados."""
    validate_required_settings(settings)
    logger.info("✅ Configuración verificada")


async def startup_initialize_services(app: FastAPI):
    """
    Construye el almacén de pedidos, el cliente del proveedor y el reconciliador.

    Args:
        app: Instancia de FastAPI
    """
    order_store = InMemoryOrderStore()

    provider_client = ProviderFulfillmentClient()
    await provider_client.initialize()

    app.state.order_store = order_store
    app.state.provider_client = provider_client
    app.state.reconciler = WebhookReconciler(
        store=order_store,
        fulfillment_client=provider_client,
        webhook_token=settings.WEBHOOK_TOKEN,
        lock_registry=TransactionLockRegistry(),
    )
    logger.info("✅ Servicios inicializados")


# === FUNCIONES DE SHUTDOWN ===


async def shutdown_cleanup_services(app: FastAPI):
    """Cierra la sesión HTTP del cliente del proveedor."""
    provider_client = getattr(app.state, "provider_client", None)
    if provider_client is not None:
        await provider_client.close()
        logger.info("✅ Cliente del proveedor cerrado")
