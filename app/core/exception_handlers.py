"""
Manejadores de excepciones centralizados para la aplicación FastAPI.

Este módulo define los manejadores de excepciones personalizados y globales,
proporcionando respuestas consistentes y logging apropiado para cada tipo de error.
"""

import logging
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.utils.error_handler import (
    AppException,
    AuthenticationException,
    UpstreamFulfillmentException,
    ValidationException,
    create_error_response,
)

settings = get_settings()
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Manejador para excepciones personalizadas de la aplicación.

    Args:
        request: Request de FastAPI
        exc: Excepción personalizada de la app

    Returns:
        JSONResponse: Respuesta JSON con error formateado
    """
    logger.error(
        f"App Exception: {exc.message} - "
        f"Code: {exc.error_code.value} - "
        f"URL: {request.url.path} - "
        f"Details: {exc.details}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **create_error_response(exc, include_details=settings.DEBUG),
            "path": str(request.url.path),
            "request_id": request.headers.get("X-Request-ID"),
        },
    )


async def authentication_exception_handler(request: Request, exc: AuthenticationException) -> JSONResponse:
    """
    Manejador para tokens de webhook inválidos.

    La respuesta no revela nada del token esperado.
    """
    client = request.client.host if request.client else "unknown"
    logger.warning(f"Authentication Exception: {exc.message} - URL: {request.url.path} - Client: {client}")

    return JSONResponse(
        status_code=401,
        content={
            "error": True,
            "error_type": "authentication_error",
            "error_code": exc.error_code.value,
            "message": exc.message,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
        },
    )


async def validation_exception_handler(request: Request, exc: ValidationException) -> JSONResponse:
    """
    Manejador para errores de validación de datos.

    Args:
        request: Request de FastAPI
        exc: Excepción de validación

    Returns:
        JSONResponse: Respuesta JSON con detalles de validación
    """
    logger.warning(
        f"Validation Exception: {exc.message} - "
        f"Field: {exc.field} - "
        f"Value: {exc.invalid_value} - "
        f"URL: {request.url.path}"
    )

    return JSONResponse(
        status_code=400,
        content={
            "error": True,
            "error_type": "validation_error",
            "error_code": exc.error_code.value,
            "message": exc.message,
            "field": exc.field,
            "invalid_value": str(exc.invalid_value) if settings.DEBUG and exc.invalid_value is not None else None,
            "expected_format": exc.expected_format,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
        },
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Manejador para cuerpos JSON malformados (errores de Pydantic).

    Se responden como 400 para distinguirlos de errores de negocio.
    """
    errors = [
        {"field": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg")}
        for error in exc.errors()
    ]
    logger.warning(f"Malformed payload on {request.url.path}: {errors}")

    return JSONResponse(
        status_code=400,
        content={
            "error": True,
            "error_type": "validation_error",
            "error_code": "VALIDATION_ERROR",
            "message": "Malformed request payload",
            "errors": errors,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
        },
    )


async def upstream_exception_handler(request: Request, exc: UpstreamFulfillmentException) -> JSONResponse:
    """
    Manejador para fallos del proveedor que escapan del reconciliador.
    """
    logger.error(
        f"Upstream Exception: {exc.message} - "
        f"Service: {exc.provider_service_id} - "
        f"API Code: {exc.api_response_code} - "
        f"URL: {request.url.path}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "error_type": "upstream_error",
            "error_code": exc.error_code.value,
            "message": exc.message,
            "timed_out": exc.timed_out,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
        },
    )


async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Manejador para HTTPException (FastAPI y Starlette).

    Args:
        request: Request de FastAPI
        exc: StarletteHTTPException

    Returns:
        JSONResponse: Respuesta JSON estandarizada
    """
    logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url.path}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "error_type": "http_error",
            "status_code": exc.status_code,
            "message": exc.detail,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
        },
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Manejador global para excepciones no capturadas.

    Args:
        request: Request de FastAPI
        exc: Excepción no manejada

    Returns:
        JSONResponse: Respuesta JSON de error interno
    """
    logger.error(
        f"Unhandled Exception: {str(exc)} - "
        f"Type: {type(exc).__name__} - "
        f"URL: {request.url.path} - "
        f"Traceback: {''.join(traceback.format_exception(exc))}"
    )

    # Respuesta genérica (sin exponer detalles internos)
    error_message = "Internal server error occurred"
    if settings.DEBUG:
        error_message = f"{type(exc).__name__}: {str(exc)}"

    return JSONResponse(
        status_code=500,
        content={
            "error": True,
            "error_type": "internal_server_error",
            "message": error_message,
            "path": str(request.url.path),
            "timestamp": _timestamp(),
        },
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Configura todos los manejadores de excepciones de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando manejadores de excepciones...")

    # Manejadores específicos (orden de especificidad)
    app.add_exception_handler(AuthenticationException, authentication_exception_handler)
    app.add_exception_handler(ValidationException, validation_exception_handler)
    app.add_exception_handler(UpstreamFulfillmentException, upstream_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    # Manejadores HTTP estándar
    app.add_exception_handler(StarletteHTTPException, starlette_http_exception_handler)

    # Manejador global (debe ser el último)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("✅ Manejadores de excepciones configurados correctamente")
