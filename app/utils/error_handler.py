"""
Sistema de manejo de errores personalizado.

Este módulo define todas las excepciones personalizadas de la aplicación
y proporciona utilidades para manejo consistente de errores.
"""

import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """
    Códigos de error estandardizados para la aplicación.
    """

    # Errores generales
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Errores de webhook
    INVALID_WEBHOOK_TOKEN = "INVALID_WEBHOOK_TOKEN"

    # Errores de pedidos
    INVALID_ORDER_DATA = "INVALID_ORDER_DATA"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"

    # Errores del proveedor
    PROVIDER_REQUEST_FAILED = "PROVIDER_REQUEST_FAILED"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    PROVIDER_INVALID_RESPONSE = "PROVIDER_INVALID_RESPONSE"


class ErrorSeverity(Enum):
    """
    Niveles de severidad para errores.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AppException(Exception):
    """
    Excepción base para todas las excepciones personalizadas de la aplicación.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        is_retryable: bool = False,
    ):
        """
        Inicializa la excepción.

        Args:
            message: Mensaje de error
            error_code: Código de error estandardizado
            details: Información adicional del error
            status_code: Código HTTP asociado
            severity: Severidad del error
            is_retryable: Si la operación puede reintentarse
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.severity = severity
        self.is_retryable = is_retryable
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convierte la excepción a diccionario.

        Returns:
            Dict: Representación de la excepción
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "details": self.details,
            "status_code": self.status_code,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        """String representation del error."""
        return f"{self.error_code.value}: {self.message}"


class ValidationException(AppException):
    """
    Excepción para payloads malformados (evento de webhook o pedido).
    """

    def __init__(
        self,
        message: str,
        field: str,
        invalid_value: Any = None,
        expected_format: Optional[str] = None,
        **kwargs,
    ):
        """
        Inicializa la excepción de validación.

        Args:
            message: Mensaje de error
            field: Campo que falló la validación
            invalid_value: Valor que causó el error
            expected_format: Formato esperado
            **kwargs: Argumentos adicionales para AppException
        """
        kwargs.setdefault("error_code", ErrorCode.VALIDATION_ERROR)
        super().__init__(
            message=message,
            status_code=400,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field = field
        self.invalid_value = invalid_value
        self.expected_format = expected_format

        self.details.update(
            {
                "field": field,
                "invalid_value": str(invalid_value) if invalid_value is not None else None,
                "expected_format": expected_format,
            }
        )


class AuthenticationException(AppException):
    """
    Excepción para tokens de webhook ausentes o inválidos.
    """

    def __init__(self, message: str = "Invalid token", **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_WEBHOOK_TOKEN,
            status_code=401,
            severity=ErrorSeverity.MEDIUM,
            **kwargs,
        )


class InvalidStatusTransition(AppException):
    """
    Excepción para transiciones de estado no permitidas en un pedido.
    """

    def __init__(self, current_status: str, target_status: str, transaction_id: Optional[str] = None):
        super().__init__(
            message=f"Cannot move order from '{current_status}' to '{target_status}'",
            error_code=ErrorCode.INVALID_STATUS_TRANSITION,
            status_code=409,
            severity=ErrorSeverity.HIGH,
        )
        self.current_status = current_status
        self.target_status = target_status
        self.transaction_id = transaction_id

        self.details.update(
            {
                "current_status": current_status,
                "target_status": target_status,
                "transaction_id": transaction_id,
            }
        )


class UpstreamFulfillmentException(AppException):
    """
    Excepción para fallos de la API de aprovisionamiento.

    Cubre respuestas HTTP distintas de 200, errores de red, timeouts
    y cuerpos de respuesta malformados. Nunca se reintenta automáticamente.
    """

    def __init__(
        self,
        message: str,
        api_response_code: Optional[int] = None,
        provider_service_id: Optional[str] = None,
        timed_out: bool = False,
        **kwargs,
    ):
        """
        Inicializa la excepción del proveedor.

        Args:
            message: Mensaje de error
            api_response_code: Código HTTP devuelto por el proveedor
            provider_service_id: Servicio del catálogo que se intentó pedir
            timed_out: Si la llamada superó el deadline
            **kwargs: Argumentos adicionales para AppException
        """
        error_code = ErrorCode.PROVIDER_REQUEST_FAILED
        if timed_out:
            error_code = ErrorCode.PROVIDER_TIMEOUT
        kwargs.setdefault("error_code", error_code)

        super().__init__(
            message=message,
            status_code=502,
            severity=ErrorSeverity.HIGH,
            is_retryable=False,
            **kwargs,
        )

        self.api_response_code = api_response_code
        self.provider_service_id = provider_service_id
        self.timed_out = timed_out

        self.details.update(
            {
                "api_response_code": api_response_code,
                "provider_service_id": provider_service_id,
                "timed_out": timed_out,
            }
        )


# === FUNCIONES DE UTILIDAD ===


def create_error_response(exception: AppException, include_details: bool = False) -> Dict[str, Any]:
    """
    Crea respuesta de error estandardizada.

    Args:
        exception: Excepción a convertir
        include_details: Si incluir los detalles internos

    Returns:
        Dict: Respuesta de error
    """
    error_dict = exception.to_dict()
    if not include_details:
        error_dict.pop("details", None)

    return {"error": True, **error_dict}


def log_error(
    exception: Exception,
    context: Optional[Dict[str, Any]] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Loggea un error de manera consistente.

    Args:
        exception: Excepción a loggear
        context: Contexto adicional
        level: Nivel de logging
    """
    context = context or {}

    log_data = {
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
        **context,
    }

    if isinstance(exception, AppException):
        message = f"{exception.error_code.value}: {exception.message}"
        log_data.update(
            {
                "error_code": exception.error_code.value,
                "severity": exception.severity.value,
                "is_retryable": exception.is_retryable,
            }
        )
    else:
        message = f"Unhandled exception: {type(exception).__name__}: {str(exception)}"
        log_data["traceback"] = traceback.format_exc()

    logger.log(level, message, extra=log_data)
