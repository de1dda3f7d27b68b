"""
Sistema de manejo de errores personalizado.

Este módulo define todas las excepciones personalizadas de la aplicación
y proporciona utilidades para manejo consistente de errores.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """
    Códigos de error estandardizados para la aplicación.
    """

    # Errores generales
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Errores de datos
    DUPLICATE_RECORD = "DUPLICATE_RECORD"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_ORDER_DATA = "INVALID_ORDER_DATA"

    # Errores de servicios externos
    STRAPI_API_ERROR = "STRAPI_API_ERROR"
    WOOCOMMERCE_API_ERROR = "WOOCOMMERCE_API_ERROR"
    EXTERNAL_AUTH_FAILED = "EXTERNAL_AUTH_FAILED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Errores de sincronización
    SYNC_FAILED = "SYNC_FAILED"
    IMPORT_TIMEOUT = "IMPORT_TIMEOUT"


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
        is_critical: bool = False,
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
            is_critical: Si requiere alerta inmediata
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.severity = severity
        self.is_retryable = is_retryable
        self.is_critical = is_critical
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
            "is_critical": self.is_critical,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        """String representation del error."""
        return f"{self.error_code.value}: {self.message}"


class ValidationException(AppException):
    """
    Excepción para errores de validación de datos.

    Se reporta al cliente como 400 antes de cualquier escritura externa.
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

        # Agregar detalles específicos
        self.details.update(
            {
                "field": field,
                "invalid_value": str(invalid_value) if invalid_value is not None else None,
                "expected_format": expected_format,
            }
        )


class ConflictException(AppException):
    """
    Excepción para registros duplicados (por ejemplo, RUT ya existente).
    """

    def __init__(self, message: str, field: str, value: Any = None, existing_id: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.DUPLICATE_RECORD,
            status_code=400,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field = field
        self.value = value
        self.existing_id = existing_id

        self.details.update({"field": field, "value": value, "existing_id": existing_id})


class NotFoundException(AppException):
    """
    Excepción para registros que no se encontraron tras agotar la búsqueda.
    """

    def __init__(self, message: str, resource: str, identifier: Any = None, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.RECORD_NOT_FOUND,
            status_code=404,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.resource = resource
        self.identifier = identifier

        self.details.update({"resource": resource, "identifier": str(identifier) if identifier is not None else None})


class TransportException(AppException):
    """
    Excepción para errores de red o HTTP contra Strapi o WooCommerce.
    """

    def __init__(
        self,
        message: str,
        service: str,
        endpoint: Optional[str] = None,
        api_response_code: Optional[int] = None,
        response_body: Any = None,
        **kwargs,
    ):
        """
        Inicializa la excepción de transporte.

        Args:
            message: Mensaje de error
            service: Servicio externo involucrado (strapi, woo_moraleja, ...)
            endpoint: Endpoint que falló
            api_response_code: Código HTTP devuelto por el servicio
            response_body: Cuerpo de la respuesta de error, si existe
            **kwargs: Argumentos adicionales para AppException
        """
        error_code = ErrorCode.STRAPI_API_ERROR if service == "strapi" else ErrorCode.WOOCOMMERCE_API_ERROR
        severity = ErrorSeverity.MEDIUM
        if api_response_code and api_response_code >= 500:
            severity = ErrorSeverity.HIGH
        kwargs.setdefault("error_code", error_code)

        super().__init__(
            message=message,
            status_code=502,
            severity=severity,
            is_retryable=True,
            **kwargs,
        )
        self.service = service
        self.endpoint = endpoint
        self.api_response_code = api_response_code
        self.response_body = response_body

        self.details.update(
            {
                "service": service,
                "endpoint": endpoint,
                "api_response_code": api_response_code,
            }
        )

    @property
    def is_not_found(self) -> bool:
        """True si el servicio respondió 404."""
        return self.api_response_code == 404


class AuthException(AppException):
    """
    Excepción para 401/403 de servicios externos.

    Indica mala configuración de credenciales, no una falla transitoria,
    y se propaga con el código de estado original.
    """

    def __init__(self, message: str, service: str, api_response_code: int, endpoint: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.EXTERNAL_AUTH_FAILED,
            status_code=api_response_code,
            severity=ErrorSeverity.HIGH,
            is_critical=True,
            **kwargs,
        )
        self.service = service
        self.api_response_code = api_response_code
        self.endpoint = endpoint

        self.details.update({"service": service, "endpoint": endpoint, "api_response_code": api_response_code})


# === FUNCIONES DE UTILIDAD ===


def describe_error(exception: Exception) -> str:
    """
    Mensaje corto de una excepción para resultados por plataforma y efectos secundarios.
    """
    if isinstance(exception, AppException):
        return exception.message
    return f"{type(exception).__name__}: {exception}"

