"""
Manejadores de excepciones centralizados para la aplicación FastAPI.

Este módulo define los manejadores de excepciones personalizados y globales,
proporcionando respuestas consistentes y logging apropiado para cada tipo de error.
Todas las respuestas de error llevan ``success: false`` para que la intranet
las trate igual que los resultados parciales.
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from intranet.core.config import get_settings
from intranet.utils.error_handler import (
    AppException,
    AuthException,
    ConflictException,
    NotFoundException,
    TransportException,
    ValidationException,
)

settings = get_settings()
logger = logging.getLogger(__name__)


def _error_content(request: Request, error_type: str, message: str, **fields: Any) -> Dict[str, Any]:
    return {
        "success": False,
        "error": message,
        "error_type": error_type,
        **fields,
        "path": str(request.url.path),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request.headers.get("X-Request-ID"),
    }


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
        f"URL: {request.url} - "
        f"Details: {exc.details}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(
            request,
            "application_error",
            exc.message,
            error_code=exc.error_code.value,
            details=exc.details if settings.DEBUG else None,
        ),
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
        f"URL: {request.url}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(
            request,
            "validation_error",
            exc.message,
            error_code=exc.error_code.value,
            field=exc.field,
            invalid_value=str(exc.invalid_value) if settings.DEBUG and exc.invalid_value is not None else None,
            expected_format=exc.expected_format,
        ),
    )


async def conflict_exception_handler(request: Request, exc: ConflictException) -> JSONResponse:
    """Manejador para registros duplicados."""
    logger.warning(f"Conflict Exception: {exc.message} - Field: {exc.field} - URL: {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(
            request,
            "conflict_error",
            exc.message,
            error_code=exc.error_code.value,
            field=exc.field,
            existing_id=exc.existing_id,
        ),
    )


async def not_found_exception_handler(request: Request, exc: NotFoundException) -> JSONResponse:
    """Manejador para registros inexistentes."""
    logger.info(f"Not Found: {exc.resource} {exc.identifier} - URL: {request.url}")

    return JSONResponse(
        status_code=404,
        content=_error_content(
            request,
            "not_found",
            exc.message,
            error_code=exc.error_code.value,
            resource=exc.resource,
        ),
    )


async def auth_exception_handler(request: Request, exc: AuthException) -> JSONResponse:
    """
    Manejador para 401/403 de servicios externos.

    Se conserva el código de estado original para distinguir credenciales
    mal configuradas de fallas transitorias.
    """
    logger.error(
        f"Auth Exception: {exc.message} - "
        f"Service: {exc.service} - "
        f"Status: {exc.api_response_code} - "
        f"URL: {request.url}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(
            request,
            "external_auth_error",
            exc.message,
            error_code=exc.error_code.value,
            service=exc.service,
        ),
    )


async def transport_exception_handler(request: Request, exc: TransportException) -> JSONResponse:
    """
    Manejador para errores de red/HTTP contra Strapi o WooCommerce.
    """
    logger.error(
        f"Transport Exception: {exc.message} - "
        f"Service: {exc.service} - "
        f"Endpoint: {exc.endpoint} - "
        f"API Code: {exc.api_response_code} - "
        f"URL: {request.url}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(
            request,
            "external_service_error",
            exc.message,
            error_code=exc.error_code.value,
            service=exc.service,
            endpoint=exc.endpoint if settings.DEBUG else None,
            api_response_code=exc.api_response_code,
        ),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Manejador para errores de validación del body (pydantic) de FastAPI.
    """
    errors = exc.errors()
    logger.warning(f"Request Validation Error: {errors} - URL: {request.url}")

    first: Optional[Dict[str, Any]] = errors[0] if errors else None
    message = first.get("msg", "Datos inválidos") if first else "Datos inválidos"
    field = ".".join(str(part) for part in first.get("loc", [])) if first else None

    return JSONResponse(
        status_code=400,
        content=_error_content(
            request,
            "validation_error",
            message,
            error_code="VALIDATION_ERROR",
            field=field,
            errors=[{"loc": list(error.get("loc", [])), "msg": error.get("msg")} for error in errors],
        ),
    )


async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Manejador para HTTPException de Starlette/FastAPI.

    Args:
        request: Request de FastAPI
        exc: StarletteHTTPException

    Returns:
        JSONResponse: Respuesta JSON estandarizada
    """
    logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(request, "http_error", str(exc.detail), status_code=exc.status_code),
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
        f"URL: {request.url} - "
        f"Traceback: {traceback.format_exc()}"
    )

    # Respuesta genérica (sin exponer detalles internos)
    error_message = "Internal server error occurred"
    if settings.DEBUG:
        error_message = f"{type(exc).__name__}: {str(exc)}"

    return JSONResponse(
        status_code=500,
        content=_error_content(request, "internal_server_error", error_message),
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Configura todos los manejadores de excepciones de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando manejadores de excepciones...")

    # Manejadores específicos (orden de especificidad)
    app.add_exception_handler(ValidationException, validation_exception_handler)
    app.add_exception_handler(ConflictException, conflict_exception_handler)
    app.add_exception_handler(NotFoundException, not_found_exception_handler)
    app.add_exception_handler(AuthException, auth_exception_handler)
    app.add_exception_handler(TransportException, transport_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)

    # Manejadores HTTP estándar
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, starlette_http_exception_handler)

    # Manejador global (debe ser el último)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("✅ Manejadores de excepciones configurados correctamente")
