"""
Configuración centralizada de routers para la aplicación FastAPI.

Este módulo se encarga de registrar todos los routers de la API,
configurar endpoints base y organizar las rutas de manera estructurada.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI

from intranet.api.v1.endpoints.customers import router as customers_router
from intranet.api.v1.endpoints.orders import router as orders_router
from intranet.api.v1.endpoints.schools import router as schools_router
from intranet.core.config import get_settings

logger = logging.getLogger(__name__)


def create_root_endpoints(app: FastAPI) -> None:
    """
    Crea endpoints raíz de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    settings = get_settings()

    @app.get("/", tags=["Root"], summary="API Info")
    async def root():
        """
        Endpoint raíz que proporciona información básica de la API.

        Returns:
            Dict con información de la API
        """
        return {
            "message": settings.APP_NAME,
            "description": "Sincronización de clientes y pedidos entre la intranet, Strapi y WooCommerce",
            "version": settings.APP_VERSION,
            "status": "running",
            "documentation": "/docs" if (settings.DEBUG or settings.ENABLE_DOCS) else "disabled",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": get_router_info()["base_paths"],
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
    settings = get_settings()

    @app.get("/health", tags=["Health"], summary="Health Check")
    async def health_check():
        """
        Estado del servicio y plataformas WooCommerce configuradas.

        No llama a los sistemas externos.
        """
        platforms = {
            platform: all(credentials.values())
            for platform, credentials in settings.get_woocommerce_platforms().items()
        }
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {
                "strapi": {"configured": bool(settings.STRAPI_URL), "url": settings.STRAPI_URL},
                "woocommerce": {"configured": platforms},
            },
        }


def configure_api_v1_routers(app: FastAPI) -> None:
    """
    Configura todos los routers de la API v1.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando routers de API v1...")

    app.include_router(
        customers_router,
        prefix="/api/v1/clientes",
        tags=["Clientes"],
        responses={
            404: {"description": "Cliente no encontrado"},
            500: {"description": "Internal server error"},
        },
    )
    logger.info("✅ Router de clientes configurado")

    app.include_router(
        orders_router,
        prefix="/api/v1/pedidos",
        tags=["Pedidos"],
        responses={
            404: {"description": "Pedido no encontrado"},
            500: {"description": "Internal server error"},
        },
    )
    logger.info("✅ Router de pedidos configurado")

    app.include_router(
        schools_router,
        prefix="/api/v1/colegios",
        tags=["Colegios"],
        responses={400: {"description": "Archivo inválido"}},
    )
    logger.info("✅ Router de colegios configurado")


def configure_all_routers(app: FastAPI) -> None:
    """
    Configura todos los routers de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando todos los routers...")

    create_root_endpoints(app)
    create_health_endpoints(app)
    configure_api_v1_routers(app)

    logger.info("✅ Todos los routers configurados correctamente")


def get_router_info() -> Dict[str, Any]:
    """
    Obtiene información sobre los routers configurados.

    Returns:
        Dict con información de routers
    """
    return {
        "api_version": "v1",
        "base_paths": {
            "root": "/",
            "health": "/health",
            "clientes": "/api/v1/clientes",
            "pedidos": "/api/v1/pedidos",
            "colegios": "/api/v1/colegios",
        },
    }
