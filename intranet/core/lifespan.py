"""
Gestión del ciclo de vida de la aplicación FastAPI.

Este módulo maneja los eventos de startup y shutdown de la aplicación:
logging, verificación de configuración y apertura/cierre de los clientes
HTTP hacia Strapi y las tiendas WooCommerce.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from intranet.core.config import get_settings
from intranet.core.logging_config import setup_logging
from intranet.db.strapi_client import StrapiClient
from intranet.db.woocommerce_clients import WooCommerceRegistry

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
    setup_logging()
    settings = get_settings()
    logger.info(f"🚀 Iniciando {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")

    startup_verify_configuration()
    startup_initialize_clients(app)
    logger.info("🎉 Aplicación iniciada correctamente")

    # === YIELD (aplicación corriendo) ===
    yield

    # === SHUTDOWN ===
    logger.info(f"🛑 Cerrando {settings.APP_NAME}...")
    try:
        await shutdown_close_clients(app)
        logger.info("👋 Aplicación cerrada correctamente")
    except Exception as e:
        logger.error(f"❌ Error durante el shutdown: {e}")


# === FUNCIONES DE STARTUP ===


def startup_verify_configuration() -> None:
    """Advierte sobre configuración incompleta sin detener el arranque."""
    settings = get_settings()

    if not settings.STRAPI_API_TOKEN:
        logger.warning("⚠️ STRAPI_API_TOKEN no configurado, las llamadas al CMS irán sin autenticación")

    for platform, credentials in settings.get_woocommerce_platforms().items():
        missing = [key for key, value in credentials.items() if not value]
        if missing:
            logger.warning(f"⚠️ Plataforma {platform} sin {', '.join(missing)}: se omitirá en la sincronización")

    logger.info("✅ Configuración verificada")


def startup_initialize_clients(app: FastAPI) -> None:
    """Crea los clientes compartidos; las sesiones HTTP se abren en el primer uso."""
    app.state.strapi = StrapiClient()
    app.state.woocommerce = WooCommerceRegistry.from_settings()
    logger.info("✅ Clientes de Strapi y WooCommerce inicializados")


# === FUNCIONES DE SHUTDOWN ===


async def shutdown_close_clients(app: FastAPI) -> None:
    """Cierra las sesiones HTTP abiertas."""
    strapi = getattr(app.state, "strapi", None)
    if strapi is not None:
        await strapi.close()

    registry = getattr(app.state, "woocommerce", None)
    if registry is not None:
        await registry.close()

    logger.info("✅ Conexiones cerradas")
