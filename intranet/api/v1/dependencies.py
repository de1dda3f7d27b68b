"""
Dependencias FastAPI compartidas por los endpoints v1.

Los clientes HTTP viven en ``app.state`` (los abre el lifespan y se crean
bajo demanda si no existen). Los orquestadores se construyen por request
con sus factories; los tests los reemplazan con ``dependency_overrides``.
"""

from fastapi import Depends, Request

from intranet.db.cms import SchoolRepository
from intranet.db.strapi_client import StrapiClient
from intranet.db.woocommerce_clients import WooCommerceRegistry
from intranet.services.customers import CustomerSyncOrchestrator, create_customer_orchestrator
from intranet.services.orders import OrderOrchestrator, create_order_orchestrator
from intranet.services.schools import EnrollmentImportService


def get_strapi_client(request: Request) -> StrapiClient:
    """Dependency para obtener el cliente de Strapi."""
    strapi = getattr(request.app.state, "strapi", None)
    if strapi is None:
        strapi = StrapiClient()
        request.app.state.strapi = strapi
    return strapi


def get_woocommerce_registry(request: Request) -> WooCommerceRegistry:
    """Dependency para obtener los clientes WooCommerce por plataforma."""
    registry = getattr(request.app.state, "woocommerce", None)
    if registry is None:
        registry = WooCommerceRegistry.from_settings()
        request.app.state.woocommerce = registry
    return registry


def get_customer_orchestrator(
    strapi: StrapiClient = Depends(get_strapi_client),
    registry: WooCommerceRegistry = Depends(get_woocommerce_registry),
) -> CustomerSyncOrchestrator:
    return create_customer_orchestrator(strapi, registry)


def get_order_orchestrator(
    strapi: StrapiClient = Depends(get_strapi_client),
    registry: WooCommerceRegistry = Depends(get_woocommerce_registry),
) -> OrderOrchestrator:
    return create_order_orchestrator(strapi, registry)


def get_enrollment_import_service(strapi: StrapiClient = Depends(get_strapi_client)) -> EnrollmentImportService:
    return EnrollmentImportService(SchoolRepository(strapi))
