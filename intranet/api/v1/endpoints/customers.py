"""
Endpoints de clientes (Persona + WO-Clientes).

Crear o editar un cliente escribe primero la persona canónica en el CMS y
luego sincroniza cada tienda seleccionada. Los fallos por tienda se
informan en ``platforms`` y ``side_effects`` sin revertir la persona.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from intranet.api.v1.dependencies import get_customer_orchestrator
from intranet.api.v1.schemas.customer_schemas import CustomerRequest
from intranet.services.customers import CustomerSyncOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

# Query parameter singletons para evitar B008
DEFAULT_QUERY_PAGE = Query(default=1, ge=1)
DEFAULT_QUERY_PAGE_SIZE = Query(default=25, ge=1, le=1000, alias="pageSize")


@router.get("", summary="Listar clientes")
async def list_customers(
    page: int = DEFAULT_QUERY_PAGE,
    page_size: int = DEFAULT_QUERY_PAGE_SIZE,
    orchestrator: CustomerSyncOrchestrator = Depends(get_customer_orchestrator),
) -> Dict[str, Any]:
    return await orchestrator.list_customers(page, page_size)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Crear cliente")
async def create_customer(
    request: CustomerRequest,
    orchestrator: CustomerSyncOrchestrator = Depends(get_customer_orchestrator),
) -> Dict[str, Any]:
    """
    Crea (o reutiliza) la persona y la sincroniza con las tiendas de ``canales``.

    Sin canales se sincronizan todas las plataformas conocidas.
    """
    logger.info(f"📥 POST /clientes canales={request.data.canales}")
    return await orchestrator.create_customer(request.data)


@router.get("/{customer_id}", summary="Obtener cliente")
async def get_customer(
    customer_id: str,
    orchestrator: CustomerSyncOrchestrator = Depends(get_customer_orchestrator),
) -> Dict[str, Any]:
    return await orchestrator.get_customer(customer_id)


@router.put("/{customer_id}", summary="Editar cliente")
async def update_customer(
    customer_id: str,
    request: CustomerRequest,
    orchestrator: CustomerSyncOrchestrator = Depends(get_customer_orchestrator),
) -> Dict[str, Any]:
    logger.info(f"📥 PUT /clientes/{customer_id} canales={request.data.canales}")
    return await orchestrator.update_customer(customer_id, request.data)


@router.delete("/{customer_id}", summary="Eliminar cliente")
async def delete_customer(
    customer_id: str,
    orchestrator: CustomerSyncOrchestrator = Depends(get_customer_orchestrator),
) -> Dict[str, Any]:
    return await orchestrator.delete_customer(customer_id)
