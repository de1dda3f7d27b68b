"""
Endpoints de pedidos.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from intranet.api.v1.dependencies import get_order_orchestrator
from intranet.api.v1.schemas.order_schemas import OrderRequest
from intranet.services.orders import OrderOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

# Query parameter singletons para evitar B008
DEFAULT_QUERY_PAGE = Query(default=1, ge=1)
DEFAULT_QUERY_PAGE_SIZE = Query(default=25, ge=1, le=5000, alias="pageSize")
DEFAULT_QUERY_INCLUDE_HIDDEN = Query(default=False, alias="includeHidden")


@router.get("", summary="Listar pedidos")
async def list_orders(
    page: int = DEFAULT_QUERY_PAGE,
    page_size: int = DEFAULT_QUERY_PAGE_SIZE,
    include_hidden: bool = DEFAULT_QUERY_INCLUDE_HIDDEN,
    orchestrator: OrderOrchestrator = Depends(get_order_orchestrator),
) -> Dict[str, Any]:
    """Pedidos paginados; ``includeHidden`` incluye los no publicados."""
    return await orchestrator.list_orders(page, page_size, include_hidden)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Crear pedido")
async def create_order(
    request: OrderRequest,
    orchestrator: OrderOrchestrator = Depends(get_order_orchestrator),
) -> Dict[str, Any]:
    """
    Valida el pedido, lo crea en el CMS y en la tienda de ``originPlatform``.

    Un pedido inválido responde 400 sin escribir nada.
    """
    logger.info(f"📥 POST /pedidos numero_pedido={request.data.numero_pedido}")
    return await orchestrator.create_order(request.data)


@router.get("/{order_id}", summary="Obtener pedido")
async def get_order(
    order_id: str,
    orchestrator: OrderOrchestrator = Depends(get_order_orchestrator),
) -> Dict[str, Any]:
    return await orchestrator.get_order(order_id)


@router.put("/{order_id}", summary="Editar pedido")
async def update_order(
    order_id: str,
    request: OrderRequest,
    orchestrator: OrderOrchestrator = Depends(get_order_orchestrator),
) -> Dict[str, Any]:
    logger.info(f"📥 PUT /pedidos/{order_id} campos={sorted(request.data.provided_fields())}")
    return await orchestrator.update_order(order_id, request.data)
