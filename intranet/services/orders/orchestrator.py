"""
OrderOrchestrator - Main coordinator for intranet orders.

Flow for create:
1. Validate and convert the payload (items, coupon, totals)
2. Create the order in the CMS (success boundary)
3. Create it on its storefront when direct sync is enabled
4. Link the storefront order id back to the CMS order (side effect)
"""

import logging
from typing import Any, Optional

from intranet.api.v1.schemas.order_schemas import OrderData, OrderItemInput
from intranet.core.config import Settings, get_settings
from intranet.db.cms import CouponRepository, OrderRepository
from intranet.db.strapi_client import StrapiClient
from intranet.db.woocommerce_clients import WooCommerceRegistry
from intranet.domain.enums import OrderStatus, OriginPlatform
from intranet.domain.models import OrderDomain
from intranet.services.customers.platform_fanout import PlatformFanout
from intranet.services.orders.converters import OrderConverter
from intranet.services.orders.interfaces import IOrderConverter, IOrderPlatformWriter, IOrderResolver
from intranet.services.orders.resolvers import OrderResolver
from intranet.services.orders.validators import OrderValidator
from intranet.services.results import OperationResult, PlatformResult, SideEffect
from intranet.utils.error_handler import NotFoundException, describe_error

logger = logging.getLogger(__name__)


class OrderOrchestrator:
    """
    Orchestrates order create/update between the CMS and the storefronts.

    Each collaborator has a single responsibility and is injected via
    constructor.
    """

    def __init__(
        self,
        converter: IOrderConverter,
        resolver: IOrderResolver,
        order_repo: OrderRepository,
        fanout: IOrderPlatformWriter,
        direct_platform_sync: bool = True,
    ):
        """
        Initialize orchestrator with service dependencies (DIP).

        Args:
            converter: Payload validation and conversion
            resolver: Order lookup by any identifier
            order_repo: pedidos repository
            fanout: Storefront writes
            direct_platform_sync: Create/update orders on the storefront directly
        """
        self.converter = converter
        self.resolver = resolver
        self.order_repo = order_repo
        self.fanout = fanout
        self.direct_platform_sync = direct_platform_sync

    # ------------------------- Create -------------------------

    async def create_order(self, data: OrderData) -> dict[str, Any]:
        """
        POST /pedidos.

        Returns:
            dict: Response with the CMS documentId, storefront result and side effects

        Raises:
            ValidationException: Invalid payload, nothing is written
        """
        order = await self.converter.convert(data)

        logger.info(f"🛒 Creating order {order.number} in CMS (platform={order.origin_platform})")
        record = await self.order_repo.create(order.to_cms())
        document_id = record.get("documentId") or record.get("id")
        order.document_id = record.get("documentId")
        operation = OperationResult(primary=record)

        if self._syncs_to_storefront(order.origin_platform):
            result = await self.fanout.create_order_on_platform(order.origin_platform, order.to_woo_payload())
            operation.platform_results[order.origin_platform] = result
            operation.add(await self._link_external_order(document_id, order, result))

        logger.info(f"✅ Order {order.number} created: documentId={document_id}")
        return {
            "success": True,
            "documentId": document_id,
            "data": {"strapi": record},
            "platforms": {code: result.to_dict() for code, result in operation.platform_results.items()},
            "side_effects": operation.side_effects_dict(),
            "message": "Pedido creado exitosamente",
        }

    async def _link_external_order(self, document_id: Any, order: OrderDomain, result: PlatformResult) -> SideEffect:
        name = f"order_link:{order.origin_platform}"
        if result.external_id is None:
            return SideEffect.skipped(name, result.error or "sin id de la tienda")
        try:
            raw_payload = {**order.to_woo_payload(), "id": result.external_id}
            await self.order_repo.link_external_order(document_id, result.external_id, raw_payload)
            order.external_id = result.external_id
            return SideEffect.ok(name)
        except Exception as e:
            logger.error(f"❌ Order {order.number}: could not store woocommerce_id {result.external_id}: {describe_error(e)}")
            return SideEffect.failed(name, describe_error(e))

    def _syncs_to_storefront(self, platform: Optional[str]) -> bool:
        return self.direct_platform_sync and bool(platform) and platform != OriginPlatform.OTROS.value

    # ------------------------- Update -------------------------

    async def update_order(self, identifier: Any, data: OrderData) -> dict[str, Any]:
        """
        PUT /pedidos/{id}: partial update of the fields present in the payload.

        A status-only update also repairs stored origen/metodo_pago values
        that are no longer canonical.
        """
        record = await self._require(identifier)
        document_id = record.get("documentId") or record.get("id")

        fields = data.provided_fields()
        if "origin_platform" in fields:
            self.converter.validator.validate_origin_platform(data.origin_platform)

        update: dict[str, Any] = {}
        if data.is_status_only:
            update.update(self.converter.repair_stored_fields(record))
        update.update(self.converter.canonical_update_fields(data))
        update.update(self.converter.parse_update_amounts(data))

        if "items" in fields and not data.is_status_only:
            items = self._items_for_update(data)
            if items is not None:
                update["items"] = items

        if "origin_platform" in fields:
            update["originPlatform"] = data.origin_platform

        if not update:
            return {"success": True, "message": "No hay campos para actualizar", "data": {}}

        logger.info(f"✏️ Updating order {document_id}: fields={sorted(update)}")
        updated = await self.order_repo.update(document_id, update)
        operation = OperationResult(primary=updated)

        platform = data.origin_platform or record.get("originPlatform") or OriginPlatform.WOO_MORALEJA.value
        external_id = record.get("woocommerce_id")
        if "estado" in update and external_id and self._syncs_to_storefront(platform):
            result = await self.fanout.update_order_on_platform(platform, external_id, {"status": update["estado"]})
            operation.platform_results[platform] = result
            name = f"storefront_status:{platform}"
            operation.add(SideEffect.ok(name) if result.success else SideEffect.failed(name, result.error or ""))

        return {
            "success": True,
            "documentId": document_id,
            "data": {"strapi": updated},
            "platforms": {code: result.to_dict() for code, result in operation.platform_results.items()},
            "side_effects": operation.side_effects_dict(),
            "message": "Pedido actualizado exitosamente",
        }

    @staticmethod
    def _items_for_update(data: OrderData) -> Optional[list[dict[str, Any]]]:
        """Items with a product id; None when every item lacks one."""
        items = data.items or []
        if not items:
            return []
        valid = [OrderOrchestrator._item_to_cms(item) for item in items if item.external_product_id is not None]
        if not valid:
            logger.warning("⚠️ Items without producto_id are not sent to the CMS")
            return None
        return valid

    @staticmethod
    def _item_to_cms(item: OrderItemInput) -> dict[str, Any]:
        data = {
            "nombre": item.nombre,
            "cantidad": item.cantidad,
            "precio_unitario": item.precio,
            "total": item.total,
            "producto_id": item.external_product_id,
        }
        if item.sku:
            data["sku"] = item.sku
        return data

    # ------------------------- Read -------------------------

    async def _require(self, identifier: Any) -> dict[str, Any]:
        record = await self.resolver.resolve(identifier)
        if record is None:
            raise NotFoundException(
                message=f"Pedido no encontrado con ID: {identifier}", resource="pedidos", identifier=identifier
            )
        return record

    async def get_order(self, identifier: Any) -> dict[str, Any]:
        """Order record plus the Spanish label of its status for the intranet."""
        record = await self._require(identifier)
        return {
            "success": True,
            "data": record,
            "estado_label": OrderStatus(record.get("estado")).display_label,
        }

    async def list_orders(self, page: int = 1, page_size: int = 25, include_hidden: bool = False) -> dict[str, Any]:
        params = {"publicationState": "preview"} if include_hidden else None
        records, meta = await self.order_repo.list_page(page, page_size, params)
        return {"success": True, "data": records, "meta": meta}


# Factory function to create orchestrator with all dependencies
def create_order_orchestrator(
    strapi: StrapiClient,
    registry: WooCommerceRegistry,
    settings: Optional[Settings] = None,
) -> OrderOrchestrator:
    """
    Factory function to create fully initialized order orchestrator.

    Args:
        strapi: CMS client shared by the repositories
        registry: Storefront clients per platform
        settings: Application settings (defaults to get_settings())

    Returns:
        OrderOrchestrator: Fully configured orchestrator
    """
    settings = settings or get_settings()
    order_repo = OrderRepository(strapi)
    validator = OrderValidator(
        mismatch_ratio=settings.ORDER_TOTAL_MISMATCH_RATIO,
        currency=settings.DEFAULT_CURRENCY,
    )
    converter = OrderConverter(
        validator=validator,
        coupon_repo=CouponRepository(strapi),
        guest_name=settings.GUEST_CUSTOMER_NAME,
        country=settings.DEFAULT_COUNTRY,
    )

    return OrderOrchestrator(
        converter=converter,
        resolver=OrderResolver(order_repo, settings.RESOLVER_SCAN_PAGE_SIZE),
        order_repo=order_repo,
        fanout=PlatformFanout(registry),
        direct_platform_sync=settings.ORDER_DIRECT_PLATFORM_SYNC,
    )
