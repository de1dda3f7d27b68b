"""Tests del flujo de pedidos contra un Strapi en memoria."""

from unittest.mock import AsyncMock

import pytest

from intranet.api.v1.schemas.order_schemas import OrderData
from intranet.services.orders import create_order_orchestrator
from intranet.utils.error_handler import NotFoundException, TransportException, ValidationException

NOTEBOOKS = {"nombre": "Cuaderno", "cantidad": 2, "precio": 500, "total": 1000, "producto_id": 55}


def order(**fields):
    data = {"numero_pedido": "P-1", "items": [NOTEBOOKS]}
    data.update(fields)
    return OrderData.model_validate(data)


def stored_order(strapi, **fields):
    record = {
        "numero_pedido": "P-9",
        "estado": "pending",
        "origen": "web",
        "metodo_pago": "bacs",
        "originPlatform": "woo_moraleja",
        "woocommerce_id": 777,
    }
    record.update(fields)
    return strapi.seed("pedidos", record)


class TestCreateOrder:
    """Tests para POST /pedidos."""

    @pytest.mark.asyncio
    async def test_creates_in_cms_and_storefront_and_links(self, strapi, registry, storefronts):
        """Debe crear en el CMS, en la tienda de origen y guardar el woocommerce_id."""
        orchestrator = create_order_orchestrator(strapi, registry)

        response = await orchestrator.create_order(order(estado="completado", originPlatform="woo_escolar"))

        assert response["success"] is True
        assert response["side_effects"] == [{"name": "order_link:woo_escolar", "outcome": "ok"}]
        assert response["platforms"]["woo_escolar"]["success"] is True

        stored = strapi.records("pedidos")[0]
        assert stored["estado"] == "completed"
        assert stored["originPlatform"] == "woo_escolar"
        assert stored["woocommerce_id"] == 602
        assert stored["rawWooData"]["id"] == 602

        sent = storefronts["woo_escolar"].orders.create.await_args.args[0]
        assert sent["status"] == "completed"
        assert sent["set_paid"] is True
        assert sent["line_items"][0]["product_id"] == 55
        assert sent["total"] == "1000.00"
        storefronts["woo_moraleja"].orders.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_storefront_failure_keeps_cms_order(self, strapi, registry, storefronts):
        """Si la tienda falla, el pedido queda en el CMS y el enlace se omite."""
        storefronts["woo_moraleja"].orders.create = AsyncMock(
            side_effect=TransportException(message="woo_moraleja HTTP 500", service="woo_moraleja")
        )
        orchestrator = create_order_orchestrator(strapi, registry)

        response = await orchestrator.create_order(order())

        assert response["success"] is True
        assert response["platforms"]["woo_moraleja"] == {"success": False, "error": "woo_moraleja HTTP 500"}
        assert response["side_effects"][0]["outcome"] == "skipped"
        assert "woocommerce_id" not in strapi.records("pedidos")[0]

    @pytest.mark.asyncio
    async def test_other_platform_skips_storefronts(self, strapi, registry, storefronts):
        """Un pedido "otros" solo se guarda en el CMS."""
        orchestrator = create_order_orchestrator(strapi, registry)

        response = await orchestrator.create_order(order(originPlatform="otros"))

        assert response["platforms"] == {}
        assert response["side_effects"] == []
        storefronts["woo_moraleja"].orders.create.assert_not_awaited()
        storefronts["woo_escolar"].orders.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_order_writes_nothing(self, strapi, registry, storefronts):
        """Un item con total incorrecto no escribe en ningún sistema."""
        orchestrator = create_order_orchestrator(strapi, registry)
        bad_item = {**NOTEBOOKS, "total": 999}

        with pytest.raises(ValidationException):
            await orchestrator.create_order(order(items=[bad_item]))

        assert strapi.records("pedidos") == []
        storefronts["woo_moraleja"].orders.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_coupon_from_cms(self, strapi, registry):
        """Debe aplicar un cupón guardado en wo-cupones."""
        strapi.seed(
            "wo-cupones",
            {"code": "MEGA", "originPlatform": "woo_moraleja", "discount_type": "percent", "amount": 150},
        )
        orchestrator = create_order_orchestrator(strapi, registry)

        await orchestrator.create_order(order(cupon="mega"))

        stored = strapi.records("pedidos")[0]
        assert stored["descuento"] == 1000.0
        assert stored["total"] == 0.0
        assert stored["cupon"] == "mega"


class TestUpdateOrder:
    """Tests para PUT /pedidos/{id}."""

    @pytest.mark.asyncio
    async def test_status_only_repairs_and_syncs_storefront(self, strapi, registry, storefronts):
        """Un cambio de estado repara campos guardados y actualiza la tienda."""
        stored_order(strapi, origen="WooCommerce", metodo_pago="Tarjeta")
        orchestrator = create_order_orchestrator(strapi, registry)

        response = await orchestrator.update_order("P-9", OrderData.model_validate({"estado": "completado"}))

        stored = strapi.records("pedidos")[0]
        assert stored["estado"] == "completed"
        assert stored["origen"] == "web"
        assert stored["metodo_pago"] == "stripe"
        storefronts["woo_moraleja"].orders.update.assert_awaited_once_with(777, {"status": "completed"})
        assert response["side_effects"] == [{"name": "storefront_status:woo_moraleja", "outcome": "ok"}]

    @pytest.mark.asyncio
    async def test_update_by_woocommerce_id(self, strapi, registry):
        """El pedido se encuentra también por woocommerce_id."""
        stored_order(strapi)
        orchestrator = create_order_orchestrator(strapi, registry)

        response = await orchestrator.update_order("777", OrderData.model_validate({"nota_cliente": "Entregar en portería"}))

        assert response["success"] is True
        assert strapi.records("pedidos")[0]["nota_cliente"] == "Entregar en portería"

    @pytest.mark.asyncio
    async def test_only_items_with_product_id_are_sent(self, strapi, registry):
        """Los items sin producto_id no se envían al CMS."""
        stored_order(strapi)
        orchestrator = create_order_orchestrator(strapi, registry)
        data = OrderData.model_validate({"items": [NOTEBOOKS, {"nombre": "Sin id", "cantidad": 1, "precio": 1, "total": 1}]})

        await orchestrator.update_order("P-9", data)

        items = strapi.records("pedidos")[0]["items"]
        assert len(items) == 1
        assert items[0]["producto_id"] == 55

    @pytest.mark.asyncio
    async def test_empty_update(self, strapi, registry):
        """Sin campos no se escribe nada."""
        stored_order(strapi)
        orchestrator = create_order_orchestrator(strapi, registry)

        response = await orchestrator.update_order("P-9", OrderData.model_validate({}))

        assert response["message"] == "No hay campos para actualizar"
        assert not [call for call in strapi.calls if call[0] == "update"]

    @pytest.mark.asyncio
    async def test_unknown_order(self, strapi, registry):
        """Un pedido inexistente responde 404."""
        orchestrator = create_order_orchestrator(strapi, registry)

        with pytest.raises(NotFoundException):
            await orchestrator.update_order("P-404", OrderData.model_validate({"estado": "cancelado"}))

    @pytest.mark.asyncio
    async def test_invalid_origin_platform(self, strapi, registry):
        """Una plataforma desconocida en la edición se rechaza."""
        stored_order(strapi)
        orchestrator = create_order_orchestrator(strapi, registry)

        with pytest.raises(ValidationException):
            await orchestrator.update_order("P-9", OrderData.model_validate({"originPlatform": "shopify"}))


class TestReadOrders:
    """Tests de lectura."""

    @pytest.mark.asyncio
    async def test_list_hidden_orders(self, strapi, registry):
        """includeHidden pide también los pedidos no publicados."""
        stored_order(strapi)
        orchestrator = create_order_orchestrator(strapi, registry)

        response = await orchestrator.list_orders(page=1, page_size=10, include_hidden=True)

        assert len(response["data"]) == 1
        params = strapi.calls[-1][2]
        assert params["publicationState"] == "preview"
        assert params["pagination[pageSize]"] == 10

    @pytest.mark.asyncio
    async def test_get_order_includes_spanish_status_label(self, strapi, registry):
        """GET agrega la etiqueta en español del estado."""
        stored_order(strapi, estado="on-hold")
        orchestrator = create_order_orchestrator(strapi, registry)

        response = await orchestrator.get_order("P-9")

        assert response["data"]["numero_pedido"] == "P-9"
        assert response["estado_label"] == "en_espera"
