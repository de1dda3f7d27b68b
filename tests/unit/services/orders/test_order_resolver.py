"""Tests unitarios para OrderResolver."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from intranet.services.customers.resolvers import ResolverKeys
from intranet.services.orders.resolvers import OrderResolver, matches_order
from intranet.utils.error_handler import TransportException

ORDER = {"id": 31, "documentId": "ord31", "numero_pedido": "P-3001", "woocommerce_id": 9001}


def make_resolver(find=None, find_one=None):
    repo = MagicMock()
    repo.strapi = MagicMock()
    repo.strapi.find = find or AsyncMock(return_value=[])
    repo.strapi.find_one = find_one or AsyncMock(return_value=None)
    repo.collection = "pedidos"
    repo.populate = {"populate": "*"}
    return OrderResolver(repo, scan_page_size=500), repo.strapi


def filter_keys(find):
    return [key for call in find.await_args_list for key in call.args[1] if key.startswith("filters[")]


class TestMatchesOrder:
    """Tests para la comparación en cliente."""

    def test_matches_any_identifier(self):
        """Debe coincidir por id, documentId, woocommerce_id o numero_pedido."""
        assert matches_order(ORDER, ResolverKeys.from_identifier("9001"))
        assert matches_order(ORDER, ResolverKeys.from_identifier("P-3001"))
        assert matches_order(ORDER, ResolverKeys.from_identifier("ord31"))
        assert not matches_order(ORDER, ResolverKeys.from_identifier("P-9999"))


class TestOrderResolver:
    """Tests para la cadena de resolución de pedidos."""

    @pytest.mark.asyncio
    async def test_document_id_is_fetched_directly_first(self):
        """Un documentId no numérico se busca primero con GET directo."""
        resolver, strapi = make_resolver(find_one=AsyncMock(return_value=ORDER))

        assert await resolver.resolve("ord31") == ORDER
        strapi.find.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_order_number_filter(self):
        """Sin GET directo, se encuentra por numero_pedido."""
        find = AsyncMock(side_effect=[[], [ORDER]])
        resolver, _ = make_resolver(find=find)

        assert await resolver.resolve("P-3001") == ORDER
        assert filter_keys(find) == ["filters[documentId][$eq]", "filters[numero_pedido][$eq]"]

    @pytest.mark.asyncio
    async def test_numeric_identifier_tries_woocommerce_id_before_id(self):
        """Un id numérico prueba woocommerce_id antes que el id del CMS."""
        find = AsyncMock(side_effect=[[], [], [ORDER]])
        resolver, strapi = make_resolver(find=find)

        assert await resolver.resolve("9001") == ORDER
        assert filter_keys(find) == [
            "filters[documentId][$eq]",
            "filters[numero_pedido][$eq]",
            "filters[woocommerce_id][$eq]",
        ]
        strapi.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_scan_after_transport_error(self):
        """Si un filtro falla por transporte, se escanea la colección."""
        error = TransportException(message="HTTP 500", service="strapi", api_response_code=500)
        find = AsyncMock(side_effect=[error, [], [], [], [{"id": 1}, ORDER]])
        resolver, _ = make_resolver(find=find)

        assert await resolver.resolve("9001") == ORDER
        assert find.await_args_list[-1].args[1]["pagination[pageSize]"] == 500

    @pytest.mark.asyncio
    async def test_not_found(self):
        """Sin coincidencias retorna None."""
        resolver, _ = make_resolver()

        assert await resolver.resolve("P-0000") is None
