"""Fixtures compartidas: un Strapi en memoria y tiendas WooCommerce simuladas."""

import itertools
import re
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from intranet.db.woocommerce_clients import WooCommerceRegistry

_FILTER_PART = re.compile(r"\[([^\]]+)\]")


def _values_at(record: Dict[str, Any], path: List[str]) -> List[Any]:
    current: List[Any] = [record]
    for part in path:
        found = []
        for item in current:
            for element in item if isinstance(item, list) else [item]:
                if isinstance(element, dict) and part in element:
                    found.append(element[part])
        current = found
    values = []
    for value in current:
        values.extend(value if isinstance(value, list) else [value])
    return values


def _parse_filters(params: Dict[str, Any]):
    parsed: Dict[tuple, Any] = {}
    for key, value in (params or {}).items():
        if not key.startswith("filters["):
            continue
        parts = _FILTER_PART.findall(key)
        index = next(i for i, part in enumerate(parts) if part.startswith("$"))
        path, operator = tuple(parts[:index]), parts[index]
        if operator == "$in":
            parsed.setdefault((path, operator), []).append(value)
        else:
            parsed[(path, operator)] = value
    return parsed


def _matches(record: Dict[str, Any], filters) -> bool:
    for (path, operator), expected in filters.items():
        values = _values_at(record, list(path))
        if operator == "$eq":
            ok = any(str(value) == str(expected) for value in values)
        elif operator == "$eqi":
            ok = any(str(value).lower() == str(expected).lower() for value in values)
        elif operator == "$in":
            ok = any(str(value) in {str(item) for item in expected} for value in values)
        else:
            raise AssertionError(f"operador no soportado en el Strapi de prueba: {operator}")
        if not ok:
            return False
    return True


class InMemoryStrapi:
    """Subconjunto de StrapiClient sobre diccionarios (formato plano v5)."""

    def __init__(self):
        self.collections: Dict[str, List[Dict[str, Any]]] = {}
        self._ids = itertools.count(1)
        self.calls: List[tuple] = []

    def seed(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        record = dict(record)
        if "id" not in record:
            record["id"] = next(self._ids)
        record.setdefault("documentId", f"doc-{collection}-{record['id']}")
        self.collections.setdefault(collection, []).append(record)
        return record

    def records(self, collection: str) -> List[Dict[str, Any]]:
        return self.collections.get(collection, [])

    def _get(self, collection: str, identifier: Any) -> Optional[Dict[str, Any]]:
        for record in self.records(collection):
            if str(record.get("documentId")) == str(identifier) or str(record.get("id")) == str(identifier):
                return record
        return None

    @staticmethod
    def _expand_relations(data: Dict[str, Any]) -> Dict[str, Any]:
        data = dict(data)
        if isinstance(data.get("persona"), str):
            data["persona"] = {"documentId": data["persona"]}
        return data

    async def find(self, collection: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        self.calls.append(("find", collection, dict(params or {})))
        filters = _parse_filters(params or {})
        return [dict(record) for record in self.records(collection) if _matches(record, filters)]

    async def find_with_meta(self, collection: str, params: Optional[Dict[str, Any]] = None):
        records = await self.find(collection, params)
        return records, {"pagination": {"total": len(records)}}

    async def find_one(self, collection: str, identifier: Any, params: Optional[Dict[str, Any]] = None):
        self.calls.append(("find_one", collection, identifier))
        record = self._get(collection, identifier)
        return dict(record) if record else None

    async def create(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("create", collection, dict(data)))
        return dict(self.seed(collection, self._expand_relations(data)))

    async def update(self, collection: str, identifier: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("update", collection, identifier, dict(data)))
        record = self._get(collection, identifier)
        if record is None:
            raise AssertionError(f"{collection}/{identifier} no existe en el Strapi de prueba")
        record.update(self._expand_relations(data))
        return dict(record)

    async def delete(self, collection: str, identifier: Any) -> None:
        self.calls.append(("delete", collection, identifier))
        record = self._get(collection, identifier)
        self.collections[collection].remove(record)


def fake_storefront(customer_id: int = 100, order_id: int = 500) -> SimpleNamespace:
    """Cliente WooCommerce con customers/orders simulados."""
    return SimpleNamespace(
        customers=SimpleNamespace(create_or_update=AsyncMock(return_value={"id": customer_id})),
        orders=SimpleNamespace(
            create=AsyncMock(return_value={"id": order_id}),
            update=AsyncMock(return_value={"id": order_id}),
        ),
    )


@pytest.fixture
def strapi():
    return InMemoryStrapi()


@pytest.fixture
def storefronts():
    return {"woo_moraleja": fake_storefront(101, 501), "woo_escolar": fake_storefront(202, 602)}


@pytest.fixture
def registry(storefronts):
    return WooCommerceRegistry(storefronts, known_platforms=["woo_moraleja", "woo_escolar"])
