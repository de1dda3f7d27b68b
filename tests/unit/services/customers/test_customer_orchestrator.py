"""Tests del flujo completo de clientes contra un Strapi en memoria."""

from unittest.mock import AsyncMock

import pytest

from intranet.api.v1.schemas.customer_schemas import CustomerData
from intranet.services.customers import create_customer_orchestrator
from intranet.utils.error_handler import ConflictException, NotFoundException, TransportException


def customer_data(**overrides):
    data = {
        "persona": {
            "nombre_completo": "Ana María Pérez Soto",
            "rut": "12.345.678-9",
            "emails": [{"email": "ana@colegio.cl", "tipo": "Personal"}],
        },
        "canales": ["woo_moraleja", "woo_escolar"],
        "telefono": "+56 9 1234 5678",
    }
    data.update(overrides)
    return CustomerData.model_validate(data)


class TestCreateCustomer:
    """Tests para POST /clientes."""

    @pytest.mark.asyncio
    async def test_one_person_and_one_shadow_per_platform(self, strapi, registry, storefronts):
        """Debe crear 1 persona, 2 registros sombra y reportar ambas plataformas."""
        orchestrator = create_customer_orchestrator(strapi, registry)

        response = await orchestrator.create_customer(customer_data())

        assert response["success"] is True
        assert response["persona"]["created"] is True
        assert set(response["platforms"]) == {"woo_moraleja", "woo_escolar"}
        assert len(strapi.records("personas")) == 1
        persona = strapi.records("personas")[0]
        assert persona["rut"] == "12345678-9"
        assert persona["telefonos"][0]["telefono_norm"] == "+56912345678"

        shadows = {record["originPlatform"]: record for record in strapi.records("wo-clientes")}
        assert set(shadows) == {"woo_moraleja", "woo_escolar"}
        assert shadows["woo_moraleja"]["wooId"] == 101
        assert shadows["woo_escolar"]["wooId"] == 202
        assert shadows["woo_escolar"]["persona"] == {"documentId": persona["documentId"]}

        sent = storefronts["woo_moraleja"].customers.create_or_update.await_args.args[0]
        assert sent["first_name"] == "Ana"
        assert sent["last_name"] == "María Pérez Soto"

    @pytest.mark.asyncio
    async def test_failing_platform_is_reported_not_raised(self, strapi, registry, storefronts):
        """Una tienda caída no revierte la persona ni la otra tienda."""
        storefronts["woo_escolar"].customers.create_or_update = AsyncMock(
            side_effect=TransportException(message="woo_escolar HTTP 503", service="woo_escolar")
        )
        orchestrator = create_customer_orchestrator(strapi, registry)

        response = await orchestrator.create_customer(customer_data())

        assert response["platforms"]["woo_moraleja"]["success"] is True
        assert response["platforms"]["woo_escolar"] == {"success": False, "error": "woo_escolar HTTP 503"}
        assert len(strapi.records("personas")) == 1
        escolar = [record for record in strapi.records("wo-clientes") if record["originPlatform"] == "woo_escolar"]
        assert len(escolar) == 1
        assert "wooId" not in escolar[0]

    @pytest.mark.asyncio
    async def test_duplicate_rut_is_rejected_before_storefronts(self, strapi, registry, storefronts):
        """Un RUT existente (en otro formato) responde conflicto sin tocar las tiendas."""
        strapi.seed("personas", {"rut": "12345678-9", "nombre_completo": "Otra Persona"})
        orchestrator = create_customer_orchestrator(strapi, registry)

        with pytest.raises(ConflictException):
            await orchestrator.create_customer(customer_data())

        storefronts["woo_moraleja"].customers.create_or_update.assert_not_awaited()
        assert strapi.records("wo-clientes") == []

    @pytest.mark.asyncio
    async def test_duplicate_rut_with_lowercase_k(self, strapi, registry, storefronts):
        """Un RUT guardado con k minúscula también es duplicado."""
        strapi.seed("personas", {"documentId": "pk", "rut": "12.345.678-k", "nombre_completo": "Otra Persona"})
        orchestrator = create_customer_orchestrator(strapi, registry)
        persona = {"nombre_completo": "Ana Pérez", "rut": "12.345.678-K", "emails": [{"email": "ana@colegio.cl"}]}

        with pytest.raises(ConflictException) as exc_info:
            await orchestrator.create_customer(customer_data(persona=persona))

        assert exc_info.value.existing_id == "pk"
        assert len(strapi.records("personas")) == 1
        storefronts["woo_moraleja"].customers.create_or_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_platform_aliases_select_storefronts(self, strapi, registry, storefronts):
        """Los nombres de plataforma se resuelven por alias."""
        orchestrator = create_customer_orchestrator(strapi, registry)

        response = await orchestrator.create_customer(customer_data(canales=["Escolar"]))

        assert list(response["platforms"]) == ["woo_escolar"]
        storefronts["woo_moraleja"].customers.create_or_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_platform_is_reported_without_shadow(self, strapi, registry, storefronts):
        """Una plataforma desconocida se reporta como falla y no crea registro sombra."""
        orchestrator = create_customer_orchestrator(strapi, registry)

        response = await orchestrator.create_customer(customer_data(canales=["woo_moraleja", "tienda_inexistente"]))

        assert response["platforms"]["woo_moraleja"]["success"] is True
        assert response["platforms"]["tienda_inexistente"] == {
            "success": False,
            "error": "Plataforma desconocida: tienda_inexistente",
        }
        assert [record["originPlatform"] for record in strapi.records("wo-clientes")] == ["woo_moraleja"]


class TestUpdateCustomer:
    """Tests para PUT /clientes/{id}."""

    @pytest.mark.asyncio
    async def test_update_through_shadow_relation(self, strapi, registry):
        """Debe resolver la persona por la relación del registro sombra y no duplicar nada."""
        orchestrator = create_customer_orchestrator(strapi, registry)
        await orchestrator.create_customer(customer_data())
        shadow = strapi.records("wo-clientes")[0]

        update = CustomerData.model_validate({"persona": {"nombres": "Ana Rosa"}, "canales": ["woo_moraleja"]})
        response = await orchestrator.update_customer(shadow["documentId"], update)

        assert response["action"] == "updated"
        assert response["persona"]["created"] is False
        assert len(strapi.records("personas")) == 1
        assert strapi.records("personas")[0]["nombres"] == "Ana Rosa"
        assert strapi.records("personas")[0]["nombre_completo"] == "Ana María Pérez Soto"
        assert len(strapi.records("wo-clientes")) == 2

    @pytest.mark.asyncio
    async def test_update_resolves_by_rut(self, strapi, registry):
        """Sin relación, la persona se encuentra por RUT normalizado."""
        person = strapi.seed(
            "personas",
            {"rut": "12.345.678-9", "nombre_completo": "Ana Pérez", "emails": [{"email": "ana@colegio.cl"}]},
        )
        orchestrator = create_customer_orchestrator(strapi, registry)

        update = CustomerData.model_validate(
            {"persona": {"rut": "123456789", "genero": "F"}, "canales": ["woo_moraleja"]}
        )
        response = await orchestrator.update_customer("no-existe", update)

        assert response["persona"]["documentId"] == person["documentId"]
        assert len(strapi.records("personas")) == 1


class TestReadDeleteCustomer:
    """Tests para GET y DELETE /clientes/{id}."""

    @pytest.mark.asyncio
    async def test_get_adds_principal_phone_and_email(self, strapi, registry):
        """Debe completar teléfono y correo desde la persona."""
        strapi.seed(
            "wo-clientes",
            {
                "id": 40,
                "nombre": "Ana",
                "persona": {
                    "documentId": "p1",
                    "telefonos": [{"telefono_raw": "+56 2 2345 6789", "principal": True}],
                    "emails": [{"email": "ana@colegio.cl", "tipo": "Personal"}],
                },
            },
        )
        orchestrator = create_customer_orchestrator(strapi, registry)

        response = await orchestrator.get_customer("40")

        assert response["data"]["telefono"] == "+56 2 2345 6789"
        assert response["data"]["correo_electronico"] == "ana@colegio.cl"

    @pytest.mark.asyncio
    async def test_delete_unknown_customer(self, strapi, registry):
        """Borrar un cliente inexistente responde 404."""
        orchestrator = create_customer_orchestrator(strapi, registry)

        with pytest.raises(NotFoundException):
            await orchestrator.delete_customer("w-404")

    @pytest.mark.asyncio
    async def test_delete_removes_shadow_only(self, strapi, registry):
        """Debe borrar el registro sombra y no la persona."""
        strapi.seed("personas", {"documentId": "p1", "rut": "1-9"})
        strapi.seed("wo-clientes", {"documentId": "w1", "persona": {"documentId": "p1"}})
        orchestrator = create_customer_orchestrator(strapi, registry)

        response = await orchestrator.delete_customer("w1")

        assert response["success"] is True
        assert strapi.records("wo-clientes") == []
        assert len(strapi.records("personas")) == 1
