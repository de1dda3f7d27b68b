"""Tests de integración de la API v1 con Strapi y tiendas simuladas."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from intranet.api.v1.dependencies import get_customer_orchestrator, get_strapi_client, get_woocommerce_registry
from intranet.main import app
from intranet.utils.error_handler import AuthException, NotFoundException


@pytest.fixture
def client(strapi, registry):
    app.dependency_overrides[get_strapi_client] = lambda: strapi
    app.dependency_overrides[get_woocommerce_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def customer_orchestrator():
    orchestrator = MagicMock()
    app.dependency_overrides[get_customer_orchestrator] = lambda: orchestrator
    yield orchestrator
    app.dependency_overrides.pop(get_customer_orchestrator, None)


class TestRootEndpoints:
    """Tests para endpoints base."""

    def test_health(self, client):
        """El health check responde sin llamar a servicios externos."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ping(self, client):
        """Debe responder pong."""
        assert client.get("/ping").json()["message"] == "pong"


class TestCustomerEndpoints:
    """Tests para /api/v1/clientes."""

    def test_create_customer_end_to_end(self, client, strapi, storefronts):
        """POST crea la persona, ambos registros sombra y responde 201."""
        body = {
            "data": {
                "persona": {
                    "nombre_completo": "Ana Pérez",
                    "rut": "12.345.678-9",
                    "emails": [{"email": "ana@colegio.cl"}],
                },
                "canales": ["woo_moraleja", "woo_escolar"],
            }
        }

        response = client.post("/api/v1/clientes", json=body)

        assert response.status_code == 201
        payload = response.json()
        assert set(payload["platforms"]) == {"woo_moraleja", "woo_escolar"}
        assert len(strapi.records("personas")) == 1
        assert len(strapi.records("wo-clientes")) == 2

    def test_missing_rut_is_400_without_writes(self, client, strapi, storefronts):
        """Sin RUT responde 400 y no escribe nada."""
        body = {"data": {"persona": {"nombre_completo": "Ana Pérez", "emails": [{"email": "ana@colegio.cl"}]}}}

        response = client.post("/api/v1/clientes", json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["field"] == "rut"
        assert strapi.records("personas") == []
        storefronts["woo_moraleja"].customers.create_or_update.assert_not_awaited()

    def test_duplicate_rut_is_400(self, client, strapi):
        """Un RUT existente responde 400 con el id existente."""
        strapi.seed("personas", {"documentId": "p1", "rut": "12.345.678-9"})
        body = {
            "data": {
                "persona": {"nombre_completo": "Ana Pérez", "rut": "123456789", "emails": [{"email": "ana@colegio.cl"}]}
            }
        }

        response = client.post("/api/v1/clientes", json=body)

        assert response.status_code == 400
        assert response.json()["existing_id"] == "p1"

    def test_body_without_data_is_400(self, client):
        """Un cuerpo sin "data" es un error de validación."""
        response = client.post("/api/v1/clientes", json={"persona": {}})

        assert response.status_code == 400
        assert response.json()["error_type"] == "validation_error"

    def test_get_not_found(self, client, customer_orchestrator):
        """Un cliente inexistente responde 404."""
        customer_orchestrator.get_customer = AsyncMock(
            side_effect=NotFoundException(message="Cliente x no encontrado", resource="wo-clientes", identifier="x")
        )

        response = client.get("/api/v1/clientes/x")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_cms_auth_error_keeps_status(self, client, customer_orchestrator):
        """Un 401 del CMS se propaga con su código original."""
        customer_orchestrator.update_customer = AsyncMock(
            side_effect=AuthException(message="strapi rechazó las credenciales (401)", service="strapi", api_response_code=401)
        )

        response = client.put("/api/v1/clientes/w1", json={"data": {"persona": {"nombres": "Ana"}}})

        assert response.status_code == 401
        assert response.json()["error_type"] == "external_auth_error"

    def test_list_customers_page_size_alias(self, client, customer_orchestrator):
        """pageSize se pasa al orquestador."""
        customer_orchestrator.list_customers = AsyncMock(return_value={"success": True, "data": [], "meta": {}})

        response = client.get("/api/v1/clientes", params={"page": 2, "pageSize": 50})

        assert response.status_code == 200
        customer_orchestrator.list_customers.assert_awaited_once_with(2, 50)


class TestOrderEndpoints:
    """Tests para /api/v1/pedidos."""

    def test_create_order(self, client, strapi, storefronts):
        """POST crea el pedido en el CMS y en la tienda."""
        body = {
            "data": {
                "numero_pedido": "P-100",
                "estado": "procesando",
                "metodo_pago": "transferencia bancaria",
                "items": [{"nombre": "Libro", "cantidad": 1, "precio": 12990, "total": 12990, "libro_id": 321}],
            }
        }

        response = client.post("/api/v1/pedidos", json=body)

        assert response.status_code == 201
        stored = strapi.records("pedidos")[0]
        assert stored["estado"] == "processing"
        assert stored["metodo_pago"] == "transferencia"
        assert stored["woocommerce_id"] == 501
        storefronts["woo_moraleja"].orders.create.assert_awaited_once()

    def test_invalid_line_total_is_400(self, client, strapi):
        """Un total de línea incorrecto responde 400 con el campo."""
        body = {
            "data": {
                "numero_pedido": "P-101",
                "originPlatform": "otros",
                "items": [{"nombre": "Cuaderno", "cantidad": 2, "precio": 1000, "total": 1999}],
            }
        }

        response = client.post("/api/v1/pedidos", json=body)

        assert response.status_code == 400
        assert response.json()["field"] == "items[0].total"
        assert strapi.records("pedidos") == []

    def test_update_and_get_order(self, client, strapi):
        """PUT actualiza por numero_pedido y GET lo devuelve."""
        strapi.seed("pedidos", {"documentId": "ord1", "numero_pedido": "P-200", "estado": "pending", "originPlatform": "otros"})

        response = client.put("/api/v1/pedidos/P-200", json={"data": {"estado": "completado"}})

        assert response.status_code == 200
        assert client.get("/api/v1/pedidos/ord1").json()["data"]["estado"] == "completed"

    def test_get_unknown_order(self, client):
        """Un pedido inexistente responde 404."""
        response = client.get("/api/v1/pedidos/P-404")

        assert response.status_code == 404
        assert response.json()["error"] == "Pedido no encontrado con ID: P-404"


class TestSchoolEndpoints:
    """Tests para /api/v1/colegios/import-matriculados."""

    @pytest.fixture
    def seeded(self, strapi):
        strapi.seed("colegios", {"id": 10, "rbd": "12345"})
        strapi.seed(
            "cursos",
            {"id": 1, "documentId": "c1", "colegio": {"id": 10}, "nivel": "Basica", "grado": 5, "año": 2024},
        )
        return strapi

    def test_import_csv_file(self, client, seeded):
        """Un CSV válido actualiza cantidad_alumnos del curso."""
        content = "AGNO,RBD,NIVEL,ID_NIVEL,N_ALU\n2024,12345,5 Basico,8,32\n"

        response = client.post(
            "/api/v1/colegios/import-matriculados",
            files={"file": ("matriculados.csv", content.encode("utf-8"), "text/csv")},
        )

        assert response.status_code == 200
        assert response.json()["data"]["resumen"]["totalCursosActualizados"] == 1
        assert seeded.records("cursos")[0]["cantidad_alumnos"] == 32

    def test_import_json_rows(self, client, seeded):
        """También acepta las filas ya leídas como JSON."""
        response = client.post(
            "/api/v1/colegios/import-matriculados",
            json={"datos": [{"AGNO": 2024, "RBD": "12345", "NIVEL": "5° Básico", "N_ALU": 28}]},
        )

        assert response.status_code == 200
        assert seeded.records("cursos")[0]["cantidad_alumnos"] == 28

    def test_missing_file(self, client):
        """Sin archivo responde 400."""
        response = client.post("/api/v1/colegios/import-matriculados", data={"otro": "campo"})

        assert response.status_code == 400
        assert response.json()["field"] == "file"

    def test_invalid_extension(self, client):
        """Un archivo que no es CSV ni Excel responde 400."""
        response = client.post(
            "/api/v1/colegios/import-matriculados",
            files={"file": ("matriculados.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 400
