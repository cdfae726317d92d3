"""
Tests para el módulo de Clientes
"""

from sqlalchemy.orm import Session

from caja.modules.customers.schemas import CustomerCreate
from caja.modules.customers.service import CustomerService

USER_A = "user-a"
USER_B = "user-b"

API = "/api/customers"


class TestCustomerService:
    """Servicio de clientes"""

    def test_create_and_get(self, db_session: Session):
        service = CustomerService(db_session)
        customer = service.create_customer(CustomerCreate(name="  Ana  ", email="ana@mail.com"), USER_A)

        assert customer.name == "Ana"
        assert service.get_customer_by_id(customer.id, USER_A).email == "ana@mail.com"
        assert service.get_customer_by_id(customer.id, USER_B) is None

    def test_find_by_exact_name(self, db_session: Session):
        service = CustomerService(db_session)
        service.create_customer(CustomerCreate(name="Ana María"), USER_A)
        ana = service.create_customer(CustomerCreate(name="Ana"), USER_A)

        assert service.find_by_exact_name("ANA", USER_A).id == ana.id
        assert service.find_by_exact_name("Ana", USER_B) is None


class TestCustomerEndpoints:
    """Endpoints de clientes"""

    def test_crud(self, client, auth_headers):
        response = client.post(API, json={"name": "Bruno", "phone": "351-555", "creditLimit": 5000}, headers=auth_headers)
        assert response.status_code == 201
        customer = response.json()["data"]
        assert customer["creditLimit"] == 5000

        response = client.put(f"{API}/{customer['id']}", json={"address": "San Martín 100"}, headers=auth_headers)
        assert response.json()["data"]["address"] == "San Martín 100"
        assert response.json()["data"]["name"] == "Bruno"

        assert client.delete(f"{API}/{customer['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"{API}/{customer['id']}", headers=auth_headers).status_code == 404

    def test_list_sorted_and_filtered(self, client, auth_headers):
        for name in ("Carla", "ana", "Bruno"):
            client.post(API, json={"name": name}, headers=auth_headers)

        names = [c["name"] for c in client.get(API, headers=auth_headers).json()["data"]]
        assert names == ["ana", "Bruno", "Carla"]

        names = [c["name"] for c in client.get(API, params={"name": "AR"}, headers=auth_headers).json()["data"]]
        assert names == ["Carla"]

    def test_search(self, client, auth_headers):
        client.post(API, json={"name": "Ana", "email": "ana@mail.com"}, headers=auth_headers)
        client.post(API, json={"name": "Bruno", "phone": "351-4440000"}, headers=auth_headers)

        found = client.get(f"{API}/search", params={"q": "MAIL"}, headers=auth_headers).json()["data"]
        assert [c["name"] for c in found] == ["Ana"]

        found = client.get(f"{API}/search", params={"q": "4440"}, headers=auth_headers).json()["data"]
        assert [c["name"] for c in found] == ["Bruno"]

    def test_invalid_email_is_400(self, client, auth_headers):
        response = client.post(API, json={"name": "X", "email": "no-es-email"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Datos inválidos"

    def test_foreign_customer_is_404(self, client, auth_headers, other_auth_headers):
        customer_id = client.post(API, json={"name": "Ana"}, headers=auth_headers).json()["data"]["id"]

        assert client.get(f"{API}/{customer_id}", headers=other_auth_headers).status_code == 404
        assert client.put(f"{API}/{customer_id}", json={"name": "X"}, headers=other_auth_headers).status_code == 404
        assert client.delete(f"{API}/{customer_id}", headers=other_auth_headers).status_code == 404

    def test_balances(self, client, auth_headers):
        ana = client.post(API, json={"name": "Ana"}, headers=auth_headers).json()["data"]
        client.post(API, json={"name": "Bruno"}, headers=auth_headers)

        movements = "/api/account-movements"
        client.post(movements, json={
            "customerId": ana["id"], "description": "Entrega", "amount": 300, "type": "sale", "date": "2024-04-01"
        }, headers=auth_headers)
        client.post(movements, json={
            "customerId": ana["id"], "description": "Pago", "amount": -100, "type": "payment", "date": "2024-04-15"
        }, headers=auth_headers)

        balances = {b["customer"]["name"]: b for b in client.get(f"{API}/balances", headers=auth_headers).json()["data"]}

        assert balances["Ana"]["balance"] == 200
        assert balances["Ana"]["lastDeliveryDate"] == "2024-04-01"
        assert balances["Ana"]["lastPaymentDate"] == "2024-04-15"
        assert balances["Bruno"]["balance"] == 0
        assert balances["Bruno"]["lastDeliveryDate"] is None
