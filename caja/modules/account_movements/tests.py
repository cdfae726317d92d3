"""
Tests para el ledger de cuentas corrientes

Cubren:
- Saldo corrido en altas sucesivas
- Orden de consulta (date desc, created_at desc)
- Aislamiento entre usuarios
- Importación ordenada por fecha e importación desde planilla
- Edición y borrado sin recálculo, y recálculo explícito
- Validación de signo por tipo
"""

import random
from decimal import Decimal

import pytest
from fastapi import HTTPException
from sqlalchemy.orm import Session

from caja.modules.account_movements.models import MovementType
from caja.modules.account_movements.schemas import (
    AccountMovementCreate, AccountMovementUpdate, ImportedMovement, SpreadsheetRow
)
from caja.modules.account_movements.service import AccountMovementService, ledger_delta
from caja.modules.customers.schemas import CustomerCreate
from caja.modules.customers.service import CustomerService

USER_A = "user-a"
USER_B = "user-b"

API = "/api/account-movements"


# ===== FIXTURES =====

@pytest.fixture
def customer(db_session: Session):
    return CustomerService(db_session).create_customer(CustomerCreate(name="Ana"), USER_A)


def create_movement(client, headers, customer_id, amount, type, **extra):
    payload = {
        "customerId": customer_id,
        "description": extra.pop("description", f"{type} {amount}"),
        "amount": amount,
        "type": type,
        **extra,
    }
    return client.post(API, json=payload, headers=headers)


# ===== SALDO CORRIDO =====

class TestRunningBalance:
    """Cada alta guarda saldo anterior + monto"""

    def test_balance_is_sum_of_amounts(self, db_session: Session, customer):
        service = AccountMovementService(db_session)
        amounts = [Decimal("100"), Decimal("-40"), Decimal("25.50"), Decimal("-10"), Decimal("300")]
        types = {True: MovementType.SALE, False: MovementType.PAYMENT}

        expected = Decimal("0")
        for amount in amounts:
            service.create_movement(
                AccountMovementCreate(
                    customer_id=customer.id,
                    description="mov",
                    amount=amount,
                    type=types[amount > 0],
                    date="2024-03-01",
                ),
                USER_A
            )
            expected += amount
            assert service.get_customer_balance(customer.id, USER_A) == expected

        assert expected == Decimal("375.50")

    def test_balance_without_movements_is_zero(self, db_session: Session, customer):
        assert AccountMovementService(db_session).get_customer_balance(customer.id, USER_A) == Decimal("0")

    def test_sale_then_payment_scenario(self, client, auth_headers, customer):
        """Venta de 100 y pago de 40 dejan saldo 60"""
        response = create_movement(client, auth_headers, customer.id, 100, "sale")
        assert response.status_code == 201
        assert response.json()["data"]["balance"] == 100

        response = create_movement(client, auth_headers, customer.id, -40, "payment")
        assert response.status_code == 201
        assert response.json()["data"]["balance"] == 60

        response = client.get(f"{API}/customer/{customer.id}", headers=auth_headers)
        assert response.status_code == 200
        account = response.json()["data"]
        assert account["currentBalance"] == 60
        assert account["totalSales"] == 100
        assert account["totalPayments"] == 40
        assert account["customer"]["name"] == "Ana"
        assert len(account["movements"]) == 2

        response = client.get(f"{API}/customer/{customer.id}/balance", headers=auth_headers)
        assert response.json()["data"] == {"balance": 60}

    def test_movement_snapshots_customer_name(self, client, auth_headers, customer):
        data = create_movement(client, auth_headers, customer.id, 10, "sale").json()["data"]
        assert data["customerName"] == "Ana"

    def test_blank_code_is_not_stored(self, client, auth_headers, customer):
        data = create_movement(client, auth_headers, customer.id, 10, "sale", code="   ").json()["data"]
        assert "code" not in data

        data = create_movement(client, auth_headers, customer.id, 10, "sale", code="A-12").json()["data"]
        assert data["code"] == "A-12"

    def test_unknown_customer_is_404(self, client, auth_headers):
        response = create_movement(client, auth_headers, "no-existe", 10, "sale")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Cliente no encontrado"}


# ===== ORDEN =====

class TestMovementOrdering:
    """Consultas ordenadas por (date desc, created_at desc)"""

    def test_movements_sorted_descending(self, client, auth_headers, customer):
        create_movement(client, auth_headers, customer.id, 10, "sale", date="2024-01-05")
        create_movement(client, auth_headers, customer.id, 20, "sale", date="2024-01-01")
        create_movement(client, auth_headers, customer.id, 30, "sale", date="2024-01-05")
        create_movement(client, auth_headers, customer.id, -5, "payment", date="2024-01-03")

        response = client.get(API, params={"customerId": customer.id}, headers=auth_headers)
        movements = response.json()["data"]

        keys = [(m["date"], m["createdAt"]) for m in movements]
        assert keys == sorted(keys, reverse=True)
        assert [m["amount"] for m in movements] == [30, 10, -5, 20]

        balance = client.get(f"{API}/customer/{customer.id}/balance", headers=auth_headers).json()["data"]["balance"]
        assert movements[0]["balance"] == balance

    def test_filters(self, client, auth_headers, customer):
        create_movement(client, auth_headers, customer.id, 10, "sale", date="2024-01-01")
        create_movement(client, auth_headers, customer.id, -5, "payment", date="2024-01-10")
        create_movement(client, auth_headers, customer.id, 7, "adjustment", date="2024-01-20")

        response = client.get(
            API, params={"startDate": "2024-01-05", "endDate": "2024-01-20"}, headers=auth_headers
        )
        assert [m["type"] for m in response.json()["data"]] == ["adjustment", "payment"]

        response = client.get(API, params={"type": "sale"}, headers=auth_headers)
        assert [m["amount"] for m in response.json()["data"]] == [10]


# ===== AISLAMIENTO =====

class TestTenantIsolation:
    """Un usuario nunca ve ni modifica movimientos de otro"""

    def test_foreign_movement_is_none(self, db_session: Session, customer):
        service = AccountMovementService(db_session)
        movement = service.create_movement(
            AccountMovementCreate(customer_id=customer.id, description="x", amount=Decimal("5"), type="sale"),
            USER_A
        )

        assert service.get_movement_by_id(movement.id, USER_A) is not None
        assert service.get_movement_by_id(movement.id, USER_B) is None
        assert service.get_movement_by_id("no-existe", USER_A) is None

    def test_foreign_movement_is_404(self, client, auth_headers, other_auth_headers, customer):
        movement_id = create_movement(client, auth_headers, customer.id, 5, "sale").json()["data"]["id"]

        assert client.get(f"{API}/{movement_id}", headers=other_auth_headers).status_code == 404
        assert client.put(f"{API}/{movement_id}", json={"description": "y"}, headers=other_auth_headers).status_code == 404
        assert client.delete(f"{API}/{movement_id}", headers=other_auth_headers).status_code == 404
        assert client.get(API, headers=other_auth_headers).json()["data"] == []

    def test_foreign_customer_cannot_receive_movements(self, client, other_auth_headers, customer):
        response = create_movement(client, other_auth_headers, customer.id, 5, "sale")
        assert response.status_code == 404

    def test_missing_token_is_401(self, client, customer):
        response = client.get(API)
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_invalid_token_is_401(self, client):
        response = client.get(API, headers={"Authorization": "Bearer no-es-un-jwt"})
        assert response.status_code == 401
        assert response.json()["error"] == "Token inválido"


# ===== EDICIÓN Y BORRADO =====

class TestEditAndDelete:
    """Editar o borrar no recalcula los saldos posteriores"""

    def test_delete_does_not_touch_other_balances(self, client, auth_headers, customer):
        first = create_movement(client, auth_headers, customer.id, 100, "sale").json()["data"]
        middle = create_movement(client, auth_headers, customer.id, 50, "sale").json()["data"]
        last = create_movement(client, auth_headers, customer.id, -30, "payment").json()["data"]

        response = client.delete(f"{API}/{middle['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Movimiento eliminado correctamente"

        remaining = {m["id"]: m["balance"] for m in client.get(API, headers=auth_headers).json()["data"]}
        assert remaining == {first["id"]: 100, last["id"]: 120}

    def test_update_amount_adjusts_only_that_balance(self, client, auth_headers, customer):
        first = create_movement(client, auth_headers, customer.id, 100, "sale").json()["data"]
        second = create_movement(client, auth_headers, customer.id, 50, "sale").json()["data"]

        response = client.put(f"{API}/{first['id']}", json={"amount": 80}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["amount"] == 80
        assert response.json()["data"]["balance"] == 80

        assert client.get(f"{API}/{second['id']}", headers=auth_headers).json()["data"]["balance"] == 150

    def test_update_text_fields(self, client, auth_headers, customer):
        movement = create_movement(client, auth_headers, customer.id, 10, "sale").json()["data"]

        response = client.put(
            f"{API}/{movement['id']}",
            json={"description": "Zapatillas", "code": "Z-1", "date": "2024-02-02"},
            headers=auth_headers
        )
        data = response.json()["data"]
        assert data["description"] == "Zapatillas"
        assert data["code"] == "Z-1"
        assert data["date"] == "2024-02-02"
        assert data["balance"] == 10

    def test_update_amount_keeps_sign_of_type(self, client, auth_headers, customer):
        create_movement(client, auth_headers, customer.id, 100, "sale")
        payment = create_movement(client, auth_headers, customer.id, -40, "payment").json()["data"]

        response = client.put(f"{API}/{payment['id']}", json={"amount": 40}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Un pago debe tener monto negativo"}

        stored = client.get(f"{API}/{payment['id']}", headers=auth_headers).json()["data"]
        assert stored["amount"] == -40
        assert stored["balance"] == 60

        response = client.put(f"{API}/{payment['id']}", json={"amount": -50}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["balance"] == 50

        account = client.get(f"{API}/customer/{customer.id}", headers=auth_headers).json()["data"]
        assert account["totalPayments"] == 50

    def test_update_sale_to_negative_is_rejected(self, db_session: Session, customer):
        service = AccountMovementService(db_session)
        sale = service.create_movement(
            AccountMovementCreate(customer_id=customer.id, description="Remera", amount=Decimal("30"), type="sale"),
            USER_A
        )

        with pytest.raises(HTTPException) as exc:
            service.update_movement(sale.id, AccountMovementUpdate(amount=Decimal("-30")), USER_A)
        assert exc.value.status_code == 400

    def test_blank_code_on_update_clears_it(self, client, auth_headers, customer):
        movement = create_movement(client, auth_headers, customer.id, 10, "sale", code="A-1").json()["data"]

        data = client.put(f"{API}/{movement['id']}", json={"code": "   "}, headers=auth_headers).json()["data"]
        assert "code" not in data

        client.put(f"{API}/{movement['id']}", json={"code": "B-2"}, headers=auth_headers)
        data = client.put(f"{API}/{movement['id']}", json={"code": ""}, headers=auth_headers).json()["data"]
        assert "code" not in data

    def test_blank_description_on_update_is_rejected(self, client, auth_headers, customer):
        movement = create_movement(client, auth_headers, customer.id, 10, "sale").json()["data"]

        response = client.put(f"{API}/{movement['id']}", json={"description": "   "}, headers=auth_headers)
        assert response.status_code == 400
        assert client.get(f"{API}/{movement['id']}", headers=auth_headers).json()["data"]["description"] == "sale 10"

    def test_recalculate_rebuilds_running_balance(self, client, auth_headers, customer):
        create_movement(client, auth_headers, customer.id, 100, "sale", date="2024-01-01")
        middle = create_movement(client, auth_headers, customer.id, 50, "sale", date="2024-01-02").json()["data"]
        create_movement(client, auth_headers, customer.id, -30, "payment", date="2024-01-03")
        client.delete(f"{API}/{middle['id']}", headers=auth_headers)

        response = client.post(f"{API}/customer/{customer.id}/recalculate", headers=auth_headers)
        assert response.status_code == 200
        assert [m["balance"] for m in response.json()["data"]] == [100, 70]

        balance = client.get(f"{API}/customer/{customer.id}/balance", headers=auth_headers).json()["data"]["balance"]
        assert balance == 70


# ===== VALIDACIÓN =====

class TestSignValidation:
    """El signo del monto debe coincidir con el tipo"""

    @pytest.mark.parametrize("amount,type", [(-10, "sale"), (0, "sale"), (10, "payment"), (0, "adjustment")])
    def test_wrong_sign_is_rejected(self, client, auth_headers, customer, amount, type):
        response = create_movement(client, auth_headers, customer.id, amount, type)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Datos inválidos"

    def test_negative_adjustment_is_allowed(self, client, auth_headers, customer):
        create_movement(client, auth_headers, customer.id, 100, "sale")
        response = create_movement(client, auth_headers, customer.id, -15, "adjustment")
        assert response.status_code == 201
        assert response.json()["data"]["balance"] == 85

    def test_missing_description_is_rejected(self, client, auth_headers, customer):
        response = create_movement(client, auth_headers, customer.id, 10, "sale", description="  ")
        assert response.status_code == 400

    def test_amount_beyond_cents_is_rejected(self, client, auth_headers, customer):
        assert create_movement(client, auth_headers, customer.id, 10.555, "sale").status_code == 400

        movement = create_movement(client, auth_headers, customer.id, 10.55, "sale").json()["data"]
        assert movement["balance"] == 10.55

        response = client.put(f"{API}/{movement['id']}", json={"amount": 1.001}, headers=auth_headers)
        assert response.status_code == 400

    def test_ledger_delta(self):
        assert ledger_delta(MovementType.SALE, Decimal("-5")) == Decimal("5")
        assert ledger_delta(MovementType.PAYMENT, Decimal("5")) == Decimal("-5")
        assert ledger_delta(MovementType.ADJUSTMENT, Decimal("-3")) == Decimal("-3")


# ===== IMPORTACIÓN =====

class TestImport:
    """Importación masiva y desde planilla"""

    def test_import_orders_by_date(self, db_session: Session, customer):
        items = [
            ImportedMovement(date=f"2024-01-{day:02d}", description=f"d{day}", amount=Decimal(day),
                             balance=Decimal(day), type=MovementType.SALE)
            for day in (5, 1, 9, 3, 7)
        ]
        service = AccountMovementService(db_session)

        random.Random(7).shuffle(items)
        service.import_movements(customer.id, items, USER_A)

        stored = list(reversed(service.get_movements(USER_A, customer_id=customer.id)))
        assert [m.date.day for m in stored] == [1, 3, 5, 7, 9]
        assert service.get_customer_balance(customer.id, USER_A) == Decimal("9")

    def test_import_keeps_input_order_within_a_day(self, client, auth_headers, customer):
        payload = {
            "customerId": customer.id,
            "movements": [
                {"date": "2024-02-01", "description": "b", "amount": 20, "balance": 30, "type": "sale"},
                {"date": "2024-01-31", "description": "first", "amount": 10, "balance": 10, "type": "sale"},
                {"date": "2024-02-01", "description": "c", "amount": -5, "balance": 25, "type": "payment"},
            ],
        }
        response = client.post(f"{API}/import", json=payload, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["message"] == "3 movimientos importados correctamente"
        assert [m["description"] for m in response.json()["data"]] == ["first", "b", "c"]

        listed = client.get(API, params={"customerId": customer.id}, headers=auth_headers).json()["data"]
        assert [m["description"] for m in listed] == ["c", "b", "first"]

    def test_import_customer_data_creates_customer(self, client, auth_headers):
        payload = {
            "customerName": "Nuevo Cliente",
            "movements": [
                {"fecha": "2024-01-02", "descripcion": "Y", "precio": -20, "saldo": 30},
                {"fecha": "2024-01-01", "descripcion": "X", "precio": 50, "saldo": 50},
            ],
        }
        response = client.post(f"{API}/import-excel", json=payload, headers=auth_headers)
        assert response.status_code == 201

        data = response.json()["data"]
        assert data["customer"]["name"] == "Nuevo Cliente"
        assert data["customer"]["notes"].startswith("Cliente importado desde Excel - ")
        assert [m["type"] for m in data["movements"]] == ["sale", "payment"]
        assert [m["balance"] for m in data["movements"]] == [50, 30]
        assert [m["amount"] for m in data["movements"]] == [50, 20]

        customers = client.get("/api/customers", headers=auth_headers).json()["data"]
        assert len(customers) == 1

    def test_import_customer_data_reuses_existing_customer(self, client, auth_headers, customer):
        payload = {
            "customerName": "ana",
            "movements": [{"fecha": "2024-01-01", "precio": 15, "saldo": 15, "codigo": 123}],
        }
        data = client.post(f"{API}/import-excel", json=payload, headers=auth_headers).json()["data"]

        assert data["customer"]["id"] == customer.id
        assert data["movements"][0]["code"] == "123"
        assert data["movements"][0]["description"] == "Movimiento importado"

    def test_import_customer_data_matches_accented_name_in_other_case(self, db_session: Session):
        customers = CustomerService(db_session)
        existing = customers.create_customer(CustomerCreate(name="Ángela Pérez"), USER_A)

        rows = [SpreadsheetRow(fecha="2024-03-01", descripcion="Blusa", precio=Decimal("25"), saldo=Decimal("25"))]
        customer, movements = AccountMovementService(db_session).import_customer_data("ángela pérez", rows, USER_A)

        assert customer.id == existing.id
        assert len(customers.get_customers(USER_A)) == 1
        assert movements[0].customer_id == existing.id

    def test_spreadsheet_amounts_are_rounded_to_cents(self, client, auth_headers):
        payload = {
            "customerName": "Planilla",
            "movements": [{"fecha": "2024-01-01", "descripcion": "X", "precio": 19.999, "saldo": 19.999}],
        }
        response = client.post(f"{API}/import-excel", json=payload, headers=auth_headers)
        assert response.status_code == 201

        movement = response.json()["data"]["movements"][0]
        assert movement["amount"] == 20
        assert movement["balance"] == 20
