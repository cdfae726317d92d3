"""
Tests para el módulo de Ventas
"""

from decimal import Decimal
from unittest.mock import patch

from sqlalchemy.orm import Session

from caja.modules.sales.schemas import SaleCreate
from caja.modules.sales.service import SaleService

USER_A = "user-a"

API = "/api/sales"


def create_sale(client, headers, amount, payment_method, **extra):
    payload = {"description": "Venta mostrador", "amount": amount, "paymentMethod": payment_method, **extra}
    return client.post(API, json=payload, headers=headers)


class TestCreateSale:
    """Separación efectivo / digital y comisión"""

    def test_cash_sale(self, client, auth_headers):
        response = create_sale(client, auth_headers, 1000, "efectivo", date="2024-05-10")
        assert response.status_code == 201

        data = response.json()["data"]
        assert data["cashAmount"] == 1000
        assert data["digitalAmount"] == 0
        assert data["commissionAmount"] == 0
        assert data["date"] == "2024-05-10"
        assert "cardBrand" not in data

    def test_credit_card_sale(self, client, auth_headers):
        response = create_sale(client, auth_headers, 1000, "tarjeta_credito", cardBrand="visa", installments=3)
        assert response.status_code == 201

        data = response.json()["data"]
        assert data["cashAmount"] == 0
        assert data["digitalAmount"] == 1000
        assert data["commissionAmount"] == 32
        assert data["cardBrand"] == "visa"
        assert data["installments"] == 3

    def test_card_details_ignored_for_other_methods(self, client, auth_headers):
        data = create_sale(client, auth_headers, 100, "qr", cardBrand="visa", installments=3).json()["data"]
        assert "cardBrand" not in data
        assert "installments" not in data
        assert data["commissionAmount"] == 1.2

    def test_credit_card_requires_brand_and_installments(self, client, auth_headers):
        assert create_sale(client, auth_headers, 100, "tarjeta_credito").status_code == 400
        assert create_sale(client, auth_headers, 100, "tarjeta_credito", cardBrand="visa", installments=2).status_code == 400

    def test_invalid_payload(self, client, auth_headers):
        assert create_sale(client, auth_headers, 0, "efectivo").status_code == 400
        assert create_sale(client, auth_headers, 10, "cheque").status_code == 400
        assert create_sale(client, auth_headers, 10, "efectivo", description=" ").status_code == 400
        assert create_sale(client, auth_headers, 10.555, "efectivo").status_code == 400
        assert create_sale(client, auth_headers, 10.55, "efectivo").json()["data"]["cashAmount"] == 10.55

    def test_commission_failure_does_not_block_sale(self, db_session: Session):
        service = SaleService(db_session)
        with patch.object(service.commission_service.db, "query", side_effect=RuntimeError("caída")):
            amounts = service._calculate_amounts(USER_A, Decimal("100"), "qr")
        assert amounts["commission_amount"] == Decimal("0")

        sale = service.create_sale(SaleCreate(description="x", amount=Decimal("100"), payment_method="qr"), USER_A)
        assert sale.id is not None
        assert sale.digital_amount == Decimal("100")


class TestQuerySales:
    """Consultas y filtros"""

    def test_sales_sorted_by_date_desc(self, client, auth_headers):
        create_sale(client, auth_headers, 10, "efectivo", date="2024-05-01")
        create_sale(client, auth_headers, 20, "qr", date="2024-05-03")
        create_sale(client, auth_headers, 30, "transferencia", date="2024-05-02")

        dates = [s["date"] for s in client.get(API, headers=auth_headers).json()["data"]]
        assert dates == ["2024-05-03", "2024-05-02", "2024-05-01"]

    def test_filters(self, client, auth_headers):
        create_sale(client, auth_headers, 10, "efectivo", date="2024-05-01")
        create_sale(client, auth_headers, 20, "qr", date="2024-05-03")
        create_sale(client, auth_headers, 30, "efectivo", date="2024-05-05")

        response = client.get(API, params={"startDate": "2024-05-02", "endDate": "2024-05-05"}, headers=auth_headers)
        assert [s["date"] for s in response.json()["data"]] == ["2024-05-05", "2024-05-03"]

        response = client.get(API, params={"paymentMethod": "efectivo"}, headers=auth_headers)
        assert [s["cashAmount"] for s in response.json()["data"]] == [30, 10]

    def test_foreign_sale_is_404(self, client, auth_headers, other_auth_headers):
        sale_id = create_sale(client, auth_headers, 10, "efectivo").json()["data"]["id"]

        assert client.get(f"{API}/{sale_id}", headers=auth_headers).status_code == 200
        assert client.get(f"{API}/{sale_id}", headers=other_auth_headers).status_code == 404
        assert client.delete(f"{API}/{sale_id}", headers=other_auth_headers).status_code == 404


class TestUpdateSale:
    """Edición con recálculo de montos"""

    def test_change_payment_method_recomputes_amounts(self, client, auth_headers):
        sale_id = create_sale(client, auth_headers, 1000, "efectivo").json()["data"]["id"]

        response = client.put(f"{API}/{sale_id}", json={"paymentMethod": "tarjeta_debito"}, headers=auth_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["cashAmount"] == 0
        assert data["digitalAmount"] == 1000
        assert data["commissionAmount"] == 20

    def test_change_amount_keeps_method(self, client, auth_headers):
        sale_id = create_sale(
            client, auth_headers, 1000, "tarjeta_credito", cardBrand="naranja", installments=12
        ).json()["data"]["id"]

        data = client.put(f"{API}/{sale_id}", json={"amount": 2000}, headers=auth_headers).json()["data"]
        assert data["digitalAmount"] == 2000
        assert data["commissionAmount"] == 100
        assert data["cardBrand"] == "naranja"

    def test_switch_to_credit_without_details_is_400(self, client, auth_headers):
        sale_id = create_sale(client, auth_headers, 100, "efectivo").json()["data"]["id"]
        response = client.put(f"{API}/{sale_id}", json={"paymentMethod": "tarjeta_credito"}, headers=auth_headers)
        assert response.status_code == 400

    def test_description_only(self, client, auth_headers):
        sale_id = create_sale(client, auth_headers, 100, "efectivo").json()["data"]["id"]
        data = client.put(f"{API}/{sale_id}", json={"description": "Nueva"}, headers=auth_headers).json()["data"]
        assert data["description"] == "Nueva"
        assert data["cashAmount"] == 100

        response = client.put(f"{API}/{sale_id}", json={"description": "  "}, headers=auth_headers)
        assert response.status_code == 400

    def test_delete(self, client, auth_headers):
        sale_id = create_sale(client, auth_headers, 100, "efectivo").json()["data"]["id"]
        assert client.delete(f"{API}/{sale_id}", headers=auth_headers).json()["message"] == "Venta eliminada correctamente"
        assert client.get(f"{API}/{sale_id}", headers=auth_headers).status_code == 404
