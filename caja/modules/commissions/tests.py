"""
Tests para el módulo de Comisiones

- Provisión de la tabla predeterminada (20 filas, sin duplicados)
- Cálculo con configuración guardada y con la tabla predeterminada
- Fail-open: un error de base devuelve comisión 0
- Vista organizada y edición con control de pertenencia
"""

from decimal import Decimal
from unittest.mock import MagicMock

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from caja.modules.commissions.defaults import config_id, default_percentage
from caja.modules.commissions.models import CommissionConfig, PaymentMethod, CardBrand
from caja.modules.commissions.schemas import CommissionConfigUpdate
from caja.modules.commissions.service import CommissionService

USER_A = "user-a"
USER_B = "user-b"

API = "/api/commissions"


class TestDefaultTable:
    """Tabla predeterminada"""

    def test_default_percentages(self):
        assert default_percentage("efectivo") == Decimal("0")
        assert default_percentage("qr") == Decimal("1.2")
        assert default_percentage("tarjeta_debito") == Decimal("2.0")
        assert default_percentage("tarjeta_credito", "visa", 12) == Decimal("4.0")
        assert default_percentage("tarjeta_credito", "naranja", 1) == Decimal("3.5")
        assert default_percentage("tarjeta_credito") == Decimal("0")
        assert default_percentage("tarjeta_credito", "visa", 2) == Decimal("0")
        assert default_percentage("cheque") == Decimal("0")

    def test_config_id_is_deterministic(self):
        assert config_id(USER_A, "qr") == config_id(USER_A, PaymentMethod.QR)
        assert config_id(USER_A, "qr") != config_id(USER_B, "qr")
        assert config_id(USER_A, "tarjeta_credito", "visa", 3) != config_id(USER_A, "tarjeta_credito", "visa", 6)


class TestProvisioning:
    """createDefaultCommissions"""

    def test_creates_twenty_rows(self, db_session: Session):
        configs = CommissionService(db_session).create_default_commissions(USER_A)

        assert len(configs) == 20
        credit = [c for c in configs if c.payment_method == PaymentMethod.TARJETA_CREDITO.value]
        assert len(credit) == 16
        assert {c.card_brand for c in credit} == {b.value for b in CardBrand}

    def test_reprovisioning_does_not_duplicate(self, db_session: Session):
        service = CommissionService(db_session)
        service.create_default_commissions(USER_A)
        config = db_session.get(CommissionConfig, config_id(USER_A, "qr"))
        service.update_commission(config.id, CommissionConfigUpdate(percentage=Decimal("9")), USER_A)

        service.create_default_commissions(USER_A)

        assert db_session.query(CommissionConfig).filter(CommissionConfig.user_id == USER_A).count() == 20
        assert db_session.get(CommissionConfig, config.id).percentage == Decimal("9")

    def test_default_endpoint(self, client, auth_headers):
        response = client.post(f"{API}/default", headers=auth_headers)
        assert response.status_code == 201
        assert len(response.json()["data"]) == 20


class TestCalculateCommission:
    """calculateCommission"""

    def test_first_call_provisions_defaults(self, client, auth_headers):
        response = client.post(
            f"{API}/calculate",
            json={"paymentMethod": "tarjeta_credito", "amount": 1000, "cardBrand": "visa", "installments": 12},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["data"] == {"commission": 40, "netAmount": 960}

        configs = client.get(API, headers=auth_headers).json()["data"]
        assert len(configs) == 20
        assert all(c["isActive"] for c in configs)

    def test_cash_is_zero(self, db_session: Session):
        service = CommissionService(db_session)
        assert service.calculate_commission(USER_A, "efectivo", Decimal("500")) == Decimal("0")
        # segunda llamada: ya usa la fila guardada
        assert service.calculate_commission(USER_A, "efectivo", Decimal("500")) == Decimal("0")

    def test_stored_config_with_fixed_amount(self, db_session: Session):
        service = CommissionService(db_session)
        service.create_default_commissions(USER_A)
        service.update_commission(
            config_id(USER_A, "qr"),
            CommissionConfigUpdate(percentage=Decimal("2.5"), fixed_amount=Decimal("10")),
            USER_A
        )

        assert service.calculate_commission(USER_A, "qr", Decimal("200")) == Decimal("15.00")

    def test_result_is_rounded_to_cents(self, db_session: Session):
        service = CommissionService(db_session)
        service.create_default_commissions(USER_A)

        # 333.33 * 1.2 / 100 = 3.99996
        assert service.calculate_commission(USER_A, "qr", Decimal("333.33")) == Decimal("4.00")

    def test_inactive_config_falls_back_to_defaults(self, db_session: Session):
        service = CommissionService(db_session)
        service.create_default_commissions(USER_A)
        service.update_commission(
            config_id(USER_A, "tarjeta_debito"),
            CommissionConfigUpdate(percentage=Decimal("7"), is_active=False),
            USER_A
        )

        assert service.calculate_commission(USER_A, "tarjeta_debito", Decimal("100")) == Decimal("2.00")

    def test_store_error_returns_zero(self):
        session = MagicMock()
        session.query.side_effect = SQLAlchemyError("base de datos caída")

        result = CommissionService(session).calculate_commission(
            USER_A, "tarjeta_credito", Decimal("1000"), "visa", 12
        )

        assert result == Decimal("0")
        session.rollback.assert_called()

    def test_credit_without_card_details_is_rejected(self, client, auth_headers):
        response = client.post(
            f"{API}/calculate",
            json={"paymentMethod": "tarjeta_credito", "amount": 1000},
            headers=auth_headers
        )
        assert response.status_code == 400

    def test_non_positive_amount_is_rejected(self, client, auth_headers):
        response = client.post(f"{API}/calculate", json={"paymentMethod": "qr", "amount": 0}, headers=auth_headers)
        assert response.status_code == 400


class TestOrganizedAndUpdate:
    """Vista organizada y edición"""

    def test_organized_shape(self, client, auth_headers):
        client.post(f"{API}/default", headers=auth_headers)

        data = client.get(f"{API}/organized", headers=auth_headers).json()["data"]

        assert data["efectivo"] == 0
        assert data["qr"] == 1.2
        assert data["tarjeta_debito"] == 2.0
        assert set(data["tarjeta_credito"]) == {"visa", "mastercard", "naranja", "tuya"}
        assert data["tarjeta_credito"]["naranja"]["12"] == 5.0
        assert data["tarjeta_credito"]["tuya"]["3"] == 3.5

    def test_update_commission(self, client, auth_headers):
        client.post(f"{API}/default", headers=auth_headers)
        commission_id = config_id(USER_A, "tarjeta_credito", "visa", 6)

        response = client.put(
            f"{API}/{commission_id}", json={"percentage": 3.9, "fixedAmount": 5}, headers=auth_headers
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["percentage"] == 3.9
        assert data["fixedAmount"] == 5

    def test_update_foreign_commission_is_404(self, client, auth_headers, other_auth_headers):
        client.post(f"{API}/default", headers=auth_headers)
        commission_id = config_id(USER_A, "qr")

        response = client.put(f"{API}/{commission_id}", json={"percentage": 0}, headers=other_auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Configuración de comisión no encontrada"

    def test_update_missing_commission_is_404(self, client, auth_headers):
        response = client.put(f"{API}/no-existe", json={"percentage": 1}, headers=auth_headers)
        assert response.status_code == 404

    def test_update_without_fields_is_rejected(self, client, auth_headers):
        client.post(f"{API}/default", headers=auth_headers)
        response = client.put(f"{API}/{config_id(USER_A, 'qr')}", json={}, headers=auth_headers)
        assert response.status_code == 400
