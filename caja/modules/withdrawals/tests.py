"""
Tests para el módulo de Retiros
"""

API = "/api/withdrawals"


def create_withdrawal(client, headers, amount, reason="gastos_operativos", **extra):
    return client.post(API, json={"amount": amount, "reason": reason, **extra}, headers=headers)


class TestWithdrawals:
    """CRUD de retiros de caja"""

    def test_create_withdrawal(self, client, auth_headers):
        response = create_withdrawal(client, auth_headers, 250, "pago_proveedores", date="2024-05-10")
        assert response.status_code == 201

        data = response.json()["data"]
        assert data["amount"] == 250
        assert data["reason"] == "pago_proveedores"
        assert data["description"] == ""
        assert data["date"] == "2024-05-10"

    def test_invalid_withdrawal(self, client, auth_headers):
        assert create_withdrawal(client, auth_headers, 0).status_code == 400
        assert create_withdrawal(client, auth_headers, 10, "vacaciones").status_code == 400

    def test_list_sorted_and_filtered(self, client, auth_headers):
        create_withdrawal(client, auth_headers, 10, "salarios", date="2024-05-01")
        create_withdrawal(client, auth_headers, 20, "impuestos", date="2024-05-03")
        create_withdrawal(client, auth_headers, 30, "salarios", date="2024-05-02")

        data = client.get(API, headers=auth_headers).json()["data"]
        assert [w["date"] for w in data] == ["2024-05-03", "2024-05-02", "2024-05-01"]

        data = client.get(API, params={"reason": "salarios"}, headers=auth_headers).json()["data"]
        assert [w["amount"] for w in data] == [30, 10]

        data = client.get(API, params={"startDate": "2024-05-02", "endDate": "2024-05-02"}, headers=auth_headers).json()["data"]
        assert len(data) == 1

    def test_update_and_delete(self, client, auth_headers):
        withdrawal_id = create_withdrawal(client, auth_headers, 10, description="Luz").json()["data"]["id"]

        response = client.put(f"{API}/{withdrawal_id}", json={"amount": 15, "reason": "servicios"}, headers=auth_headers)
        data = response.json()["data"]
        assert data["amount"] == 15
        assert data["reason"] == "servicios"
        assert data["description"] == "Luz"

        assert client.delete(f"{API}/{withdrawal_id}", headers=auth_headers).status_code == 200
        assert client.get(f"{API}/{withdrawal_id}", headers=auth_headers).status_code == 404

    def test_foreign_withdrawal_is_404(self, client, auth_headers, other_auth_headers):
        withdrawal_id = create_withdrawal(client, auth_headers, 10).json()["data"]["id"]

        assert client.get(f"{API}/{withdrawal_id}", headers=other_auth_headers).status_code == 404
        assert client.put(f"{API}/{withdrawal_id}", json={"amount": 1}, headers=other_auth_headers).status_code == 404
