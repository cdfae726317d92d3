"""
Tests para resúmenes de caja
"""

API = "/api/summary"


def seed_day(client, headers):
    """Un día con venta en efectivo, venta por QR y un retiro"""
    client.post("/api/sales", json={
        "description": "Efectivo", "amount": 1000, "paymentMethod": "efectivo", "date": "2024-05-10"
    }, headers=headers)
    client.post("/api/sales", json={
        "description": "QR", "amount": 500, "paymentMethod": "qr", "date": "2024-05-10"
    }, headers=headers)
    client.post("/api/withdrawals", json={
        "amount": 200, "reason": "gastos_operativos", "date": "2024-05-10"
    }, headers=headers)


class TestDailySummary:
    """Cierre diario"""

    def test_daily_totals(self, client, auth_headers):
        seed_day(client, auth_headers)

        response = client.get(f"{API}/daily/2024-05-10", headers=auth_headers)
        assert response.status_code == 200
        summary = response.json()["data"]

        assert summary["date"] == "2024-05-10"
        assert summary["totalCash"] == 1000
        assert summary["totalDigital"] == 500
        assert summary["totalCommissions"] == 6
        assert summary["totalNet"] == 1494
        assert summary["salesCount"] == 2
        assert summary["totalWithdrawals"] == 200
        assert summary["withdrawalsCount"] == 1
        assert summary["finalBalance"] == 1294

    def test_empty_day(self, client, auth_headers):
        summary = client.get(f"{API}/daily/2024-05-11", headers=auth_headers).json()["data"]
        assert summary["salesCount"] == 0
        assert summary["finalBalance"] == 0

    def test_other_user_data_is_excluded(self, client, auth_headers, other_auth_headers):
        seed_day(client, auth_headers)
        summary = client.get(f"{API}/daily/2024-05-10", headers=other_auth_headers).json()["data"]
        assert summary["salesCount"] == 0
        assert summary["withdrawalsCount"] == 0


class TestPeriodSummary:
    """Resúmenes por rango y por mes"""

    def test_range_has_one_entry_per_day(self, client, auth_headers):
        seed_day(client, auth_headers)

        response = client.get(
            f"{API}/range", params={"startDate": "2024-05-09", "endDate": "2024-05-11"}, headers=auth_headers
        )
        summaries = response.json()["data"]

        assert [s["date"] for s in summaries] == ["2024-05-09", "2024-05-10", "2024-05-11"]
        assert [s["salesCount"] for s in summaries] == [0, 2, 0]

    def test_inverted_range_is_400(self, client, auth_headers):
        response = client.get(
            f"{API}/range", params={"startDate": "2024-05-11", "endDate": "2024-05-09"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_range_requires_both_dates(self, client, auth_headers):
        response = client.get(f"{API}/range", params={"startDate": "2024-05-11"}, headers=auth_headers)
        assert response.status_code == 400

    def test_month(self, client, auth_headers):
        summaries = client.get(f"{API}/month/2024/2", headers=auth_headers).json()["data"]
        assert len(summaries) == 29
        assert summaries[0]["date"] == "2024-02-01"
        assert summaries[-1]["date"] == "2024-02-29"

    def test_invalid_month_is_400(self, client, auth_headers):
        assert client.get(f"{API}/month/2024/13", headers=auth_headers).status_code == 400
