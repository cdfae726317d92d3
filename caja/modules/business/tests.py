"""
Tests para la configuración del negocio
"""

API = "/api/business"


class TestBusinessConfig:
    """Una configuración por usuario"""

    def test_missing_config_is_404(self, client, auth_headers):
        response = client.get(API, headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Configuración no encontrada"}

    def test_create_with_defaults(self, client, auth_headers):
        response = client.post(API, json={"businessName": "Kiosco Ana"}, headers=auth_headers)
        assert response.status_code == 201

        data = response.json()["data"]
        assert data["businessName"] == "Kiosco Ana"
        assert data["currency"] == "ARS"
        assert data["timezone"] == "America/Argentina/Buenos_Aires"

        assert client.get(API, headers=auth_headers).json()["data"]["id"] == data["id"]

    def test_duplicate_is_409(self, client, auth_headers):
        client.post(API, json={"businessName": "Kiosco Ana"}, headers=auth_headers)
        response = client.post(API, json={"businessName": "Otro"}, headers=auth_headers)
        assert response.status_code == 409

    def test_update(self, client, auth_headers, other_auth_headers):
        client.post(API, json={"businessName": "Kiosco Ana"}, headers=auth_headers)

        response = client.put(API, json={"phone": "351-000", "currency": "usd"}, headers=auth_headers)
        data = response.json()["data"]
        assert data["phone"] == "351-000"
        assert data["currency"] == "USD"
        assert data["businessName"] == "Kiosco Ana"

        assert client.put(API, json={"phone": "1"}, headers=other_auth_headers).status_code == 404

    def test_business_name_is_required(self, client, auth_headers):
        assert client.post(API, json={"businessName": "  "}, headers=auth_headers).status_code == 400
