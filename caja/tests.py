"""
Tests de la aplicación: endpoints públicos, middleware y envelope de errores
"""


class TestApplication:

    def test_health_is_public(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_request_id_and_security_headers(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_unknown_route_uses_error_envelope(self, client, auth_headers):
        response = client.get("/api/no-existe", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_validation_error_lists_fields(self, client, auth_headers):
        response = client.post("/api/customers", json={}, headers=auth_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Datos inválidos"
        assert body["details"][0]["field"] == "name"
