"""
Tests de autenticación por bearer token
"""

from datetime import timedelta

import jwt
import pytest
from fastapi import HTTPException

from caja.core.config import settings
from caja.modules.auth.utils import create_access_token, verify_token


class TestTokens:

    def test_round_trip_claims(self):
        payload = verify_token(create_access_token("user-a", email="a@caja.test"))
        assert payload["sub"] == "user-a"
        assert payload["email"] == "a@caja.test"

    def test_expired_token(self):
        token = create_access_token("user-a", expires_delta=timedelta(minutes=-5))
        with pytest.raises(HTTPException) as exc_info:
            verify_token(token)
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token expirado"

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "user-a"}, "otra-clave-distinta-de-la-configurada-0123", algorithm=settings.AUTH_ALGORITHM)
        with pytest.raises(HTTPException) as exc_info:
            verify_token(token)
        assert exc_info.value.detail == "Token inválido"


class TestAuthDependency:

    def test_uid_claim_is_accepted(self, client):
        token = jwt.encode({"uid": "user-c"}, settings.AUTH_SECRET_KEY, algorithm=settings.AUTH_ALGORITHM)
        response = client.get("/api/customers", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_token_without_user_is_401(self, client):
        token = jwt.encode({"email": "x@caja.test"}, settings.AUTH_SECRET_KEY, algorithm=settings.AUTH_ALGORITHM)
        response = client.get("/api/customers", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
