"""
Fixtures compartidas por los tests de cada módulo

La base es SQLite en memoria (una sola conexión con StaticPool) y el esquema
se crea y destruye en cada test.
"""

import os

# Debe definirse antes de importar caja: el engine se crea al importar
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["AUTH_SECRET_KEY"] = "test-secret-key-caja-api-0123456789abcdef"

import pytest
from fastapi.testclient import TestClient

from caja.main import app
from caja.database.database import Base, engine, SessionLocal, get_db
from caja.modules.auth.utils import create_access_token

USER_A = "user-a"
USER_B = "user-b"


@pytest.fixture
def db_session():
    """Sesión sobre un esquema recién creado"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """TestClient que comparte la sesión del test"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token(USER_A, email="a@caja.test")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers():
    """Credenciales de un segundo usuario (otro tenant)"""
    token = create_access_token(USER_B, email="b@caja.test")
    return {"Authorization": f"Bearer {token}"}
