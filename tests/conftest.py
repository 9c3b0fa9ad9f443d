# File: tests/conftest.py

"""
Pytest configuration for the FundiFlow API tests.

The environment is fixed before the application is imported: an in-memory
SQLite database, the console email provider and no OpenAI key. Tables are
recreated and the cache cleared for every test.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["SMTP_HOST"] = "smtp.fundiflow.app"
os.environ["SMTP_USER"] = "mailer@fundiflow.app"
os.environ["APP_URL"] = "http://localhost:9002"
os.environ.pop("SMTP_PASS", None)
os.environ.pop("OPENAI_API_KEY", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from fundiflow.db.init_db import init_db  # noqa: E402
from fundiflow.db.session import SessionLocal, engine  # noqa: E402
from fundiflow.main import app  # noqa: E402
from fundiflow.models.base import Base  # noqa: E402
from fundiflow.services.cache import app_cache  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_database():
    init_db()
    app_cache.clear()
    yield
    Base.metadata.drop_all(bind=engine)
    app_cache.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register an account and return bearer headers for it."""
    def _register(email: str, password: str = "secret123", **extra) -> dict:
        resp = client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password, **extra},
        )
        assert resp.status_code == 201, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _register


@pytest.fixture
def admin_headers(register):
    return register("lead@admin.com", name="Project Lead")


@pytest.fixture
def assembler_headers(register):
    return register("alice@fundiflow.app", name="Alice")
