"""Tests for the application factory and its startup sequence."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from petstore_api.main import create_app
from petstore_common.db import DriverKind, default_descriptor

DB_VARS = ("VCAP_SERVICES", "SERVICE_BINDINGS_JSON", "DATABASE_URL", "DATABASE_SSL", "DB_HOST", "DB_PORT", "DB_NAME", "DB_USER", "DB_PASSWORD")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for var in DB_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_startup_resolves_descriptor_from_environment(settings, engine, clean_env) -> None:
    clean_env.setenv("DATABASE_URL", "Server=myhost;Database=x;User=y;Password=z;")
    app = create_app(settings, engine=engine)

    with TestClient(app) as client:
        assert app.state.descriptor.driver_kind is DriverKind.MYSQL
        assert client.get("/api/infos").json()["techStack"]["database"] == "MySQL"


def test_startup_honours_db_env_fallback_switch(settings, engine, clean_env) -> None:
    clean_env.setenv("DB_HOST", "db.local")
    app = create_app(settings.model_copy(update={"db_env_fallback": False}), engine=engine)

    with TestClient(app):
        assert app.state.descriptor == default_descriptor()


def test_startup_fails_when_seeding_fails(settings, broken_engine) -> None:
    app = create_app(settings, descriptor=default_descriptor(), engine=broken_engine)

    with pytest.raises(OperationalError):
        with TestClient(app):
            pass


def test_cors_is_enabled_only_when_configured(settings, engine) -> None:
    app = create_app(
        settings.model_copy(update={"cors_origins": ["http://localhost:5173"]}),
        descriptor=default_descriptor(),
        engine=engine,
    )

    with TestClient(app) as client:
        response = client.get("/health", headers={"Origin": "http://localhost:5173"})

    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
