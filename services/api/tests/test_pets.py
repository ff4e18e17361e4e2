"""Tests for `/api/pets` and startup seeding."""

from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from petstore_api.main import create_app
from petstore_api.models import Pet
from petstore_api.seed import SAMPLE_PETS, init_database
from petstore_common.db import default_descriptor


def test_list_pets_returns_seeded_rows_in_id_order(client) -> None:
    response = client.get("/api/pets")

    assert response.status_code == 200
    pets = response.json()
    assert len(pets) == 8
    assert [pet["id"] for pet in pets] == sorted(pet["id"] for pet in pets)
    assert pets[0] == {
        "id": 1,
        "race": "Golden Retriever",
        "gender": "Male",
        "name": "Max",
        "age": 5,
        "description": "Friendly and energetic dog",
    }


def test_list_pets_reports_database_errors(broken_client) -> None:
    response = broken_client.get("/api/pets")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch pets"}


def test_init_database_is_idempotent(engine) -> None:
    assert init_database(engine) == len(SAMPLE_PETS)
    assert init_database(engine) == 0

    with Session(engine) as session:
        assert session.scalar(select(func.count()).select_from(Pet)) == 8


def test_unseeded_database_has_no_pets_table(settings, engine) -> None:
    app = create_app(
        settings.model_copy(update={"seed_database": False}),
        descriptor=default_descriptor(),
        engine=engine,
    )
    with TestClient(app) as client:
        response = client.get("/api/pets")

    assert response.status_code == 500
