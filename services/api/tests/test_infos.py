"""Tests for `/api/infos`."""

import platform

import fastapi


def test_infos_describes_instance_and_stack(client) -> None:
    response = client.get("/api/infos")

    assert response.status_code == 200
    body = response.json()
    assert body["uuid"] == "11111111-2222-3333-4444-555555555555"
    assert body["version"] == "2.3.4"
    assert body["deploymentColor"] == "green"
    assert body["techStack"] == {
        "framework": "FastAPI",
        "version": fastapi.__version__,
        "language": "Python",
        "languageVersion": platform.python_version(),
        "runtime": f"{platform.python_implementation()} {platform.python_version()}",
        "database": "PostgreSQL",
    }


def test_infos_reports_mysql_from_resolved_descriptor(mysql_client) -> None:
    body = mysql_client.get("/api/infos").json()

    assert body["techStack"]["database"] == "MySQL"
