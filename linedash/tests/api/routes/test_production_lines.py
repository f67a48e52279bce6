from fastapi.testclient import TestClient
from sqlmodel import Session

from linedash.core.config import settings
from linedash.tests.utils.factories import create_line, create_product

API = settings.API_V1_STR


def test_health(client: TestClient) -> None:
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    content = response.json()
    assert content["status"] == "healthy"
    assert content["checks"] == {"database": "healthy"}


def test_create_and_list_lines(client: TestClient) -> None:
    created = client.post(f"{API}/production-lines/", json={"name": "Linea 3"})
    duplicate = client.post(f"{API}/production-lines/", json={"name": "Linea 3"})
    listed = client.get(f"{API}/production-lines/")

    assert created.status_code == 201
    assert created.json()["is_active"] is True
    assert duplicate.status_code == 409
    assert [line["name"] for line in listed.json()] == ["Linea 3"]


def test_line_hierarchy(client: TestClient, db: Session) -> None:
    line = create_line(db)

    system = client.post(
        f"{API}/production-lines/{line.id}/systems", json={"name": "Embalaje"}
    ).json()
    subsystem = client.post(
        f"{API}/systems/{system['id']}/subsystems", json={"name": "Paletizadora"}
    ).json()
    subsubsystem = client.post(
        f"{API}/subsystems/{subsystem['id']}/subsubsystems", json={"name": "Brazo"}
    )
    assert subsubsystem.status_code == 201

    tree = client.get(f"{API}/production-lines/{line.id}").json()

    assert tree["systems"][0]["name"] == "Embalaje"
    assert tree["systems"][0]["subsystems"][0]["name"] == "Paletizadora"
    assert tree["systems"][0]["subsystems"][0]["subsubsystems"][0]["name"] == "Brazo"


def test_subsystem_on_missing_system(client: TestClient) -> None:
    response = client.post(f"{API}/systems/9999/subsystems", json={"name": "X"})

    assert response.status_code == 404


def test_planned_speed(client: TestClient, db: Session) -> None:
    line = create_line(db)
    product = create_product(db)
    path = f"{API}/production-lines/{line.id}/products/{product.id}"

    missing = client.get(path)
    first = client.put(path, json={"boxes_per_hour": 120})
    second = client.put(path, json={"boxes_per_hour": 150})
    fetched = client.get(path)
    listed = client.get(f"{API}/production-lines/{line.id}/products")

    assert missing.status_code == 404
    assert first.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert fetched.json()["boxes_per_hour"] == 150
    assert len(listed.json()) == 1


def test_planned_speed_rejects_negative(client: TestClient, db: Session) -> None:
    line = create_line(db)
    product = create_product(db)

    response = client.put(
        f"{API}/production-lines/{line.id}/products/{product.id}",
        json={"boxes_per_hour": -10},
    )

    assert response.status_code == 400


def test_products(client: TestClient) -> None:
    created = client.post(
        f"{API}/products/",
        json={"name": "Cola 2L", "flavor": "cola", "size_liters": 2.0, "units_per_box": 6},
    )
    listed = client.get(f"{API}/products/")

    assert created.status_code == 201
    assert listed.json()[0]["units_per_box"] == 6
