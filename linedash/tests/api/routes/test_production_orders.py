from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from linedash.core.config import settings
from linedash.models import OrderStatus
from linedash.tests.utils.factories import create_line, create_order, create_product

ORDERS = f"{settings.API_V1_STR}/production-orders"
ANALYTICS = f"{settings.API_V1_STR}/analytics"


@pytest.fixture()
def order(db: Session):
    return create_order(
        db, create_line(db), create_product(db), datetime(2024, 3, 4, 6, 0)
    )


def test_create_order(client: TestClient, db: Session) -> None:
    line = create_line(db)
    product = create_product(db)
    data = {
        "order_number": "OP-1001",
        "production_line_id": line.id,
        "product_id": product.id,
        "shift": 2,
        "planned_boxes": 800,
        "planned_hours": 6.5,
        "production_date": "2024-03-04T06:00:00",
    }

    response = client.post(f"{ORDERS}/", json=data)

    assert response.status_code == 201
    content = response.json()
    assert content["order_number"] == "OP-1001"
    assert content["status"] == "pending"
    assert content["produced_boxes"] == 0
    assert "id" in content


def test_order_created_through_api_is_reported(client: TestClient, db: Session) -> None:
    line = create_line(db)
    product = create_product(db, name="Cola 500ml")
    data = {
        "order_number": "OP-1002",
        "production_line_id": line.id,
        "product_id": product.id,
        "shift": 1,
        "planned_boxes": 30,
        "planned_hours": 2.0,
        "production_date": "2024-03-04T06:00:00",
    }

    created = client.post(f"{ORDERS}/", json=data)
    assert created.status_code == 201
    assert created.json()["production_date"] == "2024-03-04T06:00:00"
    order_id = created.json()["id"]

    logged = client.post(
        f"{ORDERS}/{order_id}/hourly-production",
        json={"boxes": 25, "recorded_at": "2024-03-04T07:00:00"},
    )
    assert logged.status_code == 201
    assert logged.json()["recorded_at"] == "2024-03-04T07:00:00"
    assert client.post(f"{ORDERS}/{order_id}/finish").status_code == 200

    window = {"from": "2024-03-04", "to": "2024-03-04"}
    by_product = client.get(f"{ANALYTICS}/production-by-product", params=window)
    by_hour = client.get(f"{ANALYTICS}/production-heatmap-by-hour", params=window)

    assert by_product.status_code == 200
    assert by_product.json()["data"][0]["name"] == "Cola 500ml"
    assert by_product.json()["data"][0]["cajas"] == 25
    assert by_hour.json()["data"][7]["cajasProducidas"] == 25


def test_create_order_duplicate_number(client: TestClient, order) -> None:
    data = {
        "order_number": order.order_number,
        "production_line_id": order.production_line_id,
        "product_id": order.product_id,
        "shift": 1,
        "production_date": "2024-03-04T06:00:00",
    }

    response = client.post(f"{ORDERS}/", json=data)

    assert response.status_code == 409
    assert order.order_number in response.json()["error"]


def test_create_order_invalid_shift(client: TestClient, order) -> None:
    data = {
        "order_number": "OP-1002",
        "production_line_id": order.production_line_id,
        "product_id": order.product_id,
        "shift": 7,
        "production_date": "2024-03-04T06:00:00",
    }

    response = client.post(f"{ORDERS}/", json=data)

    assert response.status_code == 400
    assert "shift" in response.json()["error"]


def test_get_missing_order(client: TestClient, db: Session) -> None:
    response = client.get(f"{ORDERS}/9999")

    assert response.status_code == 404
    assert "error" in response.json()


def test_list_orders_filters(client: TestClient, db: Session) -> None:
    line = create_line(db)
    other_line = create_line(db)
    product = create_product(db)
    create_order(db, line, product, datetime(2024, 3, 4, 6, 0))
    create_order(db, line, product, datetime(2024, 3, 9, 6, 0), status=OrderStatus.COMPLETED)
    create_order(db, other_line, product, datetime(2024, 3, 5, 6, 0))

    by_window = client.get(f"{ORDERS}/", params={"from": "2024-03-04", "to": "2024-03-05"})
    by_line = client.get(f"{ORDERS}/", params={"lineId": line.id})
    by_status = client.get(f"{ORDERS}/", params={"status": "completed"})

    assert len(by_window.json()) == 2
    assert {o["production_line_id"] for o in by_line.json()} == {line.id}
    assert len(by_line.json()) == 2
    assert [o["status"] for o in by_status.json()] == ["completed"]


def test_order_lifecycle(client: TestClient, order) -> None:
    started = client.post(f"{ORDERS}/{order.id}/start")
    assert started.status_code == 200
    assert started.json()["status"] == "in_progress"

    for boxes in (40, 35):
        logged = client.post(
            f"{ORDERS}/{order.id}/hourly-production", json={"boxes": boxes}
        )
        assert logged.status_code == 201
        assert logged.json()["boxes"] == boxes

    finished = client.post(f"{ORDERS}/{order.id}/finish", json={"elapsed_hours": 0.25})
    assert finished.status_code == 200
    assert finished.json()["status"] == "completed"
    assert finished.json()["produced_boxes"] == 75

    late = client.post(f"{ORDERS}/{order.id}/hourly-production", json={"boxes": 5})
    assert late.status_code == 409


def test_finish_without_body(client: TestClient, order) -> None:
    response = client.post(f"{ORDERS}/{order.id}/finish")

    assert response.status_code == 200
    assert response.json()["status"] == "completed"


def test_start_twice_conflicts(client: TestClient, order) -> None:
    client.post(f"{ORDERS}/{order.id}/start")

    response = client.post(f"{ORDERS}/{order.id}/start")

    assert response.status_code == 409


def test_negative_hourly_production(client: TestClient, order) -> None:
    response = client.post(
        f"{ORDERS}/{order.id}/hourly-production", json={"boxes": -3}
    )

    assert response.status_code == 400


def test_record_stoppage(client: TestClient, order) -> None:
    response = client.post(
        f"{ORDERS}/{order.id}/stoppages",
        json={"duration_minutes": 12.5, "category": "maintenance"},
    )

    assert response.status_code == 201
    assert response.json()["order_id"] == order.id

    listed = client.get(f"{ORDERS}/{order.id}/stoppages")
    assert [s["category"] for s in listed.json()] == ["maintenance"]


def test_record_stoppage_unknown_category(client: TestClient, order) -> None:
    response = client.post(
        f"{ORDERS}/{order.id}/stoppages",
        json={"duration_minutes": 5, "category": "lunch"},
    )

    assert response.status_code == 400


def test_correlation_id_header(client: TestClient, order) -> None:
    response = client.get(
        f"{ORDERS}/{order.id}", headers={"X-Correlation-ID": "abc-123"}
    )

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "abc-123"
