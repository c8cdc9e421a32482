from __future__ import annotations

import json
import sys
import time
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from comanda.api.main import app
from comanda.domain.order.numbering import counter_scope_for
from comanda.infrastructure.db.repositories.counter_repo import SqlAlchemyOrderCounter
from comanda.infrastructure.messaging.redis_publisher import get_redis_client

pytestmark = pytest.mark.integration


def _payload(local: str, submitter_id: str = "usr_001", items=None) -> dict:
    return {
        "local": local,
        "scheduledHour": "2026-10-19T12:30:00Z",
        "submitterId": submitter_id,
        "items": items
        or [{"itemId": "food_001", "quantity": 2}, {"itemId": "food_002", "quantity": 3}],
    }


def _wait_for_message(pubsub, timeout_seconds: float = 2.0) -> str | None:
    deadline = time.time() + timeout_seconds
    while time.time() < deadline:
        message = pubsub.get_message(ignore_subscribe_messages=True, timeout=0.2)
        if message and message.get("type") == "message":
            payload = message.get("data")
            if isinstance(payload, bytes):
                return payload.decode("utf-8")
            return str(payload)
        time.sleep(0.05)
    return None


def test_submit_order_persists_numbers_and_publishes(local: str) -> None:
    pubsub = get_redis_client().pubsub()
    pubsub.subscribe(f"events:{local}")
    pubsub.get_message(timeout=0.5)

    client = TestClient(app)
    response = client.post("/v1/orders", json=_payload(local))
    assert response.status_code == 201
    body = response.json()
    assert body["displayNumber"] == 1
    assert Decimal(body["order"]["total"]) == Decimal("16.00")

    stored = client.get(f"/v1/orders/{body['orderId']}")
    assert stored.status_code == 200
    assert stored.json()["status"] == "PENDING"
    assert Decimal(stored.json()["total"]) == Decimal("16.00")

    second = client.post("/v1/orders", json=_payload(local))
    assert second.json()["displayNumber"] == 2

    message = _wait_for_message(pubsub)
    assert message is not None
    event = json.loads(message)
    assert event["event_type"] == "order.placed"
    assert event["local"] == local
    assert event["payload"]["orderId"] == body["orderId"]


def test_blocked_submitter_does_not_consume_a_number(local: str) -> None:
    client = TestClient(app)

    response = client.post("/v1/orders", json=_payload(local, submitter_id="usr_blocked"))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "SUBMITTER_BLOCKED"
    scope = counter_scope_for(local, scoped_per_local=True)
    assert SqlAlchemyOrderCounter().current_value(scope) == 0


def test_unknown_items_are_rejected(local: str) -> None:
    client = TestClient(app)

    response = client.post(
        "/v1/orders",
        json=_payload(
            local,
            items=[{"itemId": "food_001", "quantity": 1}, {"itemId": "ghost", "quantity": 1}],
        ),
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"unknownItemIds": ["ghost"]}
    scope = counter_scope_for(local, scoped_per_local=True)
    assert SqlAlchemyOrderCounter().current_value(scope) == 0


def test_unknown_submitter_fails_without_consuming_a_number(local: str) -> None:
    client = TestClient(app, raise_server_exceptions=False)

    response = client.post("/v1/orders", json=_payload(local, submitter_id="usr_ghost"))

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "ORDER_CREATION_FAILED"
    scope = counter_scope_for(local, scoped_per_local=True)
    assert SqlAlchemyOrderCounter().current_value(scope) == 0


def test_admin_moves_order_to_delivered(local: str) -> None:
    client = TestClient(app)
    order_id = client.post("/v1/orders", json=_payload(local)).json()["orderId"]

    non_admin = client.put(
        f"/v1/orders/{order_id}/status",
        json={"status": "CONFIRMED", "userId": "usr_001"},
    )
    assert non_admin.status_code == 403

    for status in ("CONFIRMED", "DELIVERED"):
        response = client.put(
            f"/v1/orders/{order_id}/status",
            json={"status": status, "userId": "usr_admin"},
        )
        assert response.status_code == 200
        assert response.json()["status"] == status

    backwards = client.put(
        f"/v1/orders/{order_id}/status",
        json={"status": "PENDING", "userId": "usr_admin"},
    )
    assert backwards.status_code == 409
    assert backwards.json()["error"]["code"] == "INVALID_ORDER_TRANSITION"

    open_orders = client.get("/v1/users/usr_001/orders").json()["orders"]
    assert order_id not in [order["orderId"] for order in open_orders]


def test_menu_lists_seeded_foods() -> None:
    response = TestClient(app).get("/v1/foods")

    assert response.status_code == 200
    food_ids = [food["foodId"] for food in response.json()["foods"]]
    assert {"food_001", "food_002", "food_003"} <= set(food_ids)
