from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from comanda.domain.order.entities import Order, OrderStatus


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    local: str,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "local": local,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def _order_payload(order: Order) -> dict[str, Any]:
    return {
        "orderId": str(order.order_id),
        "displayNumber": order.display_number,
        "sequenceNumber": order.sequence_number,
        "status": order.status.value,
        "total": str(order.total.amount),
        "scheduledHour": order.scheduled_hour.isoformat(),
        "submittedBy": str(order.submitted_by),
        "notes": order.notes,
        "createdAt": order.created_at.isoformat(),
        "lines": [
            {
                "lineId": str(line.line_id),
                "itemId": str(line.food_id),
                "quantity": line.quantity,
                "priceAtOrderTime": str(line.price_at_order_time.amount),
                "lineTotal": str(line.line_total.amount),
            }
            for line in order.lines
        ],
    }


def serialize_order_placed_event(
    *,
    occurred_at: datetime,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="order.placed",
        occurred_at=occurred_at,
        local=str(order.local),
        trace_id=trace_id,
        request_id=request_id,
        payload=_order_payload(order),
    )


def serialize_order_status_changed_event(
    *,
    occurred_at: datetime,
    order: Order,
    from_status: OrderStatus,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    payload = _order_payload(order)
    payload["fromStatus"] = from_status.value
    return _serialize_event(
        event_type="order.status_changed",
        occurred_at=occurred_at,
        local=str(order.local),
        trace_id=trace_id,
        request_id=request_id,
        payload=payload,
    )
