from __future__ import annotations

from comanda.application.dto.responses import OrderLineResponse, OrderResponse
from comanda.domain.order.entities import Order


def to_order_response(order: Order) -> OrderResponse:
    if order.sequence_number is None or order.display_number is None:
        raise ValueError(f"order {order.order_id} has not been numbered")
    return OrderResponse(
        orderId=str(order.order_id),
        local=str(order.local),
        displayNumber=order.display_number,
        sequenceNumber=order.sequence_number,
        status=order.status.value,
        scheduledHour=order.scheduled_hour,
        total=order.total.amount,
        notes=order.notes,
        submittedBy=str(order.submitted_by),
        lines=[
            OrderLineResponse(
                lineId=str(line.line_id),
                itemId=str(line.food_id),
                quantity=line.quantity,
                priceAtOrderTime=line.price_at_order_time.amount,
                lineTotal=line.line_total.amount,
            )
            for line in order.lines
        ],
        createdAt=order.created_at,
    )
