from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from comanda.domain.common.ids import FoodId, Local, OrderId, OrderLineId, UserId
from comanda.domain.common.money import Money
from comanda.domain.order.numbering import MAX_DISPLAY_NUMBER, display_number


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DELIVERED = "DELIVERED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.CONFIRMED, OrderStatus.REJECTED, OrderStatus.CANCELLED}
    ),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.REJECTED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class OrderLine:
    line_id: OrderLineId
    food_id: FoodId
    quantity: int
    price_at_order_time: Money
    line_total: Money

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")
        if self.line_total != self.price_at_order_time.times(self.quantity):
            raise ValueError("line_total must equal price_at_order_time * quantity")


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    local: Local
    submitted_by: UserId
    status: OrderStatus
    lines: list[OrderLine]
    total: Money
    scheduled_hour: datetime
    created_at: datetime
    notes: str | None = None
    sequence_number: int | None = None
    display_number: int | None = None
    idempotency_key: str | None = None
    idempotency_hash: str | None = None

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("order must contain at least one line")
        expected_total = Money.zero()
        for line in self.lines:
            expected_total = expected_total + line.line_total
        if self.total != expected_total:
            raise ValueError("order total must equal sum of line totals")
        if (self.sequence_number is None) != (self.display_number is None):
            raise ValueError("sequence_number and display_number must be set together")
        if self.sequence_number is not None:
            if self.display_number != display_number(self.sequence_number):
                raise ValueError("display_number must be derived from sequence_number")
            if not 1 <= self.display_number <= MAX_DISPLAY_NUMBER:
                raise ValueError(f"display_number must be in 1..{MAX_DISPLAY_NUMBER}")

    @property
    def is_numbered(self) -> bool:
        return self.sequence_number is not None

    def numbered(self, sequence_number: int) -> Order:
        if self.is_numbered:
            raise ValueError(f"order {self.order_id} already has a number")
        return replace(
            self,
            sequence_number=sequence_number,
            display_number=display_number(sequence_number),
        )

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, new_status: OrderStatus) -> Order:
        if not self.can_transition_to(new_status):
            raise OrderTransitionError(
                f"cannot move order from status={self.status.value} to status={new_status.value}"
            )
        return replace(self, status=new_status)


def create_pending_order(
    order_id: OrderId,
    local: Local,
    submitted_by: UserId,
    lines: list[OrderLine],
    scheduled_hour: datetime,
    now: datetime,
    notes: str | None = None,
    idempotency_key: str | None = None,
    idempotency_hash: str | None = None,
) -> Order:
    if not lines:
        raise ValueError("order must contain at least one line")

    total = Money.zero()
    for line in lines:
        total = total + line.line_total
    return Order(
        order_id=order_id,
        local=local,
        submitted_by=submitted_by,
        status=OrderStatus.PENDING,
        lines=lines,
        total=total,
        scheduled_hour=scheduled_hour,
        created_at=now,
        notes=notes,
        idempotency_key=idempotency_key,
        idempotency_hash=idempotency_hash,
    )


class OrderTransitionError(Exception):
    pass
