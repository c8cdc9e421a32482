from __future__ import annotations

from prometheus_client import Counter, Histogram

from comanda.domain.order.entities import Order, OrderStatus

ORDERS_TOTAL = Counter(
    "comanda_orders_total",
    "Total number of orders observed by status.",
    ["local", "status"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "comanda_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

ORDER_SUBMISSION_FAILURES_TOTAL = Counter(
    "comanda_order_submission_failures_total",
    "Total number of rejected or failed order submissions.",
    ["reason"],
)

ORDER_COMMIT_SECONDS = Histogram(
    "comanda_order_commit_seconds",
    "Time spent in the atomic numbering and persistence step.",
)

DISPLAY_NUMBER_WRAPS_TOTAL = Counter(
    "comanda_display_number_wraps_total",
    "Number of times the display number cycled back to 1.",
    ["local"],
)


def record_order_status(order: Order) -> None:
    ORDERS_TOTAL.labels(local=str(order.local), status=order.status.value).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_submission_failure(reason: str) -> None:
    ORDER_SUBMISSION_FAILURES_TOTAL.labels(reason=reason).inc()


def record_commit_duration(seconds: float) -> None:
    ORDER_COMMIT_SECONDS.observe(max(seconds, 0.0))


def record_display_number(order: Order) -> None:
    if order.display_number == 1 and (order.sequence_number or 0) > 1:
        DISPLAY_NUMBER_WRAPS_TOTAL.labels(local=str(order.local)).inc()
