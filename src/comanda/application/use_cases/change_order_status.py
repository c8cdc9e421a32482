from __future__ import annotations

import logging
from datetime import datetime, timezone

from comanda.application.dto.requests import ChangeOrderStatusRequest
from comanda.application.dto.responses import OrderResponse
from comanda.application.mappers.event_envelope import serialize_order_status_changed_event
from comanda.application.mappers.order_mapper import to_order_response
from comanda.application.metrics.order_lifecycle import record_order_status, record_transition
from comanda.application.ports.publisher import EventPublisher
from comanda.application.ports.repositories import (
    OptimisticConcurrencyError,
    OrderRepository,
    UserDirectory,
)
from comanda.application.use_cases.context import TraceContext
from comanda.domain.common.ids import OrderId, UserId
from comanda.domain.order.entities import OrderStatus, OrderTransitionError

logger = logging.getLogger(__name__)


class OrderNotFoundError(Exception):
    pass


class NotAdminError(Exception):
    pass


class InvalidOrderStatusError(Exception):
    pass


class InvalidOrderTransitionError(Exception):
    pass


class OrderConflictError(Exception):
    pass


class ChangeOrderStatus:
    def __init__(
        self,
        order_repository: OrderRepository,
        user_directory: UserDirectory,
        publisher: EventPublisher,
    ) -> None:
        self._order_repository = order_repository
        self._user_directory = user_directory
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        request_dto: ChangeOrderStatusRequest,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        user = self._user_directory.get(UserId(request_dto.user_id))
        if user is None or not user.is_admin:
            raise NotAdminError(f"user {request_dto.user_id} is not an admin")

        try:
            new_status = OrderStatus(request_dto.status.upper())
        except ValueError as exc:
            raise InvalidOrderStatusError(f"unknown order status {request_dto.status}") from exc

        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        if order.status == new_status:
            return to_order_response(order)

        try:
            order.transition_to(new_status)
        except OrderTransitionError as exc:
            raise InvalidOrderTransitionError(str(exc)) from exc

        try:
            persisted_order = self._order_repository.update_status(
                order_id=order_id,
                expected_status=order.status,
                new_status=new_status,
            )
        except OptimisticConcurrencyError:
            current = self._order_repository.get(order_id)
            if current is None:
                raise OrderNotFoundError(f"order {order_id} not found")
            if current.status == new_status:
                return to_order_response(current)
            raise OrderConflictError(f"order {order_id} status update conflict")

        occurred_at = datetime.now(timezone.utc)
        record_transition(from_status=order.status, to_status=new_status)
        record_order_status(persisted_order)
        message = serialize_order_status_changed_event(
            occurred_at=occurred_at,
            order=persisted_order,
            from_status=order.status,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        try:
            self._publisher.publish(channel=f"events:{persisted_order.local}", message=message)
        except Exception:
            logger.warning("order_event_publish_failed", exc_info=True)

        return to_order_response(persisted_order)
