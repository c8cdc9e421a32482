from __future__ import annotations

from datetime import datetime, timezone

from comanda.application.dto.responses import OrderListResponse
from comanda.application.mappers.order_mapper import to_order_response
from comanda.application.ports.repositories import OrderRepository, UserDirectory
from comanda.application.use_cases.time_window import utc_day_bounds
from comanda.domain.common.ids import UserId
from comanda.domain.order.entities import OrderStatus


class NotAdminError(Exception):
    pass


class InvalidDailyOrdersStatusError(Exception):
    pass


class ListDailyOrders:
    """Admin queue of today's orders in one status.

    An order belongs to today when either its creation time or its
    scheduled hour falls within the current UTC day.
    """

    def __init__(self, order_repository: OrderRepository, user_directory: UserDirectory) -> None:
        self._order_repository = order_repository
        self._user_directory = user_directory

    def execute(
        self,
        status: str,
        requested_by: UserId,
        now: datetime | None = None,
    ) -> OrderListResponse:
        user = self._user_directory.get(requested_by)
        if user is None or not user.is_admin:
            raise NotAdminError(f"user {requested_by} is not an admin")

        try:
            parsed_status = OrderStatus(status.upper())
        except ValueError as exc:
            raise InvalidDailyOrdersStatusError(f"unknown order status {status}") from exc

        day_start, day_end = utc_day_bounds(now or datetime.now(timezone.utc))
        orders = self._order_repository.list_by_status_for_day(
            status=parsed_status,
            day_start=day_start,
            day_end=day_end,
        )
        return OrderListResponse(orders=[to_order_response(order) for order in orders])
