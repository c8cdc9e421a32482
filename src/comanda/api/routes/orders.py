from __future__ import annotations

from fastapi import APIRouter, Header, Query, status

from comanda.api.middleware.request_id import get_request_id
from comanda.application.dto.requests import ChangeOrderStatusRequest, SubmitOrderRequest
from comanda.application.dto.responses import (
    BalanceResponse,
    OrderListResponse,
    OrderResponse,
    SubmitOrderResponse,
)
from comanda.application.use_cases.change_order_status import ChangeOrderStatus
from comanda.application.use_cases.context import TraceContext
from comanda.application.use_cases.get_balance import GetBalance
from comanda.application.use_cases.get_order import GetOrder
from comanda.application.use_cases.list_daily_orders import ListDailyOrders
from comanda.application.use_cases.submit_order import SubmitOrder
from comanda.domain.common.ids import OrderId, UserId
from comanda.infrastructure.config import ordering_policy
from comanda.infrastructure.db.repositories.food_repo import SqlAlchemyFoodRepository
from comanda.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from comanda.infrastructure.db.repositories.user_repo import SqlAlchemyUserDirectory
from comanda.infrastructure.messaging.redis_publisher import RedisEventPublisher
from comanda.infrastructure.observability.otel import current_trace_id

router = APIRouter()

# Matches the orders.idempotency_key column width.
IDEMPOTENCY_KEY_MAX_LENGTH = 128


def _trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())


def _submit_order_use_case() -> SubmitOrder:
    return SubmitOrder(
        user_directory=SqlAlchemyUserDirectory(),
        price_catalog=SqlAlchemyFoodRepository(),
        order_repository=SqlAlchemyOrderRepository(),
        publisher=RedisEventPublisher(),
        policy=ordering_policy(),
    )


def _change_order_status_use_case() -> ChangeOrderStatus:
    return ChangeOrderStatus(
        order_repository=SqlAlchemyOrderRepository(),
        user_directory=SqlAlchemyUserDirectory(),
        publisher=RedisEventPublisher(),
    )


def _get_order_use_case() -> GetOrder:
    return GetOrder(order_repository=SqlAlchemyOrderRepository())


def _list_daily_orders_use_case() -> ListDailyOrders:
    return ListDailyOrders(
        order_repository=SqlAlchemyOrderRepository(),
        user_directory=SqlAlchemyUserDirectory(),
    )


def _get_balance_use_case() -> GetBalance:
    return GetBalance(order_repository=SqlAlchemyOrderRepository())


@router.post(
    "/v1/orders",
    response_model=SubmitOrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_order(
    request_dto: SubmitOrderRequest,
    idempotency_key: str | None = Header(
        default=None,
        alias="Idempotency-Key",
        min_length=1,
        max_length=IDEMPOTENCY_KEY_MAX_LENGTH,
    ),
) -> SubmitOrderResponse:
    return _submit_order_use_case().execute(
        request_dto=request_dto,
        trace_ctx=_trace_context(),
        idempotency_key=idempotency_key,
    )


@router.get("/v1/orders/balance", response_model=BalanceResponse)
def get_balance() -> BalanceResponse:
    return _get_balance_use_case().execute()


@router.get("/v1/orders", response_model=OrderListResponse)
def list_daily_orders(
    status_filter: str = Query(default="PENDING", alias="status"),
    user_id: str = Query(alias="userId"),
) -> OrderListResponse:
    return _list_daily_orders_use_case().execute(
        status=status_filter,
        requested_by=UserId(user_id),
    )


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str) -> OrderResponse:
    return _get_order_use_case().execute(order_id=OrderId(order_id))


@router.put("/v1/orders/{order_id}/status", response_model=OrderResponse)
def change_order_status(order_id: str, request_dto: ChangeOrderStatusRequest) -> OrderResponse:
    return _change_order_status_use_case().execute(
        order_id=OrderId(order_id),
        request_dto=request_dto,
        trace_ctx=_trace_context(),
    )
