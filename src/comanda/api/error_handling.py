from __future__ import annotations

from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from comanda.api.middleware.request_id import get_request_id
from comanda.application.use_cases.block_user import UserNotFoundError as BlockUserNotFoundError
from comanda.application.use_cases.change_order_status import (
    InvalidOrderStatusError,
    InvalidOrderTransitionError,
    OrderConflictError,
)
from comanda.application.use_cases.change_order_status import (
    NotAdminError as ChangeStatusNotAdminError,
)
from comanda.application.use_cases.change_order_status import (
    OrderNotFoundError as ChangeStatusOrderNotFoundError,
)
from comanda.application.use_cases.get_order import OrderNotFoundError as GetOrderNotFoundError
from comanda.application.use_cases.list_daily_orders import InvalidDailyOrdersStatusError
from comanda.application.use_cases.list_daily_orders import (
    NotAdminError as DailyOrdersNotAdminError,
)
from comanda.application.use_cases.list_user_orders import (
    UserNotFoundError as UserOrdersNotFoundError,
)
from comanda.application.use_cases.manage_food import FoodNotFoundError, InvalidFoodUpdateError
from comanda.application.use_cases.manage_food import NotAdminError as FoodAdminNotAdminError
from comanda.application.use_cases.submit_order import (
    CounterUnavailableError,
    IdempotencyReplayMismatchError,
    InvalidItemError,
    OrderCreationFailedError,
    SubmitterBlockedError,
)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
        headers=headers,
    )


def _exception_handler(status_code: int, code: str, retry_after: int | None = None):
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None

    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
            headers=headers,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 409:
        code = "CONFLICT"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={
            "errors": jsonable_encoder(
                validation_exc.errors(), custom_encoder={Exception: str}
            )
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str]] = [
        (SubmitterBlockedError, 403, "SUBMITTER_BLOCKED"),
        (InvalidItemError, 400, "INVALID_ITEM"),
        (
            IdempotencyReplayMismatchError,
            409,
            "IDEMPOTENCY_KEY_REPLAY_DIFFERENT_PAYLOAD",
        ),
        (GetOrderNotFoundError, 404, "ORDER_NOT_FOUND"),
        (ChangeStatusOrderNotFoundError, 404, "ORDER_NOT_FOUND"),
        (ChangeStatusNotAdminError, 403, "NOT_ADMIN"),
        (DailyOrdersNotAdminError, 403, "NOT_ADMIN"),
        (InvalidOrderStatusError, 400, "INVALID_ORDER_STATUS"),
        (InvalidDailyOrdersStatusError, 400, "INVALID_ORDER_STATUS"),
        (InvalidOrderTransitionError, 409, "INVALID_ORDER_TRANSITION"),
        (OrderConflictError, 409, "CONFLICT"),
        (BlockUserNotFoundError, 404, "USER_NOT_FOUND"),
        (UserOrdersNotFoundError, 404, "USER_NOT_FOUND"),
        (FoodAdminNotAdminError, 403, "NOT_ADMIN"),
        (FoodNotFoundError, 404, "FOOD_NOT_FOUND"),
        (InvalidFoodUpdateError, 400, "INVALID_FOOD_UPDATE"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(
        CounterUnavailableError,
        _exception_handler(503, "COUNTER_UNAVAILABLE", retry_after=1),
    )
    app.add_exception_handler(
        OrderCreationFailedError,
        _exception_handler(500, "ORDER_CREATION_FAILED"),
    )
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
