from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from comanda.application.dto.requests import SubmitOrderRequest
from comanda.application.dto.responses import SubmitOrderResponse
from comanda.application.mappers.event_envelope import serialize_order_placed_event
from comanda.application.mappers.order_mapper import to_order_response
from comanda.application.metrics.order_lifecycle import (
    record_commit_duration,
    record_display_number,
    record_order_status,
    record_submission_failure,
)
from comanda.application.ports.publisher import EventPublisher
from comanda.application.ports.repositories import (
    CatalogUnavailableError,
    CounterStoreUnavailableError,
    OrderPersistenceError,
    OrderRepository,
    PriceCatalog,
    UserDirectory,
    UserDirectoryUnavailableError,
)
from comanda.application.ports.repositories import (
    IdempotencyReplayMismatchError as RepoIdempotencyReplayMismatchError,
)
from comanda.application.use_cases.context import TraceContext
from comanda.domain.common.ids import FoodId, Local, OrderId, UserId
from comanda.domain.order.builder import (
    EmptyOrderError,
    InvalidQuantityError,
    RequestedItem,
    UnknownItemError,
    build_order_lines,
)
from comanda.domain.order.entities import Order, create_pending_order
from comanda.domain.order.numbering import counter_scope_for

logger = logging.getLogger(__name__)

COUNTER_UNAVAILABLE_MESSAGE = "order numbering is temporarily unavailable, please retry"
ORDER_CREATION_FAILED_MESSAGE = "order could not be created, please retry"


class SubmitterBlockedError(Exception):
    pass


class InvalidItemError(Exception):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class CounterUnavailableError(Exception):
    pass


class OrderCreationFailedError(Exception):
    pass


class IdempotencyReplayMismatchError(Exception):
    pass


@dataclass(frozen=True)
class OrderingPolicy:
    counter_scoped_per_local: bool = True
    reject_unknown_items: bool = True


class SubmitOrder:
    """Places an order and hands back its display number.

    The blocked-user check runs outside the commit transaction. Price
    snapshot and line computation happen before any write; counter
    increment, header and lines are then persisted by the repository as a
    single unit, so a failed submission never burns a counter value.
    """

    def __init__(
        self,
        user_directory: UserDirectory,
        price_catalog: PriceCatalog,
        order_repository: OrderRepository,
        publisher: EventPublisher,
        policy: OrderingPolicy | None = None,
    ) -> None:
        self._user_directory = user_directory
        self._price_catalog = price_catalog
        self._order_repository = order_repository
        self._publisher = publisher
        self._policy = policy or OrderingPolicy()

    def execute(
        self,
        request_dto: SubmitOrderRequest,
        trace_ctx: TraceContext,
        idempotency_key: str | None = None,
    ) -> SubmitOrderResponse:
        submitter_id = UserId(request_dto.submitter_id)
        try:
            blocked = self._user_directory.is_blocked(submitter_id)
        except UserDirectoryUnavailableError as exc:
            logger.exception("blocked_check_failed", extra={"user_id": str(submitter_id)})
            record_submission_failure("user_directory_unavailable")
            raise OrderCreationFailedError(ORDER_CREATION_FAILED_MESSAGE) from exc
        if blocked:
            record_submission_failure("submitter_blocked")
            raise SubmitterBlockedError(f"user {submitter_id} is blocked")

        requested = [
            RequestedItem(food_id=FoodId(item.item_id), quantity=item.quantity)
            for item in request_dto.items
        ]

        try:
            prices = self._price_catalog.snapshot_prices({item.food_id for item in requested})
        except CatalogUnavailableError as exc:
            logger.exception("price_snapshot_failed")
            record_submission_failure("catalog_unavailable")
            raise OrderCreationFailedError(ORDER_CREATION_FAILED_MESSAGE) from exc

        try:
            built = build_order_lines(
                requested,
                prices,
                reject_unknown_items=self._policy.reject_unknown_items,
            )
        except UnknownItemError as exc:
            record_submission_failure("invalid_item")
            raise InvalidItemError(
                str(exc),
                details={"unknownItemIds": [str(food_id) for food_id in exc.food_ids]},
            ) from exc
        except (InvalidQuantityError, EmptyOrderError) as exc:
            record_submission_failure("invalid_item")
            raise InvalidItemError(str(exc)) from exc

        unknown = [str(item.food_id) for item in requested if item.food_id not in prices]
        if unknown:
            logger.warning("order_items_priced_at_zero", extra={"item_ids": unknown})

        local = Local(request_dto.local)
        counter_scope = counter_scope_for(local, self._policy.counter_scoped_per_local)

        order = create_pending_order(
            order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
            local=local,
            submitted_by=submitter_id,
            lines=built.lines,
            scheduled_hour=_as_utc(request_dto.scheduled_hour),
            now=datetime.now(timezone.utc),
            notes=request_dto.notes,
            idempotency_key=idempotency_key,
            idempotency_hash=_request_hash(request_dto) if idempotency_key else None,
        )

        started = time.perf_counter()
        try:
            persisted_order = self._order_repository.add_numbered(
                order=order,
                counter_scope=counter_scope,
            )
        except RepoIdempotencyReplayMismatchError as exc:
            raise IdempotencyReplayMismatchError(str(exc)) from exc
        except CounterStoreUnavailableError as exc:
            logger.exception("order_counter_unavailable", extra={"local": str(local)})
            record_submission_failure("counter_unavailable")
            raise CounterUnavailableError(COUNTER_UNAVAILABLE_MESSAGE) from exc
        except OrderPersistenceError as exc:
            logger.exception("order_commit_failed", extra={"local": str(local)})
            record_submission_failure("commit_failed")
            raise OrderCreationFailedError(ORDER_CREATION_FAILED_MESSAGE) from exc
        finally:
            record_commit_duration(time.perf_counter() - started)

        if persisted_order.order_id == order.order_id:
            self._announce(persisted_order, trace_ctx)

        logger.info(
            "order_submitted",
            extra={
                "order_id": str(persisted_order.order_id),
                "local": str(persisted_order.local),
                "display_number": persisted_order.display_number,
            },
        )
        response = to_order_response(persisted_order)
        return SubmitOrderResponse(
            displayNumber=response.displayNumber,
            orderId=response.orderId,
            order=response,
        )

    def _announce(self, order: Order, trace_ctx: TraceContext) -> None:
        record_order_status(order)
        record_display_number(order)
        message = serialize_order_placed_event(
            occurred_at=order.created_at,
            order=order,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        try:
            self._publisher.publish(channel=f"events:{order.local}", message=message)
        except Exception:
            logger.warning("order_event_publish_failed", exc_info=True)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _request_hash(request_dto: SubmitOrderRequest) -> str:
    normalized_payload = request_dto.model_dump(mode="json", by_alias=True, exclude_none=False)
    canonical = json.dumps(normalized_payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
