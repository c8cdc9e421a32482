from __future__ import annotations

import concurrent.futures
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

import comanda.api.routes.orders as orders_route
from comanda.application.dto.requests import SubmitOrderItemRequest, SubmitOrderRequest
from comanda.application.use_cases.context import TraceContext
from comanda.domain.order.numbering import counter_scope_for
from comanda.infrastructure.db.repositories.counter_repo import SqlAlchemyOrderCounter

pytestmark = pytest.mark.integration

SUBMISSIONS = 24


def _request(local: str) -> SubmitOrderRequest:
    return SubmitOrderRequest(
        local=local,
        scheduled_hour=datetime.now(timezone.utc),
        submitter_id="usr_001",
        items=[SubmitOrderItemRequest(item_id="food_003", quantity=1)],
    )


def test_concurrent_submissions_receive_distinct_consecutive_numbers(local: str) -> None:
    counter = SqlAlchemyOrderCounter()
    scope = counter_scope_for(local, scoped_per_local=True)
    before = counter.current_value(scope)

    def _submit(index: int) -> int:
        response = orders_route._submit_order_use_case().execute(
            _request(local),
            TraceContext(trace_id=None, request_id=f"req-{index}"),
        )
        return response.order.sequenceNumber

    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as executor:
        sequence_numbers = list(executor.map(_submit, range(SUBMISSIONS)))

    assert sorted(sequence_numbers) == list(range(before + 1, before + SUBMISSIONS + 1))
    assert counter.current_value(scope) == before + SUBMISSIONS


def test_idempotent_retries_under_concurrency_create_one_order(local: str) -> None:
    def _submit(_: int) -> str:
        response = orders_route._submit_order_use_case().execute(
            _request(local).model_copy(
                update={"scheduled_hour": datetime(2026, 10, 19, 13, 0, tzinfo=timezone.utc)}
            ),
            TraceContext(trace_id=None, request_id=None),
            idempotency_key=f"retry-{local}",
        )
        return response.orderId

    with concurrent.futures.ThreadPoolExecutor(max_workers=4) as executor:
        order_ids = set(executor.map(_submit, range(4)))

    assert len(order_ids) == 1
    scope = counter_scope_for(local, scoped_per_local=True)
    assert SqlAlchemyOrderCounter().current_value(scope) == 1
