from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Engine, and_, or_, select, text, update
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from comanda.application.ports.repositories import (
    CounterStoreUnavailableError,
    DeliveredOrderData,
    IdempotencyReplayMismatchError,
    OptimisticConcurrencyError,
    OrderPersistenceError,
    OrderRepository,
)
from comanda.domain.common.ids import FoodId, Local, OrderId, OrderLineId, UserId
from comanda.domain.common.money import Money
from comanda.domain.order.entities import Order, OrderLine, OrderStatus
from comanda.infrastructure.config import order_commit_timeout_ms
from comanda.infrastructure.db.models.order import OrderLineModel, OrderModel
from comanda.infrastructure.db.repositories.counter_repo import SqlAlchemyOrderCounter
from comanda.infrastructure.db.session import get_engine


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(
        self,
        engine: Engine | None = None,
        counter: SqlAlchemyOrderCounter | None = None,
        commit_timeout_ms: int | None = None,
    ) -> None:
        self._engine = engine or get_engine()
        self._counter = counter or SqlAlchemyOrderCounter(self._engine)
        self._commit_timeout_ms = commit_timeout_ms or order_commit_timeout_ms()

    def add_numbered(self, order: Order, counter_scope: str) -> Order:
        if order.idempotency_key:
            existing = self._replay(order)
            if existing is not None:
                return existing

        try:
            with Session(self._engine) as session, session.begin():
                self._bound_commit_time(session)
                sequence_number = self._counter.next_value(session, counter_scope)
                numbered = order.numbered(sequence_number)
                session.add(self._to_model(numbered, counter_scope))
        except IntegrityError as exc:
            if order.idempotency_key:
                existing = self._replay(order)
                if existing is not None:
                    return existing
            raise OrderPersistenceError(f"order {order.order_id} violates a constraint") from exc
        except OperationalError as exc:
            raise CounterStoreUnavailableError(
                f"counter scope {counter_scope} could not be advanced"
            ) from exc
        except SQLAlchemyError as exc:
            raise OrderPersistenceError(f"order {order.order_id} could not be stored") from exc

        return numbered

    def get(self, order_id: OrderId) -> Order | None:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.lines))
            .where(OrderModel.id == str(order_id))
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).unique().scalar_one_or_none()

        if model is None:
            return None

        return self._to_domain(model)

    def update_status(
        self,
        order_id: OrderId,
        expected_status: OrderStatus,
        new_status: OrderStatus,
    ) -> Order:
        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == str(order_id),
                OrderModel.status == expected_status.value,
            )
            .values(status=new_status.value)
        )
        with Session(self._engine) as session:
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                raise OptimisticConcurrencyError(
                    f"order {order_id} is no longer in status={expected_status.value}"
                )
            session.commit()

        updated = self.get(order_id)
        if updated is None:
            raise RuntimeError(f"order {order_id} not found after status update")
        return updated

    def list_by_status_for_day(
        self,
        status: OrderStatus,
        day_start: datetime,
        day_end: datetime,
    ) -> list[Order]:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.lines))
            .where(
                OrderModel.status == status.value,
                _within_day(day_start, day_end),
            )
            .order_by(OrderModel.created_at, OrderModel.id)
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).unique().scalars().all())
        return [self._to_domain(model) for model in models]

    def list_open_for_user(
        self,
        user_id: UserId,
        day_start: datetime,
        day_end: datetime,
    ) -> list[Order]:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.lines))
            .where(
                OrderModel.submitted_by == str(user_id),
                OrderModel.status != OrderStatus.DELIVERED.value,
                _within_day(day_start, day_end),
            )
            .order_by(OrderModel.scheduled_hour.desc(), OrderModel.id)
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).unique().scalars().all())
        return [self._to_domain(model) for model in models]

    def delivered_between(self, start: datetime, end: datetime) -> list[DeliveredOrderData]:
        statement = select(OrderModel.scheduled_hour, OrderModel.total).where(
            OrderModel.status == OrderStatus.DELIVERED.value,
            OrderModel.scheduled_hour >= start,
            OrderModel.scheduled_hour <= end,
        )
        with Session(self._engine) as session:
            rows = session.execute(statement).all()
        return [
            DeliveredOrderData(scheduled_hour=_utc(row.scheduled_hour), total=row.total)
            for row in rows
        ]

    def _replay(self, order: Order) -> Order | None:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.lines))
            .where(
                OrderModel.submitted_by == str(order.submitted_by),
                OrderModel.idempotency_key == order.idempotency_key,
            )
            .limit(1)
        )
        try:
            with Session(self._engine) as session:
                existing = session.execute(statement).unique().scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise OrderPersistenceError(
                f"idempotency lookup failed for key {order.idempotency_key}"
            ) from exc
        if existing is None:
            return None
        if existing.idempotency_hash != order.idempotency_hash:
            raise IdempotencyReplayMismatchError(
                f"idempotency key replay with different payload: {order.idempotency_key}"
            )
        return self._to_domain(existing)

    def _bound_commit_time(self, session: Session) -> None:
        if session.get_bind().dialect.name != "postgresql":
            return
        timeout_ms = int(self._commit_timeout_ms)
        session.execute(text(f"SET LOCAL lock_timeout = {timeout_ms}"))
        session.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))

    def _to_model(self, order: Order, counter_scope: str) -> OrderModel:
        order_model = OrderModel(
            id=str(order.order_id),
            local=str(order.local),
            counter_scope=counter_scope,
            sequence_number=order.sequence_number,
            display_number=order.display_number,
            scheduled_hour=order.scheduled_hour,
            total=order.total.amount,
            status=order.status.value,
            notes=order.notes,
            submitted_by=str(order.submitted_by),
            created_at=order.created_at,
            idempotency_key=order.idempotency_key,
            idempotency_hash=order.idempotency_hash,
        )
        order_model.lines = [
            OrderLineModel(
                id=str(line.line_id),
                order_id=str(order.order_id),
                position=position,
                food_id=str(line.food_id),
                quantity=line.quantity,
                price_at_order_time=line.price_at_order_time.amount,
                line_total=line.line_total.amount,
            )
            for position, line in enumerate(order.lines)
        ]
        return order_model

    def _to_domain(self, model: OrderModel) -> Order:
        lines = [
            OrderLine(
                line_id=OrderLineId(line.id),
                food_id=FoodId(line.food_id),
                quantity=line.quantity,
                price_at_order_time=Money.of(line.price_at_order_time),
                line_total=Money.of(line.line_total),
            )
            for line in model.lines
        ]
        return Order(
            order_id=OrderId(model.id),
            local=Local(model.local),
            submitted_by=UserId(model.submitted_by),
            status=OrderStatus(model.status),
            lines=lines,
            total=Money.of(model.total),
            scheduled_hour=_utc(model.scheduled_hour),
            created_at=_utc(model.created_at),
            notes=model.notes,
            sequence_number=model.sequence_number,
            display_number=model.display_number,
            idempotency_key=model.idempotency_key,
            idempotency_hash=model.idempotency_hash,
        )


def _within_day(day_start: datetime, day_end: datetime):
    return or_(
        and_(OrderModel.created_at >= day_start, OrderModel.created_at <= day_end),
        and_(OrderModel.scheduled_hour >= day_start, OrderModel.scheduled_hour <= day_end),
    )


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
