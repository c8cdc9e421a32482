from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from comanda.application.ports.repositories import OrderCounter
from comanda.infrastructure.db.models.order import OrderCounterModel
from comanda.infrastructure.db.session import get_engine


class SqlAlchemyOrderCounter(OrderCounter):
    """Per-scope counter rows advanced with a single upsert.

    ``next_value`` must run inside the caller's transaction: the upsert
    takes the row lock and holds it until that transaction ends, so
    concurrent submissions on one scope are serialized and a rolled back
    submission leaves the counter untouched.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def next_value(self, session: Session, scope: str) -> int:
        dialect_name = session.get_bind().dialect.name
        if dialect_name == "postgresql":
            insert = postgresql.insert
        elif dialect_name == "sqlite":
            insert = sqlite.insert
        else:
            raise NotImplementedError(f"order counter is not supported on {dialect_name}")

        statement = insert(OrderCounterModel).values(scope=scope, value=1)
        statement = statement.on_conflict_do_update(
            index_elements=[OrderCounterModel.scope],
            set_={"value": OrderCounterModel.value + 1},
        ).returning(OrderCounterModel.value)
        return int(session.execute(statement).scalar_one())

    def current_value(self, scope: str) -> int:
        statement = select(OrderCounterModel.value).where(OrderCounterModel.scope == scope)
        with Session(self._engine) as session:
            value = session.execute(statement).scalar_one_or_none()
        return int(value) if value is not None else 0
