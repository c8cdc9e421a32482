from __future__ import annotations

from sqlalchemy import Engine, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from comanda.application.ports.repositories import UserDirectory, UserDirectoryUnavailableError
from comanda.domain.common.ids import UserId
from comanda.domain.user.entities import User, UserRole
from comanda.infrastructure.db.models.catalog import UserModel
from comanda.infrastructure.db.session import get_engine


class SqlAlchemyUserDirectory(UserDirectory):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, user_id: UserId) -> User | None:
        with Session(self._engine) as session:
            model = session.get(UserModel, str(user_id))
        if model is None:
            return None
        return User(
            user_id=UserId(model.id),
            name=model.name,
            email=model.email,
            role=UserRole(model.role),
            blocked=model.blocked,
        )

    def is_blocked(self, user_id: UserId) -> bool:
        statement = select(UserModel.blocked).where(UserModel.id == str(user_id))
        try:
            with Session(self._engine) as session:
                blocked = session.execute(statement).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise UserDirectoryUnavailableError(f"blocked check failed for user {user_id}") from exc
        return bool(blocked)

    def set_blocked(self, user_id: UserId, blocked: bool) -> User | None:
        statement = update(UserModel).where(UserModel.id == str(user_id)).values(blocked=blocked)
        with Session(self._engine) as session:
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                return None
            session.commit()
        return self.get(user_id)
