from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from comanda.domain.common.ids import UserId


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class User:
    user_id: UserId
    name: str
    email: str
    role: UserRole
    blocked: bool

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

