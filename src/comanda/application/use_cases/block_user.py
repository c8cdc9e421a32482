from __future__ import annotations

import logging

from comanda.application.dto.responses import UserResponse
from comanda.application.mappers.catalog_mapper import to_user_response
from comanda.application.ports.repositories import UserDirectory
from comanda.domain.common.ids import UserId

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    pass


class BlockUser:
    def __init__(self, user_directory: UserDirectory) -> None:
        self._user_directory = user_directory

    def execute(self, user_id: UserId) -> UserResponse:
        user = self._user_directory.set_blocked(user_id, blocked=True)
        if user is None:
            raise UserNotFoundError(f"user {user_id} not found")
        logger.info("user_blocked", extra={"user_id": str(user_id)})
        return to_user_response(user)
