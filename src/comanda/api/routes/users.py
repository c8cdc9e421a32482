from __future__ import annotations

from fastapi import APIRouter

from comanda.application.dto.responses import OrderListResponse, UserResponse
from comanda.application.use_cases.block_user import BlockUser
from comanda.application.use_cases.list_user_orders import ListUserOrders
from comanda.domain.common.ids import UserId
from comanda.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from comanda.infrastructure.db.repositories.user_repo import SqlAlchemyUserDirectory

router = APIRouter()


def _block_user_use_case() -> BlockUser:
    return BlockUser(user_directory=SqlAlchemyUserDirectory())


def _list_user_orders_use_case() -> ListUserOrders:
    return ListUserOrders(
        order_repository=SqlAlchemyOrderRepository(),
        user_directory=SqlAlchemyUserDirectory(),
    )


@router.put("/v1/users/{user_id}/block", response_model=UserResponse)
def block_user(user_id: str) -> UserResponse:
    return _block_user_use_case().execute(user_id=UserId(user_id))


@router.get("/v1/users/{user_id}/orders", response_model=OrderListResponse)
def list_user_orders(user_id: str) -> OrderListResponse:
    return _list_user_orders_use_case().execute(user_id=UserId(user_id))
