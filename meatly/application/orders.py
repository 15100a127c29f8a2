import logging
from typing import List

from meatly.domain.models import Order, OrderStatus, OrderWithItems
from meatly.domain.exceptions import OrderNotFoundError, InvalidStatusTransitionError

logger = logging.getLogger(__name__)


class GetOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: int) -> OrderWithItems:
        async with self._uow() as uow:
            order = await uow.orders.get_with_items(order_id)
            if not order:
                raise OrderNotFoundError(f"Order {order_id} not found")
            return order


class GetUserOrdersUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: int) -> List[OrderWithItems]:
        async with self._uow() as uow:
            return await uow.orders.list_by_user(user_id)


class UpdateOrderStatusUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: int, status: OrderStatus) -> Order:
        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id)
            if not order:
                raise OrderNotFoundError(f"Order {order_id} not found")

            if not order.can_transition_to(status):
                raise InvalidStatusTransitionError(order.status.value, status.value)

            order = await uow.orders.update_status(order_id, status)
            await uow.commit()

        logger.info(f"Order {order_id} is now {status.value}")
        return order
