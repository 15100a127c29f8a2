import logging
from typing import List
from pydantic import BaseModel

from meatly.domain.models import CartItem, CartItemWithProduct
from meatly.domain.exceptions import (
    UserNotFoundError, ProductNotFoundError, ProductUnavailableError, CartItemNotFoundError
)

logger = logging.getLogger(__name__)


class AddToCartDTO(BaseModel):
    user_id: int
    product_id: int
    quantity: int


class AddToCartUseCase:
    """Add a product to the cart, merging into the user's existing line for it."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, dto: AddToCartDTO) -> CartItem:
        async with self._uow() as uow:
            if not await uow.users.get_by_id(dto.user_id):
                raise UserNotFoundError(f"User {dto.user_id} not found")

            product = await uow.products.get_by_id(dto.product_id)
            if not product:
                raise ProductNotFoundError(f"Product {dto.product_id} not found")
            if not product.is_available:
                raise ProductUnavailableError(f"Product {dto.product_id} is not available")

            existing = await uow.cart.find_line(dto.user_id, dto.product_id)
            if existing:
                item = await uow.cart.update_quantity(existing.id, existing.quantity + dto.quantity)
            else:
                item = await uow.cart.add(dto.user_id, dto.product_id, dto.quantity)
            await uow.commit()

        logger.info(f"Cart item {item.id}: user {item.user_id}, product {item.product_id} x{item.quantity}")
        return item


class GetCartUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: int) -> List[CartItemWithProduct]:
        async with self._uow() as uow:
            return await uow.cart.list_lines(user_id)


class UpdateCartItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, item_id: int, quantity: int) -> CartItem:
        async with self._uow() as uow:
            if not await uow.cart.get_by_id(item_id):
                raise CartItemNotFoundError(f"Cart item {item_id} not found")
            item = await uow.cart.update_quantity(item_id, quantity)
            await uow.commit()
        return item


class RemoveFromCartUseCase:
    # Removing a missing line is not an error
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, item_id: int) -> None:
        async with self._uow() as uow:
            await uow.cart.delete(item_id)
            await uow.commit()


class ClearCartUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: int) -> None:
        async with self._uow() as uow:
            await uow.cart.clear(user_id)
            await uow.commit()
        logger.info(f"Cart cleared for user {user_id}")
