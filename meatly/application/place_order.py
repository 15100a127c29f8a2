import logging
from typing import Optional
from pydantic import BaseModel, field_validator

from meatly.domain.models import (
    CartItemWithProduct, OrderLineDraft, OrderItemWithProduct, OrderWithItems
)
from meatly.domain.money import to_money, line_total, order_total
from meatly.domain.exceptions import UserNotFoundError, EmptyCartError, ProductUnavailableError


logger = logging.getLogger(__name__)


class PlaceOrderDTO(BaseModel):
    user_id: int
    delivery_address: str
    delivery_phone: str
    notes: Optional[str] = None

    @field_validator("delivery_address", "delivery_phone")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


def price_cart(lines: list[CartItemWithProduct]) -> list[OrderLineDraft]:
    """Snapshot the current catalog price of every cart line. Duplicate lines stay separate."""
    drafts = []
    for line in lines:
        unit_price = to_money(line.product.price)
        drafts.append(
            OrderLineDraft(
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=unit_price,
                total_price=line_total(unit_price, line.quantity)
            )
        )
    return drafts


class PlaceOrderUseCase:
    """Turn a user's cart into a pending order and empty the cart, all in one transaction.

    Nothing is written unless every step succeeds: the order row, its lines and
    the cart deletion are committed together, and any exception rolls all of
    them back before it propagates to the caller.
    """

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_data: PlaceOrderDTO) -> OrderWithItems:
        logger.info(f"Placing order for user {order_data.user_id}")

        async with self._uow() as uow:
            if not await uow.users.get_by_id(order_data.user_id):
                raise UserNotFoundError(f"User {order_data.user_id} not found")

            cart_lines = await uow.cart.list_lines(order_data.user_id)
            if not cart_lines:
                raise EmptyCartError(order_data.user_id)

            for line in cart_lines:
                if not line.product.is_available:
                    raise ProductUnavailableError(f"Product {line.product_id} is not available")

            drafts = price_cart(cart_lines)
            total = order_total(draft.total_price for draft in drafts)

            order = await uow.orders.create(
                user_id=order_data.user_id,
                total_amount=total,
                delivery_address=order_data.delivery_address,
                delivery_phone=order_data.delivery_phone,
                notes=order_data.notes
            )
            items = await uow.orders.add_items(order.id, drafts)
            await uow.cart.clear(order_data.user_id)
            await uow.commit()

        logger.info(f"Order {order.id} created for user {order.user_id}: {len(items)} items, total {total}")

        return OrderWithItems(
            **order.model_dump(),
            items=[
                OrderItemWithProduct(**item.model_dump(), product=line.product)
                for item, line in zip(items, cart_lines)
            ]
        )
