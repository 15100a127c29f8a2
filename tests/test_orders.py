"""Tests for reading orders and changing their status."""

from decimal import Decimal

import pytest

from meatly.application.orders import GetOrderUseCase, GetUserOrdersUseCase, UpdateOrderStatusUseCase
from meatly.application.place_order import PlaceOrderDTO, PlaceOrderUseCase
from meatly.domain.exceptions import InvalidStatusTransitionError, OrderNotFoundError
from meatly.domain.models import OrderStatus


async def place(uow, seed, user_id, price="12.99", quantity=1, **details):
    product_id = await seed.product(price=price)
    await seed.cart_line(user_id, product_id, quantity)
    dto = PlaceOrderDTO(
        user_id=user_id,
        delivery_address=details.get("address", "123 Main St"),
        delivery_phone=details.get("phone", "+1-555-0000"),
        notes=details.get("notes"),
    )
    return await PlaceOrderUseCase(uow)(dto)


class TestGetOrder:
    async def test_with_items(self, uow, seed):
        user_id = await seed.user()
        placed = await place(uow, seed, user_id, price="8.25", quantity=4)

        order = await GetOrderUseCase(uow)(placed.id)

        assert order.total_amount == Decimal("33.00")
        assert len(order.items) == 1
        assert order.items[0].unit_price == Decimal("8.25")
        assert order.items[0].product.name == "Fresh Chicken Breast"
        assert order.items[0].product.id == order.items[0].product_id
        assert order.items[0].order_id == placed.id

    async def test_missing(self, uow):
        with pytest.raises(OrderNotFoundError):
            await GetOrderUseCase(uow)(999)


class TestGetUserOrders:
    async def test_no_orders(self, uow, seed):
        user_id = await seed.user()
        assert await GetUserOrdersUseCase(uow)(user_id) == []

    async def test_newest_first_and_scoped_to_user(self, uow, seed):
        jane = await seed.user(email="jane@example.com")
        john = await seed.user(email="john@example.com")
        first = await place(uow, seed, jane, price="1.00")
        second = await place(uow, seed, jane, price="2.00", notes="second")
        await place(uow, seed, john, price="3.00")

        orders = await GetUserOrdersUseCase(uow)(jane)

        assert [o.id for o in orders] == [second.id, first.id]
        assert orders[0].notes == "second"
        assert [o.total_amount for o in orders] == [Decimal("2.00"), Decimal("1.00")]
        assert all(len(o.items) == 1 for o in orders)


class TestUpdateOrderStatus:
    async def test_full_lifecycle(self, uow, seed):
        user_id = await seed.user()
        placed = await place(uow, seed, user_id)
        use_case = UpdateOrderStatusUseCase(uow)

        for status in (
            OrderStatus.CONFIRMED,
            OrderStatus.PREPARING,
            OrderStatus.OUT_FOR_DELIVERY,
            OrderStatus.DELIVERED,
        ):
            order = await use_case(placed.id, status)
            assert order.status == status

        assert order.total_amount == placed.total_amount
        assert order.delivery_address == placed.delivery_address

    async def test_cancel_pending(self, uow, seed):
        user_id = await seed.user()
        placed = await place(uow, seed, user_id)

        order = await UpdateOrderStatusUseCase(uow)(placed.id, OrderStatus.CANCELLED)

        assert order.status == OrderStatus.CANCELLED
        assert order.updated_at >= placed.updated_at

    async def test_illegal_transition_leaves_status(self, uow, seed):
        user_id = await seed.user()
        placed = await place(uow, seed, user_id)

        with pytest.raises(InvalidStatusTransitionError, match="pending to delivered"):
            await UpdateOrderStatusUseCase(uow)(placed.id, OrderStatus.DELIVERED)

        order = await GetOrderUseCase(uow)(placed.id)
        assert order.status == OrderStatus.PENDING

    async def test_missing(self, uow):
        with pytest.raises(OrderNotFoundError):
            await UpdateOrderStatusUseCase(uow)(999, OrderStatus.CONFIRMED)
