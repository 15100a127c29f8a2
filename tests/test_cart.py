"""Tests for cart use cases."""

from decimal import Decimal

import pytest

from meatly.application.cart import (
    AddToCartDTO, AddToCartUseCase, ClearCartUseCase, GetCartUseCase,
    RemoveFromCartUseCase, UpdateCartItemUseCase
)
from meatly.domain.exceptions import (
    CartItemNotFoundError, ProductNotFoundError, ProductUnavailableError, UserNotFoundError
)


class TestAddToCart:
    async def test_new_line(self, uow, seed):
        user_id = await seed.user()
        product_id = await seed.product()

        item = await AddToCartUseCase(uow)(AddToCartDTO(user_id=user_id, product_id=product_id, quantity=2))

        assert item.user_id == user_id
        assert item.product_id == product_id
        assert item.quantity == 2
        assert await seed.cart_lines(user_id) == 1

    async def test_same_product_increases_quantity(self, uow, seed):
        user_id = await seed.user()
        product_id = await seed.product()
        use_case = AddToCartUseCase(uow)

        first = await use_case(AddToCartDTO(user_id=user_id, product_id=product_id, quantity=2))
        second = await use_case(AddToCartDTO(user_id=user_id, product_id=product_id, quantity=3))

        assert second.id == first.id
        assert second.quantity == 5
        assert second.updated_at >= first.updated_at
        assert await seed.cart_lines(user_id) == 1

    async def test_users_have_separate_lines(self, uow, seed):
        jane = await seed.user(email="jane@example.com")
        john = await seed.user(email="john@example.com")
        product_id = await seed.product()
        use_case = AddToCartUseCase(uow)

        await use_case(AddToCartDTO(user_id=jane, product_id=product_id, quantity=1))
        await use_case(AddToCartDTO(user_id=john, product_id=product_id, quantity=4))

        assert await seed.cart_lines(jane) == 1
        assert await seed.cart_lines(john) == 1

    async def test_unknown_user(self, uow, seed):
        product_id = await seed.product()
        with pytest.raises(UserNotFoundError):
            await AddToCartUseCase(uow)(AddToCartDTO(user_id=999, product_id=product_id, quantity=1))

    async def test_unknown_product(self, uow, seed):
        user_id = await seed.user()
        with pytest.raises(ProductNotFoundError):
            await AddToCartUseCase(uow)(AddToCartDTO(user_id=user_id, product_id=999, quantity=1))

    async def test_unavailable_product(self, uow, seed):
        user_id = await seed.user()
        product_id = await seed.product(is_available=False)
        with pytest.raises(ProductUnavailableError):
            await AddToCartUseCase(uow)(AddToCartDTO(user_id=user_id, product_id=product_id, quantity=1))
        assert await seed.cart_lines(user_id) == 0


class TestGetCart:
    async def test_empty(self, uow, seed):
        user_id = await seed.user()
        assert await GetCartUseCase(uow)(user_id) == []

    async def test_lines_with_products(self, uow, seed):
        user_id = await seed.user()
        other = await seed.user(email="other@example.com")
        chicken = await seed.product(name="Chicken", price="12.99")
        salmon = await seed.product(name="Salmon", price="24.99", description=None)
        await seed.cart_line(user_id, chicken, 2)
        await seed.cart_line(user_id, salmon, 1)
        await seed.cart_line(other, salmon, 7)

        lines = await GetCartUseCase(uow)(user_id)

        assert [(line.product.name, line.quantity) for line in lines] == [("Chicken", 2), ("Salmon", 1)]
        assert lines[0].product.price == Decimal("12.99")
        assert lines[1].product.description is None


class TestUpdateCartItem:
    async def test_sets_quantity(self, uow, seed):
        user_id = await seed.user()
        item_id = await seed.cart_line(user_id, await seed.product(), 2)

        item = await UpdateCartItemUseCase(uow)(item_id, 7)

        assert item.quantity == 7
        assert item.user_id == user_id

    async def test_missing(self, uow):
        with pytest.raises(CartItemNotFoundError):
            await UpdateCartItemUseCase(uow)(999, 1)


class TestRemoveAndClear:
    async def test_remove_one_line(self, uow, seed):
        user_id = await seed.user()
        keep = await seed.cart_line(user_id, await seed.product(name="A"), 1)
        drop = await seed.cart_line(user_id, await seed.product(name="B"), 1)

        await RemoveFromCartUseCase(uow)(drop)

        lines = await GetCartUseCase(uow)(user_id)
        assert [line.id for line in lines] == [keep]

    async def test_remove_missing_line_is_not_an_error(self, uow):
        await RemoveFromCartUseCase(uow)(999)

    async def test_clear_only_touches_one_user(self, uow, seed):
        jane = await seed.user(email="jane@example.com")
        john = await seed.user(email="john@example.com")
        product_id = await seed.product()
        await seed.cart_line(jane, product_id, 1)
        await seed.cart_line(jane, product_id, 2)
        await seed.cart_line(john, product_id, 3)

        await ClearCartUseCase(uow)(jane)

        assert await seed.cart_lines(jane) == 0
        assert await seed.cart_lines(john) == 1

    async def test_clear_empty_or_unknown_user(self, uow):
        await ClearCartUseCase(uow)(999)
