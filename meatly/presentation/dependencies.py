from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from meatly.database import get_db
from meatly.infrastructure.unit_of_work import UnitOfWork
from meatly.application.users import CreateUserUseCase, GetUserUseCase, UpdateUserUseCase
from meatly.application.products import (
    CreateProductUseCase, ListProductsUseCase, GetProductUseCase, UpdateProductUseCase
)
from meatly.application.cart import (
    AddToCartUseCase, GetCartUseCase, UpdateCartItemUseCase, RemoveFromCartUseCase, ClearCartUseCase
)
from meatly.application.place_order import PlaceOrderUseCase
from meatly.application.orders import GetOrderUseCase, GetUserOrdersUseCase, UpdateOrderStatusUseCase
from meatly.application.deliveries import (
    CreateDeliveryUseCase, UpdateDeliveryUseCase, GetDeliveryByOrderUseCase
)


# Use case factories: one unit of work over the request's session
def get_unit_of_work(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork(lambda: db)


def get_create_user_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return CreateUserUseCase(uow)


def get_get_user_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return GetUserUseCase(uow)


def get_update_user_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return UpdateUserUseCase(uow)


def get_create_product_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return CreateProductUseCase(uow)


def get_list_products_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return ListProductsUseCase(uow)


def get_get_product_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return GetProductUseCase(uow)


def get_update_product_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return UpdateProductUseCase(uow)


def get_add_to_cart_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return AddToCartUseCase(uow)


def get_get_cart_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return GetCartUseCase(uow)


def get_update_cart_item_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return UpdateCartItemUseCase(uow)


def get_remove_from_cart_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return RemoveFromCartUseCase(uow)


def get_clear_cart_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return ClearCartUseCase(uow)


def get_place_order_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return PlaceOrderUseCase(uow)


def get_get_order_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return GetOrderUseCase(uow)


def get_get_user_orders_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return GetUserOrdersUseCase(uow)


def get_update_order_status_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return UpdateOrderStatusUseCase(uow)


def get_create_delivery_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return CreateDeliveryUseCase(uow)


def get_update_delivery_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return UpdateDeliveryUseCase(uow)


def get_get_delivery_by_order_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return GetDeliveryByOrderUseCase(uow)
