import logging
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from meatly.presentation.schemas import (
    CreateUserRequest, UpdateUserRequest, UserResponse,
    CreateProductRequest, UpdateProductRequest, ProductResponse,
    AddToCartRequest, UpdateCartItemRequest, CartItemResponse, CartItemWithProductResponse,
    SuccessResponse,
    CreateOrderRequest, UpdateOrderStatusRequest, OrderResponse, OrderWithItemsResponse,
    CreateDeliveryRequest, UpdateDeliveryRequest, DeliveryResponse,
    ErrorResponse
)
from meatly.presentation import dependencies as deps
from meatly.application.users import CreateUserDTO, UpdateUserDTO
from meatly.application.products import CreateProductDTO, UpdateProductDTO
from meatly.application.cart import AddToCartDTO
from meatly.application.place_order import PlaceOrderDTO
from meatly.application.deliveries import CreateDeliveryDTO, UpdateDeliveryDTO
from meatly.domain.models import ProductCategory
from meatly.domain.exceptions import (
    UserNotFoundError, DuplicateEmailError, ProductNotFoundError, ProductUnavailableError,
    CartItemNotFoundError, EmptyCartError, OrderNotFoundError, DeliveryNotFoundError,
    InvalidStatusTransitionError
)

logger = logging.getLogger(__name__)

router = APIRouter()

ORDER_FAILED = "Order could not be placed, please try again"
MISSING_DELIVERY_DETAILS = "Delivery address and phone are required"


# Users

@router.post(
    "/users",
    response_model=UserResponse,
    responses={409: {"model": ErrorResponse}},
    status_code=status.HTTP_201_CREATED
)
async def create_user(
    request: CreateUserRequest,
    use_case=Depends(deps.get_create_user_use_case)
):
    try:
        return await use_case(CreateUserDTO(**request.model_dump()))
    except DuplicateEmailError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/users/{user_id}", response_model=UserResponse, responses={404: {"model": ErrorResponse}})
async def get_user(user_id: int, use_case=Depends(deps.get_get_user_use_case)):
    try:
        return await use_case(user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}
)
async def update_user(
    user_id: int,
    request: UpdateUserRequest,
    use_case=Depends(deps.get_update_user_use_case)
):
    try:
        return await use_case(user_id, UpdateUserDTO(**request.model_dump(exclude_unset=True)))
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateEmailError as e:
        raise HTTPException(status_code=409, detail=str(e))


# Products

@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: CreateProductRequest,
    use_case=Depends(deps.get_create_product_use_case)
):
    return await use_case(CreateProductDTO(**request.model_dump()))


@router.get("/products", response_model=List[ProductResponse])
async def list_products(
    category: Optional[ProductCategory] = None,
    use_case=Depends(deps.get_list_products_use_case)
):
    """Catalog, optionally filtered by category"""
    return await use_case(category=category)


@router.get("/products/{product_id}", response_model=ProductResponse, responses={404: {"model": ErrorResponse}})
async def get_product(product_id: int, use_case=Depends(deps.get_get_product_use_case)):
    try:
        return await use_case(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/products/{product_id}", response_model=ProductResponse, responses={404: {"model": ErrorResponse}})
async def update_product(
    product_id: int,
    request: UpdateProductRequest,
    use_case=Depends(deps.get_update_product_use_case)
):
    try:
        return await use_case(product_id, UpdateProductDTO(**request.model_dump(exclude_unset=True)))
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# Cart

@router.post(
    "/cart",
    response_model=CartItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    status_code=status.HTTP_201_CREATED
)
async def add_to_cart(
    request: AddToCartRequest,
    use_case=Depends(deps.get_add_to_cart_use_case)
):
    try:
        return await use_case(AddToCartDTO(**request.model_dump()))
    except (UserNotFoundError, ProductNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProductUnavailableError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/users/{user_id}/cart", response_model=List[CartItemWithProductResponse])
async def get_cart(user_id: int, use_case=Depends(deps.get_get_cart_use_case)):
    return await use_case(user_id)


@router.patch("/cart/{item_id}", response_model=CartItemResponse, responses={404: {"model": ErrorResponse}})
async def update_cart_item(
    item_id: int,
    request: UpdateCartItemRequest,
    use_case=Depends(deps.get_update_cart_item_use_case)
):
    try:
        return await use_case(item_id, request.quantity)
    except CartItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/cart/{item_id}", response_model=SuccessResponse)
async def remove_from_cart(item_id: int, use_case=Depends(deps.get_remove_from_cart_use_case)):
    await use_case(item_id)
    return SuccessResponse()


@router.delete("/users/{user_id}/cart", response_model=SuccessResponse)
async def clear_cart(user_id: int, use_case=Depends(deps.get_clear_cart_use_case)):
    await use_case(user_id)
    return SuccessResponse()


# Orders

@router.post(
    "/orders",
    response_model=OrderWithItemsResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        503: {"model": ErrorResponse}
    },
    status_code=status.HTTP_201_CREATED
)
async def create_order(
    request: CreateOrderRequest,
    use_case=Depends(deps.get_place_order_use_case)
):
    """Place an order from the user's cart"""
    try:
        dto = PlaceOrderDTO(**request.model_dump())
    except ValidationError:
        raise HTTPException(status_code=422, detail=MISSING_DELIVERY_DETAILS)

    try:
        return await use_case(dto)
    except (EmptyCartError, ProductUnavailableError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception(f"Placing order for user {dto.user_id} failed")
        raise HTTPException(status_code=503, detail=ORDER_FAILED)


@router.get("/users/{user_id}/orders", response_model=List[OrderWithItemsResponse])
async def get_user_orders(user_id: int, use_case=Depends(deps.get_get_user_orders_use_case)):
    """Orders of a user, newest first"""
    return await use_case(user_id)


@router.get("/orders/{order_id}", response_model=OrderWithItemsResponse, responses={404: {"model": ErrorResponse}})
async def get_order(order_id: int, use_case=Depends(deps.get_get_order_use_case)):
    try:
        return await use_case(order_id)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch(
    "/orders/{order_id}/status",
    response_model=OrderResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
async def update_order_status(
    order_id: int,
    request: UpdateOrderStatusRequest,
    use_case=Depends(deps.get_update_order_status_use_case)
):
    try:
        return await use_case(order_id, request.status)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))


# Deliveries

@router.post(
    "/deliveries",
    response_model=DeliveryResponse,
    responses={404: {"model": ErrorResponse}},
    status_code=status.HTTP_201_CREATED
)
async def create_delivery(
    request: CreateDeliveryRequest,
    use_case=Depends(deps.get_create_delivery_use_case)
):
    try:
        delivery = await use_case(CreateDeliveryDTO(**request.model_dump()))
        return DeliveryResponse.from_domain(delivery)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch(
    "/deliveries/{delivery_id}",
    response_model=DeliveryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
async def update_delivery(
    delivery_id: int,
    request: UpdateDeliveryRequest,
    use_case=Depends(deps.get_update_delivery_use_case)
):
    try:
        delivery = await use_case(delivery_id, UpdateDeliveryDTO(**request.model_dump(exclude_unset=True)))
        return DeliveryResponse.from_domain(delivery)
    except DeliveryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get(
    "/orders/{order_id}/delivery",
    response_model=DeliveryResponse,
    responses={404: {"model": ErrorResponse}}
)
async def get_delivery_by_order(order_id: int, use_case=Depends(deps.get_get_delivery_by_order_use_case)):
    """Delivery tracking: status plus progress percentage"""
    try:
        delivery = await use_case(order_id)
        return DeliveryResponse.from_domain(delivery)
    except DeliveryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
