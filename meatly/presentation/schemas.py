from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional, List
from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, HttpUrl

from meatly.domain.models import ProductCategory, OrderStatus, DeliveryStatus, DELIVERY_PROGRESS

NonEmptyStr = Annotated[str, Field(min_length=1)]
# Validated as an http(s) URL, stored as its string form
UrlStr = Annotated[HttpUrl, AfterValidator(str)]


# Users

class CreateUserRequest(BaseModel):
    email: EmailStr
    full_name: NonEmptyStr
    phone: Optional[str] = None
    address: Optional[str] = None


class UpdateUserRequest(BaseModel):
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# Products

class CreateProductRequest(BaseModel):
    name: NonEmptyStr
    description: Optional[str] = None
    category: ProductCategory
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    unit: NonEmptyStr
    stock_quantity: int = Field(ge=0)
    image_url: Optional[UrlStr] = None
    is_available: bool = True


class UpdateProductRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[ProductCategory] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    unit: Optional[str] = Field(default=None, min_length=1)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[UrlStr] = None
    is_available: Optional[bool] = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    category: ProductCategory
    price: Decimal
    unit: str
    stock_quantity: int
    image_url: Optional[str] = None
    is_available: bool
    created_at: datetime
    updated_at: datetime


# Cart

class AddToCartRequest(BaseModel):
    user_id: int
    product_id: int
    quantity: int = Field(gt=0)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(gt=0)


class CartItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    product_id: int
    quantity: int
    created_at: datetime
    updated_at: datetime


class CartItemWithProductResponse(CartItemResponse):
    product: ProductResponse


class SuccessResponse(BaseModel):
    success: bool = True


# Orders

class CreateOrderRequest(BaseModel):
    user_id: int
    delivery_address: str
    delivery_phone: str
    notes: Optional[str] = None


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    total_amount: Decimal
    status: OrderStatus
    delivery_address: str
    delivery_phone: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    product: ProductResponse


class OrderWithItemsResponse(OrderResponse):
    items: List[OrderItemResponse] = []


# Deliveries

class CreateDeliveryRequest(BaseModel):
    order_id: int
    estimated_delivery_time: Optional[datetime] = None
    delivery_person_name: Optional[str] = None
    delivery_person_phone: Optional[str] = None


class UpdateDeliveryRequest(BaseModel):
    status: Optional[DeliveryStatus] = None
    estimated_delivery_time: Optional[datetime] = None
    actual_delivery_time: Optional[datetime] = None
    delivery_person_name: Optional[str] = None
    delivery_person_phone: Optional[str] = None
    tracking_notes: Optional[str] = None


class DeliveryResponse(BaseModel):
    id: int
    order_id: int
    status: DeliveryStatus
    progress: int
    estimated_delivery_time: Optional[datetime] = None
    actual_delivery_time: Optional[datetime] = None
    delivery_person_name: Optional[str] = None
    delivery_person_phone: Optional[str] = None
    tracking_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, delivery):
        return cls(**delivery.model_dump(), progress=DELIVERY_PROGRESS[delivery.status])


class ErrorResponse(BaseModel):
    detail: str
