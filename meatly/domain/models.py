from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class ProductCategory(str, Enum):
    CHICKEN = "chicken"
    FISH = "fish"
    MEAT = "meat"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


# Every status has an entry; terminal states map to an empty set.
ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.OUT_FOR_DELIVERY}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

DELIVERY_SEQUENCE: tuple[DeliveryStatus, ...] = (
    DeliveryStatus.PENDING,
    DeliveryStatus.ASSIGNED,
    DeliveryStatus.PICKED_UP,
    DeliveryStatus.IN_TRANSIT,
    DeliveryStatus.DELIVERED,
)

DELIVERY_PROGRESS: dict[DeliveryStatus, int] = {
    DeliveryStatus.PENDING: 20,
    DeliveryStatus.ASSIGNED: 40,
    DeliveryStatus.PICKED_UP: 60,
    DeliveryStatus.IN_TRANSIT: 80,
    DeliveryStatus.DELIVERED: 100,
}


class User(BaseModel):
    """Domain Entity — customer account"""
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class Product(BaseModel):
    """Domain Entity — catalog product"""
    id: int
    name: str
    description: Optional[str] = None
    category: ProductCategory
    price: Decimal
    unit: str
    stock_quantity: int
    image_url: Optional[str] = None
    is_available: bool = True
    created_at: datetime
    updated_at: datetime


class CartItem(BaseModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    created_at: datetime
    updated_at: datetime


class CartItemWithProduct(CartItem):
    """Cart line joined with the product as it is in the catalog right now"""
    product: Product


class OrderLineDraft(BaseModel):
    """Value Object — order line computed from a cart line, not yet persisted"""
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class OrderItem(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class OrderItemWithProduct(OrderItem):
    product: Product


class Order(BaseModel):
    """Domain Entity — order"""
    id: int
    user_id: int
    total_amount: Decimal
    status: OrderStatus
    delivery_address: str
    delivery_phone: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def can_transition_to(self, status: OrderStatus) -> bool:
        """Business rule: forward along the fulfilment chain, cancel only before preparing"""
        return status in ORDER_TRANSITIONS[self.status]


class OrderWithItems(Order):
    items: list[OrderItemWithProduct] = []


class Delivery(BaseModel):
    """Domain Entity — delivery of an order"""
    id: int
    order_id: int
    status: DeliveryStatus
    estimated_delivery_time: Optional[datetime] = None
    actual_delivery_time: Optional[datetime] = None
    delivery_person_name: Optional[str] = None
    delivery_person_phone: Optional[str] = None
    tracking_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def progress(self) -> int:
        return DELIVERY_PROGRESS[self.status]

    def can_move_to(self, status: DeliveryStatus) -> bool:
        """Business rule: status never goes backwards"""
        return DELIVERY_SEQUENCE.index(status) >= DELIVERY_SEQUENCE.index(self.status)
