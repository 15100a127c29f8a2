from sqlalchemy import (
    Table, Column, String, Text, Integer, Boolean, Numeric, Enum, DateTime, ForeignKey, MetaData
)
from sqlalchemy.sql import func

from meatly.domain.models import ProductCategory, OrderStatus, DeliveryStatus

metadata = MetaData()


def _enum(enum_cls, name: str) -> Enum:
    # Store the lowercase values, not the member names
    return Enum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])


users_tbl = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String, nullable=False, unique=True),
    Column("full_name", String, nullable=False),
    Column("phone", String, nullable=True),
    Column("address", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now(), nullable=False),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), nullable=False)
)


products_tbl = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("description", Text, nullable=True),
    Column("category", _enum(ProductCategory, "product_category"), nullable=False, index=True),
    Column("price", Numeric(10, 2), nullable=False),
    Column("unit", String, nullable=False),
    Column("stock_quantity", Integer, nullable=False),
    Column("image_url", String, nullable=True),
    Column("is_available", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now(), nullable=False),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), nullable=False)
)


# No unique (user_id, product_id): a user may hold several lines for one product
cart_items_tbl = Table(
    "cart_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now(), nullable=False),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), nullable=False)
)


orders_tbl = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("total_amount", Numeric(10, 2), nullable=False),
    Column("status", _enum(OrderStatus, "order_status"), nullable=False, default=OrderStatus.PENDING),
    Column("delivery_address", Text, nullable=False),
    Column("delivery_phone", String, nullable=False),
    Column("notes", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now(), nullable=False),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), nullable=False)
)


order_items_tbl = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(10, 2), nullable=False),
    Column("total_price", Numeric(10, 2), nullable=False)
)


# order_id is not unique: several deliveries may reference one order
deliveries_tbl = Table(
    "deliveries",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("status", _enum(DeliveryStatus, "delivery_status"), nullable=False, default=DeliveryStatus.PENDING),
    Column("estimated_delivery_time", DateTime(timezone=True), nullable=True),
    Column("actual_delivery_time", DateTime(timezone=True), nullable=True),
    Column("delivery_person_name", String, nullable=True),
    Column("delivery_person_phone", String, nullable=True),
    Column("tracking_notes", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now(), nullable=False),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), nullable=False)
)
