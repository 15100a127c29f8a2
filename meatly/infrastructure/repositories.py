from typing import Optional, List
from datetime import datetime, timezone
from sqlalchemy import select, insert, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from meatly.domain.models import (
    User, Product, ProductCategory, CartItem, CartItemWithProduct,
    Order, OrderItem, OrderItemWithProduct, OrderWithItems, OrderLineDraft, OrderStatus, Delivery
)
from meatly.domain.money import to_money
from meatly.domain.exceptions import DuplicateEmailError
from meatly.infrastructure.db_schema import (
    users_tbl, products_tbl, cart_items_tbl, orders_tbl, order_items_tbl, deliveries_tbl
)
from meatly.application.interfaces import (
    UserRepository, ProductRepository, CartRepository, OrderRepository, DeliveryRepository
)

PRODUCT_PREFIX = "product__"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _product_columns():
    """Product columns labelled so they don't clash with the joined table"""
    return [column.label(f"{PRODUCT_PREFIX}{column.name}") for column in products_tbl.c]


def _product_from_row(row) -> Product:
    data = {
        key[len(PRODUCT_PREFIX):]: value
        for key, value in row._mapping.items()
        if key.startswith(PRODUCT_PREFIX)
    }
    data["price"] = to_money(data["price"])
    return Product(**data)


def _product_to_domain(row) -> Product:
    data = dict(row._mapping)
    data["price"] = to_money(data["price"])
    return Product(**data)


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self._session.execute(
            select(users_tbl).where(users_tbl.c.id == user_id)
        )
        row = result.fetchone()
        return User(**row._mapping) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(
            select(users_tbl).where(users_tbl.c.email == email)
        )
        row = result.fetchone()
        return User(**row._mapping) if row else None

    async def create(self, values: dict) -> User:
        now = _now()
        try:
            result = await self._session.execute(
                insert(users_tbl).values(**values, created_at=now, updated_at=now)
            )
        except IntegrityError as e:
            # unique email lost a race with another writer
            raise DuplicateEmailError(values["email"]) from e
        return await self.get_by_id(result.inserted_primary_key[0])

    async def update(self, user_id: int, values: dict) -> Optional[User]:
        try:
            await self._session.execute(
                update(users_tbl)
                .where(users_tbl.c.id == user_id)
                .values(**values, updated_at=_now())
            )
        except IntegrityError as e:
            raise DuplicateEmailError(values.get("email")) from e
        return await self.get_by_id(user_id)


class SQLAlchemyProductRepository(ProductRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        result = await self._session.execute(
            select(products_tbl).where(products_tbl.c.id == product_id)
        )
        row = result.fetchone()
        return _product_to_domain(row) if row else None

    async def list(self, category: Optional[ProductCategory] = None) -> List[Product]:
        stmt = select(products_tbl).order_by(products_tbl.c.id.asc())
        if category is not None:
            stmt = stmt.where(products_tbl.c.category == category)
        result = await self._session.execute(stmt)
        return [_product_to_domain(row) for row in result.fetchall()]

    async def create(self, values: dict) -> Product:
        now = _now()
        result = await self._session.execute(
            insert(products_tbl).values(**values, created_at=now, updated_at=now)
        )
        return await self.get_by_id(result.inserted_primary_key[0])

    async def update(self, product_id: int, values: dict) -> Optional[Product]:
        await self._session.execute(
            update(products_tbl)
            .where(products_tbl.c.id == product_id)
            .values(**values, updated_at=_now())
        )
        return await self.get_by_id(product_id)


class SQLAlchemyCartRepository(CartRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_lines(self, user_id: int) -> List[CartItemWithProduct]:
        result = await self._session.execute(
            select(cart_items_tbl, *_product_columns())
            .join(products_tbl, cart_items_tbl.c.product_id == products_tbl.c.id)
            .where(cart_items_tbl.c.user_id == user_id)
            .order_by(cart_items_tbl.c.id.asc())
        )
        return [
            CartItemWithProduct(
                id=row.id,
                user_id=row.user_id,
                product_id=row.product_id,
                quantity=row.quantity,
                created_at=row.created_at,
                updated_at=row.updated_at,
                product=_product_from_row(row)
            )
            for row in result.fetchall()
        ]

    async def get_by_id(self, item_id: int) -> Optional[CartItem]:
        result = await self._session.execute(
            select(cart_items_tbl).where(cart_items_tbl.c.id == item_id)
        )
        row = result.fetchone()
        return CartItem(**row._mapping) if row else None

    async def find_line(self, user_id: int, product_id: int) -> Optional[CartItem]:
        result = await self._session.execute(
            select(cart_items_tbl)
            .where(
                cart_items_tbl.c.user_id == user_id,
                cart_items_tbl.c.product_id == product_id
            )
            .order_by(cart_items_tbl.c.id.asc())
            .limit(1)
        )
        row = result.fetchone()
        return CartItem(**row._mapping) if row else None

    async def add(self, user_id: int, product_id: int, quantity: int) -> CartItem:
        now = _now()
        result = await self._session.execute(
            insert(cart_items_tbl).values(
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
                created_at=now,
                updated_at=now
            )
        )
        return await self.get_by_id(result.inserted_primary_key[0])

    async def update_quantity(self, item_id: int, quantity: int) -> Optional[CartItem]:
        await self._session.execute(
            update(cart_items_tbl)
            .where(cart_items_tbl.c.id == item_id)
            .values(quantity=quantity, updated_at=_now())
        )
        return await self.get_by_id(item_id)

    async def delete(self, item_id: int) -> None:
        await self._session.execute(
            delete(cart_items_tbl).where(cart_items_tbl.c.id == item_id)
        )

    async def clear(self, user_id: int) -> None:
        await self._session.execute(
            delete(cart_items_tbl).where(cart_items_tbl.c.user_id == user_id)
        )


class SQLAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        result = await self._session.execute(
            select(orders_tbl).where(orders_tbl.c.id == order_id)
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def get_with_items(self, order_id: int) -> Optional[OrderWithItems]:
        order = await self.get_by_id(order_id)
        if not order:
            return None
        items = await self._items_for([order_id])
        return OrderWithItems(**order.model_dump(), items=items.get(order_id, []))

    async def list_by_user(self, user_id: int) -> List[OrderWithItems]:
        result = await self._session.execute(
            select(orders_tbl)
            .where(orders_tbl.c.user_id == user_id)
            .order_by(orders_tbl.c.created_at.desc(), orders_tbl.c.id.desc())
        )
        orders = [self._to_domain(row) for row in result.fetchall()]
        items = await self._items_for([order.id for order in orders])
        return [
            OrderWithItems(**order.model_dump(), items=items.get(order.id, []))
            for order in orders
        ]

    async def create(
        self, user_id: int, total_amount, delivery_address: str, delivery_phone: str, notes: Optional[str]
    ) -> Order:
        now = _now()
        result = await self._session.execute(
            insert(orders_tbl).values(
                user_id=user_id,
                total_amount=total_amount,
                status=OrderStatus.PENDING,
                delivery_address=delivery_address,
                delivery_phone=delivery_phone,
                notes=notes,
                created_at=now,
                updated_at=now
            )
        )
        return await self.get_by_id(result.inserted_primary_key[0])

    async def add_items(self, order_id: int, lines: List[OrderLineDraft]) -> List[OrderItem]:
        # Row by row so every line gets its id back
        items = []
        for line in lines:
            result = await self._session.execute(
                insert(order_items_tbl).values(
                    order_id=order_id,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    total_price=line.total_price
                )
            )
            items.append(OrderItem(id=result.inserted_primary_key[0], order_id=order_id, **line.model_dump()))
        return items

    async def update_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        await self._session.execute(
            update(orders_tbl)
            .where(orders_tbl.c.id == order_id)
            .values(status=status, updated_at=_now())
        )
        return await self.get_by_id(order_id)

    async def _items_for(self, order_ids: List[int]) -> dict:
        if not order_ids:
            return {}
        result = await self._session.execute(
            select(order_items_tbl, *_product_columns())
            .join(products_tbl, order_items_tbl.c.product_id == products_tbl.c.id)
            .where(order_items_tbl.c.order_id.in_(order_ids))
            .order_by(order_items_tbl.c.id.asc())
        )
        items: dict = {}
        for row in result.fetchall():
            items.setdefault(row.order_id, []).append(
                OrderItemWithProduct(
                    id=row.id,
                    order_id=row.order_id,
                    product_id=row.product_id,
                    quantity=row.quantity,
                    unit_price=to_money(row.unit_price),
                    total_price=to_money(row.total_price),
                    product=_product_from_row(row)
                )
            )
        return items

    def _to_domain(self, row) -> Order:
        """DB row → Domain"""
        return Order(
            id=row.id,
            user_id=row.user_id,
            total_amount=to_money(row.total_amount),
            status=OrderStatus(row.status),
            delivery_address=row.delivery_address,
            delivery_phone=row.delivery_phone,
            notes=row.notes,
            created_at=row.created_at,
            updated_at=row.updated_at
        )


class SQLAlchemyDeliveryRepository(DeliveryRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, delivery_id: int) -> Optional[Delivery]:
        result = await self._session.execute(
            select(deliveries_tbl).where(deliveries_tbl.c.id == delivery_id)
        )
        row = result.fetchone()
        return Delivery(**row._mapping) if row else None

    async def get_by_order(self, order_id: int) -> Optional[Delivery]:
        # Lowest id wins when an order has several deliveries
        result = await self._session.execute(
            select(deliveries_tbl)
            .where(deliveries_tbl.c.order_id == order_id)
            .order_by(deliveries_tbl.c.id.asc())
            .limit(1)
        )
        row = result.fetchone()
        return Delivery(**row._mapping) if row else None

    async def create(self, values: dict) -> Delivery:
        now = _now()
        result = await self._session.execute(
            insert(deliveries_tbl).values(**values, created_at=now, updated_at=now)
        )
        return await self.get_by_id(result.inserted_primary_key[0])

    async def update(self, delivery_id: int, values: dict) -> Optional[Delivery]:
        await self._session.execute(
            update(deliveries_tbl)
            .where(deliveries_tbl.c.id == delivery_id)
            .values(**values, updated_at=_now())
        )
        return await self.get_by_id(delivery_id)
