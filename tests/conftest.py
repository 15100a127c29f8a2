"""Pytest fixtures for meatly tests."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, insert, select, func
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from meatly.domain.models import ProductCategory
from meatly.infrastructure.db_schema import (
    metadata, users_tbl, products_tbl, cart_items_tbl, orders_tbl, order_items_tbl
)
from meatly.infrastructure.unit_of_work import UnitOfWork


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def uow(session_factory):
    return UnitOfWork(session_factory)


class Seeder:
    """Writes rows straight into the tables, bypassing the use cases."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    async def _insert(self, table, **values) -> int:
        async with self._session_factory() as session:
            result = await session.execute(insert(table).values(**values))
            await session.commit()
            return result.inserted_primary_key[0]

    async def user(self, email="jane@example.com", full_name="Jane Doe", **values) -> int:
        now = datetime.now(timezone.utc)
        return await self._insert(
            users_tbl, email=email, full_name=full_name, created_at=now, updated_at=now, **values
        )

    async def product(
        self,
        name="Fresh Chicken Breast",
        price="12.99",
        category=ProductCategory.CHICKEN,
        unit="kg",
        stock_quantity=100,
        is_available=True,
        **values
    ) -> int:
        now = datetime.now(timezone.utc)
        return await self._insert(
            products_tbl,
            name=name,
            price=Decimal(price),
            category=category,
            unit=unit,
            stock_quantity=stock_quantity,
            is_available=is_available,
            created_at=now,
            updated_at=now,
            **values
        )

    async def cart_line(self, user_id: int, product_id: int, quantity: int) -> int:
        now = datetime.now(timezone.utc)
        return await self._insert(
            cart_items_tbl,
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
            created_at=now,
            updated_at=now
        )

    async def count(self, table, **filters) -> int:
        stmt = select(func.count()).select_from(table)
        for column, value in filters.items():
            stmt = stmt.where(table.c[column] == value)
        async with self._session_factory() as session:
            return (await session.execute(stmt)).scalar_one()

    async def orders(self, user_id: int) -> int:
        return await self.count(orders_tbl, user_id=user_id)

    async def order_items(self) -> int:
        return await self.count(order_items_tbl)

    async def cart_lines(self, user_id: int) -> int:
        return await self.count(cart_items_tbl, user_id=user_id)


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app with get_db bound to the test database."""
    from meatly.database import get_db
    from meatly.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()
