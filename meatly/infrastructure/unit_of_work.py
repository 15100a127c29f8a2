from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from meatly.application.interfaces import UnitOfWork as AbstractUnitOfWork
from meatly.infrastructure.repositories import (
    SQLAlchemyUserRepository,
    SQLAlchemyProductRepository,
    SQLAlchemyCartRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyDeliveryRepository
)


class UnitOfWork:
    """One session and one transaction per `async with`; anything not committed is rolled back."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def __call__(self):
        async with self._session_factory() as session:
            try:
                yield _UnitOfWorkImpl(session)
                # commit() not called: discard
                await session.rollback()
            except Exception:
                await session.rollback()
                raise


class _UnitOfWorkImpl(AbstractUnitOfWork):
    def __init__(self, session: AsyncSession):
        self._session = session
        self._users = SQLAlchemyUserRepository(session)
        self._products = SQLAlchemyProductRepository(session)
        self._cart = SQLAlchemyCartRepository(session)
        self._orders = SQLAlchemyOrderRepository(session)
        self._deliveries = SQLAlchemyDeliveryRepository(session)

    @property
    def users(self) -> SQLAlchemyUserRepository:
        return self._users

    @property
    def products(self) -> SQLAlchemyProductRepository:
        return self._products

    @property
    def cart(self) -> SQLAlchemyCartRepository:
        return self._cart

    @property
    def orders(self) -> SQLAlchemyOrderRepository:
        return self._orders

    @property
    def deliveries(self) -> SQLAlchemyDeliveryRepository:
        return self._deliveries

    async def commit(self):
        await self._session.commit()

    async def rollback(self):
        await self._session.rollback()
