from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from meatly.config import settings
from meatly.infrastructure.db_schema import metadata

engine = create_async_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, pool_pre_ping=True)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


async def create_tables(bind=engine):
    async with bind.begin() as conn:
        await conn.run_sync(metadata.create_all)
