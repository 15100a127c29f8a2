import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meatly.config import settings
from meatly.database import create_tables
from meatly.presentation.api import router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup"""
    try:
        await create_tables()
        logger.info("Tables ready")
    except Exception as e:
        logger.warning(f"Could not create tables, run the migrations: {e}")

    yield

    logger.info("Shutting down")


app = FastAPI(
    title="Meatly",
    description="Grocery delivery: catalog, cart, orders and delivery tracking",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"]
)

app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Meatly API is running"}


@app.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


def run():
    import uvicorn

    uvicorn.run("meatly.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT)


if __name__ == "__main__":
    run()
