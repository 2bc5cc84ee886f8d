# storefront/main.py
from contextlib import asynccontextmanager

import redis
import uvicorn
from fastapi import FastAPI

from storefront.data.database import Base, engine
from storefront.api.routers import health, auth, catalog, cart, checkout, orders, admin
from storefront.utils.settings import REDIS_URL, STORE_NAME
from storefront.utils.logging import setup_logging, get_logger

# IMPORT WSZYSTKICH MODELI PRZED CREATE_ALL
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # jeden klient redis na cala aplikacje, zamykany przy shutdown
    app.state.redis = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    logger.info("Redis client initialized")
    try:
        yield
    finally:
        app.state.redis.close()
        logger.info("Redis client closed")


def create_app() -> FastAPI:
    setup_logging()

    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    app = FastAPI(
        title=STORE_NAME,
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(catalog.router)
    app.include_router(cart.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)
    app.include_router(admin.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
