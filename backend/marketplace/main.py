import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.api.health import router as health_router
from marketplace.api.routes_cart import router as cart_router
from marketplace.api.routes_catalogue import router as catalogue_router
from marketplace.api.routes_order import router as order_router
from marketplace.config import settings
from marketplace.db import init_db

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup; RESET_DB=1 drops and recreates the schema
    init_db()
    yield


app = FastAPI(title="Local Marketplace - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(catalogue_router, prefix="/api/products", tags=["catalogue"])

app.include_router(cart_router, tags=["cart"])

app.include_router(order_router, prefix="/api/orders", tags=["orders"])
