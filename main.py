# ============================================================================
# CUSTOMER ORDER SERVICE - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Main application wiring repositories, handlers and routes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Customer Order Service Main Application

FastAPI application that:
1. Provides the HTTP API for accounts, products and orders
2. Opens the shared table service client at startup and closes it at shutdown

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from __version__ import __version__, BUILD_DATE
from api.routes import API_PREFIX, router, set_services
from core.config import TableStorageConfig, get_defaults
from core.logging import ComponentType, configure_logging, get_logger
from handlers import HandlerContext
from infrastructure.tables import close_table_service, init_table_service
from repositories import AccountRepository, OrderRepository, ProductRepository


configure_logging(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = get_logger(__name__, ComponentType.API)


def build_context() -> HandlerContext:
    """Repositories for every aggregate, sharing one storage configuration."""
    defaults = get_defaults()
    storage = defaults.storage

    return HandlerContext(
        accounts=AccountRepository.from_config(
            TableStorageConfig.accounts(storage),
            partitioning=defaults.partitioning,
        ),
        products=ProductRepository.from_config(TableStorageConfig.products(storage)),
        orders=OrderRepository.from_config(TableStorageConfig.orders(storage)),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Initializes the table service on startup, closes it on shutdown.
    """
    logger.info(f"Starting Customer Order Service v{__version__} (Build {BUILD_DATE})")

    await init_table_service(get_defaults().storage)
    set_services(build_context())
    logger.info("Repositories initialized")

    yield

    # Shutdown
    logger.info("Shutting down Customer Order Service...")
    set_services(None)
    await close_table_service()
    logger.info("Customer Order Service stopped")


def _cors_origins() -> list:
    raw = os.environ.get("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app = FastAPI(
    title="Customer Order Service",
    description="Accounts, product catalog and orders on partitioned table storage",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Domain validation failures raised while binding a request."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.include_router(router, prefix=API_PREFIX)


@app.get("/")
async def root():
    """Service identity and where the API lives."""
    storage = get_defaults().storage
    return {
        "service": "Customer Order Service",
        "version": __version__,
        "build_date": BUILD_DATE,
        "api": API_PREFIX,
        "tables": [
            TableStorageConfig.accounts(storage).table_name,
            TableStorageConfig.products(storage).table_name,
            TableStorageConfig.orders(storage).table_name,
        ],
    }


@app.get("/livez", tags=["Health"])
async def livez():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        reload=os.environ.get("RELOAD", "").lower() in ("1", "true"),
    )
