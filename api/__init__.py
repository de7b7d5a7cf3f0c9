# ============================================================================
# API MODULE
# ============================================================================
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for accounts, the product catalog and orders
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes for the customer/order service.
"""

from .routes import API_PREFIX, router, set_services
from .schemas import (
    AccountCreate,
    AccountUpdate,
    CreatedResponse,
    OrderCreate,
    OrderStatusUpdate,
    PagedResponse,
    ProductCreate,
    ProductUpdate,
)

__all__ = [
    "router",
    "set_services",
    "API_PREFIX",
    "AccountCreate",
    "AccountUpdate",
    "ProductCreate",
    "ProductUpdate",
    "OrderCreate",
    "OrderStatusUpdate",
    "CreatedResponse",
    "PagedResponse",
]
