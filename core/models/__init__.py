# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for all domain models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Domain models for accounts, the product catalog and orders. These never carry
storage concerns (partition keys, flattened columns, etags); the repositories
map them to and from table entities.
"""

from core.models.account import Account, Address
from core.models.product import Product, normalize_category
from core.models.order import Order, OrderLine, TAX_RATE

__all__ = [
    # Accounts
    "Account",
    "Address",
    # Catalog
    "Product",
    "normalize_category",
    # Orders
    "Order",
    "OrderLine",
    "TAX_RATE",
]
