# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts and domain models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import OrderStatus, PagedResult
from core.models import (
    Account,
    Address,
    Order,
    OrderLine,
    Product,
    normalize_category,
)

__all__ = [
    # Enums
    "OrderStatus",
    # Contracts
    "PagedResult",
    # Models
    "Account",
    "Address",
    "Order",
    "OrderLine",
    "Product",
    "normalize_category",
]
