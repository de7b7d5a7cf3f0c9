# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# STATUS: Core - Table storage access layer
# PURPOSE: CRUD and paged queries for accounts, products and orders
# CREATED: 19 OCT 2026
# ============================================================================
"""
Repositories Module

Provides table storage access for the account, catalog and order aggregates.
Each repository wraps one TableClient and picks its pagination strategy at
construction.

Usage:
    from repositories import AccountRepository

    accounts = AccountRepository.from_config()
    page = await accounts.query(page_size=50)
    next_page = await accounts.query(page_size=50, continuation_token=page.continuation_token)
"""

from .pagination import (
    NativeTokenPagination,
    PaginationStrategy,
    QueryScope,
    ScatterGatherPagination,
    decode_offset_token,
)
from .account_repo import AccountRepository, AccountTableEntity, account_sort_key
from .product_repo import ProductRepository, ProductTableEntity, product_sort_key
from .order_repo import (
    OrderRepository,
    OrderTableEntity,
    newest_first_sort_key,
    order_partition_key,
)

__all__ = [
    # Pagination
    "PaginationStrategy",
    "NativeTokenPagination",
    "ScatterGatherPagination",
    "QueryScope",
    "decode_offset_token",
    # Accounts
    "AccountRepository",
    "AccountTableEntity",
    "account_sort_key",
    # Catalog
    "ProductRepository",
    "ProductTableEntity",
    "product_sort_key",
    # Orders
    "OrderRepository",
    "OrderTableEntity",
    "newest_first_sort_key",
    "order_partition_key",
]
