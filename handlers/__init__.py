# ============================================================================
# HANDLERS MODULE
# ============================================================================
# STATUS: Core - Command handlers
# PURPOSE: Register and dispatch account, catalog and order commands
# CREATED: 19 OCT 2026
# ============================================================================
"""
Handlers Module

Provides a decorator-based registration system for command handlers and
the send() dispatcher used by the HTTP layer.

Usage:
    from handlers import HandlerContext, send, GetAccount

    ctx = HandlerContext(accounts=account_repo, products=product_repo, orders=order_repo)
    account = await send(GetAccount(account_id="3f2a..."), ctx)
"""

from handlers.registry import (
    register_handler,
    get_handler,
    get_handler_or_raise,
    list_handlers,
    send,
    HandlerFunc,
    HandlerContext,
    HandlerError,
    HandlerNotFoundError,
    DuplicateHandlerError,
)
from handlers.dtos import (
    AddressDto,
    CreatedDto,
    AccountDto,
    ProductDto,
    OrderLineDto,
    OrderDto,
)

# Import handler modules to trigger registration
from handlers.accounts import (
    CreateAccount,
    GetAccount,
    GetAccounts,
    UpdateAccount,
    DeleteAccount,
)
from handlers.catalog import (
    DuplicateSkuError,
    CreateProduct,
    GetProduct,
    GetProducts,
    UpdateProduct,
    DeleteProduct,
)
from handlers.orders import (
    InvalidOrderError,
    OrderLineRequest,
    CreateOrder,
    GetOrder,
    GetOrdersForAccount,
    UpdateOrderStatus,
    DeleteOrder,
)

__all__ = [
    # Registry
    "register_handler",
    "get_handler",
    "get_handler_or_raise",
    "list_handlers",
    "send",
    "HandlerFunc",
    "HandlerContext",
    "HandlerError",
    "HandlerNotFoundError",
    "DuplicateHandlerError",
    # DTOs
    "AddressDto",
    "CreatedDto",
    "AccountDto",
    "ProductDto",
    "OrderLineDto",
    "OrderDto",
    # Accounts
    "CreateAccount",
    "GetAccount",
    "GetAccounts",
    "UpdateAccount",
    "DeleteAccount",
    # Catalog
    "DuplicateSkuError",
    "CreateProduct",
    "GetProduct",
    "GetProducts",
    "UpdateProduct",
    "DeleteProduct",
    # Orders
    "InvalidOrderError",
    "OrderLineRequest",
    "CreateOrder",
    "GetOrder",
    "GetOrdersForAccount",
    "UpdateOrderStatus",
    "DeleteOrder",
]
