# ============================================================================
# API ROUTES
# ============================================================================
# STATUS: Core - FastAPI route definitions
# PURPOSE: HTTP endpoints for accounts, the product catalog and orders
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Routes

Thin HTTP layer: bind the request to a command, send it, map the result.

Status mapping:
- create            201 with {id, location, createdAt}
- get               200, or 404
- update / delete   204, or 404
- duplicate key or SKU, stale etag       409
- bad continuation token / bad input     400
- any other store failure                500
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from core.config import PaginationDefaults, get_defaults
from handlers import (
    AccountDto,
    CreateAccount,
    CreateOrder,
    CreateProduct,
    DeleteAccount,
    DeleteOrder,
    DeleteProduct,
    GetAccount,
    GetAccounts,
    GetOrder,
    GetOrdersForAccount,
    GetProduct,
    GetProducts,
    HandlerContext,
    OrderDto,
    OrderLineRequest,
    ProductDto,
    UpdateAccount,
    UpdateOrderStatus,
    UpdateProduct,
    send,
)
from infrastructure.base_repository import (
    ConcurrencyConflictError,
    EntityConflictError,
    RepositoryError,
)
from .schemas import (
    AccountCreate,
    AccountUpdate,
    CreatedResponse,
    ErrorResponse,
    OrderCreate,
    OrderStatusUpdate,
    PagedResponse,
    ProductCreate,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

router = APIRouter()


def page_size(take: Optional[int] = Query(None, ge=1, le=PaginationDefaults.max_page_size)) -> int:
    """Requested page size, or the configured default when ``take`` is omitted."""
    if take is not None:
        return take
    return min(get_defaults().pagination.default_page_size, PaginationDefaults.max_page_size)


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# Set by the main app at startup

_context: Optional[HandlerContext] = None


def set_services(context: Optional[HandlerContext]):
    """Set the handler context (repositories) for dependency injection."""
    global _context
    _context = context


def get_context() -> HandlerContext:
    if _context is None:
        raise HTTPException(500, "Services not initialized")
    return _context


async def _dispatch(command: Any) -> Any:
    """Send a command and translate handler failures to HTTP errors."""
    ctx = get_context()
    ctx = HandlerContext(
        accounts=ctx.accounts,
        products=ctx.products,
        orders=ctx.orders,
        request_id=uuid.uuid4().hex[:12],
    )
    try:
        return await send(command, ctx)
    except (EntityConflictError, ConcurrencyConflictError) as e:
        raise HTTPException(409, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
    except RepositoryError as e:
        logger.exception(f"{type(command).__name__} failed: {e}")
        raise HTTPException(500, "Storage operation failed")


def _created(kind: str, result) -> CreatedResponse:
    return CreatedResponse(
        id=result.id,
        location=f"{API_PREFIX}/{kind}/{result.id.hex}",
        created_at=result.created_at,
        total=result.total,
    )


_error_responses = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


# ============================================================================
# ACCOUNTS
# ============================================================================

@router.post(
    "/accounts",
    response_model=CreatedResponse,
    status_code=201,
    responses=_error_responses,
    tags=["Accounts"],
)
async def create_account(request: AccountCreate):
    """Create a customer account."""
    result = await _dispatch(CreateAccount(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        phone=request.phone,
        address=request.address.to_address(),
    ))
    return _created("accounts", result)


@router.get("/accounts", response_model=PagedResponse[AccountDto], tags=["Accounts"])
async def list_accounts(
    take: int = Depends(page_size),
    continuation_token: Optional[str] = Query(None, alias="continuationToken"),
):
    """List accounts ordered by last name, first name."""
    page = await _dispatch(GetAccounts(page_size=take, continuation_token=continuation_token))
    return PagedResponse[AccountDto](items=page.items, continuation_token=page.continuation_token)


@router.get("/accounts/{account_id}", response_model=AccountDto, responses=_error_responses, tags=["Accounts"])
async def get_account(account_id: str):
    account = await _dispatch(GetAccount(account_id=account_id))
    if account is None:
        raise HTTPException(404, f"Account not found: {account_id}")
    return account


@router.put("/accounts/{account_id}", status_code=204, responses=_error_responses, tags=["Accounts"])
async def update_account(account_id: str, request: AccountUpdate):
    found = await _dispatch(UpdateAccount(
        account_id=account_id,
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        phone=request.phone,
        address=request.address.to_address(),
        is_active=request.is_active,
    ))
    if not found:
        raise HTTPException(404, f"Account not found: {account_id}")
    return Response(status_code=204)


@router.delete("/accounts/{account_id}", status_code=204, responses=_error_responses, tags=["Accounts"])
async def delete_account(account_id: str):
    if not await _dispatch(DeleteAccount(account_id=account_id)):
        raise HTTPException(404, f"Account not found: {account_id}")
    return Response(status_code=204)


@router.get("/accounts/{account_id}/orders", response_model=PagedResponse[OrderDto], tags=["Orders"])
async def list_account_orders(
    account_id: str,
    take: int = Depends(page_size),
    continuation_token: Optional[str] = Query(None, alias="continuationToken"),
):
    """List one account's orders."""
    page = await _dispatch(GetOrdersForAccount(
        account_id=account_id,
        page_size=take,
        continuation_token=continuation_token,
    ))
    return PagedResponse[OrderDto](items=page.items, continuation_token=page.continuation_token)


# ============================================================================
# PRODUCTS
# ============================================================================

@router.post(
    "/products",
    response_model=CreatedResponse,
    status_code=201,
    responses=_error_responses,
    tags=["Products"],
)
async def create_product(request: ProductCreate):
    """Add a product to the catalog. SKUs must be unique."""
    result = await _dispatch(CreateProduct(
        sku=request.sku,
        name=request.name,
        description=request.description,
        base_price=request.base_price,
        category=request.category,
        is_active=request.is_active,
    ))
    return _created("products", result)


@router.get("/products", response_model=PagedResponse[ProductDto], tags=["Products"])
async def list_products(
    take: int = Depends(page_size),
    continuation_token: Optional[str] = Query(None, alias="continuationToken"),
    category: Optional[str] = Query(None, max_length=100),
    is_active: Optional[bool] = Query(None, alias="isActive"),
):
    """List products ordered by category and name, optionally for one category."""
    page = await _dispatch(GetProducts(
        page_size=take,
        category=category,
        is_active=is_active,
        continuation_token=continuation_token,
    ))
    return PagedResponse[ProductDto](items=page.items, continuation_token=page.continuation_token)


@router.get("/products/{product_id}", response_model=ProductDto, responses=_error_responses, tags=["Products"])
async def get_product(product_id: str):
    product = await _dispatch(GetProduct(product_id=product_id))
    if product is None:
        raise HTTPException(404, f"Product not found: {product_id}")
    return product


@router.put("/products/{product_id}", status_code=204, responses=_error_responses, tags=["Products"])
async def update_product(product_id: str, request: ProductUpdate):
    found = await _dispatch(UpdateProduct(
        product_id=product_id,
        name=request.name,
        description=request.description,
        base_price=request.base_price,
        category=request.category,
        is_active=request.is_active,
    ))
    if not found:
        raise HTTPException(404, f"Product not found: {product_id}")
    return Response(status_code=204)


@router.delete("/products/{product_id}", status_code=204, responses=_error_responses, tags=["Products"])
async def delete_product(product_id: str):
    if not await _dispatch(DeleteProduct(product_id=product_id)):
        raise HTTPException(404, f"Product not found: {product_id}")
    return Response(status_code=204)


# ============================================================================
# ORDERS
# ============================================================================

@router.post(
    "/orders",
    response_model=CreatedResponse,
    status_code=201,
    responses=_error_responses,
    tags=["Orders"],
)
async def create_order(request: OrderCreate):
    """Place an order priced from the current catalog."""
    result = await _dispatch(CreateOrder(
        account_id=request.account_id,
        lines=[OrderLineRequest(product_id=line.product_id, quantity=line.quantity) for line in request.lines],
        shipping_address=request.shipping_address.to_address() if request.shipping_address else None,
    ))
    return _created("orders", result)


@router.get("/orders/{order_id}", response_model=OrderDto, responses=_error_responses, tags=["Orders"])
async def get_order(order_id: str):
    order = await _dispatch(GetOrder(order_id=order_id))
    if order is None:
        raise HTTPException(404, f"Order not found: {order_id}")
    return order


@router.put("/orders/{order_id}/status", status_code=204, responses=_error_responses, tags=["Orders"])
async def update_order_status(order_id: str, request: OrderStatusUpdate):
    """Advance an order. Invalid transitions return 400."""
    found = await _dispatch(UpdateOrderStatus(
        order_id=order_id,
        status=request.status,
        tracking_number=request.tracking_number,
    ))
    if not found:
        raise HTTPException(404, f"Order not found: {order_id}")
    return Response(status_code=204)


@router.delete("/orders/{order_id}", status_code=204, responses=_error_responses, tags=["Orders"])
async def delete_order(order_id: str):
    if not await _dispatch(DeleteOrder(order_id=order_id)):
        raise HTTPException(404, f"Order not found: {order_id}")
    return Response(status_code=204)


__all__ = [
    "router",
    "set_services",
    "get_context",
    "API_PREFIX",
]
