# ============================================================================
# ORDER HANDLERS
# ============================================================================
# STATUS: Core - Order commands and queries
# PURPOSE: Place orders, read them, list per account, advance status, delete
# CREATED: 19 OCT 2026
# ============================================================================
"""
Order Handlers

CreateOrder prices every line from the product's current catalog entry, so
the order keeps the SKU, name and unit price it was sold at. The shipping
address defaults to the account's address.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from core.contracts import OrderStatus, PagedResult
from core.models import Address, Order, OrderLine
from handlers.dtos import CreatedDto, OrderDto
from handlers.registry import HandlerContext, register_handler


class InvalidOrderError(ValueError):
    """The order references an unknown account or an unavailable product."""


@dataclass(frozen=True)
class OrderLineRequest:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class CreateOrder:
    account_id: str
    lines: List[OrderLineRequest] = field(default_factory=list)
    shipping_address: Optional[Address] = None


@dataclass(frozen=True)
class GetOrder:
    order_id: str


@dataclass(frozen=True)
class GetOrdersForAccount:
    account_id: str
    page_size: int
    continuation_token: Optional[str] = None


@dataclass(frozen=True)
class UpdateOrderStatus:
    order_id: str
    status: OrderStatus
    tracking_number: Optional[str] = None


@dataclass(frozen=True)
class DeleteOrder:
    order_id: str


@register_handler(CreateOrder, description="Place an order for an account")
async def create_order(command: CreateOrder, ctx: HandlerContext) -> CreatedDto:
    account = await ctx.accounts.get_by_id(command.account_id)
    if account is None:
        raise InvalidOrderError(f"Account {command.account_id} does not exist")
    if not command.lines:
        raise InvalidOrderError("An order needs at least one line")

    lines = []
    for requested in command.lines:
        product = await ctx.products.get_by_id(requested.product_id)
        if product is None or not product.is_active:
            raise InvalidOrderError(f"Product {requested.product_id} is not available")
        lines.append(OrderLine(
            product_id=product.id,
            product_sku=product.sku,
            product_name=product.name,
            quantity=requested.quantity,
            unit_price=str(product.base_price),
        ))

    order = Order(
        account_id=account.id,
        lines=lines,
        shipping_address=command.shipping_address or account.address,
    )
    await ctx.orders.add(order)
    return CreatedDto(id=order.id, created_at=order.ordered_utc, total=order.total)


@register_handler(GetOrder, description="Get one order by id")
async def get_order(command: GetOrder, ctx: HandlerContext) -> Optional[OrderDto]:
    entity = await ctx.orders.get_by_id(command.order_id)
    return OrderDto.from_entity(entity) if entity else None


@register_handler(GetOrdersForAccount, description="List an account's orders")
async def get_orders_for_account(command: GetOrdersForAccount, ctx: HandlerContext) -> PagedResult[OrderDto]:
    page = await ctx.orders.query_by_account(
        command.account_id,
        command.page_size,
        command.continuation_token,
    )
    return PagedResult(
        items=[OrderDto.from_entity(entity) for entity in page.items],
        continuation_token=page.continuation_token,
    )


@register_handler(UpdateOrderStatus, description="Advance an order's status")
async def update_order_status(command: UpdateOrderStatus, ctx: HandlerContext) -> bool:
    return await ctx.orders.update_status(
        command.order_id,
        command.status,
        tracking_number=command.tracking_number,
    )


@register_handler(DeleteOrder, description="Delete an order")
async def delete_order(command: DeleteOrder, ctx: HandlerContext) -> bool:
    return await ctx.orders.delete(command.order_id)


__all__ = [
    "InvalidOrderError",
    "OrderLineRequest",
    "CreateOrder",
    "GetOrder",
    "GetOrdersForAccount",
    "UpdateOrderStatus",
    "DeleteOrder",
]
