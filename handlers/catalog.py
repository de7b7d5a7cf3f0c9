# ============================================================================
# CATALOG HANDLERS
# ============================================================================
# STATUS: Core - Product commands and queries
# PURPOSE: Create, read, list, update and delete catalog products
# CREATED: 19 OCT 2026
# ============================================================================
"""
Catalog Handlers

SKUs are unique across the catalog. CreateProduct looks the SKU up before
inserting and raises DuplicateSkuError when it is taken. The check and the
insert are not atomic; two concurrent creates with one SKU can both succeed.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.contracts import PagedResult
from core.models import Product
from handlers.dtos import CreatedDto, ProductDto
from handlers.registry import HandlerContext, register_handler
from infrastructure.base_repository import EntityConflictError


class DuplicateSkuError(EntityConflictError):
    """A product with the requested SKU already exists."""

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"A product with SKU '{sku}' already exists.", operation="product create")


@dataclass(frozen=True)
class CreateProduct:
    sku: str
    name: str
    description: Optional[str]
    base_price: float
    category: str
    is_active: bool = True


@dataclass(frozen=True)
class GetProduct:
    product_id: str


@dataclass(frozen=True)
class GetProducts:
    page_size: int
    category: Optional[str] = None
    is_active: Optional[bool] = None
    continuation_token: Optional[str] = None


@dataclass(frozen=True)
class UpdateProduct:
    product_id: str
    name: str
    description: Optional[str]
    base_price: float
    category: str
    is_active: bool


@dataclass(frozen=True)
class DeleteProduct:
    product_id: str


@register_handler(CreateProduct, description="Add a product to the catalog")
async def create_product(command: CreateProduct, ctx: HandlerContext) -> CreatedDto:
    if await ctx.products.get_by_sku(command.sku) is not None:
        raise DuplicateSkuError(command.sku)

    product = Product(
        sku=command.sku,
        name=command.name,
        description=command.description,
        base_price=command.base_price,
        category=command.category,
        is_active=command.is_active,
        created_utc=datetime.now(timezone.utc),
    )
    await ctx.products.add(product)
    return CreatedDto(id=product.id, created_at=product.created_utc)


@register_handler(GetProduct, description="Get one product by id")
async def get_product(command: GetProduct, ctx: HandlerContext) -> Optional[ProductDto]:
    entity = await ctx.products.get_by_id(command.product_id)
    return ProductDto.from_entity(entity) if entity else None


@register_handler(GetProducts, description="List products by category and name")
async def get_products(command: GetProducts, ctx: HandlerContext) -> PagedResult[ProductDto]:
    page = await ctx.products.query(
        command.page_size,
        category=command.category,
        is_active=command.is_active,
        continuation_token=command.continuation_token,
    )
    return PagedResult(
        items=[ProductDto.from_entity(entity) for entity in page.items],
        continuation_token=page.continuation_token,
    )


@register_handler(UpdateProduct, description="Replace a product's details")
async def update_product(command: UpdateProduct, ctx: HandlerContext) -> bool:
    return await ctx.products.update(
        command.product_id,
        name=command.name,
        description=command.description,
        base_price=command.base_price,
        category=command.category,
        is_active=command.is_active,
    )


@register_handler(DeleteProduct, description="Remove a product from the catalog")
async def delete_product(command: DeleteProduct, ctx: HandlerContext) -> bool:
    return await ctx.products.delete(command.product_id)


__all__ = [
    "DuplicateSkuError",
    "CreateProduct",
    "GetProduct",
    "GetProducts",
    "UpdateProduct",
    "DeleteProduct",
]
