# ============================================================================
# PRODUCT REPOSITORY
# ============================================================================
# STATUS: Core - Catalog CRUD over category-partitioned table rows
# PURPOSE: Table access for the Products table
# CREATED: 19 OCT 2026
# ============================================================================
"""
Product Repository

Products are partitioned by normalized category ("electronics", "books").
Listing one category reads a single partition; listing the catalog reads the
whole table. Both are merged and sorted by (category, name, row key).

Lookups by id or SKU do not know the category and scan the table.
Changing a product's category moves its row to another partition.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import Field

from core.config import TableStorageConfig
from core.contracts import PagedResult
from core.logging import log_context
from core.models import Product, normalize_category
from infrastructure.base_repository import BaseRepository, EntityNotFoundError
from infrastructure.tables import TableClient, TableEntityModel, eq, match_all, row_key_eq

from .pagination import PaginationStrategy, QueryScope, ScatterGatherPagination

ProductId = Union[uuid.UUID, str]


class ProductTableEntity(TableEntityModel):
    """Wire shape of a Products row."""

    sku: str = Field(..., alias="Sku")
    name: str = Field(..., alias="Name")
    description: Optional[str] = Field(default=None, alias="Description")
    base_price: float = Field(..., alias="BasePrice")
    category: str = Field(..., alias="Category")
    is_active: bool = Field(default=True, alias="IsActive")
    created_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="CreatedUtc")
    modified_utc: Optional[datetime] = Field(default=None, alias="ModifiedUtc")

    @property
    def id(self) -> uuid.UUID:
        return uuid.UUID(self.row_key)

    def to_product(self) -> Product:
        return Product(
            id=self.id,
            sku=self.sku,
            name=self.name,
            description=self.description,
            base_price=self.base_price,
            category=self.category,
            is_active=self.is_active,
            created_utc=self.created_utc,
        )


def product_sort_key(entity: ProductTableEntity):
    return (entity.category, entity.name, entity.row_key)


def _last_written(entity: ProductTableEntity) -> float:
    return (entity.modified_utc or entity.created_utc).timestamp()


def _row_key(product_id: ProductId) -> Optional[str]:
    if isinstance(product_id, uuid.UUID):
        return product_id.hex
    try:
        return uuid.UUID(str(product_id)).hex
    except ValueError:
        return None


class ProductRepository(BaseRepository):
    """Repository for catalog products."""

    def __init__(
        self,
        table: TableClient[ProductTableEntity],
        pagination: Optional[PaginationStrategy] = None,
    ):
        super().__init__()
        self.table = table
        self.pagination = pagination or ScatterGatherPagination(product_sort_key)

    @classmethod
    def from_config(cls, config: Optional[TableStorageConfig] = None) -> "ProductRepository":
        return cls(TableClient(config or TableStorageConfig.products(), ProductTableEntity))

    async def add(self, product: Product) -> ProductTableEntity:
        """
        Insert a product into its category partition.

        Raises:
            EntityConflictError: If a product with this id already exists
        """
        entity = ProductTableEntity(
            partition_key=product.partition_key,
            row_key=product.id.hex,
            sku=product.sku,
            name=product.name,
            description=product.description,
            base_price=product.base_price,
            category=product.category,
            is_active=product.is_active,
            created_utc=product.created_utc,
            modified_utc=datetime.now(timezone.utc),
        )

        with log_context(aggregate="product", entity_id=entity.row_key, partition_key=entity.partition_key):
            with self._error_context("product add", entity.row_key):
                await self.table.add(entity)
            self.logger.info(
                f"Product {entity.row_key} ({entity.sku}) added to catalog in category {entity.category}"
            )
        return entity

    async def get_by_id(self, product_id: ProductId) -> Optional[ProductTableEntity]:
        """
        Find a product by id across every category partition.

        A move interrupted between its two writes leaves the id in two
        partitions; the most recently modified row is the product.
        """
        row_key = _row_key(product_id)
        if row_key is None:
            return None

        rows = await self._rows_for(row_key)
        return rows[0] if rows else None

    async def _rows_for(self, row_key: str) -> List[ProductTableEntity]:
        """Every row carrying this id, newest first."""
        # TODO: keep an id -> category index row so this becomes a point lookup
        self.logger.debug(f"Searching for product {row_key} across all categories")
        with self._error_context("product get", row_key):
            rows = await self.table.query(row_key_eq(row_key)).to_list()
        return sorted(rows, key=_last_written, reverse=True)

    async def get_by_sku(self, sku: str) -> Optional[ProductTableEntity]:
        if not sku or not sku.strip():
            return None

        self.logger.debug(f"Searching for product with SKU {sku}")
        with self._error_context("product get by sku", sku):
            return await self.table.query(eq("Sku", sku.strip())).first()

    async def query(
        self,
        page_size: int,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        continuation_token: Optional[str] = None,
    ) -> PagedResult[ProductTableEntity]:
        """
        One page of products ordered by category, name, id.

        Args:
            page_size: Rows per page
            category: Restrict to one category (any case or padding)
            is_active: Restrict to active or inactive products
            continuation_token: Token from the previous page
        """
        where = eq("IsActive", is_active) if is_active is not None else match_all()

        if category and category.strip():
            scope = QueryScope(partition_keys=[normalize_category(category)], where=where)
        else:
            scope = QueryScope(where=where)

        with log_context(aggregate="product", operation="query"):
            with self._error_context("product query"):
                return await self.pagination.fetch_page(self.table, scope, page_size, continuation_token)

    async def update(
        self,
        product_id: ProductId,
        name: str,
        description: Optional[str],
        base_price: float,
        category: str,
        is_active: bool,
    ) -> bool:
        """
        Replace the mutable fields of a product.

        A category change moves the row: the row is upserted into the new
        category partition, then removed from the old one. Any other row
        left behind by an interrupted move is removed as well, so repeating
        a failed update converges on a single row.

        Returns:
            False if the product does not exist
        """
        row_key = _row_key(product_id)
        rows = await self._rows_for(row_key) if row_key else []
        if not rows:
            return False
        existing = rows[0]

        product = Product(
            id=existing.id,
            sku=existing.sku,
            name=name,
            description=description,
            base_price=base_price,
            category=category,
            is_active=is_active,
            created_utc=existing.created_utc,
        )

        updated = existing.model_copy(update={
            "partition_key": product.partition_key,
            "name": product.name,
            "description": product.description,
            "base_price": product.base_price,
            "category": product.category,
            "is_active": product.is_active,
            "modified_utc": datetime.now(timezone.utc),
        })
        leftovers = [row for row in rows if row.partition_key != updated.partition_key]

        with log_context(aggregate="product", entity_id=existing.row_key, partition_key=updated.partition_key):
            with self._error_context("product update", existing.row_key):
                await self.table.upsert(updated)
                for row in leftovers:
                    await self._delete_row(row)

            if updated.partition_key != existing.partition_key:
                self.logger.info(
                    f"Moved product {existing.row_key} from {existing.partition_key} to {updated.partition_key}"
                )
            else:
                self.logger.info(f"Updated product {existing.row_key} in category {updated.category}")
        return True

    async def delete(self, product_id: ProductId) -> bool:
        """
        Delete a product from every partition holding it.

        Returns:
            False if the product does not exist
        """
        row_key = _row_key(product_id)
        rows = await self._rows_for(row_key) if row_key else []

        deleted = False
        with log_context(aggregate="product", entity_id=row_key):
            with self._error_context("product delete", row_key):
                for row in rows:
                    deleted = await self._delete_row(row) or deleted
            if deleted:
                self.logger.info(f"Deleted product {row_key} from category {rows[0].category}")
        return deleted

    async def _delete_row(self, row: ProductTableEntity) -> bool:
        try:
            await self.table.delete(row)
        except EntityNotFoundError:
            return False
        return True


__all__ = [
    "ProductTableEntity",
    "ProductRepository",
    "product_sort_key",
]
