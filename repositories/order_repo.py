# ============================================================================
# ORDER REPOSITORY
# ============================================================================
# STATUS: Core - Order CRUD over account/month partitions
# PURPOSE: Table access for the Orders table
# CREATED: 19 OCT 2026
# ============================================================================
"""
Order Repository

Orders are partitioned by "{account_id.hex}-{yyyyMM}" of the order date, so
one account's orders for one month share a partition. The partition key is
fixed at creation; status updates replace the row in place.

Order lines are stored as a JSON array in LinesJson. Money columns are
stored as decimal strings.
"""

import json
import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import Field, field_serializer

from core.config import TableStorageConfig
from core.contracts import OrderStatus, PagedResult
from core.logging import log_context
from core.models import Address, Order, OrderLine
from infrastructure.base_repository import BaseRepository, EntityNotFoundError
from infrastructure.tables import TableClient, TableEntityModel, eq, row_key_eq

from .address_columns import address_columns, address_from_columns
from .pagination import NativeTokenPagination, PaginationStrategy, QueryScope

EntityId = Union[uuid.UUID, str]


def order_partition_key(account_id: uuid.UUID, ordered_utc: datetime) -> str:
    return f"{account_id.hex}-{ordered_utc:%Y%m}"


def serialize_lines(lines: List[OrderLine]) -> str:
    return json.dumps([
        {
            "ProductId": line.product_id.hex,
            "ProductSku": line.product_sku,
            "ProductName": line.product_name,
            "Quantity": line.quantity,
            "UnitPrice": str(line.unit_price),
        }
        for line in lines
    ])


def deserialize_lines(lines_json: str) -> List[OrderLine]:
    return [
        OrderLine(
            product_id=uuid.UUID(raw["ProductId"]),
            product_sku=raw["ProductSku"],
            product_name=raw["ProductName"],
            quantity=raw["Quantity"],
            unit_price=Decimal(str(raw["UnitPrice"])),
        )
        for raw in json.loads(lines_json or "[]")
    ]


class OrderTableEntity(TableEntityModel):
    """Wire shape of an Orders row."""

    account_id: str = Field(..., alias="AccountId")
    status: str = Field(..., alias="Status")
    lines_json: str = Field(default="[]", alias="LinesJson")

    shipping_address_street1: str = Field(..., alias="ShippingAddress_Street1")
    shipping_address_street2: Optional[str] = Field(default=None, alias="ShippingAddress_Street2")
    shipping_address_city: str = Field(..., alias="ShippingAddress_City")
    shipping_address_state: Optional[str] = Field(default=None, alias="ShippingAddress_State")
    shipping_address_postal_code: str = Field(..., alias="ShippingAddress_PostalCode")
    shipping_address_country: str = Field(..., alias="ShippingAddress_Country")

    sub_total: Decimal = Field(..., alias="SubTotal")
    tax: Decimal = Field(..., alias="Tax")
    total: Decimal = Field(..., alias="Total")

    ordered_utc: datetime = Field(..., alias="OrderedUtc")
    shipped_utc: Optional[datetime] = Field(default=None, alias="ShippedUtc")
    delivered_utc: Optional[datetime] = Field(default=None, alias="DeliveredUtc")
    tracking_number: Optional[str] = Field(default=None, alias="TrackingNumber")

    @field_serializer("sub_total", "tax", "total")
    def _money(self, value: Decimal) -> str:
        return str(value)

    @property
    def id(self) -> uuid.UUID:
        return uuid.UUID(self.row_key)

    @property
    def lines(self) -> List[OrderLine]:
        return deserialize_lines(self.lines_json)

    @property
    def shipping_address(self) -> Address:
        return address_from_columns(self, "shipping_address")

    def to_order(self) -> Order:
        return Order(
            id=self.id,
            account_id=uuid.UUID(self.account_id),
            lines=self.lines,
            shipping_address=self.shipping_address,
            ordered_utc=self.ordered_utc,
            status=OrderStatus(self.status),
            shipped_utc=self.shipped_utc,
            delivered_utc=self.delivered_utc,
            tracking_number=self.tracking_number,
        )

    @classmethod
    def from_order(cls, order: Order) -> "OrderTableEntity":
        return cls(
            partition_key=order_partition_key(order.account_id, order.ordered_utc),
            row_key=order.id.hex,
            account_id=order.account_id.hex,
            status=order.status.value,
            lines_json=serialize_lines(order.lines),
            sub_total=order.sub_total,
            tax=order.tax,
            total=order.total,
            ordered_utc=order.ordered_utc,
            shipped_utc=order.shipped_utc,
            delivered_utc=order.delivered_utc,
            tracking_number=order.tracking_number,
            **address_columns(order.shipping_address, "shipping_address"),
        )


def newest_first_sort_key(entity: OrderTableEntity):
    """Order for scatter-gather listing: most recent first, id as tie-break."""
    return (-entity.ordered_utc.timestamp(), entity.row_key)


def _hex(entity_id: EntityId) -> Optional[str]:
    if isinstance(entity_id, uuid.UUID):
        return entity_id.hex
    try:
        return uuid.UUID(str(entity_id)).hex
    except ValueError:
        return None


class OrderRepository(BaseRepository):
    """Repository for customer orders."""

    def __init__(
        self,
        table: TableClient[OrderTableEntity],
        pagination: Optional[PaginationStrategy] = None,
    ):
        super().__init__()
        self.table = table
        self.pagination = pagination or NativeTokenPagination()

    @classmethod
    def from_config(cls, config: Optional[TableStorageConfig] = None) -> "OrderRepository":
        return cls(TableClient(config or TableStorageConfig.orders(), OrderTableEntity))

    async def add(self, order: Order) -> OrderTableEntity:
        """
        Insert an order into its account/month partition.

        Raises:
            EntityConflictError: If an order with this id already exists
        """
        entity = OrderTableEntity.from_order(order)

        with log_context(aggregate="order", entity_id=entity.row_key, partition_key=entity.partition_key):
            with self._error_context("order add", entity.row_key):
                await self.table.add(entity)
            self.logger.info(f"Order {entity.row_key} added for account {entity.account_id}")
        return entity

    async def get_by_id(self, order_id: EntityId) -> Optional[OrderTableEntity]:
        """Find an order by id (scans partitions by row key)."""
        row_key = _hex(order_id)
        if row_key is None:
            return None

        with self._error_context("order get", row_key):
            return await self.table.query(row_key_eq(row_key)).first()

    async def query_by_account(
        self,
        account_id: EntityId,
        page_size: int,
        continuation_token: Optional[str] = None,
    ) -> PagedResult[OrderTableEntity]:
        """One page of an account's orders (store order unless another strategy is injected)."""
        account_hex = _hex(account_id)
        if account_hex is None:
            return PagedResult(items=[], continuation_token=None)

        self.logger.debug(f"Querying orders for account {account_hex}, page_size={page_size}")
        scope = QueryScope(where=eq("AccountId", account_hex))

        with log_context(aggregate="order", operation="query_by_account", entity_id=account_hex):
            with self._error_context("order query", account_hex):
                return await self.pagination.fetch_page(self.table, scope, page_size, continuation_token)

    async def update_status(
        self,
        order_id: EntityId,
        status: OrderStatus,
        tracking_number: Optional[str] = None,
    ) -> bool:
        """
        Move an order to a new status and persist it.

        ShippedUtc and DeliveredUtc are stamped the first time the order
        reaches those states; the tracking number is recorded on shipping.

        Returns:
            False if the order does not exist

        Raises:
            ValueError: If the status transition is not allowed
        """
        existing = await self.get_by_id(order_id)
        if existing is None:
            return False

        order = existing.to_order()
        order.update_status(status)
        if status == OrderStatus.SHIPPED and tracking_number and tracking_number.strip():
            order.set_tracking(tracking_number)

        updated = existing.model_copy(update={
            "status": order.status.value,
            "shipped_utc": order.shipped_utc,
            "delivered_utc": order.delivered_utc,
            "tracking_number": order.tracking_number,
        })

        with log_context(aggregate="order", entity_id=existing.row_key, partition_key=existing.partition_key):
            with self._error_context("order status update", existing.row_key):
                await self.table.upsert(updated)
            self.logger.info(f"Updated order {existing.row_key} status to {order.status.value}")
        return True

    async def delete(self, order_id: EntityId) -> bool:
        existing = await self.get_by_id(order_id)
        if existing is None:
            return False

        with log_context(aggregate="order", entity_id=existing.row_key, partition_key=existing.partition_key):
            try:
                with self._error_context("order delete", existing.row_key):
                    await self.table.delete(existing)
            except EntityNotFoundError:
                return False
            self.logger.info(f"Order {existing.row_key} deleted")
        return True


__all__ = [
    "OrderTableEntity",
    "OrderRepository",
    "order_partition_key",
    "newest_first_sort_key",
    "serialize_lines",
    "deserialize_lines",
]
