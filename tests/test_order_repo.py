# ============================================================================
# ORDER REPOSITORY TESTS
# ============================================================================
# STATUS: Tests - Order repository over the in-memory table service
# PURPOSE: Verify account/month partitions, money columns and status updates
# CREATED: 19 OCT 2026
# ============================================================================
"""
Order Repository Tests

Run with:
    pytest tests/test_order_repo.py -v
"""

import asyncio
import json
import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.contracts import OrderStatus
from core.models import Address, Order, OrderLine
from repositories import (
    OrderRepository,
    OrderTableEntity,
    ScatterGatherPagination,
    newest_first_sort_key,
    order_partition_key,
)


def _line(price="10.00", quantity=2) -> OrderLine:
    return OrderLine(
        product_id=uuid.uuid4(),
        product_sku="SKU-1",
        product_name="Widget",
        quantity=quantity,
        unit_price=Decimal(price),
    )


def _order(account_id=None, ordered_utc=None, **kwargs) -> Order:
    return Order(
        account_id=account_id or uuid.uuid4(),
        lines=kwargs.pop("lines", [_line()]),
        shipping_address=Address(street1="1 Dock Rd", city="Oslo", postal_code="0150", country="NO"),
        ordered_utc=ordered_utc or datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc),
        **kwargs,
    )


@pytest.fixture
def repo(make_table_client) -> OrderRepository:
    return OrderRepository(make_table_client("Orders", OrderTableEntity))


class TestOrderStorage:

    def test_partition_key_is_account_and_month(self):
        account_id = uuid.UUID("0f8fad5b-d9cb-469f-a165-70867728950e")
        ordered = datetime(2026, 3, 14, tzinfo=timezone.utc)
        assert order_partition_key(account_id, ordered) == "0f8fad5bd9cb469fa16570867728950e-202603"

    def test_columns_on_the_wire(self, repo, table_service):
        order = _order(lines=[_line("10.00", 2), _line("5.50", 1)])

        entity = asyncio.run(repo.add(order))

        row = table_service.tables["Orders"].partition(entity.partition_key)[0]
        assert row["AccountId"] == order.account_id.hex
        assert row["Status"] == "Submitted"
        assert row["SubTotal"] == "25.50"
        assert row["Tax"] == "2.04"
        assert row["Total"] == "27.54"
        assert row["ShippingAddress_City"] == "Oslo"
        assert [raw["UnitPrice"] for raw in json.loads(row["LinesJson"])] == ["10.00", "5.50"]

    def test_round_trip(self, repo):
        order = _order(lines=[_line("3.33", 3)])

        async def run():
            await repo.add(order)
            return await repo.get_by_id(order.id)

        loaded = asyncio.run(run()).to_order()

        assert loaded.lines == order.lines
        assert loaded.total == order.total == Decimal("10.79")
        assert loaded.shipping_address == order.shipping_address
        assert loaded.status == OrderStatus.SUBMITTED

    def test_get_unknown_or_malformed(self, repo):
        assert asyncio.run(repo.get_by_id(uuid.uuid4())) is None
        assert asyncio.run(repo.get_by_id("zzz")) is None


class TestOrderStatus:

    def test_walk_to_delivered(self, repo):
        order = _order()

        async def run():
            await repo.add(order)
            await repo.update_status(order.id, OrderStatus.PROCESSING)
            await repo.update_status(order.id, OrderStatus.SHIPPED, tracking_number=" 1Z999 ")
            shipped = await repo.get_by_id(order.id)
            await repo.update_status(order.id, OrderStatus.DELIVERED)
            return shipped, await repo.get_by_id(order.id)

        shipped, delivered = asyncio.run(run())

        assert shipped.status == "Shipped"
        assert shipped.tracking_number == "1Z999"
        assert shipped.shipped_utc is not None
        assert shipped.delivered_utc is None
        assert delivered.status == "Delivered"
        assert delivered.shipped_utc == shipped.shipped_utc
        assert delivered.delivered_utc is not None
        assert delivered.partition_key == shipped.partition_key

    def test_invalid_transition_is_not_persisted(self, repo):
        order = _order()

        async def run():
            await repo.add(order)
            with pytest.raises(ValueError):
                await repo.update_status(order.id, OrderStatus.DELIVERED)
            return await repo.get_by_id(order.id)

        assert asyncio.run(run()).status == "Submitted"

    def test_delivered_cannot_be_cancelled(self, repo):
        order = _order(status=OrderStatus.DELIVERED)

        async def run():
            await repo.add(order)
            await repo.update_status(order.id, OrderStatus.CANCELLED)

        with pytest.raises(ValueError):
            asyncio.run(run())

    def test_missing_order(self, repo):
        assert asyncio.run(repo.update_status(uuid.uuid4(), OrderStatus.CANCELLED)) is False

    def test_delete(self, repo):
        order = _order()

        async def run():
            await repo.add(order)
            return await repo.delete(order.id), await repo.delete(order.id)

        assert asyncio.run(run()) == (True, False)


class TestOrdersForAccount:

    def _seed(self, repo, account_id, count):
        orders = [
            _order(account_id, ordered_utc=datetime(2026, 1 + i % 3, 1 + i, tzinfo=timezone.utc))
            for i in range(count)
        ]

        async def run():
            for order in orders:
                await repo.add(order)
            # Another account's order never shows up
            await repo.add(_order())

        asyncio.run(run())
        return orders

    def test_native_pages_cover_every_order_once(self, repo):
        account_id = uuid.uuid4()
        orders = self._seed(repo, account_id, 7)

        async def run():
            seen, sizes, token = [], [], None
            while True:
                page = await repo.query_by_account(account_id, 3, token)
                sizes.append(len(page.items))
                seen.extend(item.row_key for item in page.items)
                token = page.continuation_token
                if token is None:
                    return seen, sizes

        seen, sizes = asyncio.run(run())

        assert sizes == [3, 3, 1]
        assert sorted(seen) == sorted(o.id.hex for o in orders)

    def test_malformed_account_id(self, repo):
        page = asyncio.run(repo.query_by_account("not-an-id", 10))
        assert page.items == []
        assert page.continuation_token is None

    def test_newest_first_strategy(self, make_table_client):
        repo = OrderRepository(
            make_table_client("Orders", OrderTableEntity),
            pagination=ScatterGatherPagination(newest_first_sort_key),
        )
        account_id = uuid.uuid4()
        orders = self._seed(repo, account_id, 5)

        page = asyncio.run(repo.query_by_account(account_id, 10))

        newest_first = sorted(orders, key=lambda o: o.ordered_utc, reverse=True)
        assert [item.row_key for item in page.items] == [o.id.hex for o in newest_first]
