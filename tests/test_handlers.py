# ============================================================================
# HANDLER TESTS
# ============================================================================
# STATUS: Tests - Command dispatch and handler behaviour
# PURPOSE: Verify registry dispatch, SKU uniqueness and order pricing
# CREATED: 19 OCT 2026
# ============================================================================
"""
Handler Tests

Repositories are AsyncMocks; handlers are reached through send().

Run with:
    pytest tests/test_handlers.py -v
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from core.contracts import OrderStatus, PagedResult
from core.models import Address
from handlers import (
    AccountDto,
    CreateAccount,
    CreateOrder,
    CreateProduct,
    DuplicateHandlerError,
    DuplicateSkuError,
    GetAccount,
    GetProducts,
    HandlerContext,
    HandlerNotFoundError,
    InvalidOrderError,
    OrderLineRequest,
    UpdateOrderStatus,
    list_handlers,
    register_handler,
    send,
)
from repositories import AccountTableEntity, ProductTableEntity


# ============================================================================
# FIXTURES
# ============================================================================

ADDRESS = Address(street1="1 Main St", city="Springfield", postal_code="12345", country="US")


def _account_entity(account_id=None) -> AccountTableEntity:
    account_id = account_id or uuid.uuid4()
    return AccountTableEntity(
        partition_key="ACC-001",
        row_key=account_id.hex,
        first_name="Ada",
        last_name="Lovelace",
        address_street1=ADDRESS.street1,
        address_city=ADDRESS.city,
        address_postal_code=ADDRESS.postal_code,
        address_country=ADDRESS.country,
        created_utc=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def _product_entity(price=9.99, is_active=True, sku="SKU-1") -> ProductTableEntity:
    return ProductTableEntity(
        partition_key="electronics",
        row_key=uuid.uuid4().hex,
        sku=sku,
        name="Radio",
        base_price=price,
        category="Electronics",
        is_active=is_active,
    )


@pytest.fixture
def ctx() -> HandlerContext:
    return HandlerContext(
        accounts=AsyncMock(),
        products=AsyncMock(),
        orders=AsyncMock(),
        request_id="test-req",
    )


# ============================================================================
# REGISTRY
# ============================================================================

class TestRegistry:

    def test_every_command_has_a_handler(self):
        commands = {entry["command"] for entry in list_handlers()}
        assert {"CreateAccount", "GetAccounts", "CreateProduct", "GetProducts",
                "CreateOrder", "GetOrdersForAccount", "UpdateOrderStatus"} <= commands

    def test_unregistered_command(self, ctx):
        @dataclass
        class Unknown:
            value: int = 0

        with pytest.raises(HandlerNotFoundError):
            asyncio.run(send(Unknown(), ctx))

    def test_duplicate_registration_fails_fast(self):
        @dataclass
        class Ping:
            pass

        @register_handler(Ping)
        async def first(command, ctx):
            return "pong"

        with pytest.raises(DuplicateHandlerError):
            @register_handler(Ping)
            async def second(command, ctx):
                return "pong again"

        assert asyncio.run(send(Ping(), HandlerContext())) == "pong"


# ============================================================================
# ACCOUNTS
# ============================================================================

class TestAccountHandlers:

    def test_create_account(self, ctx):
        ctx.accounts.add.side_effect = lambda account: _account_entity(account.id)

        result = asyncio.run(send(CreateAccount("Ada", "Lovelace", None, None, ADDRESS), ctx))

        added = ctx.accounts.add.await_args.args[0]
        assert result.id == added.id
        assert added.first_name == "Ada"

    def test_create_account_rejects_blank_name(self, ctx):
        with pytest.raises(ValueError):
            asyncio.run(send(CreateAccount(" ", "Lovelace", None, None, ADDRESS), ctx))
        ctx.accounts.add.assert_not_awaited()

    def test_get_account_maps_to_dto(self, ctx):
        entity = _account_entity()
        ctx.accounts.get_by_id.return_value = entity

        dto = asyncio.run(send(GetAccount(entity.row_key), ctx))

        assert isinstance(dto, AccountDto)
        assert dto.id == entity.id
        assert dto.address.postal_code == "12345"

    def test_get_missing_account(self, ctx):
        ctx.accounts.get_by_id.return_value = None
        assert asyncio.run(send(GetAccount("x"), ctx)) is None


# ============================================================================
# CATALOG
# ============================================================================

class TestCatalogHandlers:

    def test_duplicate_sku(self, ctx):
        ctx.products.get_by_sku.return_value = _product_entity(sku="SKU-1")

        with pytest.raises(DuplicateSkuError) as exc_info:
            asyncio.run(send(CreateProduct("SKU-1", "Radio", None, 9.99, "Electronics"), ctx))

        assert exc_info.value.sku == "SKU-1"
        ctx.products.add.assert_not_awaited()

    def test_create_product(self, ctx):
        ctx.products.get_by_sku.return_value = None

        result = asyncio.run(send(CreateProduct("SKU-2", "Lamp", "Desk lamp", 20.0, "Home"), ctx))

        added = ctx.products.add.await_args.args[0]
        assert added.id == result.id
        assert added.partition_key == "home"

    def test_list_products_passes_filters(self, ctx):
        entity = _product_entity()
        ctx.products.query.return_value = PagedResult(items=[entity], continuation_token="1")

        page = asyncio.run(send(GetProducts(1, category="Electronics", is_active=True), ctx))

        ctx.products.query.assert_awaited_once_with(
            1, category="Electronics", is_active=True, continuation_token=None,
        )
        assert [p.sku for p in page.items] == ["SKU-1"]
        assert page.continuation_token == "1"


# ============================================================================
# ORDERS
# ============================================================================

class TestOrderHandlers:

    def test_create_order_prices_from_catalog(self, ctx):
        account = _account_entity()
        radio = _product_entity(price=10.0)
        ctx.accounts.get_by_id.return_value = account
        ctx.products.get_by_id.return_value = radio

        command = CreateOrder(account.row_key, [OrderLineRequest(radio.row_key, 3)])
        result = asyncio.run(send(command, ctx))

        order = ctx.orders.add.await_args.args[0]
        assert order.account_id == account.id
        assert order.lines[0].product_sku == "SKU-1"
        assert order.lines[0].unit_price == Decimal("10.0")
        assert order.shipping_address == account.address
        assert order.status == OrderStatus.SUBMITTED
        assert result.total == Decimal("32.40")

    def test_unknown_account(self, ctx):
        ctx.accounts.get_by_id.return_value = None

        with pytest.raises(InvalidOrderError):
            asyncio.run(send(CreateOrder("missing", [OrderLineRequest("p", 1)]), ctx))

    def test_inactive_product(self, ctx):
        ctx.accounts.get_by_id.return_value = _account_entity()
        ctx.products.get_by_id.return_value = _product_entity(is_active=False)

        with pytest.raises(InvalidOrderError):
            asyncio.run(send(CreateOrder("a", [OrderLineRequest("p", 1)]), ctx))
        ctx.orders.add.assert_not_awaited()

    def test_empty_order(self, ctx):
        ctx.accounts.get_by_id.return_value = _account_entity()

        with pytest.raises(InvalidOrderError):
            asyncio.run(send(CreateOrder("a", []), ctx))

    def test_status_update_forwards_tracking(self, ctx):
        ctx.orders.update_status.return_value = True

        assert asyncio.run(send(UpdateOrderStatus("o", OrderStatus.SHIPPED, "1Z"), ctx)) is True
        ctx.orders.update_status.assert_awaited_once_with("o", OrderStatus.SHIPPED, tracking_number="1Z")
