# ============================================================================
# ACCOUNT REPOSITORY TESTS
# ============================================================================
# STATUS: Tests - Account repository over the in-memory table service
# PURPOSE: Verify partitioned CRUD and scatter-gather paging of accounts
# CREATED: 19 OCT 2026
# ============================================================================
"""
Account Repository Tests

Run with:
    pytest tests/test_account_repo.py -v
"""

import asyncio
import random
import uuid

import pytest

from core.config import PartitionDefaults
from core.models import Account, Address
from infrastructure.base_repository import EntityConflictError
from infrastructure.partitioning import HashPartitionKeyStrategy
from repositories import AccountRepository, AccountTableEntity


def _address(city="Springfield") -> Address:
    return Address(street1="1 Main St", city=city, postal_code="12345", country="US")


def _account(first="Ada", last="Lovelace", **kwargs) -> Account:
    return Account(first_name=first, last_name=last, address=_address(), **kwargs)


@pytest.fixture
def repo(make_table_client) -> AccountRepository:
    table = make_table_client("Accounts", AccountTableEntity)
    strategy = HashPartitionKeyStrategy.from_defaults(PartitionDefaults(partition_count=100, partition_prefix="ACC"))
    return AccountRepository(table, strategy)


class TestAccountCrud:

    def test_add_places_row_in_hash_partition(self, repo, table_service):
        account = _account(email="ada@example.com")

        entity = asyncio.run(repo.add(account))

        assert entity.partition_key == repo.partition_strategy.get_partition_key(account.id)
        assert entity.row_key == account.id.hex
        stored = table_service.tables["Accounts"].partition(entity.partition_key)
        assert stored[0]["FirstName"] == "Ada"
        assert stored[0]["Address_PostalCode"] == "12345"
        assert stored[0]["PartitionStrategyVersion"] == 1

    def test_get_by_id_round_trip(self, repo):
        account = _account(phone="555-0100")

        async def run():
            await repo.add(account)
            return await repo.get_by_id(account.id)

        loaded = asyncio.run(run())

        assert loaded.to_account() == account
        assert loaded.address == account.address
        assert loaded.etag is not None

    def test_get_by_id_accepts_string_ids(self, repo):
        account = _account()

        async def run():
            await repo.add(account)
            return await repo.get_by_id(str(account.id)), await repo.get_by_id(account.id.hex)

        by_str, by_hex = asyncio.run(run())
        assert by_str.row_key == by_hex.row_key == account.id.hex

    def test_get_unknown_or_malformed_id(self, repo):
        assert asyncio.run(repo.get_by_id(uuid.uuid4())) is None
        assert asyncio.run(repo.get_by_id("not-a-guid")) is None

    def test_duplicate_add_conflicts(self, repo):
        account = _account()

        async def run():
            await repo.add(account)
            await repo.add(account)

        with pytest.raises(EntityConflictError):
            asyncio.run(run())

    def test_update_replaces_fields_in_place(self, repo):
        account = _account()

        async def run():
            original = await repo.add(account)
            updated = await repo.update(
                account.id, "Augusta", "King", "ada@example.org", None,
                _address(city="London"), is_active=False,
            )
            return original, updated, await repo.get_by_id(account.id)

        original, updated, loaded = asyncio.run(run())

        assert updated is True
        assert loaded.first_name == "Augusta"
        assert loaded.last_name == "King"
        assert loaded.address.city == "London"
        assert loaded.is_active is False
        assert loaded.partition_key == original.partition_key
        assert loaded.created_utc == original.created_utc

    def test_update_rejects_blank_names(self, repo):
        account = _account()

        async def run():
            await repo.add(account)
            await repo.update(account.id, " ", "King", None, None, _address())

        with pytest.raises(ValueError):
            asyncio.run(run())

    def test_update_missing_account(self, repo):
        assert asyncio.run(repo.update(uuid.uuid4(), "A", "B", None, None, _address())) is False

    def test_delete(self, repo):
        account = _account()

        async def run():
            await repo.add(account)
            first = await repo.delete(account.id)
            second = await repo.delete(account.id)
            return first, second, await repo.get_by_id(account.id)

        first, second, loaded = asyncio.run(run())
        assert (first, second, loaded) == (True, False, None)


class TestAccountPaging:

    def _seed(self, repo, count):
        rng = random.Random(7)
        accounts = [
            _account(
                first=f"First{rng.randint(0, 9)}",
                last=f"Last{rng.randint(0, 40):02d}",
                id=uuid.UUID(int=rng.getrandbits(128), version=4),
            )
            for _ in range(count)
        ]

        async def run():
            for account in accounts:
                await repo.add(account)

        asyncio.run(run())
        return accounts

    def test_250_accounts_in_pages_of_50(self, repo):
        accounts = self._seed(repo, 250)

        async def run():
            pages, token = [], None
            for _ in range(5):
                page = await repo.query(50, token)
                pages.append(page)
                token = page.continuation_token
            return pages

        pages = asyncio.run(run())

        assert [len(p.items) for p in pages] == [50, 50, 50, 50, 50]
        assert [p.continuation_token for p in pages] == ["50", "100", "150", "200", None]

        expected = sorted(accounts, key=lambda a: (a.last_name, a.first_name, a.id.hex))
        seen = [item.row_key for page in pages for item in page.items]
        assert seen == [a.id.hex for a in expected]

        past_end = asyncio.run(repo.query(50, "250"))
        assert past_end.items == []
        assert past_end.continuation_token is None

    def test_replaying_a_token_returns_the_same_page(self, repo):
        self._seed(repo, 30)

        async def run():
            return await repo.query(10, "10"), await repo.query(10, "10")

        first, second = asyncio.run(run())
        assert [i.row_key for i in first.items] == [i.row_key for i in second.items]
        assert first.continuation_token == second.continuation_token == "20"

    def test_invalid_token_starts_from_the_beginning(self, repo):
        self._seed(repo, 5)

        async def run():
            return await repo.query(3), await repo.query(3, "garbage")

        first, garbage = asyncio.run(run())
        assert [i.row_key for i in garbage.items] == [i.row_key for i in first.items]

    def test_empty_table(self, repo):
        page = asyncio.run(repo.query(50))
        assert page.items == []
        assert page.continuation_token is None
