# ============================================================================
# ACCOUNT REPOSITORY
# ============================================================================
# STATUS: Core - Account CRUD over hash-partitioned table rows
# PURPOSE: Table access for the Accounts table
# CREATED: 19 OCT 2026
# ============================================================================
"""
Account Repository

Accounts are spread across a fixed set of hash partitions
("ACC-000" .. "ACC-099" by default). The partition is derived from the
account id, so point lookups never scan; listing scatter-gathers every
partition and sorts by (last name, first name, row key).
"""

import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import Field

from core.config import PartitionDefaults, TableStorageConfig
from core.contracts import PagedResult
from core.logging import log_context
from core.models import Account, Address
from infrastructure.base_repository import BaseRepository, EntityNotFoundError
from infrastructure.partitioning import HashPartitionKeyStrategy, PartitionKeyStrategy
from infrastructure.tables import TableClient, TableEntityModel

from .address_columns import address_columns, address_from_columns
from .pagination import PaginationStrategy, QueryScope, ScatterGatherPagination

AccountId = Union[uuid.UUID, str]


class AccountTableEntity(TableEntityModel):
    """Wire shape of an Accounts row."""

    first_name: str = Field(..., alias="FirstName")
    last_name: str = Field(..., alias="LastName")
    email: Optional[str] = Field(default=None, alias="Email")
    phone_number: Optional[str] = Field(default=None, alias="PhoneNumber")

    address_street1: str = Field(..., alias="Address_Street1")
    address_street2: Optional[str] = Field(default=None, alias="Address_Street2")
    address_city: str = Field(..., alias="Address_City")
    address_state: Optional[str] = Field(default=None, alias="Address_State")
    address_postal_code: str = Field(..., alias="Address_PostalCode")
    address_country: str = Field(..., alias="Address_Country")

    is_active: Optional[bool] = Field(default=True, alias="IsActive")
    created_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="CreatedUtc")
    modified_utc: Optional[datetime] = Field(default=None, alias="ModifiedUtc")
    partition_strategy_version: int = Field(default=1, alias="PartitionStrategyVersion")

    @property
    def id(self) -> uuid.UUID:
        return uuid.UUID(self.row_key)

    @property
    def address(self) -> Address:
        return address_from_columns(self, "address")

    def to_account(self) -> Account:
        return Account(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone=self.phone_number,
            address=self.address,
            is_active=self.is_active,
        )


def account_sort_key(entity: AccountTableEntity):
    return (entity.last_name, entity.first_name, entity.row_key)


def _parse_id(account_id: AccountId) -> Optional[uuid.UUID]:
    if isinstance(account_id, uuid.UUID):
        return account_id
    try:
        return uuid.UUID(str(account_id))
    except ValueError:
        return None


class AccountRepository(BaseRepository):
    """Repository for Account entities."""

    def __init__(
        self,
        table: TableClient[AccountTableEntity],
        partition_strategy: PartitionKeyStrategy,
        pagination: Optional[PaginationStrategy] = None,
    ):
        super().__init__()
        self.table = table
        self.partition_strategy = partition_strategy
        self.pagination = pagination or ScatterGatherPagination(account_sort_key)

    @classmethod
    def from_config(
        cls,
        config: Optional[TableStorageConfig] = None,
        partitioning: Optional[PartitionDefaults] = None,
    ) -> "AccountRepository":
        """Repository wired to the Accounts table and environment partitioning."""
        table = TableClient(config or TableStorageConfig.accounts(), AccountTableEntity)
        strategy = HashPartitionKeyStrategy.from_defaults(partitioning or PartitionDefaults.from_env())
        return cls(table, strategy)

    async def add(self, account: Account) -> AccountTableEntity:
        """
        Insert a new account row.

        Raises:
            EntityConflictError: If an account with this id already exists
        """
        partition_key = self.partition_strategy.get_partition_key(account.id)
        now = datetime.now(timezone.utc)

        entity = AccountTableEntity(
            partition_key=partition_key,
            row_key=account.id.hex,
            first_name=account.first_name,
            last_name=account.last_name,
            email=account.email,
            phone_number=account.phone,
            is_active=account.is_active,
            created_utc=now,
            modified_utc=now,
            partition_strategy_version=getattr(self.partition_strategy, "strategy_version", 1),
            **address_columns(account.address, "address"),
        )

        with log_context(aggregate="account", entity_id=entity.row_key, partition_key=partition_key):
            with self._error_context("account add", entity.row_key):
                await self.table.add(entity)
            self.logger.info(f"Account {entity.row_key} added to partition {partition_key}")
        return entity

    async def get_by_id(self, account_id: AccountId) -> Optional[AccountTableEntity]:
        """Point lookup; malformed or unknown ids return None."""
        parsed = _parse_id(account_id)
        if parsed is None:
            return None

        partition_key = self.partition_strategy.get_partition_key(parsed)
        self.logger.debug(f"Getting account {parsed.hex} from partition {partition_key}")

        with self._error_context("account get", parsed.hex):
            return await self.table.get_by_id(partition_key, parsed.hex)

    async def query(
        self,
        page_size: int,
        continuation_token: Optional[str] = None,
    ) -> PagedResult[AccountTableEntity]:
        """One page of accounts ordered by last name, first name, id."""
        scope = QueryScope(partition_keys=list(self.partition_strategy.get_all_partition_keys()))

        with log_context(aggregate="account", operation="query"):
            with self._error_context("account query"):
                return await self.pagination.fetch_page(self.table, scope, page_size, continuation_token)

    async def update(
        self,
        account_id: AccountId,
        first_name: str,
        last_name: str,
        email: Optional[str],
        phone: Optional[str],
        address: Address,
        is_active: Optional[bool] = None,
    ) -> bool:
        """
        Replace the mutable fields of an account.

        Returns:
            False if the account does not exist
        """
        existing = await self.get_by_id(account_id)
        if existing is None:
            return False

        # Validate through the domain model before touching the row
        account = Account(
            id=existing.id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            address=address,
            is_active=is_active,
        )

        updated = existing.model_copy(update={
            "first_name": account.first_name,
            "last_name": account.last_name,
            "email": account.email,
            "phone_number": account.phone,
            "is_active": account.is_active,
            "modified_utc": datetime.now(timezone.utc),
            **address_columns(account.address, "address"),
        })

        with log_context(aggregate="account", entity_id=existing.row_key, partition_key=existing.partition_key):
            with self._error_context("account update", existing.row_key):
                await self.table.upsert(updated)
            self._log_operation(True, "account update", existing.row_key)
        return True

    async def delete(self, account_id: AccountId) -> bool:
        """
        Delete an account.

        Returns:
            False if the account does not exist

        Raises:
            ConcurrencyConflictError: If the row changed after it was read
        """
        existing = await self.get_by_id(account_id)
        if existing is None:
            return False

        with log_context(aggregate="account", entity_id=existing.row_key, partition_key=existing.partition_key):
            try:
                with self._error_context("account delete", existing.row_key):
                    await self.table.delete(existing)
            except EntityNotFoundError:
                # Removed between the read and the delete
                return False
            self._log_operation(True, "account delete", existing.row_key)
        return True


__all__ = [
    "AccountTableEntity",
    "AccountRepository",
    "account_sort_key",
]
