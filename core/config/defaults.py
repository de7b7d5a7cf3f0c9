# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for storage, partitioning and pagination
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the table storage layer.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class LocationMode(str, Enum):
    """Which storage endpoint(s) requests go to."""
    PRIMARY_ONLY = "PrimaryOnly"
    PRIMARY_THEN_SECONDARY = "PrimaryThenSecondary"
    SECONDARY_ONLY = "SecondaryOnly"

    @property
    def sdk_location(self) -> str:
        """Location value understood by the Azure SDK."""
        if self == LocationMode.SECONDARY_ONLY:
            return "secondary"
        return "primary"


@dataclass(frozen=True)
class StorageDefaults:
    """
    Defaults for the storage account connection.

    Either connection_string (local emulator, keys) or account_url (managed
    identity) must be set before the table service is initialized.
    """
    connection_string: Optional[str] = None
    account_url: Optional[str] = None
    location_mode: LocationMode = LocationMode.PRIMARY_ONLY

    # Transport-wide fixed-delay retry
    retry_delay_ms: int = 500
    max_retries: int = 3

    # Per-request timeout (seconds)
    maximum_execution_seconds: int = 30

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000.0

    @property
    def endpoint_key(self) -> str:
        """Key identifying the storage endpoint (one service client per key)."""
        return self.connection_string or self.account_url or ""

    @classmethod
    def from_env(cls) -> "StorageDefaults":
        """Create from environment variables."""
        return cls(
            connection_string=os.getenv("STORAGE_CONNECTION_STRING"),
            account_url=os.getenv("STORAGE_ACCOUNT_URL"),
            location_mode=LocationMode(os.getenv("STORAGE_LOCATION_MODE", "PrimaryOnly")),
            retry_delay_ms=int(os.getenv("STORAGE_RETRY_DELAY_MS", 500)),
            max_retries=int(os.getenv("STORAGE_MAX_RETRIES", 3)),
            maximum_execution_seconds=int(os.getenv("STORAGE_MAX_EXECUTION_SECONDS", 30)),
        )


@dataclass(frozen=True)
class TableStorageConfig:
    """
    Storage settings bound to one table.

    Each aggregate has its own table; all tables on the same storage
    endpoint share one service client.
    """
    table_name: str
    storage: StorageDefaults = field(default_factory=StorageDefaults)

    @classmethod
    def accounts(cls, storage: Optional[StorageDefaults] = None) -> "TableStorageConfig":
        return cls(table_name="Accounts", storage=storage or StorageDefaults.from_env())

    @classmethod
    def products(cls, storage: Optional[StorageDefaults] = None) -> "TableStorageConfig":
        return cls(table_name="Products", storage=storage or StorageDefaults.from_env())

    @classmethod
    def orders(cls, storage: Optional[StorageDefaults] = None) -> "TableStorageConfig":
        return cls(table_name="Orders", storage=storage or StorageDefaults.from_env())


@dataclass(frozen=True)
class PartitionDefaults:
    """
    Defaults for hash partitioning of accounts.

    partition_count must stay in [1, 1000]; changing it (or the prefix)
    relocates every existing row, so treat both as fixed per deployment.
    """
    partition_count: int = 100
    partition_prefix: str = "ACC"

    @classmethod
    def from_env(cls) -> "PartitionDefaults":
        """Create from environment variables."""
        return cls(
            partition_count=int(os.getenv("PARTITION_COUNT", 100)),
            partition_prefix=os.getenv("PARTITION_PREFIX", "ACC"),
        )


@dataclass(frozen=True)
class PaginationDefaults:
    """Defaults for paged list endpoints."""
    default_page_size: int = 50
    max_page_size: int = 1000

    @classmethod
    def from_env(cls) -> "PaginationDefaults":
        """Create from environment variables."""
        return cls(
            default_page_size=int(os.getenv("DEFAULT_PAGE_SIZE", 50)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    storage: StorageDefaults = field(default_factory=StorageDefaults)
    partitioning: PartitionDefaults = field(default_factory=PartitionDefaults)
    pagination: PaginationDefaults = field(default_factory=PaginationDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment."""
        return cls(
            storage=StorageDefaults.from_env(),
            partitioning=PartitionDefaults.from_env(),
            pagination=PaginationDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance (lazy initialization)."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LocationMode",
    "StorageDefaults",
    "TableStorageConfig",
    "PartitionDefaults",
    "PaginationDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
