# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Table storage operations
# PURPOSE: Partitioning, error taxonomy and the generic table client
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module.

Provides:
- HashPartitionKeyStrategy: Deterministic id -> partition key mapping
- TableClient: Typed async access to one table
- Repository error taxonomy shared by every repository

Usage:
    from infrastructure import HashPartitionKeyStrategy, TableClient

    strategy = HashPartitionKeyStrategy(partition_count=100, prefix="ACC")
    table = TableClient(TableStorageConfig.accounts(), AccountTableEntity)
"""

from infrastructure.base_repository import (
    BaseRepository,
    ConcurrencyConflictError,
    EntityConflictError,
    EntityNotFoundError,
    InvalidContinuationToken,
    RepositoryError,
    TableStoreError,
)
from infrastructure.partitioning import (
    HashPartitionKeyStrategy,
    PartitionKeyStrategy,
    stable_hash,
)
from infrastructure.tables import (
    EntityQuery,
    Page,
    QueryFilter,
    TableClient,
    TableEntityModel,
    close_table_service,
    get_table_service,
    init_table_service,
)

__all__ = [
    # Errors
    'BaseRepository',
    'RepositoryError',
    'EntityConflictError',
    'EntityNotFoundError',
    'ConcurrencyConflictError',
    'TableStoreError',
    'InvalidContinuationToken',
    # Partitioning
    'PartitionKeyStrategy',
    'HashPartitionKeyStrategy',
    'stable_hash',
    # Tables
    'TableClient',
    'TableEntityModel',
    'EntityQuery',
    'Page',
    'QueryFilter',
    'get_table_service',
    'init_table_service',
    'close_table_service',
]
