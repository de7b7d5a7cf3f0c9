# ============================================================================
# TABLE ACCESS MODULE
# ============================================================================
# STATUS: Infrastructure - Azure Table Storage access layer
# PURPOSE: Shared service clients, entity base model, filters, typed client
# CREATED: 19 OCT 2026
# ============================================================================
"""
Table access layer.

Usage:
    from infrastructure.tables import TableClient, TableEntityModel, partition_eq

    table = TableClient(TableStorageConfig.accounts(), AccountTableEntity)
    entity = await table.get_by_id("ACC-042", account_id.hex)
"""

from infrastructure.tables.client import (
    EntityQuery,
    Page,
    TableClient,
    decode_continuation_token,
    encode_continuation_token,
)
from infrastructure.tables.connection import (
    close_table_service,
    get_table_service,
    init_table_service,
)
from infrastructure.tables.entity import TableEntityModel
from infrastructure.tables.filters import (
    QueryFilter,
    and_,
    eq,
    match_all,
    partition_eq,
    row_key_eq,
)

__all__ = [
    # Client
    'TableClient',
    'EntityQuery',
    'Page',
    'encode_continuation_token',
    'decode_continuation_token',
    # Connection
    'get_table_service',
    'init_table_service',
    'close_table_service',
    # Entities
    'TableEntityModel',
    # Filters
    'QueryFilter',
    'eq',
    'and_',
    'partition_eq',
    'row_key_eq',
    'match_all',
]
