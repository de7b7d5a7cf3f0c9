# ============================================================================
# TEST FIXTURES - IN-MEMORY TABLE SERVICE
# ============================================================================
# STATUS: Tests - Shared fixtures
# PURPOSE: Async stand-in for the Azure table service used by repository tests
# CREATED: 19 OCT 2026
# ============================================================================
"""
In-memory table service.

Mirrors the slice of azure.data.tables.aio the table client uses:
create_table / get_table_client on the service; create/upsert/get/delete and
query_entities / list_entities on a table. Queries evaluate conjunctions of
"Field eq @param" clauses, return rows ordered by (PartitionKey, RowKey) and
page with dict continuation tokens, like the real store.

SDK exception types come from azure.core so translation is exercised for
real.
"""

import itertools
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest
from azure.core import MatchConditions
from azure.core.exceptions import (
    ResourceExistsError,
    ResourceModifiedError,
    ResourceNotFoundError,
)

from core.config import StorageDefaults, TableStorageConfig
from infrastructure.tables import TableClient

_CLAUSE = re.compile(r"^\s*(\w+)\s+eq\s+@(\w+)\s*$")
_etags = itertools.count(1)


class FakeEntity(dict):
    """Property bag with SDK-style metadata."""

    def __init__(self, data: Dict[str, Any], metadata: Dict[str, Any]):
        super().__init__(data)
        self.metadata = metadata


class FakeAsyncList:
    def __init__(self, items: List[FakeEntity]):
        self._items = iter(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._items)
        except StopIteration:
            raise StopAsyncIteration


class FakePageIterator:
    """Result of pager.by_page(); exposes continuation_token like the SDK."""

    def __init__(self, rows: List[FakeEntity], page_size: int, continuation_token: Optional[dict]):
        self._rows = rows
        self._page_size = page_size
        self._position = 0
        self._done = False
        self.continuation_token = continuation_token

        if continuation_token:
            start = (continuation_token["PartitionKey"], continuation_token["RowKey"])
            self._position = next(
                (i for i, row in enumerate(rows) if (row["PartitionKey"], row["RowKey"]) >= start),
                len(rows),
            )

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._done:
            raise StopAsyncIteration

        page = self._rows[self._position:self._position + self._page_size]
        self._position += len(page)

        if self._position < len(self._rows):
            following = self._rows[self._position]
            self.continuation_token = {
                "PartitionKey": following["PartitionKey"],
                "RowKey": following["RowKey"],
            }
        else:
            self.continuation_token = None
            self._done = True

        return FakeAsyncList(page)


class FakePager:
    """Result of query_entities / list_entities."""

    def __init__(self, rows: List[FakeEntity], page_size: Optional[int]):
        self._rows = rows
        self._page_size = page_size or 1000

    def by_page(self, continuation_token: Optional[dict] = None) -> FakePageIterator:
        return FakePageIterator(self._rows, self._page_size, continuation_token)

    def __aiter__(self):
        self._iter = iter(self._rows)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeTable:
    def __init__(self, name: str):
        self.name = name
        self.rows: Dict[Tuple[str, str], Tuple[Dict[str, Any], Dict[str, Any]]] = {}
        self.calls: List[str] = []

    def _metadata(self) -> Dict[str, Any]:
        return {"etag": f'W/"{next(_etags)}"', "timestamp": datetime.now(timezone.utc)}

    def _write(self, entity: Dict[str, Any]) -> Dict[str, Any]:
        metadata = self._metadata()
        self.rows[(entity["PartitionKey"], entity["RowKey"])] = (dict(entity), metadata)
        return {"etag": metadata["etag"], "date": metadata["timestamp"]}

    async def create_entity(self, entity, **kwargs):
        self.calls.append("create_entity")
        if (entity["PartitionKey"], entity["RowKey"]) in self.rows:
            raise ResourceExistsError("The specified entity already exists.")
        return self._write(entity)

    async def upsert_entity(self, entity, mode=None, **kwargs):
        self.calls.append("upsert_entity")
        return self._write(entity)

    async def get_entity(self, partition_key, row_key, **kwargs):
        self.calls.append("get_entity")
        stored = self.rows.get((partition_key, row_key))
        if stored is None:
            raise ResourceNotFoundError("The specified resource does not exist.")
        data, metadata = stored
        return FakeEntity(data, metadata)

    async def delete_entity(self, partition_key, row_key, etag=None, match_condition=None, **kwargs):
        self.calls.append("delete_entity")
        stored = self.rows.get((partition_key, row_key))
        if stored is None:
            raise ResourceNotFoundError("The specified resource does not exist.")
        if match_condition == MatchConditions.IfNotModified and etag != stored[1]["etag"]:
            raise ResourceModifiedError("The update condition specified in the request was not satisfied.")
        del self.rows[(partition_key, row_key)]

    def _select(self, query_filter: str, parameters: Dict[str, Any]) -> List[FakeEntity]:
        clauses = []
        for clause in query_filter.split(" and "):
            match = _CLAUSE.match(clause)
            if not match:
                raise ValueError(f"Unsupported filter clause: {clause!r}")
            clauses.append((match.group(1), parameters[match.group(2)]))

        return [
            FakeEntity(data, metadata)
            for key, (data, metadata) in sorted(self.rows.items())
            if all(data.get(field) == value for field, value in clauses)
        ]

    def query_entities(self, query_filter, parameters=None, results_per_page=None, select=None, **kwargs):
        self.calls.append("query_entities")
        return FakePager(self._select(query_filter, parameters or {}), results_per_page)

    def list_entities(self, results_per_page=None, select=None, **kwargs):
        self.calls.append("list_entities")
        rows = [FakeEntity(data, metadata) for key, (data, metadata) in sorted(self.rows.items())]
        return FakePager(rows, results_per_page)

    def partition(self, partition_key: str) -> List[Dict[str, Any]]:
        """Raw rows of one partition (test inspection)."""
        return [data for (pk, _), (data, _) in sorted(self.rows.items()) if pk == partition_key]


class FakeTableService:
    def __init__(self):
        self.tables: Dict[str, FakeTable] = {}
        self.create_calls = 0

    async def create_table(self, table_name: str, **kwargs):
        self.create_calls += 1
        if table_name in self.tables:
            raise ResourceExistsError("The table specified already exists.")
        self.tables[table_name] = FakeTable(table_name)

    def get_table_client(self, table_name: str) -> FakeTable:
        return self.tables.setdefault(table_name, FakeTable(table_name))


def make_table(service: FakeTableService, table_name: str, entity_type) -> TableClient:
    """TableClient over the in-memory service."""
    config = TableStorageConfig(table_name=table_name, storage=StorageDefaults())
    return TableClient(config, entity_type, service_client=service)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def table_service() -> FakeTableService:
    return FakeTableService()


@pytest.fixture
def make_table_client(table_service):
    """Factory for TableClients sharing one in-memory service."""
    def _make(table_name: str, entity_type) -> TableClient:
        return make_table(table_service, table_name, entity_type)
    return _make
