# ============================================================================
# GENERIC TABLE CLIENT
# ============================================================================
# STATUS: Infrastructure - Typed async wrapper over one Azure table
# PURPOSE: Point lookup, lazy paged queries, add/upsert/delete, existence
# CREATED: 19 OCT 2026
# ============================================================================
"""
Generic Table Client

TableClient[E] is a thin typed wrapper over one table of a schemaless,
partitioned key-value store. E is a TableEntityModel subclass.

Operations:
- query(filter, page_size)        lazy EntityQuery (iterate or fetch one page)
- get_by_id(pk, rk)               point lookup, None when absent
- add(entity)                     insert, EntityConflictError on duplicate key
- upsert(entity)                  insert-or-replace, ignores the etag
- delete(entity)                  etag-checked delete (wildcard when no etag)
- delete_by_key(pk, rk, etag)     explicit-key variant
- exists(pk, rk)                  derived from get_by_id

The table is created on first use. Creation races between processes return
409 from the store, which is expected and ignored.

SDK errors are translated into the repository error taxonomy; retries happen
below this layer in the transport pipeline (see connection.py).
"""

import asyncio
import base64
import binascii
import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from azure.core import MatchConditions
from azure.core.exceptions import (
    AzureError,
    HttpResponseError,
    ResourceExistsError,
    ResourceModifiedError,
    ResourceNotFoundError,
)
from azure.data.tables import UpdateMode

from core.config import TableStorageConfig
from infrastructure.base_repository import (
    ConcurrencyConflictError,
    EntityConflictError,
    EntityNotFoundError,
    InvalidContinuationToken,
    TableStoreError,
)
from infrastructure.tables.connection import get_table_service
from infrastructure.tables.entity import TableEntityModel
from infrastructure.tables.filters import QueryFilter

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=TableEntityModel)


# ============================================================================
# CONTINUATION TOKENS
# ============================================================================

def encode_continuation_token(token: Optional[Dict[str, Any]]) -> Optional[str]:
    """Turn the store's next-key marker into an opaque URL-safe string."""
    if not token:
        return None
    raw = json.dumps(token, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_continuation_token(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Reverse of encode_continuation_token.

    Raises:
        InvalidContinuationToken: If the token was not issued by this client
    """
    if not token:
        return None
    try:
        decoded = json.loads(base64.urlsafe_b64decode(token.encode("ascii")))
    except (binascii.Error, ValueError, UnicodeError) as e:
        raise InvalidContinuationToken(f"Malformed continuation token: {e}") from e
    if not isinstance(decoded, dict):
        raise InvalidContinuationToken("Malformed continuation token")
    return decoded


# ============================================================================
# ERROR TRANSLATION
# ============================================================================

@contextmanager
def _translate_errors(operation: str, entity_id: Optional[str] = None):
    """Map SDK exceptions onto the repository error taxonomy."""
    try:
        yield
    except ResourceExistsError as e:
        raise EntityConflictError(
            f"{operation}: entity already exists ({entity_id})",
            operation=operation, entity_id=entity_id,
        ) from e
    except ResourceNotFoundError as e:
        raise EntityNotFoundError(
            f"{operation}: entity not found ({entity_id})",
            operation=operation, entity_id=entity_id,
        ) from e
    except ResourceModifiedError as e:
        raise ConcurrencyConflictError(
            f"{operation}: entity was modified concurrently ({entity_id})",
            operation=operation, entity_id=entity_id,
        ) from e
    except HttpResponseError as e:
        if e.status_code == 412:
            raise ConcurrencyConflictError(
                f"{operation}: etag mismatch ({entity_id})",
                operation=operation, entity_id=entity_id,
            ) from e
        raise TableStoreError(
            f"{operation} failed ({entity_id}): {e.message}",
            operation=operation, entity_id=entity_id, status_code=e.status_code,
        ) from e
    except AzureError as e:
        raise TableStoreError(
            f"{operation} failed ({entity_id}): {e}",
            operation=operation, entity_id=entity_id,
        ) from e


def _describe(partition_key: str, row_key: str) -> str:
    return f"{partition_key}/{row_key}"


# ============================================================================
# QUERY RESULTS
# ============================================================================

@dataclass
class Page(Generic[E]):
    """One page of store results in store-native order."""
    items: List[E] = field(default_factory=list)
    continuation_token: Optional[str] = None


class EntityQuery(Generic[E]):
    """
    Lazy query over a table.

    Nothing is sent to the store until the query is iterated or a page is
    requested. Iterating drains every page; page() fetches exactly one.
    """

    def __init__(
        self,
        client: "TableClient[E]",
        query_filter: QueryFilter,
        page_size: Optional[int] = None,
        select: Optional[Sequence[str]] = None,
    ):
        self._client = client
        self.query_filter = query_filter
        self.page_size = page_size
        self.select = list(select) if select else None

    async def _paged(self):
        table = await self._client._get_table()
        kwargs: Dict[str, Any] = {}
        if self.page_size:
            kwargs["results_per_page"] = self.page_size
        if self.select:
            kwargs["select"] = self.select

        if self.query_filter.is_match_all:
            return table.list_entities(**kwargs)
        return table.query_entities(
            self.query_filter.text,
            parameters=self.query_filter.parameters,
            **kwargs,
        )

    async def __aiter__(self) -> AsyncIterator[E]:
        paged = await self._paged()
        entity_type = self._client.entity_type
        with _translate_errors(f"query {self._client.table_name}", str(self.query_filter)):
            async for raw in paged:
                yield entity_type.from_entity(raw)

    async def page(self, continuation_token: Optional[str] = None) -> Page[E]:
        """
        Fetch one page starting at continuation_token.

        Returns:
            Page with the items and the opaque token of the next page
            (None when this was the last page)
        """
        start = decode_continuation_token(continuation_token)
        paged = await self._paged()
        entity_type = self._client.entity_type

        with _translate_errors(f"query page {self._client.table_name}", str(self.query_filter)):
            pages = paged.by_page(continuation_token=start)
            try:
                raw_page = await pages.__anext__()
            except StopAsyncIteration:
                return Page(items=[], continuation_token=None)

            items = [entity_type.from_entity(raw) async for raw in raw_page]
            next_token = encode_continuation_token(pages.continuation_token)

        return Page(items=items, continuation_token=next_token)

    async def to_list(self) -> List[E]:
        return [entity async for entity in self]

    async def first(self) -> Optional[E]:
        async for entity in self:
            return entity
        return None


# ============================================================================
# TABLE CLIENT
# ============================================================================

class TableClient(Generic[E]):
    """
    Typed client for one table.

    Args:
        config: Storage settings and table name
        entity_type: TableEntityModel subclass for rows of this table
        service_client: Optional explicit async TableServiceClient; the
            process-wide client for config.storage is used otherwise
    """

    def __init__(
        self,
        config: TableStorageConfig,
        entity_type: Type[E],
        service_client: Optional[Any] = None,
    ):
        self.config = config
        self.entity_type = entity_type
        self._service_client = service_client
        self._table = None
        self._table_lock = asyncio.Lock()

    @property
    def table_name(self) -> str:
        return self.config.table_name

    async def _get_table(self):
        """Table client for this table, creating the table on first use."""
        if self._table is not None:
            return self._table

        async with self._table_lock:
            if self._table is None:
                service = self._service_client or get_table_service(self.config.storage)
                try:
                    await service.create_table(self.table_name)
                    logger.info(f"Created table: {self.table_name}")
                except ResourceExistsError:
                    logger.debug(f"Table already exists: {self.table_name}")
                except AzureError as e:
                    raise TableStoreError(
                        f"create table {self.table_name} failed: {e}",
                        operation="create table",
                    ) from e
                self._table = service.get_table_client(self.table_name)

        return self._table

    def query(
        self,
        query_filter: QueryFilter,
        page_size: Optional[int] = None,
        select: Optional[Sequence[str]] = None,
    ) -> EntityQuery[E]:
        """Lazy query; see EntityQuery."""
        return EntityQuery(self, query_filter, page_size=page_size, select=select)

    async def get_by_id(self, partition_key: str, row_key: str) -> Optional[E]:
        """Point lookup. Absence is not an error."""
        table = await self._get_table()
        try:
            with _translate_errors("get entity", _describe(partition_key, row_key)):
                raw = await table.get_entity(partition_key=partition_key, row_key=row_key)
        except EntityNotFoundError:
            return None
        return self.entity_type.from_entity(raw)

    async def add(self, entity: E) -> Dict[str, Any]:
        """
        Insert a new row.

        Raises:
            EntityConflictError: If (PartitionKey, RowKey) already exists
        """
        table = await self._get_table()
        with _translate_errors("add entity", _describe(*entity.key)):
            metadata = await table.create_entity(entity=entity.to_entity())
        self._apply_metadata(entity, metadata)
        return metadata

    async def upsert(self, entity: E) -> Dict[str, Any]:
        """Insert or fully replace a row, regardless of its etag."""
        table = await self._get_table()
        with _translate_errors("upsert entity", _describe(*entity.key)):
            metadata = await table.upsert_entity(entity=entity.to_entity(), mode=UpdateMode.REPLACE)
        self._apply_metadata(entity, metadata)
        return metadata

    async def delete(self, entity: E) -> None:
        """
        Delete a row, checking its etag when it has one.

        Raises:
            EntityNotFoundError: If the row does not exist
            ConcurrencyConflictError: If the row's etag no longer matches
        """
        await self.delete_by_key(entity.partition_key, entity.row_key, entity.etag)

    async def delete_by_key(self, partition_key: str, row_key: str, etag: Optional[str] = None) -> None:
        """Delete by key; etag=None deletes unconditionally."""
        table = await self._get_table()
        kwargs: Dict[str, Any] = {}
        if etag:
            kwargs["etag"] = etag
            kwargs["match_condition"] = MatchConditions.IfNotModified
        else:
            kwargs["match_condition"] = MatchConditions.Unconditionally

        with _translate_errors("delete entity", _describe(partition_key, row_key)):
            await table.delete_entity(partition_key=partition_key, row_key=row_key, **kwargs)

    async def exists(self, partition_key: str, row_key: str) -> bool:
        return await self.get_by_id(partition_key, row_key) is not None

    @staticmethod
    def _apply_metadata(entity: E, metadata: Any) -> None:
        if isinstance(metadata, dict):
            entity.etag = metadata.get("etag", entity.etag)
            entity.timestamp = metadata.get("date", entity.timestamp)


__all__ = [
    "TableClient",
    "EntityQuery",
    "Page",
    "encode_continuation_token",
    "decode_continuation_token",
]
