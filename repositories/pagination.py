# ============================================================================
# REPOSITORY PAGINATION
# ============================================================================
# STATUS: Core - Paging strategies shared by every repository
# PURPOSE: Native continuation-token paging and scatter-gather offset paging
# CREATED: 19 OCT 2026
# ============================================================================
"""
Repository Pagination

Two strategies, picked per aggregate when the repository is constructed:

NativeTokenPagination
    One store query, one store page. Items come back in store order and the
    next token is the store's own (encoded) continuation marker.

ScatterGatherPagination
    The store cannot sort across partitions, so every target partition is
    drained concurrently, merged, sorted with a total order and sliced by a
    synthetic integer offset. Next token is str(offset + page_size).

    Cost is O(matching rows) per page. No snapshot isolation: replaying an
    offset against changed data can shift page boundaries.

Both take a QueryScope: the partitions to read (None means the whole table)
and an extra filter applied inside each partition.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from core.contracts import PagedResult
from infrastructure.tables import QueryFilter, TableClient, partition_eq

logger = logging.getLogger(__name__)

SortKey = Callable[[Any], Any]


def decode_offset_token(token: Optional[str]) -> int:
    """Integer offset from a scatter-gather token; missing or invalid means 0."""
    if token is None or not token.strip():
        return 0
    try:
        offset = int(token)
    except ValueError:
        logger.debug(f"Ignoring non-numeric continuation token: {token!r}")
        return 0
    return max(offset, 0)


@dataclass(frozen=True)
class QueryScope:
    """Where a paged query reads from."""

    partition_keys: Optional[Sequence[str]] = None
    where: QueryFilter = field(default_factory=QueryFilter)

    @property
    def is_single_partition(self) -> bool:
        return self.partition_keys is not None and len(self.partition_keys) == 1

    def partition_filters(self) -> List[QueryFilter]:
        """One filter per target partition (a single table-wide filter when unscoped)."""
        if self.partition_keys is None:
            return [self.where]
        return [partition_eq(pk) & self.where for pk in self.partition_keys]


class PaginationStrategy(ABC):
    """Fetches one page of a scoped query."""

    @abstractmethod
    async def fetch_page(
        self,
        table: TableClient,
        scope: QueryScope,
        page_size: int,
        continuation_token: Optional[str] = None,
    ) -> PagedResult:
        """Return one page of entities and the token of the next page."""


class NativeTokenPagination(PaginationStrategy):
    """
    Server-side paging with the store's continuation marker.

    A scope of exactly one partition is queried on that partition. A scope
    of several partitions is read as one table-wide query with the scope's
    filter; the caller's partitions must then cover every row it can match.
    """

    async def fetch_page(self, table, scope, page_size, continuation_token=None):
        query_filter = scope.partition_filters()[0] if scope.is_single_partition else scope.where

        page = await table.query(query_filter, page_size=page_size).page(continuation_token)

        logger.info(
            f"{table.table_name}: returning {len(page.items)} rows, "
            f"has_more={page.continuation_token is not None}"
        )
        return PagedResult(items=page.items, continuation_token=page.continuation_token)


class ScatterGatherPagination(PaginationStrategy):
    """
    Concurrent partition scans merged into a sorted, offset-paged view.

    Args:
        sort_key: Total order over entities; must end in a unique field
            (RowKey) so page boundaries are deterministic
    """

    def __init__(self, sort_key: SortKey):
        self.sort_key = sort_key

    async def fetch_page(self, table, scope, page_size, continuation_token=None):
        offset = decode_offset_token(continuation_token)
        filters = scope.partition_filters()

        logger.debug(
            f"{table.table_name}: querying {len(filters)} partition(s), "
            f"offset={offset}, page_size={page_size}"
        )

        partitions = await self._gather(table, filters)
        merged = [entity for partition in partitions for entity in partition]
        merged.sort(key=self.sort_key)

        window = merged[offset:offset + page_size + 1]
        has_more = len(window) > page_size
        items = window[:page_size]
        next_token = str(offset + page_size) if has_more else None

        logger.info(
            f"{table.table_name}: returning {len(items)} of {len(merged)} rows, "
            f"has_more={has_more}, next_token={next_token}"
        )
        return PagedResult(items=items, continuation_token=next_token)

    @staticmethod
    async def _gather(table: TableClient, filters: List[QueryFilter]) -> List[list]:
        tasks = [asyncio.ensure_future(table.query(f).to_list()) for f in filters]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            # One failed or cancelled scan abandons the rest
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise


__all__ = [
    "PaginationStrategy",
    "NativeTokenPagination",
    "ScatterGatherPagination",
    "QueryScope",
    "decode_offset_token",
]
