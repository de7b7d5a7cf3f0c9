# ============================================================================
# QUERY FILTERS
# ============================================================================
# STATUS: Infrastructure - OData filter construction
# PURPOSE: Build parameterized table query filters
# CREATED: 19 OCT 2026
# ============================================================================
"""
Query Filters

Table queries take an OData filter string. Values are always bound through
the SDK's @parameter substitution, never formatted into the string, so
category names or ids with quotes cannot break (or widen) a query.

    partition_eq("ACC-042")                    # PartitionKey eq @partition_key
    eq("AccountId", account_id) & eq("Status", "Shipped")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class QueryFilter:
    """OData filter text plus its bound parameters. Empty text matches all rows."""

    text: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)

    def __and__(self, other: "QueryFilter") -> "QueryFilter":
        if not self.text:
            return other
        if not other.text:
            return self

        for name, value in other.parameters.items():
            if name in self.parameters and self.parameters[name] != value:
                raise ValueError(f"Conflicting values for filter parameter @{name}")

        return QueryFilter(
            text=f"{self.text} and {other.text}",
            parameters={**self.parameters, **other.parameters},
        )

    @property
    def is_match_all(self) -> bool:
        return not self.text

    def __str__(self) -> str:
        return self.text or "<all rows>"


def _parameter_name(field_name: str) -> str:
    snake = []
    for index, char in enumerate(field_name):
        if char.isupper() and index > 0 and not field_name[index - 1].isupper():
            snake.append("_")
        snake.append(char.lower())
    return "".join(snake)


def eq(field_name: str, value: Any, parameter: Optional[str] = None) -> QueryFilter:
    """Equality filter on one column."""
    name = parameter or _parameter_name(field_name)
    return QueryFilter(text=f"{field_name} eq @{name}", parameters={name: value})


def and_(*filters: QueryFilter) -> QueryFilter:
    """Conjunction of filters; empty filters are dropped."""
    combined = QueryFilter()
    for query_filter in filters:
        combined = combined & query_filter
    return combined


def partition_eq(partition_key: str) -> QueryFilter:
    return eq("PartitionKey", partition_key)


def row_key_eq(row_key: str) -> QueryFilter:
    return eq("RowKey", row_key)


def match_all() -> QueryFilter:
    return QueryFilter()


__all__ = [
    "QueryFilter",
    "eq",
    "and_",
    "partition_eq",
    "row_key_eq",
    "match_all",
]
