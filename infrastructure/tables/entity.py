# ============================================================================
# TABLE ENTITY BASE MODEL
# ============================================================================
# STATUS: Infrastructure - Typed view over schemaless table rows
# PURPOSE: Base pydantic model for wire entities (keys, etag, timestamp)
# CREATED: 19 OCT 2026
# ============================================================================
"""
Table Entity Base Model

Every row persisted to a table carries:
- PartitionKey: groups rows for efficient range scans
- RowKey: unique within a partition
- ETag: opaque version marker, set by the store on write
- Timestamp: last-modified time, set by the store

Subclasses declare their columns with wire aliases:

    class AccountTableEntity(TableEntityModel):
        first_name: str = Field(alias="FirstName")

ETag and Timestamp live in the SDK's entity metadata, not in the property
bag, so they are never written back as columns.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

E = TypeVar("E", bound="TableEntityModel")


class TableEntityModel(BaseModel):
    """Base class for typed table entities."""

    partition_key: str = Field(default="", alias="PartitionKey")
    row_key: str = Field(default="", alias="RowKey")

    etag: Optional[str] = Field(default=None, exclude=True)
    timestamp: Optional[datetime] = Field(default=None, exclude=True)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_entity(self) -> Dict[str, Any]:
        """Property bag for the SDK (wire names, None values omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_entity(cls: Type[E], entity: Mapping[str, Any]) -> E:
        """Build a typed entity from an SDK entity, including its metadata."""
        model = cls.model_validate(dict(entity))
        metadata = getattr(entity, "metadata", None) or {}
        model.etag = metadata.get("etag")
        model.timestamp = metadata.get("timestamp")
        return model

    @property
    def key(self) -> tuple:
        return (self.partition_key, self.row_key)
