# ============================================================================
# PARTITION KEY STRATEGY
# ============================================================================
# STATUS: Infrastructure - Deterministic partition assignment
# PURPOSE: Map entity identifiers to a fixed set of table partitions
# CREATED: 19 OCT 2026
# ============================================================================
"""
Partition Key Strategy

A partition key strategy maps an entity identifier to one of N fixed
partitions, and enumerates all N for scatter-gather scans.

HashPartitionKeyStrategy uses a fixed two-seed string hash instead of
Python's hash(), which is salted per process (PYTHONHASHSEED). Partition
membership must be identical across runs and processes: a point lookup
computes the partition from the id without reading anything first.

Usage:
    strategy = HashPartitionKeyStrategy(partition_count=100, prefix="ACC")
    strategy.get_partition_key(account_id)        # "ACC-042"
    list(strategy.get_all_partition_keys())       # ["ACC-000", ..., "ACC-099"]
"""

import uuid
from abc import ABC, abstractmethod
from typing import Iterator, Union

from core.config import PartitionDefaults

MIN_PARTITION_COUNT = 1
MAX_PARTITION_COUNT = 1000

_HASH_SEED = 5381
_HASH_MULTIPLIER = 1566083941

EntityId = Union[uuid.UUID, str]


def _to_int32(value: int) -> int:
    """Wrap an arbitrary int to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def stable_hash(text: str) -> int:
    """
    Deterministic signed 32-bit hash of a string.

    Characters at even positions fold into one DJB-style accumulator and
    characters at odd positions into a second; the two are combined as
    hash1 + hash2 * 1566083941. Hashing stops at the first NUL character.
    """
    hash1 = _HASH_SEED
    hash2 = _HASH_SEED

    length = len(text)
    i = 0
    while i < length and text[i] != "\0":
        hash1 = _to_int32(((hash1 << 5) + hash1) ^ ord(text[i]))
        if i == length - 1 or text[i + 1] == "\0":
            break
        hash2 = _to_int32(((hash2 << 5) + hash2) ^ ord(text[i + 1]))
        i += 2

    return _to_int32(hash1 + hash2 * _HASH_MULTIPLIER)


def _canonical_id(entity_id: EntityId) -> str:
    """Lowercase hyphenated form, accepting a UUID or any UUID string form."""
    if isinstance(entity_id, uuid.UUID):
        return str(entity_id)
    return str(uuid.UUID(entity_id))


class PartitionKeyStrategy(ABC):
    """Maps entity identifiers to partition keys."""

    @abstractmethod
    def get_partition_key(self, entity_id: EntityId) -> str:
        """Partition key for an entity identifier."""

    @abstractmethod
    def get_all_partition_keys(self) -> Iterator[str]:
        """Every partition key the strategy can produce (for fan-out scans)."""


class HashPartitionKeyStrategy(PartitionKeyStrategy):
    """
    Hash-bucket partitioning: "{prefix}-{bucket:03d}".

    Raises:
        ValueError: If partition_count is outside [1, 1000]
    """

    strategy_version = 1

    def __init__(self, partition_count: int = 100, prefix: str = "ACC"):
        if not MIN_PARTITION_COUNT <= partition_count <= MAX_PARTITION_COUNT:
            raise ValueError(
                f"partition_count must be between {MIN_PARTITION_COUNT} and "
                f"{MAX_PARTITION_COUNT}, got {partition_count}"
            )
        self.partition_count = partition_count
        self.prefix = prefix

    @classmethod
    def from_defaults(cls, defaults: PartitionDefaults) -> "HashPartitionKeyStrategy":
        return cls(partition_count=defaults.partition_count, prefix=defaults.partition_prefix)

    def bucket_for(self, entity_id: EntityId) -> int:
        # abs(h) % n equals the magnitude of a truncated remainder of h by n
        return abs(stable_hash(_canonical_id(entity_id))) % self.partition_count

    def get_partition_key(self, entity_id: EntityId) -> str:
        return self._format(self.bucket_for(entity_id))

    def get_all_partition_keys(self) -> Iterator[str]:
        return (self._format(bucket) for bucket in range(self.partition_count))

    def _format(self, bucket: int) -> str:
        return f"{self.prefix}-{bucket:03d}"

    def __repr__(self) -> str:
        return f"HashPartitionKeyStrategy(partition_count={self.partition_count}, prefix={self.prefix!r})"


__all__ = [
    "PartitionKeyStrategy",
    "HashPartitionKeyStrategy",
    "stable_hash",
    "MIN_PARTITION_COUNT",
    "MAX_PARTITION_COUNT",
]
