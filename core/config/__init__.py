# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the table storage layer.
"""

from core.config.defaults import (
    LocationMode,
    StorageDefaults,
    TableStorageConfig,
    PartitionDefaults,
    PaginationDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

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
