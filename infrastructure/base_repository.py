# ============================================================================
# BASE REPOSITORY - ERROR HANDLING PATTERNS
# ============================================================================
# STATUS: Infrastructure - Base repository patterns
# PURPOSE: Error taxonomy, error context and logging shared by all repositories
# CREATED: 19 OCT 2026
# ============================================================================
"""
Base Repository Patterns

Abstract base class that provides common infrastructure for all repositories:
- Error taxonomy for table store failures
- Consistent error handling with a context manager
- Standardized logging

Propagation policy:
- "Not found" is never an exception at the repository level (None / False)
- Conflicts and store failures propagate to handlers, which decide the
  HTTP status
- asyncio.CancelledError is a BaseException and passes through untouched
"""

import logging
from abc import ABC
from contextlib import contextmanager
from typing import Any, Dict, Optional

from core.logging import ComponentType, get_logger, log_context


class RepositoryError(Exception):
    """Base exception for repository operations."""

    def __init__(self, message: str, operation: str = None, entity_id: str = None):
        self.operation = operation
        self.entity_id = entity_id
        super().__init__(message)


class EntityConflictError(RepositoryError):
    """An entity with the same (PartitionKey, RowKey) already exists."""


class EntityNotFoundError(RepositoryError):
    """The target row of a store-level delete does not exist."""


class ConcurrencyConflictError(RepositoryError):
    """The row changed since it was read (ETag mismatch)."""


class TableStoreError(RepositoryError):
    """Any other store failure, raised after transport retries are exhausted."""

    def __init__(self, message: str, operation: str = None, entity_id: str = None,
                 status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, operation=operation, entity_id=entity_id)


class InvalidContinuationToken(RepositoryError, ValueError):
    """A continuation token that this store did not issue."""


class BaseRepository(ABC):
    """
    Shared plumbing for the aggregate repositories.

    Subclasses get a repository-scoped logger and ``_error_context`` for
    wrapping store calls.
    """

    def __init__(self):
        self.logger = get_logger(f"repositories.{type(self).__name__}", ComponentType.REPOSITORY)

    @contextmanager
    def _error_context(self, operation: str, entity_id: Optional[str] = None):
        """
        Wrap a store call so unexpected failures surface as RepositoryError.

        Errors from the repository taxonomy, and ValueError, pass through
        unchanged. Records logged inside the block carry ``operation`` and
        ``entity_id``.

        Example:
            with self._error_context("account update", account_id):
                await self.table.upsert(entity)
        """
        with log_context(operation=operation, entity_id=entity_id):
            try:
                yield
            except (RepositoryError, ValueError):
                raise
            except Exception as exc:
                target = f" for {entity_id}" if entity_id else ""
                message = f"{operation} failed{target}: {exc}"
                self.logger.error(message, exc_info=True)
                raise RepositoryError(message, operation=operation, entity_id=entity_id) from exc

    def _log_operation(
        self,
        success: bool,
        operation: str,
        entity_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log ``operation: <id>`` at INFO, or ``operation failed: <id>`` at WARNING."""
        outcome = operation if success else f"{operation} failed"
        self.logger.log(
            logging.INFO if success else logging.WARNING,
            f"{outcome}: {entity_id}",
            extra=details,
        )


__all__ = [
    "BaseRepository",
    "RepositoryError",
    "EntityConflictError",
    "EntityNotFoundError",
    "ConcurrencyConflictError",
    "TableStoreError",
    "InvalidContinuationToken",
]
