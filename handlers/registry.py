# ============================================================================
# HANDLER REGISTRY
# ============================================================================
# STATUS: Core - Command handler registration and dispatch
# PURPOSE: Route each command object to the one handler registered for it
# CREATED: 19 OCT 2026
# ============================================================================
"""
Handler Registry

Central registry for command handlers. The HTTP layer builds a command
object and calls send(); the registry finds the handler registered for the
command's type and awaits it.

Design:
- Handlers are registered at import time via decorator
- Registry is a simple dict (command type -> handler func)
- Fail-fast on duplicate registration
- Handler exceptions propagate unchanged to the caller
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from core.logging import log_context

logger = logging.getLogger(__name__)


# ============================================================================
# HANDLER TYPES
# ============================================================================

@dataclass
class HandlerContext:
    """
    Context passed to handler functions.

    Carries the repositories a handler may use. Each handler touches
    exactly one of them per request.
    """
    accounts: Any = None
    products: Any = None
    orders: Any = None

    # Correlation
    request_id: Optional[str] = None


# Handler function type
HandlerFunc = Callable[[Any, HandlerContext], Awaitable[Any]]


# ============================================================================
# EXCEPTIONS
# ============================================================================

class HandlerError(Exception):
    """Base exception for handler errors."""
    pass


class HandlerNotFoundError(HandlerError):
    """Raised when no handler is registered for a command type."""
    def __init__(self, command_type: type):
        self.command_type = command_type
        super().__init__(f"Handler not found: {command_type.__name__}")


class DuplicateHandlerError(HandlerError):
    """Raised when a command type already has a handler."""
    def __init__(self, command_type: type):
        self.command_type = command_type
        super().__init__(f"Handler already registered: {command_type.__name__}")


# ============================================================================
# REGISTRY
# ============================================================================

# Global registry
_handlers: Dict[type, HandlerFunc] = {}
_handler_metadata: Dict[type, Dict[str, Any]] = {}


def register_handler(
    command_type: Type,
    *,
    description: str = "",
) -> Callable[[HandlerFunc], HandlerFunc]:
    """
    Decorator to register the handler for a command type.

    Args:
        command_type: Command class the handler accepts (must be unique)
        description: Human-readable description

    Example:
        @register_handler(GetAccount)
        async def get_account(command: GetAccount, ctx: HandlerContext) -> Optional[AccountDto]:
            entity = await ctx.accounts.get_by_id(command.account_id)
            return AccountDto.from_entity(entity) if entity else None
    """
    def decorator(func: HandlerFunc) -> HandlerFunc:
        if command_type in _handlers:
            raise DuplicateHandlerError(command_type)

        _handlers[command_type] = func
        _handler_metadata[command_type] = {
            "command": command_type.__name__,
            "description": description,
            "function": func.__name__,
            "module": func.__module__,
            "registered_at": datetime.now(timezone.utc).isoformat(),
        }

        logger.debug(f"Registered handler: {command_type.__name__} ({func.__module__}.{func.__name__})")
        return func

    return decorator


def get_handler(command_type: Type) -> Optional[HandlerFunc]:
    return _handlers.get(command_type)


def get_handler_or_raise(command_type: Type) -> HandlerFunc:
    """
    Get the handler for a command type.

    Raises:
        HandlerNotFoundError if no handler is registered
    """
    handler = _handlers.get(command_type)
    if handler is None:
        raise HandlerNotFoundError(command_type)
    return handler


def list_handlers() -> List[Dict[str, Any]]:
    """List all registered handlers with metadata."""
    return list(_handler_metadata.values())


# ============================================================================
# DISPATCH
# ============================================================================

async def send(command: Any, context: HandlerContext) -> Any:
    """
    Dispatch a command to its handler.

    Args:
        command: Command or query object
        context: Repositories and correlation for this request

    Returns:
        Whatever the handler returns

    Raises:
        HandlerNotFoundError if the command type has no handler
    """
    command_type = type(command)
    handler = get_handler_or_raise(command_type)

    with log_context(request_id=context.request_id, operation=command_type.__name__):
        logger.debug(f"Dispatching {command_type.__name__} to {handler.__name__}")
        return await handler(command, context)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "register_handler",
    "get_handler",
    "get_handler_or_raise",
    "list_handlers",
    "send",
    "HandlerFunc",
    "HandlerContext",
    "HandlerError",
    "HandlerNotFoundError",
    "DuplicateHandlerError",
]
