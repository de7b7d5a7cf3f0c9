# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums and result contracts
# PURPOSE: Status enums and the paged result contract shared by all layers
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: OrderStatus, PagedResult
# DEPENDENCIES: enum, pydantic
# ============================================================================
"""
Base contracts for the customer/order service.

These cross every boundary:
- Table Storage (wire entities)
- Handlers (commands and DTOs)
- HTTP (response bodies)
"""

from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


# ============================================================================
# STATUS ENUMS
# ============================================================================

class OrderStatus(str, Enum):
    """
    Order lifecycle states.

    State transitions:
        DRAFT -> SUBMITTED -> PROCESSING -> SHIPPED -> DELIVERED
        any non-terminal state -> CANCELLED
    """
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    def is_terminal(self) -> bool:
        """Check if this is a terminal state (no further transitions)."""
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    def can_transition_to(self, new_status: "OrderStatus") -> bool:
        """Check whether moving from this status to new_status is allowed."""
        if new_status == OrderStatus.CANCELLED:
            return not self.is_terminal()
        return (self, new_status) in _ORDER_TRANSITIONS


_ORDER_TRANSITIONS = {
    (OrderStatus.DRAFT, OrderStatus.SUBMITTED),
    (OrderStatus.SUBMITTED, OrderStatus.PROCESSING),
    (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
    (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
}


# ============================================================================
# RESULT CONTRACTS
# ============================================================================

class PagedResult(BaseModel, Generic[T]):
    """
    One page of an ordered result set.

    continuation_token is opaque to callers. Feed it back unchanged to get
    the next page; None means there are no further pages.
    """
    items: List[T] = Field(default_factory=list)
    continuation_token: Optional[str] = None

    model_config = {"arbitrary_types_allowed": True}

    @property
    def has_more(self) -> bool:
        return self.continuation_token is not None


__all__ = [
    "OrderStatus",
    "PagedResult",
]
