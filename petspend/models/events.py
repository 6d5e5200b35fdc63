"""
Store Event Models

Every write to one of the store's fields produces one StoreEvent.
Observers receive it synchronously, before the state is persisted.

DESIGN DECISION: One event per field write, not per operation.
delete_pet touches three fields and therefore emits three events.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class StoreField(str, Enum):
    """The persisted fields of the store."""
    PETS = "pets"
    EXPENSES = "expenses"
    LIMITS = "limits"
    SELECTED_MONTH = "selected_month"


class StoreEventType(str, Enum):
    """What kind of write happened."""
    # Pets
    PET_ADDED = "pet_added"
    PET_UPDATED = "pet_updated"
    PET_DELETED = "pet_deleted"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSES_REMOVED = "expenses_removed"

    # Limits
    LIMIT_ADDED = "limit_added"
    LIMIT_UPDATED = "limit_updated"
    LIMITS_REMOVED = "limits_removed"

    # Month navigation
    SELECTED_MONTH_CHANGED = "selected_month_changed"

    # Whole collection assigned through a property setter
    FIELD_REPLACED = "field_replaced"


class StoreEvent(BaseModel):
    """A single write to the store."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the write happened (UTC)"
    )

    event_type: StoreEventType
    field: StoreField = Field(
        ...,
        description="Store field that was written"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="Pet, expense or limit the write is about"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "field": self.field.value,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "details": self.details,
        }
