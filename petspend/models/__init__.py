"""
Data Models Package

This package contains all Pydantic models used in PetSpend.
Everything the store holds or persists conforms to these schemas.
"""

from petspend.models.pet import (
    ExpenseCategory,
    LimitUsage,
    MonthPeriod,
    Pet,
    PetExpense,
    PetKind,
    SpendingLimit,
)
from petspend.models.events import (
    StoreEvent,
    StoreEventType,
    StoreField,
)

__all__ = [
    # Domain models
    "ExpenseCategory",
    "LimitUsage",
    "MonthPeriod",
    "Pet",
    "PetExpense",
    "PetKind",
    "SpendingLimit",
    # Store events
    "StoreEvent",
    "StoreEventType",
    "StoreField",
]
