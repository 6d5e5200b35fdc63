"""
Core Data Models for PetSpend

These models define the records the store keeps and persists:
pets, their expenses and their monthly spending limits.

DESIGN DECISION: Amounts are Decimal everywhere. Currency sums
must not drift the way float sums do.

LimitUsage is derived data. It is recomputed from expenses on
demand and is never persisted.
"""

import calendar
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class PetKind(str, Enum):
    """Kinds of pets a user can register."""
    DOG = "dog"
    CAT = "cat"
    PARROT = "parrot"
    RODENT = "rodent"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Declaration order matters: it breaks ties when categories
    are ranked by amount.
    """
    FOOD = "food"
    VETERINARY_CARE = "veterinary_care"
    TOYS = "toys"
    GROOMING = "grooming"
    ACCESSORIES = "accessories"
    VITAMINS_AND_SUPPLEMENTS = "vitamins_and_supplements"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        """Human-readable name, e.g. 'Veterinary care'."""
        if self is ExpenseCategory.VITAMINS_AND_SUPPLEMENTS:
            return "Vitamins and supplements"
        return self.value.replace("_", " ").capitalize()


# =============================================================================
# MONTH PERIOD
# =============================================================================

class MonthPeriod(BaseModel):
    """
    A calendar month identified by (year, month).

    Used to bucket expenses and to scope spending limits.
    Frozen so it can be compared and hashed.
    """
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(..., ge=1, le=12)

    @classmethod
    def from_date(cls, moment: Union[date, datetime]) -> "MonthPeriod":
        return cls(year=moment.year, month=moment.month)

    @classmethod
    def current(cls) -> "MonthPeriod":
        return cls.from_date(date.today())

    def adding_months(self, offset: int) -> "MonthPeriod":
        """
        Shift by a number of months, rolling the year over
        in either direction.
        """
        index = self.year * 12 + (self.month - 1) + offset
        year, month_index = divmod(index, 12)
        return MonthPeriod(year=year, month=month_index + 1)

    def contains(self, moment: Union[date, datetime]) -> bool:
        return moment.year == self.year and moment.month == self.month

    def title(self) -> str:
        """Title used in screen headers, e.g. 'March, 2025'."""
        return f"{calendar.month_name[self.month]}, {self.year}"

    def formatted(self) -> str:
        """Compact label, e.g. 'March 2025'."""
        return f"{calendar.month_name[self.month]} {self.year}"


# =============================================================================
# CORE RECORDS
# =============================================================================

class Pet(BaseModel):
    """
    A registered pet.

    The photo is an opaque byte payload from the image picker.
    It is written as base64 in the persisted JSON. The name is kept
    exactly as given. Frozen: edits go through PetStore.update_pet.
    """
    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique pet ID"
    )
    name: str = Field(
        ...,
        description="Display name"
    )
    kind: PetKind
    birth_date: Optional[date] = None
    photo_data: Optional[bytes] = Field(
        default=None,
        description="Opaque photo payload"
    )


class PetExpense(BaseModel):
    """
    A single expense logged for a pet.

    Expenses are immutable once created. They only leave the
    store when their pet is deleted.

    NOTE: amount > 0 is a caller-side precondition and is not
    enforced here.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )
    pet_id: UUID = Field(
        ...,
        description="ID of the pet this expense belongs to"
    )
    category: ExpenseCategory
    amount: Decimal
    date: datetime = Field(
        ...,
        description="When the expense happened"
    )
    note: Optional[str] = None


class SpendingLimit(BaseModel):
    """
    A monthly spending limit for a pet.

    A limit without a category applies to the pet's total spend
    for the month. Frozen: edits go through PetStore.update_limit.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique limit ID"
    )
    pet_id: UUID
    category: Optional[ExpenseCategory] = Field(
        default=None,
        description="Category the limit applies to; None means total spend"
    )
    month: MonthPeriod
    amount: Decimal
    is_active: bool = True

    @property
    def title(self) -> str:
        if self.category is None:
            return "Total"
        return self.category.display_name


# =============================================================================
# DERIVED MODELS (never persisted)
# =============================================================================

class LimitUsage(BaseModel):
    """
    A spending limit compared against actual spend.

    fraction_used is spent / limit amount. A limit amount of zero
    or less counts as fully used (1.0) instead of dividing by zero.
    """
    model_config = ConfigDict(frozen=True)

    WARNING_THRESHOLD: ClassVar[float] = 0.9

    limit: SpendingLimit
    spent: Decimal

    @property
    def id(self) -> UUID:
        return self.limit.id

    @property
    def fraction_used(self) -> float:
        if self.limit.amount <= 0:
            return 1.0
        return float(self.spent / self.limit.amount)

    @property
    def percent_used(self) -> float:
        return self.fraction_used * 100.0

    @property
    def is_exceeded(self) -> bool:
        return self.spent > self.limit.amount

    @property
    def is_warning(self) -> bool:
        """Close to the limit (90% or more) but not over it."""
        return self.fraction_used >= self.WARNING_THRESHOLD and not self.is_exceeded
