"""
Spending Insights

Derived numbers shown on a pet's statistics screen: how the month's
spend splits across categories, whether an overall limit was blown,
and how pets compare with each other.

Like the aggregation functions, these are pure and recompute
everything from the expenses they are given.
"""

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from petspend.models.pet import (
    ExpenseCategory,
    LimitUsage,
    MonthPeriod,
    Pet,
    PetExpense,
    SpendingLimit,
)
from petspend.queries.aggregation import (
    category_breakdown,
    expenses_for_pet_in_month,
    total_amount,
)


def _whole_percent(fraction: float) -> int:
    # Half away from zero, e.g. 0.125 -> 13
    return int(Decimal(str(fraction * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CategoryShare(BaseModel):
    """One category's part of a month's spend."""
    model_config = ConfigDict(frozen=True)

    category: ExpenseCategory
    amount: Decimal
    fraction: float

    @property
    def percent(self) -> int:
        return _whole_percent(self.fraction)

    @property
    def percent_text(self) -> str:
        return f"{self.percent}%"


class LimitOverrun(BaseModel):
    """Month total that went over the pet's overall limit."""
    model_config = ConfigDict(frozen=True)

    spent: Decimal
    limit: Decimal
    percent: int


class PetComparison(BaseModel):
    """A pet's spend next to the biggest spender in the comparison."""
    model_config = ConfigDict(frozen=True)

    pet: Pet
    amount: Decimal
    fraction_of_max: float


def category_shares(
    expenses: Iterable[PetExpense],
    pet_id: UUID,
    month: MonthPeriod,
) -> list[CategoryShare]:
    """
    Split of a pet's month spend across categories.

    Sorted by amount, largest first. Equal amounts keep the
    category declaration order. Empty when there is nothing to
    split or the month total is not positive.
    """
    sums = category_breakdown(expenses, pet_id, month)
    total = sum(sums.values(), Decimal("0"))
    if not sums or total <= 0:
        return []

    shares = [
        CategoryShare(
            category=category,
            amount=sums[category],
            fraction=float(sums[category] / total),
        )
        for category in ExpenseCategory
        if category in sums
    ]
    # sorted() is stable, so ties stay in declaration order
    return sorted(shares, key=lambda share: share.amount, reverse=True)


def total_limit_amount(limits: Iterable[SpendingLimit]) -> Optional[Decimal]:
    """
    Sum of the overall (category-less) limits.

    Returns None when there is no overall limit at all.
    """
    overall = [limit.amount for limit in limits if limit.category is None]
    if not overall:
        return None
    return sum(overall, Decimal("0"))


def overall_overrun(
    expenses: Iterable[PetExpense],
    pet_id: UUID,
    month: MonthPeriod,
    limits: Iterable[SpendingLimit],
) -> Optional[LimitOverrun]:
    """
    Report when a pet's month total exceeds its overall limit.

    `limits` should already be scoped to the pet and month, as
    returned by PetStore.limits_for(). Returns None when there is
    no positive overall limit or it was not exceeded.
    """
    limit = total_limit_amount(limits)
    if limit is None or limit <= 0:
        return None

    spent = total_amount(expenses, pet_id, month)
    if spent <= limit:
        return None

    return LimitOverrun(
        spent=spent,
        limit=limit,
        percent=_whole_percent(float(spent / limit)),
    )


def compare_pets(
    expenses: Iterable[PetExpense],
    pets: Sequence[Pet],
    month: MonthPeriod,
    category: Optional[ExpenseCategory] = None,
) -> list[PetComparison]:
    """
    Month spend of several pets, relative to the largest one.

    Args:
        expenses: Expenses to aggregate
        pets: Pets to compare, in display order
        month: Month to compare
        category: Compare one category; None compares totals

    Returns:
        One PetComparison per pet, in the order given
    """
    expenses = list(expenses)
    amounts = [total_amount(expenses, pet.id, month, category=category) for pet in pets]
    largest = max(amounts, default=Decimal("0"))

    return [
        PetComparison(
            pet=pet,
            amount=amount,
            fraction_of_max=float(amount / largest) if largest > 0 else 0.0,
        )
        for pet, amount in zip(pets, amounts)
    ]


def recent_expenses(
    expenses: Iterable[PetExpense],
    pet_id: UUID,
    month: MonthPeriod,
) -> list[PetExpense]:
    """A pet's expenses for the month, newest first."""
    return sorted(
        expenses_for_pet_in_month(expenses, pet_id, month),
        key=lambda expense: expense.date,
        reverse=True,
    )


def sorted_usages(usages: Iterable[LimitUsage]) -> list[LimitUsage]:
    """Usages ordered by limit title ('Food', 'Toys', 'Total', ...)."""
    return sorted(usages, key=lambda usage: usage.limit.title)
