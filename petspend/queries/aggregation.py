"""
Expense Aggregation

DESIGN DECISION: Aggregation is a set of pure functions over a
sequence of expenses. Nothing here reads the store or caches a
result, so a LimitUsage always reflects the current expenses.

No rounding happens here. Whole-percent or whole-currency display
is up to the caller.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Optional
from uuid import UUID

from petspend.models.pet import (
    ExpenseCategory,
    LimitUsage,
    MonthPeriod,
    PetExpense,
    SpendingLimit,
)


def expenses_for_pet(
    expenses: Iterable[PetExpense],
    pet_id: UUID,
) -> list[PetExpense]:
    """Expenses belonging to a pet, in input order."""
    return [expense for expense in expenses if expense.pet_id == pet_id]


def expenses_for_pet_in_month(
    expenses: Iterable[PetExpense],
    pet_id: UUID,
    month: MonthPeriod,
) -> list[PetExpense]:
    """Expenses of a pet whose date falls in the given calendar month."""
    return [
        expense
        for expense in expenses_for_pet(expenses, pet_id)
        if month.contains(expense.date)
    ]


def total_amount(
    expenses: Iterable[PetExpense],
    pet_id: UUID,
    month: MonthPeriod,
    category: Optional[ExpenseCategory] = None,
) -> Decimal:
    """
    Exact sum of a pet's expenses for a month.

    Args:
        expenses: Expenses to aggregate
        pet_id: Pet to total
        month: Calendar month to total
        category: Only sum this category; None sums all categories

    Returns:
        The sum, Decimal("0") when nothing matches
    """
    total = Decimal("0")
    for expense in expenses_for_pet_in_month(expenses, pet_id, month):
        if category is None or expense.category == category:
            total += expense.amount
    return total


def category_breakdown(
    expenses: Iterable[PetExpense],
    pet_id: UUID,
    month: MonthPeriod,
) -> dict[ExpenseCategory, Decimal]:
    """
    Per-category sums for a pet's month.

    Only categories with at least one expense appear.
    """
    result: dict[ExpenseCategory, Decimal] = {}
    for expense in expenses_for_pet_in_month(expenses, pet_id, month):
        result[expense.category] = result.get(expense.category, Decimal("0")) + expense.amount
    return result


def usage_for(
    expenses: Iterable[PetExpense],
    limit: SpendingLimit,
) -> LimitUsage:
    """Compare a limit with what its pet spent in its month and category."""
    spent = total_amount(
        expenses,
        limit.pet_id,
        limit.month,
        category=limit.category,
    )
    return LimitUsage(limit=limit, spent=spent)


def usages_for(
    expenses: Iterable[PetExpense],
    limits: Iterable[SpendingLimit],
) -> list[LimitUsage]:
    """usage_for over every limit, limit order preserved."""
    # The expenses are walked once per limit
    expenses = list(expenses)
    return [usage_for(expenses, limit) for limit in limits]
