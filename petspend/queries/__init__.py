"""Aggregation and insight functions over expenses."""

from petspend.queries.aggregation import (
    category_breakdown,
    expenses_for_pet,
    expenses_for_pet_in_month,
    total_amount,
    usage_for,
    usages_for,
)
from petspend.queries.insights import (
    CategoryShare,
    LimitOverrun,
    PetComparison,
    category_shares,
    compare_pets,
    overall_overrun,
    recent_expenses,
    sorted_usages,
    total_limit_amount,
)

__all__ = [
    # Aggregation
    "category_breakdown",
    "expenses_for_pet",
    "expenses_for_pet_in_month",
    "total_amount",
    "usage_for",
    "usages_for",
    # Insights
    "CategoryShare",
    "LimitOverrun",
    "PetComparison",
    "category_shares",
    "compare_pets",
    "overall_overrun",
    "recent_expenses",
    "sorted_usages",
    "total_limit_amount",
]
