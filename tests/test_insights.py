"""Tests for spending insights (shares, overruns, comparisons)."""

import pytest
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from petspend.models.pet import (
    ExpenseCategory,
    LimitUsage,
    MonthPeriod,
    Pet,
    PetExpense,
    PetKind,
    SpendingLimit,
)
from petspend.queries.insights import (
    CategoryShare,
    category_shares,
    compare_pets,
    overall_overrun,
    recent_expenses,
    sorted_usages,
    total_limit_amount,
)


MARCH_2025 = MonthPeriod(year=2025, month=3)

felix = Pet(name="Felix", kind=PetKind.CAT)
rex = Pet(name="Rex", kind=PetKind.DOG)


def _expense(pet, category, amount, day=1):
    return PetExpense(
        pet_id=pet.id,
        category=category,
        amount=Decimal(amount),
        date=datetime(2025, 3, day),
    )


def _limit(amount, category=None, pet=felix):
    return SpendingLimit(
        pet_id=pet.id,
        category=category,
        month=MARCH_2025,
        amount=Decimal(amount),
    )


class TestCategoryShares:
    """Tests for category_shares."""

    def test_sorted_by_amount(self):
        """Test shares are ordered largest first with fractions of the total."""
        expenses = [
            _expense(felix, ExpenseCategory.FOOD, "84"),
            _expense(felix, ExpenseCategory.VETERINARY_CARE, "90"),
            _expense(felix, ExpenseCategory.TOYS, "26"),
        ]
        shares = category_shares(expenses, felix.id, MARCH_2025)
        assert [s.category for s in shares] == [
            ExpenseCategory.VETERINARY_CARE,
            ExpenseCategory.FOOD,
            ExpenseCategory.TOYS,
        ]
        assert shares[0].fraction == pytest.approx(0.45)
        assert shares[0].percent_text == "45%"
        assert sum(s.fraction for s in shares) == pytest.approx(1.0)

    def test_ties_keep_declaration_order(self):
        """Test equal amounts are listed in category order."""
        expenses = [
            _expense(felix, ExpenseCategory.OTHER, "10"),
            _expense(felix, ExpenseCategory.GROOMING, "10"),
        ]
        shares = category_shares(expenses, felix.id, MARCH_2025)
        assert [s.category for s in shares] == [ExpenseCategory.GROOMING, ExpenseCategory.OTHER]

    def test_empty_month(self):
        """Test no expenses gives no shares."""
        assert category_shares([], felix.id, MARCH_2025) == []

    def test_non_positive_total(self):
        """Test a zero total gives no shares instead of dividing by zero."""
        expenses = [_expense(felix, ExpenseCategory.FOOD, "0")]
        assert category_shares(expenses, felix.id, MARCH_2025) == []

    def test_percent_rounds_half_up(self):
        """Test whole-percent rounding."""
        share = CategoryShare(category=ExpenseCategory.FOOD, amount=Decimal("1"), fraction=0.125)
        assert share.percent == 13


class TestOverallLimit:
    """Tests for total_limit_amount and overall_overrun."""

    def test_total_limit_ignores_category_limits(self):
        """Test only category-less limits are summed."""
        limits = [_limit("100"), _limit("50", ExpenseCategory.FOOD), _limit("20")]
        assert total_limit_amount(limits) == Decimal("120")

    def test_no_overall_limit(self):
        """Test None when only category limits exist."""
        assert total_limit_amount([_limit("50", ExpenseCategory.FOOD)]) is None

    def test_overrun_reported(self):
        """Test $174 against a $150 overall limit is a 116% overrun."""
        expenses = [
            _expense(felix, ExpenseCategory.FOOD, "84"),
            _expense(felix, ExpenseCategory.VETERINARY_CARE, "90"),
        ]
        overrun = overall_overrun(expenses, felix.id, MARCH_2025, [_limit("150")])
        assert overrun is not None
        assert overrun.spent == Decimal("174")
        assert overrun.limit == Decimal("150")
        assert overrun.percent == 116

    def test_no_overrun_at_limit(self):
        """Test spending exactly the limit is not an overrun."""
        expenses = [_expense(felix, ExpenseCategory.FOOD, "150")]
        assert overall_overrun(expenses, felix.id, MARCH_2025, [_limit("150")]) is None

    def test_no_overrun_with_zero_limit(self):
        """Test a zero overall limit is ignored."""
        expenses = [_expense(felix, ExpenseCategory.FOOD, "10")]
        assert overall_overrun(expenses, felix.id, MARCH_2025, [_limit("0")]) is None


class TestComparePets:
    """Tests for compare_pets."""

    def test_totals_relative_to_largest(self):
        """Test fractions are relative to the biggest spender."""
        expenses = [
            _expense(felix, ExpenseCategory.FOOD, "84"),
            _expense(felix, ExpenseCategory.VETERINARY_CARE, "90"),
            _expense(rex, ExpenseCategory.TOYS, "87"),
        ]
        result = compare_pets(expenses, [felix, rex], MARCH_2025)
        assert [c.pet.id for c in result] == [felix.id, rex.id]
        assert [c.amount for c in result] == [Decimal("174"), Decimal("87")]
        assert result[0].fraction_of_max == pytest.approx(1.0)
        assert result[1].fraction_of_max == pytest.approx(0.5)

    def test_by_category(self):
        """Test comparing a single category."""
        expenses = [
            _expense(felix, ExpenseCategory.FOOD, "84"),
            _expense(rex, ExpenseCategory.TOYS, "30"),
        ]
        result = compare_pets(expenses, [felix, rex], MARCH_2025, ExpenseCategory.TOYS)
        assert [c.amount for c in result] == [Decimal("0"), Decimal("30")]

    def test_nothing_spent(self):
        """Test all fractions are zero when nobody spent anything."""
        result = compare_pets([], [felix, rex], MARCH_2025)
        assert [c.fraction_of_max for c in result] == [0.0, 0.0]


class TestOrdering:
    """Tests for recent_expenses and sorted_usages."""

    def test_recent_expenses_newest_first(self):
        """Test expenses are ordered by date, newest first."""
        expenses = [
            _expense(felix, ExpenseCategory.FOOD, "1", day=3),
            _expense(felix, ExpenseCategory.FOOD, "2", day=28),
            _expense(felix, ExpenseCategory.FOOD, "3", day=11),
        ]
        result = recent_expenses(expenses, felix.id, MARCH_2025)
        assert [e.amount for e in result] == [Decimal("2"), Decimal("3"), Decimal("1")]

    def test_sorted_usages_by_title(self):
        """Test usages are ordered by limit title."""
        usages = [
            LimitUsage(limit=_limit("10"), spent=Decimal("0")),
            LimitUsage(limit=_limit("10", ExpenseCategory.TOYS), spent=Decimal("0")),
            LimitUsage(limit=_limit("10", ExpenseCategory.FOOD), spent=Decimal("0")),
        ]
        assert [u.limit.title for u in sorted_usages(usages)] == ["Food", "Total", "Toys"]
