"""Tests for expense filtering."""

from datetime import datetime

from expense_tracker.analytics import filter_expenses
from expense_tracker.models import ExpenseCategory, ExpenseFilters


class TestFilterExpenses:
    """Tests for filter_expenses."""

    def test_no_filters_sorts_newest_first(self, sample_expenses):
        """Test that an empty filter returns everything, newest first."""
        result = filter_expenses(sample_expenses)
        assert [e.description for e in result] == [
            "Electricity bill", "Lunch with team", "Groceries",
        ]

    def test_category(self, sample_expenses):
        """Test filtering to one category."""
        result = filter_expenses(sample_expenses, ExpenseFilters(category="Food"))
        assert [e.description for e in result] == ["Lunch with team", "Groceries"]

    def test_all_category(self, sample_expenses):
        """Test that 'All' keeps every category."""
        result = filter_expenses(sample_expenses, ExpenseFilters.cleared())
        assert len(result) == 3

    def test_search_is_case_insensitive_substring(self, sample_expenses):
        """Test description search."""
        result = filter_expenses(sample_expenses, ExpenseFilters(search_query="LUNCH"))
        assert [e.description for e in result] == ["Lunch with team"]

        result = filter_expenses(sample_expenses, ExpenseFilters(search_query="ill"))
        assert [e.description for e in result] == ["Electricity bill"]

    def test_date_bounds_are_inclusive(self, sample_expenses):
        """Test that expenses exactly on either bound are kept."""
        filters = ExpenseFilters(start_date="2024-01-20", end_date="2024-02-01")
        result = filter_expenses(sample_expenses, filters)
        assert [e.description for e in result] == ["Electricity bill", "Lunch with team"]

    def test_date_only_end_bound_is_midnight(self, expense_factory):
        """Test that a date-only end bound excludes later times on that day."""
        expenses = [
            expense_factory("2024-01-20T00:00:00", "1", description="Midnight"),
            expense_factory("2024-01-20T15:00:00", "2", description="Afternoon"),
        ]
        result = filter_expenses(expenses, ExpenseFilters(end_date="2024-01-20"))
        assert [e.description for e in result] == ["Midnight"]

    def test_predicates_are_anded(self, sample_expenses):
        """Test combining category, search and date range."""
        filters = ExpenseFilters(
            category=ExpenseCategory.FOOD,
            search_query="groc",
            start_date=datetime(2024, 1, 1),
            end_date=datetime(2024, 1, 31),
        )
        result = filter_expenses(sample_expenses, filters)
        assert [e.description for e in result] == ["Groceries"]

        filters = ExpenseFilters(category="Bills", search_query="groc")
        assert filter_expenses(sample_expenses, filters) == []

    def test_idempotent(self, sample_expenses):
        """Test that filtering a filtered list changes nothing."""
        filters = ExpenseFilters(category="Food", search_query="e")
        once = filter_expenses(sample_expenses, filters)
        twice = filter_expenses(once, filters)
        assert [e.id for e in twice] == [e.id for e in once]

    def test_input_not_mutated(self, sample_expenses):
        """Test that the caller's list keeps its order."""
        ids = [e.id for e in sample_expenses]
        result = filter_expenses(sample_expenses)

        assert [e.id for e in sample_expenses] == ids
        assert result is not sample_expenses

    def test_same_date_keeps_input_order(self, expense_factory):
        """Test that the date sort is stable."""
        expenses = [
            expense_factory("2024-01-05", "1", description="first"),
            expense_factory("2024-01-05", "2", description="second"),
        ]
        result = filter_expenses(expenses)
        assert [e.description for e in result] == ["first", "second"]
