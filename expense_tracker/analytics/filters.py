"""
Expense Filtering

Derives the displayed (and exported) view of the collection from
ExpenseFilters. Every active predicate is ANDed and the result is
always sorted newest first. The input list is never mutated.
"""

from collections.abc import Iterable
from typing import Optional

from expense_tracker.models.expense import Expense, ExpenseFilters


def filter_expenses(
    expenses: Iterable[Expense],
    filters: Optional[ExpenseFilters] = None,
) -> list[Expense]:
    """
    Apply filter criteria and sort by date, newest first.

    Args:
        expenses: Expenses to filter
        filters: Criteria; None means no filtering (sort only)

    Returns:
        A new list. Date bounds are inclusive; a date-only bound means
        midnight of that day. Sorting is stable, so re-filtering an
        already filtered list returns it unchanged.
    """
    filters = filters or ExpenseFilters()
    category = filters.category_filter
    query = filters.search_query.lower() if filters.search_query else None

    result = []
    for expense in expenses:
        if category is not None and expense.category != category:
            continue
        if query is not None and query not in expense.description.lower():
            continue
        if filters.start_date is not None and expense.date < filters.start_date:
            continue
        if filters.end_date is not None and expense.date > filters.end_date:
            continue
        result.append(expense)

    result.sort(key=lambda e: e.date, reverse=True)
    return result
