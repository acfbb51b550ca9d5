"""Aggregation and filtering over expense lists."""

from expense_tracker.analytics.filters import filter_expenses
from expense_tracker.analytics.summary import (
    category_breakdown,
    empty_category_totals,
    monthly_spending,
    recent_expenses,
    summarize,
    top_category,
)

__all__ = [
    "category_breakdown",
    "empty_category_totals",
    "filter_expenses",
    "monthly_spending",
    "recent_expenses",
    "summarize",
    "top_category",
]
