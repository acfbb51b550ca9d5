"""
Spending Aggregation

DESIGN DECISION: Aggregation is a set of pure functions.
They take the expense list and an explicit reference time, never read
the system clock, and never touch storage. Given the same inputs they
always return the same result.

All sums are Decimal so category totals add up to the grand total
exactly.
"""

import calendar
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from expense_tracker.models.expense import (
    CategoryBreakdownItem,
    Expense,
    ExpenseCategory,
    ExpenseSummary,
    MonthlySpending,
    coerce_datetime,
)


ZERO = Decimal("0")


def empty_category_totals() -> dict[ExpenseCategory, Decimal]:
    """Every category at zero, in enumeration order."""
    return {category: ZERO for category in ExpenseCategory}


def summarize(
    expenses: Iterable[Expense],
    reference_now: Union[datetime, date],
) -> ExpenseSummary:
    """
    Compute summary statistics for a list of expenses.

    Args:
        expenses: Expenses to aggregate
        reference_now: Defines the "current" calendar month for the
            monthly total

    Returns:
        ExpenseSummary with total, monthly total, zero-filled category
        totals, top category and mean amount
    """
    reference = coerce_datetime(reference_now)

    total = ZERO
    monthly_total = ZERO
    count = 0
    category_totals = empty_category_totals()

    for expense in expenses:
        count += 1
        total += expense.amount
        category_totals[expense.category] += expense.amount
        if (
            expense.date.year == reference.year
            and expense.date.month == reference.month
        ):
            monthly_total += expense.amount

    return ExpenseSummary(
        total_expenses=total,
        monthly_total=monthly_total,
        category_totals=category_totals,
        top_category=top_category(category_totals),
        average_expense=total / count if count else ZERO,
    )


def top_category(
    category_totals: Mapping[ExpenseCategory, Decimal],
) -> Optional[ExpenseCategory]:
    """
    Category with the strictly greatest total.

    Walks categories in enumeration order and only replaces the leader
    on a strictly greater total, so ties go to the earlier category.
    Returns None when nothing has been spent.
    """
    leader = None
    max_amount = ZERO
    for category in ExpenseCategory:
        amount = category_totals.get(category, ZERO)
        if amount > max_amount:
            max_amount = amount
            leader = category
    return leader


def category_breakdown(
    source: Union[ExpenseSummary, Mapping[ExpenseCategory, Decimal]],
) -> list[CategoryBreakdownItem]:
    """
    Each category's share of total spending, largest first.

    Categories with equal amounts keep enumeration order.
    """
    if isinstance(source, ExpenseSummary):
        totals = source.category_totals
    else:
        totals = source

    grand_total = sum((totals.get(c, ZERO) for c in ExpenseCategory), ZERO)

    items = []
    for category in ExpenseCategory:
        amount = totals.get(category, ZERO)
        percentage = float(amount / grand_total * 100) if grand_total > 0 else 0.0
        items.append(CategoryBreakdownItem(
            category=category,
            amount=amount,
            percentage=percentage,
        ))

    return sorted(items, key=lambda item: item.amount, reverse=True)


def monthly_spending(
    expenses: Iterable[Expense],
    reference_now: Union[datetime, date],
    months: int = 6,
) -> list[MonthlySpending]:
    """
    Spending per calendar month for the ``months`` months ending with
    the reference month, oldest first.
    """
    if months < 1:
        raise ValueError("months must be at least 1")

    reference = coerce_datetime(reference_now)

    buckets: dict[tuple[int, int], Decimal] = {}
    year, month = reference.year, reference.month
    for _ in range(months):
        buckets[(year, month)] = ZERO
        month -= 1
        if month == 0:
            month = 12
            year -= 1

    for expense in expenses:
        key = (expense.date.year, expense.date.month)
        if key in buckets:
            buckets[key] += expense.amount

    return [
        MonthlySpending(
            year=y,
            month=m,
            label=calendar.month_abbr[m],
            total=buckets[(y, m)],
        )
        for (y, m) in reversed(list(buckets))
    ]


def recent_expenses(expenses: Iterable[Expense], limit: int = 5) -> list[Expense]:
    """The ``limit`` most recent expenses, newest first."""
    return sorted(expenses, key=lambda e: e.date, reverse=True)[:limit]
