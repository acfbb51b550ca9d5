"""Shared fixtures for the expense tracker tests."""

from datetime import datetime
from decimal import Decimal

import pytest

from expense_tracker.audit import AuditLogger, InMemoryAuditSink
from expense_tracker.config import AppSettings
from expense_tracker.models import Expense, ExpenseCategory
from expense_tracker.services.storage import ExpenseRepository, InMemoryBackend
from expense_tracker.validation import ExpenseValidator


FIXED_NOW = datetime(2024, 2, 15, 12, 0, 0)


class FakeClock:
    """Clock returning a fixed time that tests can move forward."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_expense(
    date: str,
    amount: str,
    category: ExpenseCategory = ExpenseCategory.FOOD,
    description: str = "Test expense",
    **kwargs,
) -> Expense:
    return Expense(
        date=date,
        amount=Decimal(amount),
        category=category,
        description=description,
        **kwargs,
    )


@pytest.fixture
def expense_factory():
    return make_expense


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture
def audit_logger(audit_sink):
    return AuditLogger(sink=audit_sink)


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def repository(backend, audit_logger, clock):
    return ExpenseRepository(backend, audit_logger=audit_logger, clock=clock)


@pytest.fixture
def validator():
    return ExpenseValidator(AppSettings())


@pytest.fixture
def sample_expenses():
    """Two Food expenses in January and one Bills expense in February 2024."""
    return [
        make_expense("2024-01-05", "20.00", ExpenseCategory.FOOD, "Groceries"),
        make_expense("2024-01-20", "30.00", ExpenseCategory.FOOD, "Lunch with team"),
        make_expense("2024-02-01", "50.00", ExpenseCategory.BILLS, "Electricity bill"),
    ]
