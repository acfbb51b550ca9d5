"""
Expense Tracker Facade

This module ties together all the components and defines the
operations the presentation layer consumes:
1. Entry (form → validate → build → add/update)
2. Listing (load → filter → sort)
3. Dashboard (summary, category breakdown, recent expenses, trend)
4. Export (load → filter → CSV → file)

DESIGN DECISION: The facade owns the clock.
Every "now" the pure analytics functions need is read once here and
passed down explicitly, so the engines themselves stay deterministic.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from expense_tracker.analytics import (
    category_breakdown,
    filter_expenses,
    monthly_spending,
    recent_expenses,
    summarize,
)
from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import Settings, get_settings
from expense_tracker.export import export_filename, to_csv, trigger_download
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.expense import (
    CategoryBreakdownItem,
    Expense,
    ExpenseFilters,
    ExpenseFormData,
    ExpenseSummary,
    ExpenseUpdate,
    MonthlySpending,
    ValidationResult,
    utc_now,
)
from expense_tracker.services.storage import ExpenseRepository, create_backend
from expense_tracker.validation import ExpenseValidator


class ExpenseTracker:
    """
    Single entry point for the expense tracker's operations.

    Every read goes back to the repository, so the tracker holds no
    state of its own beyond its collaborators.
    """

    def __init__(
        self,
        repository: ExpenseRepository,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
        export_dir: Union[str, Path, None] = None,
        recent_limit: int = 5,
        trend_months: int = 6,
    ):
        self._repository = repository
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock
        self._export_dir = Path(export_dir) if export_dir else Path("exports")
        self._recent_limit = recent_limit
        self._trend_months = trend_months

    @property
    def repository(self) -> ExpenseRepository:
        return self._repository

    # -------------------------------------------------------------------------
    # Collection
    # -------------------------------------------------------------------------

    def list_expenses(self) -> list[Expense]:
        """Every stored expense, in storage order."""
        return self._repository.load()

    def add(self, expense: Expense) -> list[Expense]:
        return self._repository.add(expense)

    def update(self, expense_id: str, changes: ExpenseUpdate) -> list[Expense]:
        return self._repository.update(expense_id, changes)

    def delete(self, expense_id: str) -> list[Expense]:
        return self._repository.delete(expense_id)

    def clear(self) -> None:
        self._repository.clear()

    def submit(
        self,
        form: ExpenseFormData,
        editing: Optional[Expense] = None,
    ) -> tuple[ValidationResult, list[Expense]]:
        """
        Validate a form and save it as a new or edited expense.

        Returns:
            (validation_result, expenses). When the form is invalid
            nothing is saved and ``expenses`` is the unchanged list.
        """
        now = self._clock()
        result = self._validator.validate(form, today=now.date())
        if not result.is_valid:
            self._audit_logger.log(
                AuditEventBuilder.validation_failed(
                    [issue.model_dump() for issue in result.issues]
                )
            )
            return result, self._repository.load()

        expense = self._validator.build_expense(form, now=now, existing=editing)
        if editing is None:
            return result, self._repository.add(expense)

        changes = ExpenseUpdate(
            date=expense.date,
            amount=expense.amount,
            category=expense.category,
            description=expense.description,
        )
        return result, self._repository.update(editing.id, changes)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def filtered(self, filters: Optional[ExpenseFilters] = None) -> list[Expense]:
        """Expenses matching ``filters``, newest first."""
        return filter_expenses(self._repository.load(), filters)

    def summary(self, filters: Optional[ExpenseFilters] = None) -> ExpenseSummary:
        """Summary of all expenses, or of the filtered subset."""
        expenses = self._repository.load()
        if filters is not None:
            expenses = filter_expenses(expenses, filters)
        return summarize(expenses, self._clock())

    def breakdown(self) -> list[CategoryBreakdownItem]:
        """Category shares of total spending, largest first."""
        return category_breakdown(self.summary())

    def recent(self, limit: Optional[int] = None) -> list[Expense]:
        if limit is None:
            limit = self._recent_limit
        return recent_expenses(self._repository.load(), limit)

    def trend(self, months: Optional[int] = None) -> list[MonthlySpending]:
        """Monthly totals for the last ``months`` months, oldest first."""
        if months is None:
            months = self._trend_months
        return monthly_spending(self._repository.load(), self._clock(), months)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_csv(self, filters: Optional[ExpenseFilters] = None) -> Optional[Path]:
        """
        Export the filtered view to a CSV file.

        Returns:
            Path of the written file, or None if there was nothing to
            export
        """
        expenses = self.filtered(filters)
        if not expenses:
            return None

        filename = export_filename(self._clock())
        path = trigger_download(to_csv(expenses), filename, self._export_dir)
        self._audit_logger.log(
            AuditEventBuilder.export_generated(
                filename,
                len(expenses),
                (filters or ExpenseFilters()).describe(),
            )
        )
        return path


def create_tracker(
    settings: Optional[Settings] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> ExpenseTracker:
    """
    Build a tracker from configuration.

    Configures logging, picks the storage backend, and wires the
    repository, validator and audit logger together.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings.log_level)
    audit_logger = audit_logger or AuditLogger()

    repository = ExpenseRepository(
        create_backend(storage_settings),
        storage_key=storage_settings.storage_key,
        audit_logger=audit_logger,
        currency=app_settings.currency_code,
    )
    return ExpenseTracker(
        repository,
        validator=ExpenseValidator(app_settings),
        audit_logger=audit_logger,
        export_dir=settings.export.directory,
        recent_limit=app_settings.recent_expenses_limit,
        trend_months=app_settings.trend_months,
    )
