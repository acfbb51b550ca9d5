"""
Expense Form Validation

DESIGN DECISION: Form input is validated before any Expense is built.
The checks mirror what the entry form enforces:
- Date is required, must be a real calendar date, and cannot be in the future
- Amount is required and must be a positive number
- Description is required and must reach a minimum length
- Category must be one of the fixed categories

Every failed check is reported, not just the first, so the form can show
all inline errors at once.

IMPORTANT: Validation NEVER silently fixes input.
It reports issues; the caller decides what to do with them.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from expense_tracker.config import AppSettings, get_settings
from expense_tracker.models.expense import (
    Expense,
    ExpenseCategory,
    ExpenseFormData,
    ValidationIssue,
    ValidationResult,
    coerce_datetime,
    utc_now,
)


class ExpenseValidationError(ValueError):
    """Raised when an Expense is built from an invalid form."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(issue.message for issue in result.issues)
        super().__init__(f"Invalid expense: {messages}")


class ExpenseValidator:
    """Validates raw form input and turns valid input into Expenses."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    @property
    def min_description_length(self) -> int:
        return self._settings.min_description_length

    def validate(
        self,
        form: ExpenseFormData,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Check every form field.

        Args:
            form: Raw form input
            today: Latest allowed expense date (defaults to today, UTC)

        Returns:
            ValidationResult with one issue per failed check
        """
        today = today or utc_now().date()
        issues: list[ValidationIssue] = []

        issues.extend(self._check_date(form.date, today))
        issues.extend(self._check_amount(form.amount))
        issues.extend(self._check_description(form.description))
        issues.extend(self._check_category(form.category))

        return ValidationResult(issues=issues)

    def build_expense(
        self,
        form: ExpenseFormData,
        now: Optional[datetime] = None,
        existing: Optional[Expense] = None,
    ) -> Expense:
        """
        Build an Expense from a valid form.

        A new expense gets a fresh id and timestamps. When ``existing``
        is given (editing), its id and ``created_at`` are kept and only
        ``updated_at`` moves.

        Raises:
            ExpenseValidationError: If the form does not validate
        """
        now = now or utc_now()
        result = self.validate(form, today=now.date())
        if not result.is_valid:
            raise ExpenseValidationError(result)

        fields = dict(
            date=_parse_date(form.date),
            amount=Decimal(form.amount.strip()),
            category=ExpenseCategory(form.category),
            description=form.description.strip(),
            updated_at=now,
        )
        if existing is not None:
            return Expense(id=existing.id, created_at=existing.created_at, **fields)
        return Expense(created_at=now, **fields)

    def _check_date(self, value: str, today: date) -> list[ValidationIssue]:
        if not value or not value.strip():
            return [ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            )]

        try:
            parsed = _parse_date(value)
        except ValueError:
            return [ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Date must be a valid date (YYYY-MM-DD)",
            )]

        if parsed.date() > today:
            return [ValidationIssue(
                field="date",
                issue_type="future_date",
                message="Date cannot be in the future",
            )]
        return []

    def _check_amount(self, value: str) -> list[ValidationIssue]:
        if not value or not value.strip():
            return [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
            )]

        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            amount = None

        if amount is None or not amount.is_finite() or amount <= 0:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be a positive number",
            )]
        return []

    def _check_description(self, value: str) -> list[ValidationIssue]:
        text = (value or "").strip()
        if not text:
            return [ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
            )]

        if len(text) < self.min_description_length:
            return [ValidationIssue(
                field="description",
                issue_type="too_short",
                message=(
                    f"Description must be at least "
                    f"{self.min_description_length} characters"
                ),
            )]
        return []

    def _check_category(self, value: str) -> list[ValidationIssue]:
        allowed = [category.value for category in ExpenseCategory]
        if value not in allowed:
            return [ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message=f"Category must be one of: {', '.join(allowed)}",
            )]
        return []

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short text listing every problem, for display above the form."""
        if result.is_valid:
            return "All fields look good."

        lines = ["Please fix the following:"]
        for issue in result.issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)


def _parse_date(value: str) -> datetime:
    """Parse a form date; raises ValueError if it is not a date."""
    parsed = coerce_datetime(value.strip())
    if not isinstance(parsed, datetime):
        raise ValueError(f"Not a date: {value!r}")
    return parsed
