"""
Core Data Models for the Expense Tracker

These models define the schemas for every piece of data that flows
through the tracker. They are designed to:
1. Enforce the expense invariants at runtime (positive amount, closed category set)
2. Provide clear validation error messages
3. Serialize to the persisted blob layout (camelCase field names)

DESIGN DECISION: All timestamps are naive UTC in memory.
Timezone-aware input is converted to UTC and the tzinfo dropped, so
comparisons between stored dates and filter bounds never mix the two.
On the way out they are written as ``YYYY-MM-DDTHH:MM:SS.sssZ``.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional, Union
from uuid import uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


def utc_now() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_id() -> str:
    """Create a new opaque expense identifier."""
    return str(uuid4())


def coerce_datetime(value):
    """
    Normalize date-like input to a naive UTC datetime.

    Accepts date objects, datetimes (aware or naive), date-only strings
    (interpreted as midnight) and full ISO-8601 timestamps, including
    the trailing ``Z`` form. Anything else is passed through for
    Pydantic to reject.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return value
        if len(text) == 10:
            value = date.fromisoformat(text)
        else:
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            value = datetime.fromisoformat(text)

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    return value


def to_iso_string(value: datetime) -> str:
    """
    Render a naive UTC datetime as stored: ``2024-01-05T00:00:00.000Z``.

    Millisecond precision with a ``Z`` designator, the same text browser
    clients write, so stored blobs and CSV exports keep one format.
    """
    return value.isoformat(timespec="milliseconds") + "Z"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    CRITICAL: Declaration order is significant. Summaries zero-fill and
    break top-category ties in exactly this order.
    """
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    OTHER = "Other"


ALL_CATEGORIES = "All"


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded expense.

    The persisted layout uses camelCase names (``createdAt``,
    ``updatedAt``); either spelling is accepted when constructing.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=generate_id,
        min_length=1,
        description="Opaque unique identifier, immutable"
    )
    date: datetime = Field(
        ...,
        description="When the expense happened"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount in currency units"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        alias="createdAt",
        validation_alias=AliasChoices("createdAt", "created_at"),
        description="When the record was created"
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        alias="updatedAt",
        validation_alias=AliasChoices("updatedAt", "updated_at"),
        description="Last mutation timestamp"
    )

    @field_validator("date", "created_at", "updated_at", mode="before")
    @classmethod
    def normalize_timestamps(cls, v):
        return coerce_datetime(v)

    @field_serializer("date", "created_at", "updated_at", when_used="json")
    def serialize_timestamp(self, value: datetime) -> str:
        return to_iso_string(value)

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> float:
        """Store amounts as JSON numbers, not strings."""
        return float(amount)

    def to_storage_dict(self) -> dict:
        """Convert to the JSON-ready dict written to the storage blob."""
        return self.model_dump(mode="json", by_alias=True)


class ExpenseUpdate(BaseModel):
    """
    Partial set of fields applied to an existing expense.

    Only fields that are explicitly set to a value are applied; ``id`` and
    ``created_at`` are not part of the model and cannot be changed.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    date: Optional[datetime] = None
    amount: Optional[Decimal] = Field(default=None, gt=0)
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = Field(default=None, min_length=1)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v):
        return coerce_datetime(v)

    def changes(self) -> dict:
        """Fields explicitly set on this update."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ExpenseFormData(BaseModel):
    """
    Raw input as typed into the expense form.

    Every field is a string; nothing here is trusted until it has been
    through ExpenseValidator.
    """
    date: str = ""
    amount: str = ""
    category: str = ExpenseCategory.FOOD.value
    description: str = ""

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseFormData":
        """Pre-fill the form for editing an existing expense."""
        return cls(
            date=expense.date.date().isoformat(),
            amount=str(expense.amount),
            category=expense.category.value,
            description=expense.description,
        )


# =============================================================================
# FILTER CRITERIA
# =============================================================================

class ExpenseFilters(BaseModel):
    """
    Optional predicates narrowing the displayed or exported list.

    Empty strings are treated the same as absent values, which is what
    a cleared form field produces.
    """

    category: Optional[Union[ExpenseCategory, Literal["All"]]] = None
    search_query: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("category", "search_query", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_bounds(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return coerce_datetime(v)

    @classmethod
    def cleared(cls) -> "ExpenseFilters":
        """The reset state: all categories, no search, no date bounds."""
        return cls(category=ALL_CATEGORIES)

    @property
    def category_filter(self) -> Optional[ExpenseCategory]:
        """The category to match, or None when not filtering by category."""
        if self.category is None or self.category == ALL_CATEGORIES:
            return None
        return self.category

    @property
    def is_active(self) -> bool:
        return any((
            self.category_filter is not None,
            bool(self.search_query),
            self.start_date is not None,
            self.end_date is not None,
        ))

    def describe(self) -> str:
        """Human-readable description of the active predicates."""
        parts = []
        if self.category_filter is not None:
            parts.append(f"category: {self.category_filter.value}")
        if self.search_query:
            parts.append(f"matching '{self.search_query}'")
        date_range = _date_range_str(self.start_date, self.end_date)
        if date_range:
            parts.append(date_range)
        if not parts:
            return "All expenses"
        return "Expenses | " + " | ".join(parts)


def _date_range_str(
    date_from: Optional[datetime],
    date_to: Optional[datetime],
) -> str:
    """Format a date range for descriptions."""
    if date_from and date_to:
        if date_from.date() == date_to.date():
            return f"on {date_from.strftime('%d %b %Y')}"
        elif date_from.month == date_to.month and date_from.year == date_to.year:
            return f"in {date_from.strftime('%B %Y')}"
        elif date_from.year == date_to.year:
            return f"from {date_from.strftime('%b')} to {date_to.strftime('%b %Y')}"
        else:
            return f"from {date_from.strftime('%b %Y')} to {date_to.strftime('%b %Y')}"
    elif date_from:
        return f"from {date_from.strftime('%d %b %Y')}"
    elif date_to:
        return f"until {date_to.strftime('%d %b %Y')}"
    return ""


# =============================================================================
# DERIVED ANALYTICS MODELS (never persisted)
# =============================================================================

class ExpenseSummary(BaseModel):
    """Aggregate statistics over a list of expenses."""

    total_expenses: Decimal = Field(
        default=Decimal("0"),
        description="Sum of all amounts"
    )
    monthly_total: Decimal = Field(
        default=Decimal("0"),
        description="Sum of amounts in the reference calendar month"
    )
    category_totals: dict[ExpenseCategory, Decimal] = Field(
        default_factory=dict,
        description="Total per category, every category present"
    )
    top_category: Optional[ExpenseCategory] = Field(
        default=None,
        description="Category with the greatest total, None if nothing was spent"
    )
    average_expense: Decimal = Field(
        default=Decimal("0"),
        description="Mean amount per expense, 0 for an empty list"
    )


class CategoryBreakdownItem(BaseModel):
    """One category's share of total spending."""

    category: ExpenseCategory
    amount: Decimal
    percentage: float = Field(
        ge=0.0,
        le=100.0,
        description="Share of the grand total (0-100)"
    )


class MonthlySpending(BaseModel):
    """Total spent in one calendar month."""

    year: int
    month: int = Field(ge=1, le=12)
    label: str = Field(
        ...,
        description="Abbreviated month name, e.g. 'Jan'"
    )
    total: Decimal = Decimal("0")


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in form input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating an expense form."""

    validated_at: datetime = Field(
        default_factory=utc_now
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        """Valid when there are no error-level issues."""
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def errors_by_field(self) -> dict[str, str]:
        """First error message per field, for inline display."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error" and issue.field not in errors:
                errors[issue.field] = issue.message
        return errors
