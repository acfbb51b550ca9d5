"""
CSV Export

DESIGN DECISION: The CSV layout is a fixed external contract:

    Date,Category,Amount,Description
    2024-01-20T00:00:00.000Z,Food,30,"Lunch at ""Joe's"", downtown"

- Columns are always Date, Category, Amount, Description, in that order
- Date is the stored ISO string (``...sssZ``) and category the raw label
- Amount is a plain number: no currency symbol, no thousands separator,
  no trailing zeros
- Description is ALWAYS quoted and embedded quotes are doubled; this is
  the only escaping performed
- Rows are joined with "\\n" and there is no trailing newline

Serialization is pure. Writing the file is a separate step
(trigger_download) so the text can be checked before anything touches
the filesystem.
"""

from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Union

from expense_tracker.models.expense import Expense, to_iso_string


CSV_HEADERS = ["Date", "Category", "Amount", "Description"]


def format_amount(amount: Decimal) -> str:
    """Render an amount as a bare number: ``20``, ``12.5``, ``0.99``."""
    return format(amount.normalize(), "f")


def quote_field(value: str) -> str:
    """Wrap a value in double quotes, doubling any embedded quotes."""
    return '"' + value.replace('"', '""') + '"'


def expense_to_row(expense: Expense) -> str:
    """Convert one expense to a CSV line (no terminator)."""
    return ",".join([
        to_iso_string(expense.date),
        expense.category.value,
        format_amount(expense.amount),
        quote_field(expense.description),
    ])


def to_csv(expenses: Iterable[Expense]) -> str:
    """
    Serialize expenses to CSV text, preserving input order.

    The header row is always present, even for an empty list.
    """
    lines = [",".join(CSV_HEADERS)]
    lines.extend(expense_to_row(expense) for expense in expenses)
    return "\n".join(lines)


def export_filename(export_date: Union[date, datetime]) -> str:
    """File name for an export made on ``export_date``: ``expenses-YYYY-MM-DD.csv``."""
    if isinstance(export_date, datetime):
        export_date = export_date.date()
    return f"expenses-{export_date.isoformat()}.csv"


def trigger_download(text: str, filename: str, directory: Union[str, Path]) -> Path:
    """
    Write exported CSV text to ``directory/filename``.

    The directory is created if needed and an existing file of the same
    name is replaced.

    Returns:
        Path of the written file
    """
    if Path(filename).name != filename:
        raise ValueError(f"Export filename must not contain a path: {filename!r}")

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    path.write_text(text, encoding="utf-8", newline="")
    return path
