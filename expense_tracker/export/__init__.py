"""CSV export package."""

from expense_tracker.export.csv_exporter import (
    CSV_HEADERS,
    export_filename,
    format_amount,
    quote_field,
    to_csv,
    trigger_download,
)

__all__ = [
    "CSV_HEADERS",
    "export_filename",
    "format_amount",
    "quote_field",
    "to_csv",
    "trigger_download",
]
