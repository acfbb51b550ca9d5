"""Shared helpers."""

from expense_tracker.utils.formatting import format_currency, format_date

__all__ = ["format_currency", "format_date"]
