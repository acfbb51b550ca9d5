"""
Expense Tracker - Source Package

A personal expense tracker: record expenses, see where the money goes,
filter and search, and export what you see to CSV.

DESIGN PRINCIPLES:
1. The whole collection is one blob under one key in a key-value store
2. Storage fails soft: unreadable data is "no data", failed writes are logged
3. Analytics are pure functions with an explicit reference time
4. The CSV layout is a fixed contract
5. Storage backend is swappable
"""

from expense_tracker.tracker import ExpenseTracker, create_tracker

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"

__all__ = ["ExpenseTracker", "create_tracker"]
