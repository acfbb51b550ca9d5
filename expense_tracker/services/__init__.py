"""Services package."""

from expense_tracker.services.storage import (
    DEFAULT_STORAGE_KEY,
    DuplicateError,
    ExpenseRepository,
    InMemoryBackend,
    JSONFileBackend,
    KeyValueBackend,
    QuotaExceededError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    create_backend,
)

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "DuplicateError",
    "ExpenseRepository",
    "InMemoryBackend",
    "JSONFileBackend",
    "KeyValueBackend",
    "QuotaExceededError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "create_backend",
]
