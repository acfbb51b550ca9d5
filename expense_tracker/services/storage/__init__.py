"""
Storage Services Package

Provides the key-value backend interface, its implementations, and the
expense repository built on top of them.
"""

from typing import Optional

from expense_tracker.config import StorageSettings
from expense_tracker.services.storage.interface import (
    DuplicateError,
    KeyValueBackend,
    QuotaExceededError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.file_store import JSONFileBackend
from expense_tracker.services.storage.memory import InMemoryBackend
from expense_tracker.services.storage.repository import (
    DEFAULT_STORAGE_KEY,
    ExpenseRepository,
)


def create_backend(settings: Optional[StorageSettings] = None) -> KeyValueBackend:
    """Build the backend selected by configuration."""
    settings = settings or StorageSettings()
    if settings.backend == "memory":
        return InMemoryBackend()
    return JSONFileBackend(
        settings.data_dir,
        write_attempts=settings.write_attempts,
    )


__all__ = [
    # Interface
    "KeyValueBackend",
    # Exceptions
    "DuplicateError",
    "QuotaExceededError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryBackend",
    "JSONFileBackend",
    "create_backend",
    # Repository
    "DEFAULT_STORAGE_KEY",
    "ExpenseRepository",
]
