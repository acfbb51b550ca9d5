"""
Abstract Storage Interface

DESIGN DECISION: The expense collection lives in a plain key-value store
that holds string blobs, the same shape as browser local storage.
Defining the store as an interface allows us to:
1. Use in-memory storage for tests
2. Persist to local JSON files in production
3. Swap in another key-value backend without touching the repository

The interface is intentionally tiny: get, set, remove. Everything
expense-specific (serialization, fail-soft behaviour) belongs to
ExpenseRepository, not to backends.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueBackend(ABC):
    """
    Abstract interface for a string key-value store.

    Backends report failures by raising StorageError subclasses.
    They never swallow errors themselves.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: String to store

        Raises:
            StorageWriteError: If the write fails
            QuotaExceededError: If the value does not fit
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Raises:
            StorageWriteError: If the removal fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written to storage."""
    pass


class QuotaExceededError(StorageWriteError):
    """The value is larger than the backend will accept."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a record whose id already exists."""
    pass
