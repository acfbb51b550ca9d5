"""In-memory key-value backend, used by tests and the ``memory`` setting."""

from typing import Optional

from expense_tracker.services.storage.interface import (
    KeyValueBackend,
    QuotaExceededError,
)


class InMemoryBackend(KeyValueBackend):
    """
    Dict-backed store.

    ``quota_bytes`` caps the total UTF-8 size of all stored values,
    which lets tests reproduce a full browser store.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            used = sum(
                len(v.encode("utf-8"))
                for k, v in self._data.items()
                if k != key
            )
            if used + len(value.encode("utf-8")) > self._quota_bytes:
                raise QuotaExceededError(
                    f"Storing {key!r} would exceed the {self._quota_bytes} byte quota"
                )
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
