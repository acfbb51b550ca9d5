"""
Expense Repository

DESIGN DECISION: The whole collection is one JSON array under one key.
Every mutation is a read-modify-write of that array:
    load → change in memory → save_all → return the new list

The repository fails soft:
- load() never raises. Absent, unreadable or corrupted data is "no data";
  individual records that fail validation are skipped, the rest survive.
- save_all() never raises. A failed write is audited and reported by
  its return value, but the list-returning mutators still hand back the
  new in-memory list, so the caller keeps working. Mutation audit
  events are only emitted for writes that persisted.

There is no locking. A single writer is assumed; two writers sharing a
key race and the last write wins.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Optional, Union

import structlog
from pydantic import TypeAdapter, ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.expense import Expense, ExpenseUpdate, utc_now
from expense_tracker.services.storage.interface import (
    DuplicateError,
    KeyValueBackend,
    StorageError,
)
from expense_tracker.utils.formatting import format_currency


DEFAULT_STORAGE_KEY = "expense-tracker-data"

_EXPENSE_LIST = TypeAdapter(list[Expense])
_RECORD_LIST = TypeAdapter(list[Any])


class ExpenseRepository:
    """
    Persistence adapter for the expense collection.

    Args:
        backend: Key-value store the blob lives in
        storage_key: Key the blob is stored under
        audit_logger: Receives mutation and failure events
        clock: Source of ``updated_at`` timestamps
        currency: Currency code used when describing amounts in audit events
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        storage_key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
        currency: str = "USD",
    ):
        self._backend = backend
        self._storage_key = storage_key
        self._audit = audit_logger or AuditLogger()
        self._clock = clock
        self._currency = currency
        self._logger = structlog.get_logger(__name__)

    @property
    def storage_key(self) -> str:
        return self._storage_key

    def load(self) -> list[Expense]:
        """
        Load every stored expense.

        Returns an empty list if nothing is stored or the stored blob
        cannot be read or parsed. Records that fail validation are
        skipped and reported; valid ones are still returned.
        """
        try:
            raw = self._backend.get_item(self._storage_key)
        except StorageError as e:
            self._audit.log(
                AuditEventBuilder.storage_read_failed(self._storage_key, str(e))
            )
            return []

        if not raw:
            return []

        try:
            records = _RECORD_LIST.validate_json(raw)
        except ValidationError as e:
            self._audit.log(
                AuditEventBuilder.storage_read_failed(
                    self._storage_key,
                    f"Stored data is corrupted: {e.error_count()} errors",
                )
            )
            return []

        expenses = []
        skipped = 0
        for record in records:
            try:
                expenses.append(Expense.model_validate(record))
            except ValidationError:
                skipped += 1

        if skipped:
            self._audit.log(
                AuditEventBuilder.storage_read_failed(
                    self._storage_key,
                    f"Skipped {skipped} invalid of {len(records)} stored records",
                )
            )
        return expenses

    def save_all(self, expenses: list[Expense]) -> bool:
        """
        Replace the stored collection.

        Returns:
            True if the write succeeded, False if it failed (the
            failure is audited, never raised)
        """
        blob = _EXPENSE_LIST.dump_json(expenses, by_alias=True).decode("utf-8")
        try:
            self._backend.set_item(self._storage_key, blob)
        except StorageError as e:
            self._audit.log(
                AuditEventBuilder.storage_write_failed(
                    self._storage_key, str(e), len(expenses)
                )
            )
            return False

        self._logger.debug(
            "expenses_saved",
            storage_key=self._storage_key,
            record_count=len(expenses),
        )
        return True

    def get(self, expense_id: str) -> Optional[Expense]:
        """Find a stored expense by id."""
        for expense in self.load():
            if expense.id == expense_id:
                return expense
        return None

    def add(self, expense: Expense) -> list[Expense]:
        """
        Append an expense and persist.

        Raises:
            DuplicateError: If an expense with the same id is stored
        """
        expenses = self.load()
        if any(existing.id == expense.id for existing in expenses):
            raise DuplicateError(f"Expense {expense.id} already exists")

        new_expenses = [*expenses, expense]
        if self.save_all(new_expenses):
            self._audit.log(
                AuditEventBuilder.expense_added(
                    expense.id,
                    expense.category.value,
                    format_currency(expense.amount, self._currency),
                )
            )
        return new_expenses

    def update(
        self,
        expense_id: str,
        changes: Union[ExpenseUpdate, Mapping],
    ) -> list[Expense]:
        """
        Apply a partial update to one expense and persist.

        ``id`` and ``created_at`` are never changed; ``updated_at`` is
        stamped from the clock. Unknown ids leave the collection
        untouched.
        """
        if not isinstance(changes, ExpenseUpdate):
            changes = ExpenseUpdate.model_validate(dict(changes))
        fields = changes.changes()

        expenses = self.load()
        if not any(expense.id == expense_id for expense in expenses):
            self._logger.info("expense_update_skipped", expense_id=expense_id)
            return expenses

        new_expenses = [
            self._apply(expense, fields) if expense.id == expense_id else expense
            for expense in expenses
        ]
        if self.save_all(new_expenses):
            self._audit.log(
                AuditEventBuilder.expense_updated(expense_id, sorted(fields))
            )
        return new_expenses

    def delete(self, expense_id: str) -> list[Expense]:
        """Remove one expense and persist. Unknown ids are a no-op."""
        expenses = self.load()
        new_expenses = [expense for expense in expenses if expense.id != expense_id]
        if len(new_expenses) == len(expenses):
            self._logger.info("expense_delete_skipped", expense_id=expense_id)
            return expenses

        if self.save_all(new_expenses):
            self._audit.log(AuditEventBuilder.expense_deleted(expense_id))
        return new_expenses

    def clear(self) -> None:
        """Remove the whole collection from storage."""
        count = len(self.load())
        try:
            self._backend.remove_item(self._storage_key)
        except StorageError as e:
            self._audit.log(
                AuditEventBuilder.storage_write_failed(
                    self._storage_key, str(e), count
                )
            )
            return

        self._audit.log(AuditEventBuilder.expenses_cleared(count))

    def _apply(self, expense: Expense, fields: dict) -> Expense:
        """Build the updated record, re-validating the merged fields."""
        merged = expense.model_dump()
        merged.update(fields)
        merged["id"] = expense.id
        merged["created_at"] = expense.created_at
        merged["updated_at"] = self._clock()
        return Expense.model_validate(merged)
