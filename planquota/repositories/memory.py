"""In-memory quota repository used by tests and local tooling."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Generator

from planquota.core.errors import TransactionConflictError
from planquota.repositories.base import QuotaRecord


class InMemoryTransaction:
    """Stages changes on a private copy of the store."""

    def __init__(self, records: dict[int, QuotaRecord], sequence: int) -> None:
        self.records = records
        self.sequence = sequence

    def find_active(self, user_id: str) -> QuotaRecord | None:
        for record in self.records.values():
            if record.user_id == user_id and record.activated:
                return record
        return None

    def list_history(self, user_id: str) -> list[QuotaRecord]:
        history = [record for record in self.records.values() if record.user_id == user_id]
        return sorted(history, key=lambda record: (record.created_at, record.id))

    def deactivate(self, record_id: int) -> None:
        record = self.records.get(record_id)
        if record is None or not record.activated:
            raise TransactionConflictError(f"Quota record {record_id} is no longer active")
        self.records[record_id] = replace(record, activated=False)

    def insert(self, record: QuotaRecord) -> QuotaRecord:
        if record.activated and self.find_active(record.user_id) is not None:
            raise TransactionConflictError(
                f"User {record.user_id!r} already has an active quota record"
            )
        self.sequence += 1
        stored = replace(record, id=self.sequence)
        self.records[stored.id] = stored
        return stored


class InMemoryQuotaRepository:
    """Thread-safe store whose transactions are serialised by one lock.

    Transactions do not nest: opening one while the same thread already
    holds one raises ``RuntimeError``.
    """

    def __init__(self) -> None:
        self._records: dict[int, QuotaRecord] = {}
        self._sequence = 0
        self._lock = threading.Lock()
        self._owner: int | None = None

    @contextmanager
    def transaction(self) -> Generator[InMemoryTransaction, None, None]:
        if self._owner == threading.get_ident():
            raise RuntimeError("Nested in-memory quota transactions are not supported")
        with self._lock:
            self._owner = threading.get_ident()
            try:
                unit = InMemoryTransaction(dict(self._records), self._sequence)
                yield unit
                self._records = unit.records
                self._sequence = unit.sequence
            finally:
                self._owner = None

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["InMemoryQuotaRepository", "InMemoryTransaction"]
