"""Repository contract for per-user quota assignment records."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ContextManager, Protocol


@dataclass(frozen=True, slots=True)
class QuotaRecord:
    """Plain persisted assignment row; ``id`` is ``None`` until inserted."""

    user_id: str
    plan_type: str
    activated: bool
    created_at: datetime
    reason: str | None = None
    id: int | None = None


class QuotaTransaction(Protocol):
    """Operations that commit or roll back together."""

    def find_active(self, user_id: str) -> QuotaRecord | None:
        ...

    def list_history(self, user_id: str) -> list[QuotaRecord]:
        ...

    def deactivate(self, record_id: int) -> None:
        ...

    def insert(self, record: QuotaRecord) -> QuotaRecord:
        ...


class QuotaRepository(Protocol):
    def transaction(self) -> ContextManager[QuotaTransaction]:
        ...


__all__ = ["QuotaRecord", "QuotaRepository", "QuotaTransaction"]
