"""SQLAlchemy-backed quota repository."""
from __future__ import annotations

from contextlib import contextmanager
from datetime import timezone
from typing import Generator

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from planquota.core import models
from planquota.core.database import session_scope
from planquota.core.errors import TransactionConflictError
from planquota.core.logging import get_logger
from planquota.repositories.base import QuotaRecord

logger = get_logger(__name__)

_CONTENTION_MARKERS = ("locked", "deadlock", "could not serialize", "lock timeout")


def _is_contention(exc: OperationalError) -> bool:
    message = str(exc.orig or exc).lower()
    return any(marker in message for marker in _CONTENTION_MARKERS)


def _to_record(row: models.QuotaAssignment) -> QuotaRecord:
    created_at = row.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return QuotaRecord(
        id=row.id,
        user_id=row.user_id,
        plan_type=row.plan_type,
        activated=row.activated,
        created_at=created_at,
        reason=row.reason,
    )


class SqlTransaction:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_active(self, user_id: str) -> QuotaRecord | None:
        stmt = (
            select(models.QuotaAssignment)
            .where(
                models.QuotaAssignment.user_id == user_id,
                models.QuotaAssignment.activated.is_(True),
            )
            .with_for_update()
        )
        row = self.session.execute(stmt).scalar_one_or_none()
        return _to_record(row) if row is not None else None

    def list_history(self, user_id: str) -> list[QuotaRecord]:
        stmt = (
            select(models.QuotaAssignment)
            .where(models.QuotaAssignment.user_id == user_id)
            .order_by(models.QuotaAssignment.created_at, models.QuotaAssignment.id)
        )
        return [_to_record(row) for row in self.session.execute(stmt).scalars()]

    def deactivate(self, record_id: int) -> None:
        stmt = (
            update(models.QuotaAssignment)
            .where(
                models.QuotaAssignment.id == record_id,
                models.QuotaAssignment.activated.is_(True),
            )
            .values(activated=False)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount != 1:
            raise TransactionConflictError(f"Quota record {record_id} is no longer active")

    def insert(self, record: QuotaRecord) -> QuotaRecord:
        row = models.QuotaAssignment(
            user_id=record.user_id,
            plan_type=record.plan_type,
            activated=record.activated,
            reason=record.reason,
            created_at=record.created_at,
        )
        self.session.add(row)
        self.session.flush()
        return _to_record(row)


class SqlQuotaRepository:
    """Runs each transaction in its own session; commits on clean exit."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    @contextmanager
    def transaction(self) -> Generator[SqlTransaction, None, None]:
        try:
            with session_scope(self.session_factory) as session:
                yield SqlTransaction(session)
        except IntegrityError as exc:
            logger.warning("quota_transaction_conflict", error=str(exc.orig or exc))
            raise TransactionConflictError("Concurrent quota update detected") from exc
        except OperationalError as exc:
            if not _is_contention(exc):
                raise
            logger.warning("quota_transaction_contention", error=str(exc.orig or exc))
            raise TransactionConflictError("Quota record is locked by another transaction") from exc


__all__ = ["SqlQuotaRepository", "SqlTransaction"]
