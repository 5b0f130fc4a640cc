"""Quota assignment repositories."""
from planquota.repositories.base import QuotaRecord, QuotaRepository, QuotaTransaction
from planquota.repositories.memory import InMemoryQuotaRepository
from planquota.repositories.sql import SqlQuotaRepository

__all__ = [
    "QuotaRecord",
    "QuotaRepository",
    "QuotaTransaction",
    "InMemoryQuotaRepository",
    "SqlQuotaRepository",
]
