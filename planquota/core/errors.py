"""Exception hierarchy raised by the quota services and repositories."""
from __future__ import annotations


class QuotaError(Exception):
    """Base exception for all quota errors."""


class PlanNotFoundError(QuotaError, KeyError):
    """Raised by the plan catalog when a plan type is not registered."""

    def __init__(self, plan_type: str) -> None:
        super().__init__(plan_type)
        self.plan_type = plan_type

    def __str__(self) -> str:
        return f"Unknown plan type: {self.plan_type!r}"


class InvalidPlanError(QuotaError, ValueError):
    """Raised when a caller requests a plan that is not in the catalog."""

    def __init__(self, plan_type: str) -> None:
        super().__init__(f"Invalid plan type: {plan_type!r}")
        self.plan_type = plan_type


class UserNotInitializedError(QuotaError):
    """Raised when a user has no quota assignment at all."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User {user_id!r} has no quota assignment")
        self.user_id = user_id


class TransactionConflictError(QuotaError):
    """Raised when a concurrent switch for the same user won the race.

    The transaction has been rolled back; the caller may retry.
    """


class StorageQuotaExceededError(QuotaError):
    """Raised when an upload would exceed the user's total storage quota."""

    def __init__(self, storage_quota: int, requested: int) -> None:
        super().__init__(
            f"Storage quota of {storage_quota} bytes exceeded (requested {requested} bytes)"
        )
        self.storage_quota = storage_quota
        self.requested = requested


class BlobTooLargeError(QuotaError):
    """Raised when a single blob is larger than the plan's blob limit."""

    def __init__(self, blob_limit: int, requested: int) -> None:
        super().__init__(f"Blob of {requested} bytes exceeds the {blob_limit} bytes limit")
        self.blob_limit = blob_limit
        self.requested = requested


__all__ = [
    "QuotaError",
    "PlanNotFoundError",
    "InvalidPlanError",
    "UserNotInitializedError",
    "TransactionConflictError",
    "StorageQuotaExceededError",
    "BlobTooLargeError",
]
