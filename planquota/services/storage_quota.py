"""Storage limits derived from a user's active quota plan."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from planquota.core.errors import (
    BlobTooLargeError,
    StorageQuotaExceededError,
    UserNotInitializedError,
)
from planquota.core.logging import get_logger
from planquota.services.quota import QuotaService, UserQuota

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class StorageQuota:
    name: str
    plan_type: str
    reason: str | None
    created_at: datetime
    blob_limit: int
    storage_quota: int
    history_period: int
    member_limit: int

    @classmethod
    def from_user_quota(cls, quota: UserQuota) -> "StorageQuota":
        configs = quota.plan.configs
        return cls(
            name=configs.name,
            plan_type=quota.plan_type,
            reason=quota.reason,
            created_at=quota.created_at,
            blob_limit=configs.blob_limit,
            storage_quota=configs.storage_quota,
            history_period=configs.history_period,
            member_limit=configs.member_limit,
        )


class StorageQuotaService:
    """Read-only view over :class:`QuotaService` for upload enforcement."""

    def __init__(self, quota_service: QuotaService) -> None:
        self.quota_service = quota_service

    def get_user_quota(self, user_id: str) -> StorageQuota | None:
        quota = self.quota_service.get_user_quota(user_id)
        if quota is None:
            return None
        return StorageQuota.from_user_quota(quota)

    def get_storage_quota(self, user_id: str) -> StorageQuota:
        return StorageQuota.from_user_quota(self.quota_service.require_user_quota(user_id))

    def check_blob_quota(self, user_id: str, used_bytes: int, blob_size: int) -> int:
        """Return the bytes left after storing ``blob_size`` more bytes.

        ``used_bytes`` is the user's current usage as measured by the blob
        store.
        """
        if used_bytes < 0 or blob_size < 0:
            raise ValueError("used_bytes and blob_size must be non-negative")

        quota = self.get_user_quota(user_id)
        if quota is None:
            raise UserNotInitializedError(user_id)

        if blob_size > quota.blob_limit:
            logger.info(
                "blob_limit_exceeded",
                user_id=user_id,
                blob_size=blob_size,
                blob_limit=quota.blob_limit,
            )
            raise BlobTooLargeError(quota.blob_limit, blob_size)

        remaining = quota.storage_quota - (used_bytes + blob_size)
        if remaining < 0:
            logger.info(
                "storage_quota_exceeded",
                user_id=user_id,
                used_bytes=used_bytes,
                blob_size=blob_size,
                storage_quota=quota.storage_quota,
            )
            raise StorageQuotaExceededError(quota.storage_quota, used_bytes + blob_size)
        return remaining


__all__ = ["StorageQuota", "StorageQuotaService"]
