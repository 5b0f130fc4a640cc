from __future__ import annotations

import pytest

from planquota.core.errors import (
    BlobTooLargeError,
    StorageQuotaExceededError,
    UserNotInitializedError,
)
from planquota.core.plans import ONE_MB, Quotas, QuotaType
from planquota.services.quota import QuotaService
from planquota.services.storage_quota import StorageQuotaService


def test_should_be_able_to_check_storage_quota(
    quota: QuotaService, storage_quota: StorageQuotaService, user_id: str
) -> None:
    q1 = storage_quota.get_user_quota(user_id)
    assert q1 is not None
    assert q1.blob_limit == Quotas[0].configs.blob_limit
    assert q1.storage_quota == Quotas[0].configs.storage_quota
    assert q1.name == "Free"

    quota.switch_user_quota(user_id, QuotaType.ProPlanV1)
    q2 = storage_quota.get_user_quota(user_id)
    assert q2 is not None
    assert q2.blob_limit == Quotas[1].configs.blob_limit
    assert q2.storage_quota == Quotas[1].configs.storage_quota
    assert q2.history_period == Quotas[1].configs.history_period
    assert q2.member_limit == Quotas[1].configs.member_limit


def test_reverted_plan_reports_original_limits(
    quota: QuotaService, storage_quota: StorageQuotaService, user_id: str
) -> None:
    quota.switch_user_quota(user_id, QuotaType.ProPlanV1)
    quota.switch_user_quota(user_id, QuotaType.FreePlanV1)

    q3 = storage_quota.get_storage_quota(user_id)
    assert q3.plan_type == QuotaType.FreePlanV1.value
    assert q3.blob_limit == Quotas[0].configs.blob_limit
    assert q3.storage_quota == Quotas[0].configs.storage_quota
    assert len(quota.get_user_quotas(user_id)) == 3


def test_uninitialised_user_has_no_storage_quota(storage_quota: StorageQuotaService) -> None:
    assert storage_quota.get_user_quota("ghost") is None
    with pytest.raises(UserNotInitializedError):
        storage_quota.get_storage_quota("ghost")
    with pytest.raises(UserNotInitializedError):
        storage_quota.check_blob_quota("ghost", 0, 1)


def test_check_blob_quota_returns_remaining_bytes(
    storage_quota: StorageQuotaService, user_id: str
) -> None:
    limits = Quotas[0].configs
    remaining = storage_quota.check_blob_quota(user_id, used_bytes=ONE_MB, blob_size=ONE_MB)
    assert remaining == limits.storage_quota - 2 * ONE_MB


def test_check_blob_quota_rejects_large_blobs(
    storage_quota: StorageQuotaService, user_id: str
) -> None:
    limit = Quotas[0].configs.blob_limit
    with pytest.raises(BlobTooLargeError) as excinfo:
        storage_quota.check_blob_quota(user_id, used_bytes=0, blob_size=limit + 1)
    assert excinfo.value.blob_limit == limit


def test_check_blob_quota_rejects_full_storage(
    quota: QuotaService, storage_quota: StorageQuotaService, user_id: str
) -> None:
    limits = Quotas[0].configs
    with pytest.raises(StorageQuotaExceededError):
        storage_quota.check_blob_quota(user_id, used_bytes=limits.storage_quota, blob_size=1)

    quota.switch_user_quota(user_id, QuotaType.ProPlanV1)
    remaining = storage_quota.check_blob_quota(
        user_id, used_bytes=limits.storage_quota, blob_size=1
    )
    assert remaining == Quotas[1].configs.storage_quota - limits.storage_quota - 1


def test_check_blob_quota_rejects_negative_sizes(
    storage_quota: StorageQuotaService, user_id: str
) -> None:
    with pytest.raises(ValueError):
        storage_quota.check_blob_quota(user_id, used_bytes=-1, blob_size=1)


def test_blob_exactly_at_limit_is_accepted(
    storage_quota: StorageQuotaService, user_id: str
) -> None:
    limits = Quotas[0].configs
    remaining = storage_quota.check_blob_quota(user_id, used_bytes=0, blob_size=limits.blob_limit)
    assert remaining == limits.storage_quota - limits.blob_limit


def test_upload_filling_storage_exactly_leaves_zero(
    storage_quota: StorageQuotaService, user_id: str
) -> None:
    limits = Quotas[0].configs
    used = limits.storage_quota - ONE_MB
    assert storage_quota.check_blob_quota(user_id, used_bytes=used, blob_size=ONE_MB) == 0
