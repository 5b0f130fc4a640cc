"""Quota business services."""
from planquota.services.quota import QuotaService, UserQuota
from planquota.services.storage_quota import StorageQuota, StorageQuotaService

__all__ = ["QuotaService", "UserQuota", "StorageQuota", "StorageQuotaService"]
