from __future__ import annotations

import pytest
from pydantic import ValidationError

from planquota import create_services
from planquota.core.errors import PlanNotFoundError
from planquota.core.logging import resolve_level
from planquota.core.plans import QuotaType
from planquota.core.settings import Settings
from planquota.repositories.memory import InMemoryQuotaRepository
from planquota.repositories.sql import SqlQuotaRepository


def test_factory_wires_sql_repository(settings: Settings) -> None:
    services = create_services(settings)
    try:
        assert isinstance(services.quota.repository, SqlQuotaRepository)
        assert services.storage_quota.quota_service is services.quota

        services.quota.initialize_default_quota("u1")
        services.quota.switch_user_quota("u1", QuotaType.ProPlanV1)
        limits = services.storage_quota.get_user_quota("u1")
        assert limits is not None
        assert limits.plan_type == QuotaType.ProPlanV1.value
    finally:
        services.dispose()


def test_factory_persists_between_instances(settings: Settings) -> None:
    first = create_services(settings)
    first.quota.initialize_default_quota("u1")
    first.quota.switch_user_quota("u1", QuotaType.ProPlanV1)
    first.dispose()

    second = create_services(settings)
    try:
        assert len(second.quota.get_user_quotas("u1")) == 2
        assert second.quota.has_quota("u1", QuotaType.ProPlanV1)
    finally:
        second.dispose()


def test_factory_honours_default_plan_setting(settings: Settings) -> None:
    settings.default_plan = "pro_plan_v1"
    services = create_services(settings, repository=InMemoryQuotaRepository())
    assert services.engine is None
    assert services.quota.initialize_default_quota("u1").plan_type == "pro_plan_v1"


def test_factory_rejects_unknown_default_plan(settings: Settings) -> None:
    settings.default_plan = "enterprise_plan_v1"
    with pytest.raises(PlanNotFoundError):
        create_services(settings, repository=InMemoryQuotaRepository())


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("PLANQUOTA_DEFAULT_PLAN", "pro_plan_v1")
    monkeypatch.setenv("PLANQUOTA_DATA_DIR", str(tmp_path))
    settings = Settings()
    assert settings.default_plan == "pro_plan_v1"
    assert settings.resolved_database_url.endswith("quota.db")


def test_log_level_is_normalised() -> None:
    assert Settings(log_level="debug").log_level == "DEBUG"


def test_unknown_log_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLANQUOTA_LOG_LEVEL", "FOO")
    with pytest.raises(ValidationError):
        Settings()
    with pytest.raises(ValueError):
        resolve_level("FOO")
