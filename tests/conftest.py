"""Shared fixtures for the quota service tests."""
from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from planquota.core.database import (
    create_engine_from_settings,
    create_session_factory,
    init_database,
)
from planquota.core.plans import PlanCatalog
from planquota.core.settings import Settings
from planquota.repositories.base import QuotaRepository
from planquota.repositories.memory import InMemoryQuotaRepository
from planquota.repositories.sql import SqlQuotaRepository
from planquota.services.quota import QuotaService
from planquota.services.storage_quota import StorageQuotaService


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path,
        database_url=f"sqlite:///{(tmp_path / 'quota.db').as_posix()}",
        log_json=False,
    )


@pytest.fixture
def catalog() -> PlanCatalog:
    return PlanCatalog()


@pytest.fixture
def sql_repository(settings: Settings) -> Iterator[SqlQuotaRepository]:
    engine = create_engine_from_settings(settings)
    init_database(engine)
    yield SqlQuotaRepository(create_session_factory(engine))
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def repository(request: pytest.FixtureRequest) -> QuotaRepository:
    if request.param == "memory":
        return InMemoryQuotaRepository()
    return request.getfixturevalue("sql_repository")


@pytest.fixture
def quota(repository: QuotaRepository, catalog: PlanCatalog) -> QuotaService:
    return QuotaService(repository, catalog)


@pytest.fixture
def storage_quota(quota: QuotaService) -> StorageQuotaService:
    return StorageQuotaService(quota)


@pytest.fixture
def user_id(quota: QuotaService) -> str:
    """A freshly signed-up user on the default plan."""
    quota.initialize_default_quota("darksky")
    return "darksky"
