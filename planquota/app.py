"""Explicit composition of the quota services."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine

from planquota.core.database import (
    create_engine_from_settings,
    create_session_factory,
    init_database,
)
from planquota.core.logging import get_logger, setup_logging
from planquota.core.plans import PlanCatalog, Quotas
from planquota.core.settings import Settings, get_settings
from planquota.repositories.base import QuotaRepository
from planquota.repositories.sql import SqlQuotaRepository
from planquota.services.quota import QuotaService
from planquota.services.storage_quota import StorageQuotaService

logger = get_logger(__name__)


@dataclass(slots=True)
class QuotaServices:
    catalog: PlanCatalog
    quota: QuotaService
    storage_quota: StorageQuotaService
    engine: Engine | None = None

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def create_services(
    settings: Settings | None = None,
    repository: QuotaRepository | None = None,
    catalog: PlanCatalog | None = None,
) -> QuotaServices:
    """Build the catalog, repository and services from settings.

    Without an explicit ``repository`` a SQL repository is created on the
    configured database and its tables are created if missing.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, json=settings.log_json)

    catalog = catalog or PlanCatalog(Quotas, default=settings.default_plan)

    engine: Engine | None = None
    if repository is None:
        engine = create_engine_from_settings(settings)
        init_database(engine)
        repository = SqlQuotaRepository(create_session_factory(engine))

    quota = QuotaService(repository, catalog)
    logger.info(
        "quota_services_ready",
        environment=settings.environment,
        plans=catalog.types(),
        default_plan=catalog.default.type,
        repository=type(repository).__name__,
    )
    return QuotaServices(
        catalog=catalog,
        quota=quota,
        storage_quota=StorageQuotaService(quota),
        engine=engine,
    )


__all__ = ["QuotaServices", "create_services"]
