"""Per-user quota plan assignment: query, switch and initialisation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from planquota.core.errors import InvalidPlanError, PlanNotFoundError, UserNotInitializedError
from planquota.core.logging import get_logger
from planquota.core.models import utcnow
from planquota.core.plans import PlanCatalog, PlanDefinition, QuotaType, plan_key, retired_plan
from planquota.repositories.base import QuotaRecord, QuotaRepository

logger = get_logger(__name__)

SIGN_UP_REASON = "sign up"
DEFAULT_SWITCH_REASON = "switch"


@dataclass(frozen=True, slots=True)
class UserQuota:
    """An assignment record resolved together with its plan definition."""

    id: int
    user_id: str
    plan: PlanDefinition
    activated: bool
    created_at: datetime
    reason: str | None = None

    @property
    def plan_type(self) -> str:
        return self.plan.type


class QuotaService:
    """Owns the switch/activate/query logic over a repository and catalog.

    Records are never cached between calls; every operation opens its own
    repository transaction.
    """

    def __init__(self, repository: QuotaRepository, catalog: PlanCatalog) -> None:
        self.repository = repository
        self.catalog = catalog

    # ------------------------------------------------------------------
    def _resolve(self, record: QuotaRecord) -> UserQuota:
        assert record.id is not None
        try:
            plan = self.catalog.get(record.plan_type)
        except PlanNotFoundError:
            logger.warning(
                "quota_plan_retired",
                user_id=record.user_id,
                plan_type=record.plan_type,
                record_id=record.id,
            )
            plan = retired_plan(record.plan_type)
        return UserQuota(
            id=record.id,
            user_id=record.user_id,
            plan=plan,
            activated=record.activated,
            created_at=record.created_at,
            reason=record.reason,
        )

    def _validate_plan(self, plan_type: QuotaType | str) -> PlanDefinition:
        try:
            return self.catalog.get(plan_type)
        except PlanNotFoundError as exc:
            logger.info("quota_switch_rejected", plan_type=exc.plan_type)
            raise InvalidPlanError(exc.plan_type) from exc

    # ------------------------------------------------------------------
    def get_user_quota(self, user_id: str) -> UserQuota | None:
        with self.repository.transaction() as tx:
            record = tx.find_active(user_id)
        return self._resolve(record) if record is not None else None

    def require_user_quota(self, user_id: str) -> UserQuota:
        quota = self.get_user_quota(user_id)
        if quota is None:
            logger.error("quota_user_not_initialised", user_id=user_id)
            raise UserNotInitializedError(user_id)
        return quota

    def get_user_quotas(self, user_id: str) -> list[UserQuota]:
        with self.repository.transaction() as tx:
            history = tx.list_history(user_id)
        return [self._resolve(record) for record in history]

    def has_quota(self, user_id: str, plan_type: QuotaType | str) -> bool:
        quota = self.get_user_quota(user_id)
        return quota is not None and quota.plan_type == plan_key(plan_type)

    def switch_user_quota(
        self,
        user_id: str,
        plan_type: QuotaType | str,
        reason: str | None = None,
    ) -> UserQuota:
        """Deactivate the current plan and activate ``plan_type``.

        Switching to the plan that is already active still appends a new
        history entry. Raises :class:`InvalidPlanError` before touching the
        repository when the plan is not in the catalog.
        """
        plan = self._validate_plan(plan_type)

        with self.repository.transaction() as tx:
            current = tx.find_active(user_id)
            created_at = utcnow()
            if current is not None:
                assert current.id is not None
                created_at = max(created_at, current.created_at)
                tx.deactivate(current.id)
            inserted = tx.insert(
                QuotaRecord(
                    user_id=user_id,
                    plan_type=plan.type,
                    activated=True,
                    created_at=created_at,
                    reason=reason or DEFAULT_SWITCH_REASON,
                )
            )

        logger.info(
            "quota_switched",
            user_id=user_id,
            from_plan=current.plan_type if current else None,
            to_plan=plan.type,
            record_id=inserted.id,
        )
        return self._resolve(inserted)

    def initialize_default_quota(self, user_id: str) -> UserQuota:
        """Seed a new user onto the catalog's default plan.

        A user that already has history keeps its current assignment.
        """
        plan = self.catalog.default
        with self.repository.transaction() as tx:
            record = tx.find_active(user_id)
            has_history = record is not None or bool(tx.list_history(user_id))
            if not has_history:
                record = tx.insert(
                    QuotaRecord(
                        user_id=user_id,
                        plan_type=plan.type,
                        activated=True,
                        created_at=utcnow(),
                        reason=SIGN_UP_REASON,
                    )
                )

        if record is None:
            # history without an active record means a previous write was lost
            logger.error("quota_history_without_active_record", user_id=user_id)
            raise UserNotInitializedError(user_id)
        if has_history:
            logger.warning("quota_already_initialised", user_id=user_id, plan=record.plan_type)
        else:
            logger.info("quota_initialised", user_id=user_id, plan=plan.type, record_id=record.id)
        return self._resolve(record)


__all__ = ["QuotaService", "UserQuota", "SIGN_UP_REASON", "DEFAULT_SWITCH_REASON"]
