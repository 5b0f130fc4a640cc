"""Quota plan catalog and helpers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from .errors import PlanNotFoundError

ONE_MB = 1024 * 1024
ONE_GB = 1024 * ONE_MB
ONE_DAY = 24 * 60 * 60


class QuotaType(str, Enum):
    FreePlanV1 = "free_plan_v1"
    ProPlanV1 = "pro_plan_v1"


@dataclass(frozen=True, slots=True)
class PlanConfigs:
    name: str
    blob_limit: int
    storage_quota: int
    history_period: int
    member_limit: int


@dataclass(frozen=True, slots=True)
class PlanDefinition:
    type: str
    configs: PlanConfigs
    version: int = 1


def plan_key(plan_type: QuotaType | str) -> str:
    """Normalise a plan type given as enum member or raw string."""
    if isinstance(plan_type, QuotaType):
        return plan_type.value
    return str(plan_type)


Quota_FreePlanV1 = PlanDefinition(
    type=QuotaType.FreePlanV1.value,
    configs=PlanConfigs(
        name="Free",
        blob_limit=10 * ONE_MB,
        storage_quota=10 * ONE_GB,
        history_period=7 * ONE_DAY,
        member_limit=3,
    ),
)

Quota_ProPlanV1 = PlanDefinition(
    type=QuotaType.ProPlanV1.value,
    configs=PlanConfigs(
        name="Pro",
        blob_limit=100 * ONE_MB,
        storage_quota=100 * ONE_GB,
        history_period=30 * ONE_DAY,
        member_limit=10,
    ),
)

Quotas: tuple[PlanDefinition, ...] = (Quota_FreePlanV1, Quota_ProPlanV1)


def retired_plan(plan_type: str) -> PlanDefinition:
    """Stand-in for a stored plan type that the catalog no longer carries.

    All limits are zero so an active retired plan admits no uploads.
    """
    return PlanDefinition(
        type=plan_type,
        configs=PlanConfigs(
            name="Retired",
            blob_limit=0,
            storage_quota=0,
            history_period=0,
            member_limit=0,
        ),
        version=0,
    )


class PlanCatalog:
    """Ordered, read-only collection of plan definitions indexed by type."""

    __slots__ = ("_plans", "_by_type", "_default")

    def __init__(
        self,
        plans: Iterable[PlanDefinition] = Quotas,
        default: QuotaType | str = QuotaType.FreePlanV1,
    ) -> None:
        ordered = tuple(plans)
        by_type: dict[str, PlanDefinition] = {}
        for plan in ordered:
            if plan.type in by_type:
                raise ValueError(f"Duplicate plan type in catalog: {plan.type!r}")
            by_type[plan.type] = plan
        self._plans = ordered
        self._by_type = by_type
        self._default = self.get(default)

    @property
    def default(self) -> PlanDefinition:
        return self._default

    def get(self, plan_type: QuotaType | str) -> PlanDefinition:
        key = plan_key(plan_type)
        try:
            return self._by_type[key]
        except KeyError:
            raise PlanNotFoundError(key) from None

    def types(self) -> list[str]:
        return [plan.type for plan in self._plans]

    def __contains__(self, plan_type: object) -> bool:
        if not isinstance(plan_type, str):
            return False
        return plan_key(plan_type) in self._by_type

    def __iter__(self) -> Iterator[PlanDefinition]:
        return iter(self._plans)

    def __len__(self) -> int:
        return len(self._plans)

    def __getitem__(self, index: int) -> PlanDefinition:
        return self._plans[index]


__all__ = [
    "ONE_MB",
    "ONE_GB",
    "ONE_DAY",
    "QuotaType",
    "PlanConfigs",
    "PlanDefinition",
    "PlanCatalog",
    "Quota_FreePlanV1",
    "Quota_ProPlanV1",
    "Quotas",
    "plan_key",
    "retired_plan",
]
