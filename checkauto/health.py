"""Weighted health score per vehicle and its qualitative tier."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .anchor import DateLike
from .catalog import Catalog, default_catalog
from .evaluator import StatusResult, evaluate_status
from .maintenance_config import MaintenanceConfig
from .status import Status
from .vehicle import Vehicle

STATUS_POINTS: Dict[Status, int] = {
    Status.OK: 20,
    Status.WARNING: 10,
    Status.REVIEW_NEEDED: -10,
    Status.OVERDUE: -25,
}
MAX_POINTS_PER_ITEM = 20

# Score reported when nothing is tracked yet
EMPTY_SCORE = 100.0
RESPONSIBLE_DRIVER_SCORE = 95


class Tier(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    CRITICAL = "critical"


@dataclass(frozen=True)
class TierMeta:
    """Display metadata for a health score. Labels are i18n keys."""

    tier: Tier
    level: str
    description: str
    color: str
    short_msg: Optional[str] = None
    responsible_driver: bool = False


# (lower bound inclusive, tier, color, short message key)
TIER_BOUNDS = [
    (90, Tier.EXCELLENT, "emerald", None),
    (70, Tier.GOOD, "indigo", None),
    (40, Tier.MODERATE, "amber", "health_msg_missing_info"),
]
CRITICAL_COLOR = "rose"
CRITICAL_MSG = "health_msg_urgent"


def active_configs_for(
    vehicle: Vehicle, configs: Iterable[MaintenanceConfig], catalog: Catalog
) -> List[MaintenanceConfig]:
    """Active configs of the vehicle, leaving out untracked categories."""
    return [
        c
        for c in configs
        if c.vehicle_id == vehicle.id
        and c.is_active
        and (c.category not in catalog or catalog.is_tracked(c.category))
    ]


def score_results(results: List[StatusResult]) -> float:
    """Percentage of the maximum points, clamped to 0-100."""
    if not results:
        return EMPTY_SCORE
    raw_score = sum(STATUS_POINTS[r.status] for r in results)
    max_possible = len(results) * MAX_POINTS_PER_ITEM
    percentage = raw_score / max_possible * 100
    return max(0.0, min(100.0, percentage))


def compute_health_score(
    vehicle: Vehicle,
    configs: Iterable[MaintenanceConfig],
    now: DateLike,
    catalog: Optional[Catalog] = None,
) -> float:
    """
    Score a vehicle from the status of its active maintenance items.

    A vehicle with no active items scores 100.
    """
    if catalog is None:
        catalog = default_catalog()
    results = [
        evaluate_status(vehicle, config, now, catalog)
        for config in active_configs_for(vehicle, configs, catalog)
    ]
    return score_results(results)


def classify_tier(score: float) -> TierMeta:
    """Map a score to its tier; each bound is inclusive on the lower side."""
    responsible = score > RESPONSIBLE_DRIVER_SCORE
    for lower, tier, color, short_msg in TIER_BOUNDS:
        if score >= lower:
            break
    else:
        tier, color, short_msg = Tier.CRITICAL, CRITICAL_COLOR, CRITICAL_MSG
    return TierMeta(
        tier=tier,
        level=f"score_{tier.value}",
        description=f"desc_{tier.value}",
        color=color,
        short_msg=short_msg,
        responsible_driver=responsible,
    )


@dataclass
class HealthReport:
    """Score, tier and per-status breakdown for one vehicle."""

    vehicle: Vehicle
    score: float
    meta: TierMeta
    results: List[StatusResult] = field(default_factory=list)

    @property
    def counts(self) -> Dict[Status, int]:
        counts = {status: 0 for status in Status}
        for result in self.results:
            counts[result.status] += 1
        return counts


def build_health_report(
    vehicle: Vehicle,
    configs: Iterable[MaintenanceConfig],
    now: DateLike,
    catalog: Optional[Catalog] = None,
) -> HealthReport:
    if catalog is None:
        catalog = default_catalog()
    results = [
        evaluate_status(vehicle, config, now, catalog)
        for config in active_configs_for(vehicle, configs, catalog)
    ]
    score = score_results(results)
    return HealthReport(
        vehicle=vehicle, score=score, meta=classify_tier(score), results=results
    )
