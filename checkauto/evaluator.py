"""Status evaluation for a single maintenance item."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .anchor import (
    DateLike,
    ExpiresOn,
    INVALID_DATE,
    Serviced,
    Unrecorded,
    resolve_anchor,
    to_day,
)
from .calculations import (
    EXPIRY_WARNING_DAYS,
    calc_days_between,
    calc_days_limit,
    calc_expiry_progress,
    calc_km_traveled,
    check_status,
    days_warning_threshold,
    km_warning_threshold,
)
from .catalog import Catalog, default_catalog
from .maintenance_config import MaintenanceConfig
from .status import Status
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


@dataclass
class StatusResult:
    """
    Calculated status for one config.

    km_remaining / days_remaining are None when that dimension does not apply
    (legal items have no km limit, time-only items no km, km-only items no
    time). For REVIEW_NEEDED both are 0.
    """

    config: MaintenanceConfig
    status: Status
    km_remaining: Optional[float] = None
    days_remaining: Optional[float] = None
    progress: float = 0.0
    expiration_based: bool = False

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.WARNING)

    @property
    def display_progress(self) -> float:
        """Progress clamped to 0-100 for bars and gauges."""
        return max(0.0, min(100.0, self.progress))


def _review_needed(config: MaintenanceConfig, expiration_based: bool) -> StatusResult:
    return StatusResult(
        config=config,
        status=Status.REVIEW_NEEDED,
        km_remaining=0,
        days_remaining=0,
        progress=0.0,
        expiration_based=expiration_based,
    )


def _evaluate_expiry(config: MaintenanceConfig, anchor: ExpiresOn, today) -> StatusResult:
    days_remaining = calc_days_between(today, anchor.date)
    status = check_status(days_remaining, EXPIRY_WARNING_DAYS)
    return StatusResult(
        config=config,
        status=status,
        km_remaining=None,
        days_remaining=days_remaining,
        progress=calc_expiry_progress(days_remaining),
        expiration_based=True,
    )


def _evaluate_usage(
    vehicle: Vehicle, config: MaintenanceConfig, anchor: Serviced, today
) -> StatusResult:
    km_traveled = calc_km_traveled(vehicle.current_mileage, anchor.mileage)
    days_elapsed = max(0, calc_days_between(anchor.date, today))

    km_remaining = None
    km_progress = 0.0
    km_status = Status.OK
    if config.interval_km > 0:
        km_remaining = config.interval_km - km_traveled
        km_progress = km_traveled / config.interval_km
        km_status = check_status(km_remaining, km_warning_threshold(config.interval_km))

    days_remaining = None
    time_progress = 0.0
    time_status = Status.OK
    if config.interval_months > 0:
        days_limit = calc_days_limit(config.interval_months)
        days_remaining = days_limit - days_elapsed
        time_progress = days_elapsed / days_limit
        time_status = check_status(days_remaining, days_warning_threshold(days_limit))

    # Whichever dimension is worse wins
    status = min(km_status, time_status, key=lambda s: s.value)

    return StatusResult(
        config=config,
        status=status,
        km_remaining=km_remaining,
        days_remaining=days_remaining,
        progress=max(km_progress, time_progress) * 100,
        expiration_based=False,
    )


def evaluate_status(
    vehicle: Vehicle,
    config: MaintenanceConfig,
    now: DateLike,
    catalog: Optional[Catalog] = None,
) -> StatusResult:
    """
    Calculate the status of one maintenance item at `now`.

    Logic:
    - Unknown history or an unreadable date: REVIEW_NEEDED
    - Legal items: days until the stored expiry date
    - Everything else: km and/or days used since the last service, compared
      to the configured intervals; the worse of the two decides

    Never raises for bad data; degenerate inputs resolve to a status.
    """
    if catalog is None:
        catalog = default_catalog()
    expiration_based = catalog.is_expiration_based(config.category)

    anchor = resolve_anchor(config, catalog)
    if isinstance(anchor, Unrecorded):
        if anchor.reason == INVALID_DATE:
            logger.warning(
                "Config %s (%s) has unreadable date %r; marking for review",
                config.id,
                config.category,
                config.last_replaced_date,
            )
        return _review_needed(config, expiration_based)

    today = to_day(now)
    if isinstance(anchor, ExpiresOn):
        return _evaluate_expiry(config, anchor, today)
    return _evaluate_usage(vehicle, config, anchor, today)


def evaluate_all(
    vehicle: Vehicle,
    configs: Iterable[MaintenanceConfig],
    now: DateLike,
    catalog: Optional[Catalog] = None,
    active_only: bool = True,
) -> List[StatusResult]:
    """Evaluate the vehicle's configs, skipping untracked categories."""
    if catalog is None:
        catalog = default_catalog()
    return [
        evaluate_status(vehicle, config, now, catalog)
        for config in configs
        if config.vehicle_id == vehicle.id
        and (config.is_active or not active_only)
        and (config.category not in catalog or catalog.is_tracked(config.category))
    ]
