"""Consistency rules tying service history to config state and mileage."""

from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from .anchor import DateLike, parse_day, to_day
from .catalog import Catalog, default_catalog
from .errors import InvalidRecordError
from .maintenance_config import MaintenanceConfig
from .records import ServiceRecord
from .vehicle import Vehicle


def _record_sort_key(record: ServiceRecord):
    # Unreadable dates sort first so they never become "latest"
    return (parse_day(record.date) or date.min, record.mileage or 0)


def records_for_config(
    records: Iterable[ServiceRecord], config_id: str
) -> List[ServiceRecord]:
    return [r for r in records if r.maintenance_config_id == config_id]


def latest_record(records: Iterable[ServiceRecord]) -> Optional[ServiceRecord]:
    """Most recent record by date; ties go to the higher mileage."""
    records = list(records)
    if not records:
        return None
    return max(records, key=_record_sort_key)


def recalculate_last_service(
    config: MaintenanceConfig,
    records: Iterable[ServiceRecord],
    now: Optional[datetime] = None,
) -> MaintenanceConfig:
    """
    Return a copy of config whose last-replaced fields reflect its history.

    - With records: mileage/date of the most recent one
    - Without records: unknown mileage, date reset to `now`
    """
    latest = latest_record(records_for_config(records, config.id))
    if latest is None:
        now = now or datetime.now()
        return replace(
            config, last_replaced_mileage=None, last_replaced_date=now.isoformat()
        )
    return replace(
        config,
        last_replaced_mileage=latest.mileage,
        last_replaced_date=latest.date,
    )


def apply_mileage(vehicle: Vehicle, mileage: Optional[float]) -> bool:
    """Raise the vehicle's odometer if mileage is strictly higher. Returns True if changed."""
    if mileage is None or mileage <= vehicle.current_mileage:
        return False
    vehicle.current_mileage = mileage
    return True


def validate_service_record(
    record: ServiceRecord,
    category: str,
    today: DateLike,
    catalog: Optional[Catalog] = None,
) -> None:
    """
    Check user-entered service data before it is saved.

    Raises InvalidRecordError for negative cost or mileage, an unreadable
    date, or a service date in the future for usage-based items (legal items
    store their new expiry date, which is expected to be in the future).
    """
    if catalog is None:
        catalog = default_catalog()
    if record.cost is not None and record.cost < 0:
        raise InvalidRecordError(f"Cost cannot be negative ({record.cost})")
    if record.mileage is None or record.mileage < 0:
        raise InvalidRecordError(f"Mileage cannot be negative ({record.mileage})")

    record_day = parse_day(record.date)
    if record_day is None:
        raise InvalidRecordError(f"Invalid service date '{record.date}'")
    if not catalog.is_expiration_based(category) and record_day > to_day(today):
        raise InvalidRecordError(
            f"Service date {record_day.isoformat()} is in the future"
        )


def total_spend(records: Iterable[ServiceRecord]) -> float:
    return sum(r.cost for r in records if r.cost is not None)


def spend_by_config(records: Iterable[ServiceRecord]) -> Dict[str, float]:
    """Total cost per maintenance config id."""
    totals: Dict[str, float] = {}
    for record in records:
        if record.cost is None:
            continue
        totals[record.maintenance_config_id] = (
            totals.get(record.maintenance_config_id, 0) + record.cost
        )
    return totals
