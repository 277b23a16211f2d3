"""Default configs for new vehicles and the first-run setup wizard."""

from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from .anchor import DateLike, to_day
from .catalog import Catalog, default_catalog
from .errors import InvalidRecordError
from .maintenance_config import MaintenanceConfig
from .vehicle import Vehicle

OIL_CATEGORIES = ("engine_oil", "oil_filter")
WIZARD_CATEGORIES = ("inspection", "road_tax") + OIL_CATEGORIES


def config_id(vehicle_id: str, category: str) -> str:
    return f"{vehicle_id}-{category}"


def build_default_configs(
    vehicle: Vehicle,
    catalog: Optional[Catalog] = None,
    now: Optional[datetime] = None,
) -> List[MaintenanceConfig]:
    """One inactive config with unknown history per tracked catalog category."""
    if catalog is None:
        catalog = default_catalog()
    stamp = (now or datetime.now()).isoformat()
    return [
        MaintenanceConfig(
            id=config_id(vehicle.id, d.category),
            vehicle_id=vehicle.id,
            category=d.category,
            interval_km=d.interval_km,
            interval_months=d.interval_months,
            last_replaced_mileage=None,
            last_replaced_date=stamp,
            is_active=False,
        )
        for d in catalog.tracked_definitions()
    ]


def apply_setup(
    configs: Iterable[MaintenanceConfig],
    vehicle: Vehicle,
    inspection_date: Optional[DateLike] = None,
    inspection_interval_months: int = 12,
    road_tax_date: Optional[DateLike] = None,
    oil_km: Optional[int] = None,
    oil_date: Optional[DateLike] = None,
    oil_interval_km: Optional[int] = None,
    extra_categories: Iterable[str] = (),
) -> List[MaintenanceConfig]:
    """
    Activate and seed the vehicle's configs from the setup wizard answers.

    - inspection_date is the date of the *last* inspection; the stored date
      becomes the next one, inspection_interval_months later
    - road_tax_date is the tax expiry date itself
    - oil_km/oil_date seed both engine oil and oil filter
    - extra_categories are only activated; their history stays as it was, so
      unknown items show up as REVIEW_NEEDED until the user fills them in

    Returns only the configs that changed.
    """
    if oil_km is not None and oil_km > vehicle.current_mileage:
        raise InvalidRecordError(
            f"Oil change mileage {oil_km:,} is above the odometer "
            f"({vehicle.current_mileage:,})"
        )
    if (oil_km is None) != (oil_date is None):
        raise InvalidRecordError("Oil change needs both mileage and date")

    by_category: Dict[str, MaintenanceConfig] = {
        c.category: c for c in configs if c.vehicle_id == vehicle.id
    }
    updates: List[MaintenanceConfig] = []

    inspection = by_category.get("inspection")
    if inspection is not None and inspection_date is not None:
        next_inspection = to_day(inspection_date) + relativedelta(
            months=inspection_interval_months
        )
        updates.append(
            replace(
                inspection,
                is_active=True,
                interval_months=inspection_interval_months,
                last_replaced_mileage=vehicle.current_mileage,
                last_replaced_date=next_inspection.isoformat(),
            )
        )

    road_tax = by_category.get("road_tax")
    if road_tax is not None and road_tax_date is not None:
        updates.append(
            replace(
                road_tax,
                is_active=True,
                last_replaced_mileage=vehicle.current_mileage,
                last_replaced_date=to_day(road_tax_date).isoformat(),
            )
        )

    if oil_km is not None:
        oil_day = to_day(oil_date).isoformat()
        for category in OIL_CATEGORIES:
            config = by_category.get(category)
            if config is None:
                continue
            updates.append(
                replace(
                    config,
                    is_active=True,
                    interval_km=oil_interval_km or config.interval_km,
                    last_replaced_mileage=oil_km,
                    last_replaced_date=oil_day,
                )
            )

    for category in extra_categories:
        if category in WIZARD_CATEGORIES:
            continue
        config = by_category.get(category)
        if config is None:
            continue
        updates.append(replace(config, is_active=True))

    return updates
