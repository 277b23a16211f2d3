"""
Vehicle maintenance status and health scoring.

This package provides the engine behind the garage tracker:
- Status: Urgency levels (OVERDUE, WARNING, REVIEW_NEEDED, OK)
- Catalog: Default intervals, sections and interval limits per category
- Vehicle / MaintenanceConfig / ServiceRecord / Modification: Data records
- evaluate_status: Status of one maintenance item at a given date
- compute_health_score / classify_tier: Weighted score per vehicle
- Garage: Aggregate with the history/config consistency rules
- load_garage / save_garage / edit_garage: YAML persistence
"""

from .status import Status
from .errors import (
    CheckAutoError,
    GarageFileError,
    IntervalOutOfRangeError,
    InvalidRecordError,
    NotFoundError,
    UnknownCategoryError,
)
from .catalog import (
    Catalog,
    CategoryDefinition,
    IntervalLimits,
    Section,
    default_catalog,
    load_catalog,
)
from .vehicle import Vehicle
from .maintenance_config import MaintenanceConfig
from .records import Modification, ServiceRecord
from .anchor import ExpiresOn, Serviced, Unrecorded, resolve_anchor, to_day
from .evaluator import StatusResult, evaluate_all, evaluate_status
from .health import (
    HealthReport,
    Tier,
    TierMeta,
    build_health_report,
    classify_tier,
    compute_health_score,
)
from .alerts import Alert, OverdueAlerts
from .garage import Garage
from .loader import create_garage, edit_garage, load_garage, save_garage

__all__ = [
    "Status",
    "CheckAutoError",
    "GarageFileError",
    "IntervalOutOfRangeError",
    "InvalidRecordError",
    "NotFoundError",
    "UnknownCategoryError",
    "Catalog",
    "CategoryDefinition",
    "IntervalLimits",
    "Section",
    "default_catalog",
    "load_catalog",
    "Vehicle",
    "MaintenanceConfig",
    "Modification",
    "ServiceRecord",
    "ExpiresOn",
    "Serviced",
    "Unrecorded",
    "resolve_anchor",
    "to_day",
    "StatusResult",
    "evaluate_all",
    "evaluate_status",
    "HealthReport",
    "Tier",
    "TierMeta",
    "build_health_report",
    "classify_tier",
    "compute_health_score",
    "Alert",
    "OverdueAlerts",
    "Garage",
    "create_garage",
    "edit_garage",
    "load_garage",
    "save_garage",
]
