"""MaintenanceConfig dataclass: one tracked maintenance item of a vehicle."""

from dataclasses import dataclass
from typing import Optional

# On-disk marker for "last replaced mileage unknown"
UNKNOWN_MILEAGE = -1


@dataclass
class MaintenanceConfig:
    """
    Interval settings and last-service state for a (vehicle, category) pair.

    last_replaced_date holds the raw ISO-8601 string as stored. For legal
    categories it is the future expiry date; for everything else it is the
    date of the last service. Use anchor.resolve_anchor() to read it.
    A last_replaced_mileage of -1 is taken as unknown and stored as None.
    """

    id: str
    vehicle_id: str
    category: str
    interval_km: int = 0
    interval_months: int = 0
    last_replaced_mileage: Optional[int] = None
    last_replaced_date: str = ""
    is_active: bool = False

    def __post_init__(self):
        self.last_replaced_mileage = mileage_from_stored(self.last_replaced_mileage)

    @property
    def is_known(self) -> bool:
        return self.last_replaced_mileage is not None

    @property
    def stored_mileage(self) -> int:
        """Mileage as written to the garage file (-1 when unknown)."""
        if self.last_replaced_mileage is None:
            return UNKNOWN_MILEAGE
        return self.last_replaced_mileage


def mileage_from_stored(value: Optional[int]) -> Optional[int]:
    """Convert the on-disk -1 sentinel to None."""
    if value is None or value == UNKNOWN_MILEAGE:
        return None
    return value
