"""
Schedule anchors: what a config's stored mileage/date actually mean.

The garage file keeps one date field per config whose meaning depends on the
category: a future expiry date for legal items, the past service date for
everything else. resolve_anchor() turns that field into one of three explicit
variants so the evaluator never has to guess.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from dateutil.parser import isoparse

from .catalog import Catalog, default_catalog
from .maintenance_config import UNKNOWN_MILEAGE, MaintenanceConfig

DateLike = Union[date, datetime, str]

UNKNOWN_HISTORY = "unknown history"
INVALID_DATE = "invalid date"


@dataclass(frozen=True)
class Serviced:
    """Usage-based item last serviced on `date` at `mileage` km."""

    date: date
    mileage: int


@dataclass(frozen=True)
class ExpiresOn:
    """Expiration-based item (insurance, road tax, inspection) valid until `date`."""

    date: date


@dataclass(frozen=True)
class Unrecorded:
    """No usable history; `reason` says why."""

    reason: str


Anchor = Union[Serviced, ExpiresOn, Unrecorded]


def to_day(value: DateLike) -> date:
    """
    Normalise a date, datetime or ISO-8601 string to a local calendar day.

    Timezone-aware values are converted to local time first, so an instant
    stored as UTC lands on the day the user saw it.

    Raises ValueError if a string cannot be parsed.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    return to_day(isoparse(value.strip()))


def parse_day(value: Optional[DateLike]) -> Optional[date]:
    """Like to_day(), but returns None for empty or malformed input."""
    if value is None or value == "":
        return None
    try:
        return to_day(value)
    except (ValueError, OverflowError, TypeError, AttributeError):
        return None


def resolve_anchor(
    config: MaintenanceConfig, catalog: Optional[Catalog] = None
) -> Anchor:
    """Interpret a config's last-replaced fields according to its category."""
    if config.last_replaced_mileage in (None, UNKNOWN_MILEAGE):
        return Unrecorded(UNKNOWN_HISTORY)

    stored = parse_day(config.last_replaced_date)
    if stored is None:
        return Unrecorded(INVALID_DATE)

    if catalog is None:
        catalog = default_catalog()
    if catalog.is_expiration_based(config.category):
        return ExpiresOn(stored)
    return Serviced(stored, config.last_replaced_mileage)
