"""Helper functions for maintenance status calculations."""

from datetime import date

from .status import Status

DAYS_PER_MONTH = 30
EXPIRY_WARNING_DAYS = 30
EXPIRY_PROGRESS_WINDOW_DAYS = 365

MIN_KM_WARNING = 1000
MIN_DAYS_WARNING = 30
WARNING_FRACTION = 0.08


def calc_km_traveled(current_mileage: float, last_mileage: float) -> float:
    """Distance since last service, never negative (odometer rollback, typos)."""
    return max(0, current_mileage - last_mileage)


def calc_days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative if end is earlier)."""
    return (end - start).days


def calc_days_limit(interval_months: float) -> float:
    """Interval length in days, using 30-day months."""
    return interval_months * DAYS_PER_MONTH


def km_warning_threshold(interval_km: float) -> float:
    """Warn within 8% of the interval, but never less than 1000 km."""
    return max(MIN_KM_WARNING, interval_km * WARNING_FRACTION)


def days_warning_threshold(days_limit: float) -> float:
    """Warn within 8% of the interval, but never less than 30 days."""
    return max(MIN_DAYS_WARNING, days_limit * WARNING_FRACTION)


def check_status(remaining: float, soon_threshold: float) -> Status:
    """Determine status from what is left before the limit."""
    if remaining < 0:
        return Status.OVERDUE
    if remaining <= soon_threshold:
        return Status.WARNING
    return Status.OK


def calc_expiry_progress(days_remaining: int) -> float:
    """Visual progress for an expiring document, against a one-year window."""
    window = EXPIRY_PROGRESS_WINDOW_DAYS
    clamped_days = max(0, days_remaining)
    return max(0.0, min(100.0, (window - clamped_days) / window * 100))
