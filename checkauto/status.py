"""Status enum for maintenance urgency levels."""

from enum import Enum


class Status(Enum):
    """Maintenance status categories. Lower value = more urgent."""

    OVERDUE = 1
    WARNING = 2
    REVIEW_NEEDED = 3  # No usable history (unknown mileage or bad date)
    OK = 4
