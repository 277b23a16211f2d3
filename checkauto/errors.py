"""Exceptions raised at the edges of the maintenance engine.

The status evaluator and health aggregator never raise these for bad data;
they are used where external data is loaded, validated or looked up.
"""


class CheckAutoError(Exception):
    """Base class for all errors raised by this package."""


class GarageFileError(CheckAutoError):
    """A garage file could not be parsed or failed schema validation."""

    def __init__(self, filename, message: str):
        self.filename = filename
        super().__init__(f"{filename}: {message}")


class NotFoundError(CheckAutoError, KeyError):
    """A vehicle, config, record or modification id does not exist."""

    def __init__(self, kind: str, ident: str):
        self.kind = kind
        self.ident = ident
        super().__init__(f"{kind} '{ident}' not found")

    def __str__(self) -> str:
        return self.args[0]


class UnknownCategoryError(CheckAutoError, KeyError):
    """A maintenance category is not present in the catalog."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Unknown maintenance category '{category}'")

    def __str__(self) -> str:
        return self.args[0]


class InvalidRecordError(CheckAutoError, ValueError):
    """User-entered service data is inconsistent (negative cost, future date...)."""


class IntervalOutOfRangeError(CheckAutoError, ValueError):
    """A customised interval falls outside the category's safety limits."""

    def __init__(self, category: str, value: float, limits):
        self.category = category
        self.value = value
        self.limits = limits
        super().__init__(
            f"Interval {value:,.0f} km for '{category}' must be between "
            f"{limits.min:,} and {limits.max:,} in steps of {limits.step:,}"
        )
