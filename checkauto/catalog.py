"""Static maintenance category catalog and interval safety limits."""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

import yaml
from jsonschema import validate, ValidationError

from .errors import CheckAutoError, IntervalOutOfRangeError, UnknownCategoryError

CATALOG_PATH = Path(__file__).parent / "catalog.yaml"
CATALOG_SCHEMA_PATH = Path(__file__).parent / "catalog_schema.yaml"

MODIFICATION_CATEGORY = "modification"


class Section(Enum):
    """Grouping used to lay out maintenance items."""

    LEGAL = "legal"
    ENGINE = "engine"
    SAFETY = "safety"
    VISIBILITY = "visibility"
    TRANSMISSION = "transmission"
    ELECTRICAL = "electrical"
    OTHER = "other"


@dataclass(frozen=True)
class CategoryDefinition:
    """Default intervals and grouping for one maintenance category."""

    category: str
    interval_km: int
    interval_months: int
    section: Section
    tracked: bool = True

    @property
    def is_expiration_based(self) -> bool:
        """Legal items store a future expiry date instead of a service date."""
        return self.section is Section.LEGAL


@dataclass(frozen=True)
class IntervalLimits:
    """Bounds for a user-customised km interval."""

    min: int
    max: int
    step: int

    def contains(self, value: float) -> bool:
        if value < self.min or value > self.max:
            return False
        return (value - self.min) % self.step == 0

    def check(self, category: str, value: float) -> None:
        """Raise IntervalOutOfRangeError if value is not an allowed setting."""
        if not self.contains(value):
            raise IntervalOutOfRangeError(category, value, self)


DEFAULT_LIMITS = IntervalLimits(min=0, max=200000, step=5000)


class Catalog:
    """
    Immutable lookup table of category definitions and interval limits.

    Iteration follows declaration order, which is also the display order.
    """

    def __init__(
        self,
        definitions: Iterable[CategoryDefinition],
        limits: Optional[Mapping[str, IntervalLimits]] = None,
        default_limits: IntervalLimits = DEFAULT_LIMITS,
    ):
        by_category: Dict[str, CategoryDefinition] = {}
        for definition in definitions:
            if definition.category in by_category:
                raise CheckAutoError(
                    f"Duplicate catalog category '{definition.category}'"
                )
            by_category[definition.category] = definition
        self._definitions = MappingProxyType(by_category)
        self._limits = MappingProxyType(dict(limits or {}))
        self._default_limits = default_limits

    def __contains__(self, category: object) -> bool:
        return category in self._definitions

    def __iter__(self) -> Iterator[CategoryDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def limits(self) -> Mapping[str, IntervalLimits]:
        return self._limits

    @property
    def default_limits(self) -> IntervalLimits:
        return self._default_limits

    def get(self, category: str) -> CategoryDefinition:
        try:
            return self._definitions[category]
        except KeyError:
            raise UnknownCategoryError(category) from None

    def is_expiration_based(self, category: str) -> bool:
        """Unknown categories are treated as usage-based."""
        definition = self._definitions.get(category)
        return definition is not None and definition.is_expiration_based

    def is_tracked(self, category: str) -> bool:
        definition = self._definitions.get(category)
        return definition is not None and definition.tracked

    def limits_for(self, category: str) -> IntervalLimits:
        return self._limits.get(category, self._default_limits)

    def tracked_definitions(self) -> List[CategoryDefinition]:
        """Every category that gets a maintenance config (all but 'modification')."""
        return [d for d in self if d.tracked]

    def by_section(self) -> Dict[Section, List[CategoryDefinition]]:
        """Tracked definitions grouped by section, in Section order."""
        grouped: Dict[Section, List[CategoryDefinition]] = {s: [] for s in Section}
        for definition in self.tracked_definitions():
            grouped[definition.section].append(definition)
        return {s: defs for s, defs in grouped.items() if defs}


def _parse_limits(dct: Dict[str, Any]) -> IntervalLimits:
    return IntervalLimits(min=dct["min"], max=dct["max"], step=dct["step"])


def catalog_from_dict(data: Dict[str, Any]) -> Catalog:
    """Build a Catalog from the camelCase structure used in catalog.yaml."""
    definitions = [
        CategoryDefinition(
            category=item["category"],
            interval_km=item["intervalKm"],
            interval_months=item["intervalMonths"],
            section=Section(item["section"]),
            tracked=item.get("tracked", True),
        )
        for item in data["categories"]
    ]
    limits = {name: _parse_limits(d) for name, d in (data.get("limits") or {}).items()}
    default_limits = _parse_limits(data["defaultLimits"])
    return Catalog(definitions, limits, default_limits)


def load_catalog(filename: Optional[Union[str, Path]] = None) -> Catalog:
    """Load and validate a catalog file (defaults to the embedded catalog)."""
    path = Path(filename) if filename else CATALOG_PATH
    with open(CATALOG_SCHEMA_PATH) as fp:
        schema = yaml.safe_load(fp)
    with open(path) as fp:
        data = yaml.safe_load(fp)
    try:
        validate(instance=data, schema=schema)
    except ValidationError as e:
        raise CheckAutoError(f"Invalid catalog {path}: {e.message}") from e
    return catalog_from_dict(data)


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """The embedded catalog, loaded once per process."""
    return load_catalog()
