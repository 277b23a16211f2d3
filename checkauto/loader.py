"""YAML loading and saving utilities for garage files."""

import json
import logging
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Union

import yaml
from jsonschema import validate, ValidationError

from .errors import GarageFileError
from .garage import Garage
from .maintenance_config import MaintenanceConfig, mileage_from_stored
from .records import Modification, ServiceRecord
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "garage_schema.yaml"


def load_schema() -> dict:
    """Load the JSON schema for garage files."""
    with open(SCHEMA_PATH) as f:
        return yaml.safe_load(f)


def _json_default(value: Any) -> str:
    # Unquoted YAML dates come back as date/datetime objects
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Cannot serialise {type(value).__name__}")


def _parse_object(dct: Dict[str, Any]) -> Any:
    """Parse dictionary into appropriate object type."""
    # Maintenance config
    if "intervalKm" in dct and "category" in dct:
        return MaintenanceConfig(
            id=dct["id"],
            vehicle_id=dct["vehicleId"],
            category=dct["category"],
            interval_km=dct["intervalKm"],
            interval_months=dct["intervalMonths"],
            last_replaced_mileage=mileage_from_stored(dct["lastReplacedMileage"]),
            last_replaced_date=dct["lastReplacedDate"],
            is_active=dct["isActive"],
        )
    # Service record
    elif "maintenanceConfigId" in dct:
        return ServiceRecord(
            dct["id"],
            dct["vehicleId"],
            dct["maintenanceConfigId"],
            dct["date"],
            dct["mileage"],
            dct.get("cost") or 0,
            dct.get("shopName") or "",
            dct.get("notes"),
        )
    # Vehicle
    elif "make" in dct and "currentMileage" in dct:
        return Vehicle(
            dct["id"],
            dct["make"],
            dct["model"],
            dct["year"],
            dct.get("plate") or "",
            dct["currentMileage"],
            dct.get("userId"),
            dct.get("image"),
        )
    # Modification
    elif "name" in dct and "vehicleId" in dct:
        return Modification(
            dct["id"],
            dct["vehicleId"],
            dct["name"],
            dct["category"],
            dct["cost"],
            dct["date"],
            dct.get("expenseId"),
            dct.get("isWishlist"),
        )
    # Top-level garage object
    elif {"vehicles", "configs", "history", "modifications"} & dct.keys():
        return Garage(
            dct.get("vehicles"),
            dct.get("configs"),
            dct.get("history"),
            dct.get("modifications"),
        )
    else:
        return dct


def load_garage(filename: Union[str, Path]) -> Garage:
    """
    Load a garage from a YAML file.

    The file is validated against the garage schema first, so missing or
    mistyped fields fail here with a GarageFileError rather than inside the
    status engine.
    """
    try:
        with open(filename, "rb") as fp:
            raw = yaml.load(fp, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise GarageFileError(filename, f"YAML parse error: {e}") from e
    except OSError as e:
        raise GarageFileError(filename, str(e)) from e

    if raw is None:
        return Garage()
    json_data = json.dumps(raw, default=_json_default)
    try:
        validate(instance=json.loads(json_data), schema=load_schema())
    except ValidationError as e:
        where = ".".join(str(p) for p in e.path)
        message = f"Schema validation error: {e.message}"
        if where:
            message += f" (at {where})"
        raise GarageFileError(filename, message) from e

    garage = json.loads(json_data, object_hook=_parse_object)
    if not isinstance(garage, Garage):
        # An empty mapping has none of the top-level keys
        return Garage()
    return garage


def _vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize a Vehicle to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": vehicle.id,
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "plate": vehicle.plate,
        "currentMileage": vehicle.current_mileage,
    }
    if vehicle.user_id is not None:
        d["userId"] = vehicle.user_id
    if vehicle.image is not None:
        d["image"] = vehicle.image
    return d


def _config_to_dict(config: MaintenanceConfig) -> Dict[str, Any]:
    return {
        "id": config.id,
        "vehicleId": config.vehicle_id,
        "category": config.category,
        "intervalKm": config.interval_km,
        "intervalMonths": config.interval_months,
        "lastReplacedMileage": config.stored_mileage,
        "lastReplacedDate": config.last_replaced_date,
        "isActive": config.is_active,
    }


def _record_to_dict(record: ServiceRecord) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": record.id,
        "vehicleId": record.vehicle_id,
        "maintenanceConfigId": record.maintenance_config_id,
        "date": record.date,
        "mileage": record.mileage,
        "cost": record.cost,
        "shopName": record.shop_name,
    }
    if record.notes is not None:
        d["notes"] = record.notes
    return d


def _modification_to_dict(modification: Modification) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": modification.id,
        "vehicleId": modification.vehicle_id,
        "name": modification.name,
        "category": modification.category,
        "cost": modification.cost,
        "date": modification.date,
        "isWishlist": modification.is_wishlist,
    }
    if modification.expense_id is not None:
        d["expenseId"] = modification.expense_id
    return d


def garage_to_dict(garage: Garage) -> Dict[str, Any]:
    return {
        "vehicles": [_vehicle_to_dict(v) for v in garage.vehicles],
        "configs": [_config_to_dict(c) for c in garage.configs],
        "history": [_record_to_dict(r) for r in garage.history],
        "modifications": [_modification_to_dict(m) for m in garage.modifications],
    }


def save_garage(filename: Union[str, Path], garage: Garage) -> None:
    """Write the whole garage back to a YAML file."""
    with open(filename, "w") as fp:
        yaml.dump(
            garage_to_dict(garage),
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def create_garage(filename: Union[str, Path]) -> Garage:
    """Create an empty garage file. Refuses to overwrite an existing one."""
    path = Path(filename)
    if path.exists():
        raise GarageFileError(filename, "file already exists")
    garage = Garage()
    save_garage(path, garage)
    logger.info("Created garage file %s", path)
    return garage


@contextmanager
def edit_garage(filename: Union[str, Path]) -> Iterator[Garage]:
    """
    Load a garage, yield it for changes, and save it if no error was raised.

        with edit_garage("garage.yaml") as garage:
            garage.set_mileage("golf", 61000)
    """
    garage = load_garage(filename)
    yield garage
    save_garage(filename, garage)
