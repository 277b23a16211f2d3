"""Garage class - the aggregate of vehicles, configs, history and modifications."""

import copy
import logging
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .anchor import DateLike, parse_day, to_day
from .catalog import Catalog, MODIFICATION_CATEGORY, default_catalog
from .errors import CheckAutoError, InvalidRecordError, NotFoundError
from .evaluator import StatusResult, evaluate_all
from .health import HealthReport, build_health_report
from .ledger import (
    apply_mileage,
    recalculate_last_service,
    total_spend,
    validate_service_record,
)
from .maintenance_config import MaintenanceConfig
from .records import Modification, ServiceRecord
from .vehicle import Vehicle
from .wizard import build_default_configs, config_id

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("date", "mileage", "cost", "shop_name", "notes")
VEHICLE_FIELDS = ("make", "model", "year", "plate", "image", "current_mileage")


def new_id() -> str:
    return uuid.uuid4().hex[:12]


class Garage:
    """Everything a user tracks, with the consistency rules between the parts."""

    def __init__(
        self,
        vehicles: Optional[List[Vehicle]] = None,
        configs: Optional[List[MaintenanceConfig]] = None,
        history: Optional[List[ServiceRecord]] = None,
        modifications: Optional[List[Modification]] = None,
    ):
        self.vehicles = vehicles or []
        self.configs = configs or []
        self.history = history or []
        self.modifications = modifications or []

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        raise NotFoundError("Vehicle", vehicle_id)

    def get_config(self, config_id: str) -> MaintenanceConfig:
        for config in self.configs:
            if config.id == config_id:
                return config
        raise NotFoundError("Maintenance config", config_id)

    def find_config(self, vehicle_id: str, category: str) -> Optional[MaintenanceConfig]:
        """The config for a (vehicle, category) pair, if one exists."""
        for config in self.configs:
            if config.vehicle_id == vehicle_id and config.category == category:
                return config
        return None

    def get_record(self, record_id: str) -> ServiceRecord:
        for record in self.history:
            if record.id == record_id:
                return record
        raise NotFoundError("Service record", record_id)

    def get_modification(self, modification_id: str) -> Modification:
        for modification in self.modifications:
            if modification.id == modification_id:
                return modification
        raise NotFoundError("Modification", modification_id)

    def configs_for(self, vehicle_id: str) -> List[MaintenanceConfig]:
        return [c for c in self.configs if c.vehicle_id == vehicle_id]

    def history_for(self, vehicle_id: str) -> List[ServiceRecord]:
        """Service records for a vehicle, newest first."""
        records = [r for r in self.history if r.vehicle_id == vehicle_id]
        return sorted(
            records,
            key=lambda r: (parse_day(r.date) or date.min, r.mileage or 0),
            reverse=True,
        )

    def modifications_for(self, vehicle_id: str, wishlist: Optional[bool] = None):
        mods = [m for m in self.modifications if m.vehicle_id == vehicle_id]
        if wishlist is not None:
            mods = [m for m in mods if m.is_wishlist == wishlist]
        return sorted(mods, key=lambda m: m.date, reverse=True)

    # -------------------------------------------------------------------------
    # Status and health
    # -------------------------------------------------------------------------

    def statuses(
        self, vehicle_id: str, now: DateLike, catalog: Optional[Catalog] = None
    ) -> List[StatusResult]:
        """Status of every active item, most urgent first."""
        vehicle = self.get_vehicle(vehicle_id)
        results = evaluate_all(vehicle, self.configs, now, catalog)
        results.sort(key=lambda r: (r.status.value, r.config.category))
        return results

    def health(
        self, vehicle_id: str, now: DateLike, catalog: Optional[Catalog] = None
    ) -> HealthReport:
        return build_health_report(self.get_vehicle(vehicle_id), self.configs, now, catalog)

    def spend(self, vehicle_id: str) -> Dict[str, float]:
        """Total spend split into maintenance and modifications."""
        mod_config = self.find_config(vehicle_id, MODIFICATION_CATEGORY)
        mod_config_id = mod_config.id if mod_config else None
        records = self.history_for(vehicle_id)
        maintenance = [r for r in records if r.maintenance_config_id != mod_config_id]
        mods = [r for r in records if r.maintenance_config_id == mod_config_id]
        return {
            "maintenance": total_spend(maintenance),
            "modifications": total_spend(mods),
            "total": total_spend(records),
        }

    # -------------------------------------------------------------------------
    # Vehicles
    # -------------------------------------------------------------------------

    def add_vehicle(
        self,
        vehicle: Vehicle,
        catalog: Optional[Catalog] = None,
        now: Optional[datetime] = None,
    ) -> List[MaintenanceConfig]:
        """Add a vehicle with one inactive config per tracked category."""
        if any(v.id == vehicle.id for v in self.vehicles):
            raise CheckAutoError(f"Vehicle '{vehicle.id}' already exists")
        if vehicle.current_mileage < 0:
            raise InvalidRecordError("Mileage cannot be negative")
        configs = build_default_configs(vehicle, catalog, now)
        self.vehicles.append(vehicle)
        self.configs.extend(configs)
        logger.info("Added vehicle %s with %d configs", vehicle.id, len(configs))
        return configs

    def update_vehicle(self, vehicle_id: str, changes: Dict[str, Any]) -> Vehicle:
        """Edit vehicle details (make, model, year, plate, image, mileage)."""
        vehicle = self.get_vehicle(vehicle_id)
        for name in changes:
            if name not in VEHICLE_FIELDS:
                raise InvalidRecordError(f"Cannot change '{name}' on a vehicle")
        if changes.get("current_mileage", 0) < 0:
            raise InvalidRecordError("Mileage cannot be negative")
        for name, value in changes.items():
            setattr(vehicle, name, value)
        logger.info("Updated vehicle %s: %s", vehicle_id, ", ".join(changes))
        return vehicle

    def set_mileage(self, vehicle_id: str, mileage: int) -> Vehicle:
        if mileage < 0:
            raise InvalidRecordError("Mileage cannot be negative")
        vehicle = self.get_vehicle(vehicle_id)
        vehicle.current_mileage = mileage
        logger.info("Vehicle %s mileage set to %s", vehicle_id, mileage)
        return vehicle

    def remove_vehicle(self, vehicle_id: str) -> None:
        """Delete a vehicle and its configs, history and modifications."""
        self.get_vehicle(vehicle_id)
        self.vehicles = [v for v in self.vehicles if v.id != vehicle_id]
        self.configs = [c for c in self.configs if c.vehicle_id != vehicle_id]
        self.history = [r for r in self.history if r.vehicle_id != vehicle_id]
        self.modifications = [
            m for m in self.modifications if m.vehicle_id != vehicle_id
        ]
        logger.info("Deleted vehicle %s and its related data", vehicle_id)

    # -------------------------------------------------------------------------
    # Configs
    # -------------------------------------------------------------------------

    def update_config(
        self, config: MaintenanceConfig, catalog: Optional[Catalog] = None
    ) -> MaintenanceConfig:
        """Replace a config by id, enforcing the category's interval limits."""
        if catalog is None:
            catalog = default_catalog()
        if config.interval_km < 0 or config.interval_months < 0:
            raise InvalidRecordError("Intervals cannot be negative")
        mileage = config.last_replaced_mileage
        if mileage is not None and mileage < 0:
            raise InvalidRecordError("Mileage cannot be negative")
        untracked = config.category in catalog and not catalog.is_tracked(config.category)
        if config.is_active and untracked:
            raise CheckAutoError(f"'{config.category}' is not a maintenance item")
        current = self.get_config(config.id)
        if config.interval_km != current.interval_km:
            catalog.limits_for(config.category).check(config.category, config.interval_km)
        self.configs = [config if c.id == config.id else c for c in self.configs]
        return config

    def save_configs(self, configs: List[MaintenanceConfig]) -> None:
        """Batch replace configs by id (wizard results, bulk toggles)."""
        by_id = {c.id: c for c in configs}
        for ident in by_id:
            self.get_config(ident)
        self.configs = [by_id.get(c.id, c) for c in self.configs]

    def _recalculate(self, config_id_: str, now: Optional[datetime] = None) -> None:
        try:
            config = self.get_config(config_id_)
        except NotFoundError:
            logger.warning("Record points at missing config %s", config_id_)
            return
        updated = recalculate_last_service(config, self.history, now)
        self.configs = [updated if c.id == config.id else c for c in self.configs]

    # -------------------------------------------------------------------------
    # Service history
    # -------------------------------------------------------------------------

    def add_record(
        self, record: ServiceRecord, now: Optional[datetime] = None
    ) -> ServiceRecord:
        """
        Log a service and keep dependent state consistent.

        The owning config takes the values of its most recent record, and the
        vehicle's mileage moves up if the record is beyond the odometer.
        """
        vehicle = self.get_vehicle(record.vehicle_id)
        self.get_config(record.maintenance_config_id)
        if not record.id:
            record.id = new_id()
        self.history.append(record)
        self._recalculate(record.maintenance_config_id, now)
        if apply_mileage(vehicle, record.mileage):
            logger.info("Vehicle %s mileage raised to %s", vehicle.id, record.mileage)
        logger.info(
            "Logged record %s for config %s", record.id, record.maintenance_config_id
        )
        return record

    def update_record(
        self,
        record_id: str,
        changes: Dict[str, Any],
        now: Optional[datetime] = None,
        catalog: Optional[Catalog] = None,
    ) -> ServiceRecord:
        """Edit a record; the edited values must pass the same checks as a new one."""
        record = self.get_record(record_id)
        for name in changes:
            if name not in RECORD_FIELDS:
                raise InvalidRecordError(f"Cannot change '{name}' on a service record")
        edited = copy.copy(record)
        for name, value in changes.items():
            setattr(edited, name, value)
        category = self.get_config(record.maintenance_config_id).category
        validate_service_record(edited, category, now or datetime.now(), catalog)

        for name, value in changes.items():
            setattr(record, name, value)
        self._recalculate(record.maintenance_config_id, now)
        if apply_mileage(self.get_vehicle(record.vehicle_id), record.mileage):
            logger.info(
                "Vehicle %s mileage raised to %s", record.vehicle_id, record.mileage
            )
        return record

    def remove_record(self, record_id: str, now: Optional[datetime] = None) -> None:
        record = self.get_record(record_id)
        self.history = [r for r in self.history if r.id != record_id]
        self._recalculate(record.maintenance_config_id, now)
        logger.info("Deleted record %s", record_id)

    # -------------------------------------------------------------------------
    # Modifications
    # -------------------------------------------------------------------------

    def _modification_config(
        self, vehicle_id: str, now: Optional[datetime] = None
    ) -> MaintenanceConfig:
        """The vehicle's expense bucket for modifications, created on demand."""
        config = self.find_config(vehicle_id, MODIFICATION_CATEGORY)
        if config is None:
            config = MaintenanceConfig(
                id=config_id(vehicle_id, MODIFICATION_CATEGORY),
                vehicle_id=vehicle_id,
                category=MODIFICATION_CATEGORY,
                last_replaced_date=(now or datetime.now()).isoformat(),
                is_active=False,
            )
            self.configs.append(config)
        return config

    def _add_expense(
        self, modification: Modification, now: Optional[datetime] = None
    ) -> str:
        vehicle = self.get_vehicle(modification.vehicle_id)
        config = self._modification_config(modification.vehicle_id, now)
        record = ServiceRecord(
            id=new_id(),
            vehicle_id=vehicle.id,
            maintenance_config_id=config.id,
            date=modification.date,
            mileage=vehicle.current_mileage,
            cost=modification.cost,
            shop_name=f"Mod: {modification.category}",
            notes=modification.name,
        )
        self.add_record(record, now)
        return record.id

    def add_modification(
        self, modification: Modification, now: Optional[datetime] = None
    ) -> Modification:
        """Add a modification; installed ones are also logged as an expense."""
        self.get_vehicle(modification.vehicle_id)
        if modification.cost is not None and modification.cost < 0:
            raise InvalidRecordError("Cost cannot be negative")
        if not modification.id:
            modification.id = new_id()
        if not modification.is_wishlist:
            modification.expense_id = self._add_expense(modification, now)
        self.modifications.append(modification)
        return modification

    def install_wishlist(
        self,
        modification_id: str,
        final_cost: float,
        install_date: DateLike,
        now: Optional[datetime] = None,
    ) -> Modification:
        """Mark a wishlist entry as installed and log its expense."""
        modification = self.get_modification(modification_id)
        if not modification.is_wishlist:
            raise InvalidRecordError(f"Modification '{modification_id}' is already installed")
        if final_cost < 0:
            raise InvalidRecordError("Cost cannot be negative")
        modification.is_wishlist = False
        modification.cost = final_cost
        modification.date = to_day(install_date).isoformat()
        modification.expense_id = self._add_expense(modification, now)
        return modification

    def remove_modification(
        self, modification_id: str, now: Optional[datetime] = None
    ) -> None:
        modification = self.get_modification(modification_id)
        self.modifications = [m for m in self.modifications if m.id != modification_id]
        if modification.expense_id:
            try:
                self.remove_record(modification.expense_id, now)
            except NotFoundError:
                logger.warning(
                    "Expense %s of modification %s was already gone",
                    modification.expense_id,
                    modification_id,
                )
