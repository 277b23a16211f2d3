"""Detection of newly overdue items for the notification layer."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from .anchor import DateLike
from .catalog import Catalog, default_catalog
from .evaluator import evaluate_status
from .maintenance_config import MaintenanceConfig
from .status import Status
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Alert:
    """
    One overdue item to notify about.

    kind is "renew" for expiring documents and "replace" for worn parts;
    title_key/body_key are i18n keys for the delivery layer.
    """

    vehicle: Vehicle
    config: MaintenanceConfig
    kind: str

    @property
    def key(self) -> str:
        return alert_key(self.vehicle, self.config, Status.OVERDUE)

    @property
    def title_key(self) -> str:
        return "alert_title"

    @property
    def body_key(self) -> str:
        return f"alert_msg_{self.kind}"


def alert_key(vehicle: Vehicle, config: MaintenanceConfig, status: Status) -> str:
    return f"{vehicle.id}-{config.category}-{status.name}"


class OverdueAlerts:
    """Remembers which overdue items were already reported."""

    def __init__(self, catalog: Optional[Catalog] = None):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.sent: Set[str] = set()

    def check(
        self,
        vehicles: Iterable[Vehicle],
        configs: Iterable[MaintenanceConfig],
        now: DateLike,
    ) -> List[Alert]:
        """Return alerts for active items that became OVERDUE since the last check."""
        configs = list(configs)
        alerts = []
        for vehicle in vehicles:
            for config in configs:
                if config.vehicle_id != vehicle.id or not config.is_active:
                    continue
                status = evaluate_status(vehicle, config, now, self.catalog).status
                key = alert_key(vehicle, config, status)
                if status is not Status.OVERDUE or key in self.sent:
                    continue
                kind = (
                    "renew"
                    if self.catalog.is_expiration_based(config.category)
                    else "replace"
                )
                alerts.append(Alert(vehicle=vehicle, config=config, kind=kind))
                self.sent.add(key)
                logger.info("Overdue alert: %s %s", vehicle.name, config.category)
        return alerts

    def clear(self) -> None:
        self.sent.clear()
