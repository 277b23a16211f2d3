"""Service history and modification records."""

from typing import Optional

MODIFICATION_KINDS = (
    "exterior",
    "interior",
    "performance",
    "wheels",
    "lighting",
    "electronics",
    "other",
)


class ServiceRecord:
    """A logged service (or renewal) for one maintenance config."""

    def __init__(
        self,
        id: str,
        vehicle_id: str,
        maintenance_config_id: str,
        date: str,
        mileage: int,
        cost: float = 0,
        shop_name: str = "",
        notes: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.maintenance_config_id = maintenance_config_id
        self.date = date
        self.mileage = mileage
        self.cost = cost
        self.shop_name = shop_name
        self.notes = notes


class Modification:
    """An installed upgrade, or a wishlist entry not yet bought."""

    def __init__(
        self,
        id: str,
        vehicle_id: str,
        name: str,
        category: str,
        cost: float,
        date: str,
        expense_id: Optional[str] = None,
        is_wishlist: bool = False,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.name = name
        self.category = category
        self.cost = cost
        self.date = date
        self.expense_id = expense_id
        self.is_wishlist = is_wishlist or False
