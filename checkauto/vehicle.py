"""Vehicle class for tracked cars."""

from typing import Optional


class Vehicle:
    """A car in the garage and its current odometer reading (km)."""

    def __init__(
        self,
        id: str,
        make: str,
        model: str,
        year: int,
        plate: str,
        current_mileage: int,
        user_id: Optional[str] = None,
        image: Optional[str] = None,
    ):
        self.id = id
        self.make = make
        self.model = model
        self.year = year
        self.plate = plate
        self.current_mileage = current_mileage
        self.user_id = user_id
        self.image = image

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return f"{self.year} {self.make} {self.model}"

    def __repr__(self) -> str:
        return f"Vehicle({self.id!r}, {self.name!r}, {self.current_mileage} km)"
