"""Shared builders for tests."""

from datetime import date, timedelta

from checkauto import MaintenanceConfig, Vehicle

NOW = date(2026, 6, 1)


def days_ago(n: int) -> str:
    return (NOW - timedelta(days=n)).isoformat()


def days_ahead(n: int) -> str:
    return (NOW + timedelta(days=n)).isoformat()


def make_vehicle(mileage=50000, vehicle_id="golf") -> Vehicle:
    return Vehicle(vehicle_id, "Volkswagen", "Golf", 2015, "1234ABC", mileage)


def make_config(
    category="engine_oil",
    interval_km=15000,
    interval_months=12,
    last_mileage=40000,
    last_date=None,
    active=True,
    vehicle_id="golf",
) -> MaintenanceConfig:
    return MaintenanceConfig(
        id=f"{vehicle_id}-{category}",
        vehicle_id=vehicle_id,
        category=category,
        interval_km=interval_km,
        interval_months=interval_months,
        last_replaced_mileage=last_mileage,
        last_replaced_date=last_date if last_date is not None else days_ago(200),
        is_active=active,
    )
