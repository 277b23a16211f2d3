#!/usr/bin/env python3
"""Tests for the Garage aggregate."""

from dataclasses import replace
from datetime import datetime

import pytest

from checkauto import (
    CheckAutoError,
    Garage,
    IntervalOutOfRangeError,
    InvalidRecordError,
    Modification,
    NotFoundError,
    ServiceRecord,
    Status,
)

from helpers import NOW, make_vehicle

STAMP = datetime(2026, 6, 1, 9, 0)


@pytest.fixture
def garage():
    g = Garage()
    g.add_vehicle(make_vehicle(50000), now=STAMP)
    return g


def oil_record(mileage=45000, date="2026-03-01", cost=80.0):
    return ServiceRecord("", "golf", "golf-engine_oil", date, mileage, cost, "Taller Pepe")


class TestVehicles:
    """Tests for adding, updating and removing vehicles."""

    def test_add_vehicle_creates_inactive_configs(self, garage):
        configs = garage.configs_for("golf")
        assert configs
        assert not any(c.is_active for c in configs)

    def test_duplicate_vehicle_rejected(self, garage):
        with pytest.raises(CheckAutoError, match="already exists"):
            garage.add_vehicle(make_vehicle())

    def test_negative_mileage_rejected(self):
        with pytest.raises(InvalidRecordError):
            Garage().add_vehicle(make_vehicle(-1))

    def test_set_mileage(self, garage):
        garage.set_mileage("golf", 52000)
        assert garage.get_vehicle("golf").current_mileage == 52000

    def test_update_vehicle(self, garage):
        vehicle = garage.update_vehicle("golf", {"plate": "9999XYZ", "year": 2016})
        assert vehicle.plate == "9999XYZ"
        assert vehicle.name == "2016 Volkswagen Golf"

    def test_update_vehicle_rejects_unknown_field(self, garage):
        with pytest.raises(InvalidRecordError, match="Cannot change 'id'"):
            garage.update_vehicle("golf", {"id": "polo"})
        assert garage.get_vehicle("golf")

    def test_update_vehicle_rejects_negative_mileage(self, garage):
        with pytest.raises(InvalidRecordError):
            garage.update_vehicle("golf", {"current_mileage": -10})
        assert garage.get_vehicle("golf").current_mileage == 50000

    def test_unknown_vehicle(self, garage):
        with pytest.raises(NotFoundError, match="Vehicle 'nope' not found"):
            garage.get_vehicle("nope")

    def test_remove_vehicle_cascades(self, garage):
        garage.add_record(oil_record())
        garage.add_modification(
            Modification("", "golf", "Spoiler", "exterior", 150, "2026-04-01")
        )
        garage.remove_vehicle("golf")
        assert garage.vehicles == []
        assert garage.configs == []
        assert garage.history == []
        assert garage.modifications == []


class TestConfigs:
    """Tests for config updates and interval limits."""

    def test_update_config(self, garage):
        config = garage.find_config("golf", "engine_oil")
        garage.update_config(replace(config, interval_km=20000, is_active=True))
        updated = garage.get_config("golf-engine_oil")
        assert updated.interval_km == 20000
        assert updated.is_active

    def test_interval_outside_limits(self, garage):
        config = garage.find_config("golf", "engine_oil")
        with pytest.raises(IntervalOutOfRangeError):
            garage.update_config(replace(config, interval_km=50000))

    def test_interval_off_step(self, garage):
        config = garage.find_config("golf", "engine_oil")
        with pytest.raises(IntervalOutOfRangeError):
            garage.update_config(replace(config, interval_km=15500))

    def test_unchanged_interval_not_checked(self, garage):
        """Toggling an item never fails on a legacy out-of-range interval."""
        config = garage.find_config("golf", "engine_oil")
        garage.configs = [replace(c, interval_km=50000) if c.id == config.id else c for c in garage.configs]
        legacy = garage.get_config(config.id)
        garage.update_config(replace(legacy, is_active=True))
        assert garage.get_config(config.id).is_active

    def test_negative_last_mileage_rejected(self, garage):
        config = garage.find_config("golf", "engine_oil")
        with pytest.raises(InvalidRecordError):
            garage.update_config(replace(config, last_replaced_mileage=-5))

    def test_stored_unknown_mileage_accepted(self, garage):
        """-1 from a garage file means unknown, not a negative reading."""
        config = garage.find_config("golf", "engine_oil")
        updated = garage.update_config(replace(config, last_replaced_mileage=-1))
        assert updated.last_replaced_mileage is None

    def test_activating_modification_refused(self, garage):
        garage.add_modification(
            Modification("", "golf", "Spoiler", "exterior", 150, "2026-04-01")
        )
        config = garage.find_config("golf", "modification")
        with pytest.raises(CheckAutoError, match="not a maintenance item"):
            garage.update_config(replace(config, is_active=True))
        assert not garage.get_config(config.id).is_active

    def test_save_configs_unknown_id(self, garage):
        config = replace(garage.find_config("golf", "engine_oil"), id="nope")
        with pytest.raises(NotFoundError):
            garage.save_configs([config])


class TestHistory:
    """Tests for service records keeping configs consistent."""

    def test_add_record_updates_config(self, garage):
        record = garage.add_record(oil_record())
        assert record.id
        config = garage.get_config("golf-engine_oil")
        assert config.last_replaced_mileage == 45000
        assert config.last_replaced_date == "2026-03-01"

    def test_add_record_raises_odometer(self, garage):
        garage.add_record(oil_record(mileage=52000, date="2026-05-30"))
        assert garage.get_vehicle("golf").current_mileage == 52000

    def test_add_record_never_lowers_odometer(self, garage):
        garage.add_record(oil_record(mileage=10000))
        assert garage.get_vehicle("golf").current_mileage == 50000

    def test_older_record_does_not_win(self, garage):
        garage.add_record(oil_record(mileage=45000, date="2026-03-01"))
        garage.add_record(oil_record(mileage=30000, date="2025-03-01"))
        assert garage.get_config("golf-engine_oil").last_replaced_mileage == 45000

    def test_record_for_unknown_config(self, garage):
        record = ServiceRecord("", "golf", "golf-nope", "2026-03-01", 1000)
        with pytest.raises(NotFoundError):
            garage.add_record(record)

    def test_remove_only_record_resets_to_unknown(self, garage):
        record = garage.add_record(oil_record())
        garage.remove_record(record.id, now=STAMP)
        config = garage.get_config("golf-engine_oil")
        assert config.last_replaced_mileage is None
        assert config.last_replaced_date == "2026-06-01T09:00:00"

    def test_remove_latest_falls_back_to_previous(self, garage):
        garage.add_record(oil_record(mileage=30000, date="2025-03-01"))
        latest = garage.add_record(oil_record(mileage=45000, date="2026-03-01"))
        garage.remove_record(latest.id)
        assert garage.get_config("golf-engine_oil").last_replaced_mileage == 30000

    def test_update_record(self, garage):
        record = garage.add_record(oil_record())
        garage.update_record(record.id, {"mileage": 46000, "cost": 90})
        assert garage.get_config("golf-engine_oil").last_replaced_mileage == 46000
        assert garage.get_record(record.id).cost == 90

    def test_update_record_rejects_unknown_field(self, garage):
        record = garage.add_record(oil_record())
        with pytest.raises(InvalidRecordError):
            garage.update_record(record.id, {"vehicle_id": "other"})

    def test_update_record_rejects_negative_cost(self, garage):
        record = garage.add_record(oil_record(cost=80))
        with pytest.raises(InvalidRecordError, match="Cost cannot be negative"):
            garage.update_record(record.id, {"cost": -1, "mileage": 47000}, now=STAMP)
        assert record.cost == 80
        assert record.mileage == 45000
        assert garage.get_config("golf-engine_oil").last_replaced_mileage == 45000

    def test_update_record_rejects_future_date(self, garage):
        record = garage.add_record(oil_record())
        with pytest.raises(InvalidRecordError, match="future"):
            garage.update_record(record.id, {"date": "2026-07-01"}, now=STAMP)
        assert record.date == "2026-03-01"

    def test_update_record_raises_odometer(self, garage):
        record = garage.add_record(oil_record())
        garage.update_record(record.id, {"mileage": 51000}, now=STAMP)
        assert garage.get_vehicle("golf").current_mileage == 51000

    def test_history_newest_first(self, garage):
        garage.add_record(oil_record(mileage=30000, date="2025-03-01"))
        garage.add_record(oil_record(mileage=45000, date="2026-03-01"))
        assert [r.mileage for r in garage.history_for("golf")] == [45000, 30000]


class TestStatusAndHealth:
    """Tests for statuses, health and spend on the garage."""

    def test_statuses_sorted_by_urgency(self, garage):
        for category, active in (("engine_oil", True), ("tires", True)):
            config = garage.find_config("golf", category)
            garage.update_config(replace(config, is_active=active))
        garage.add_record(oil_record(mileage=30000, date="2026-03-01"))
        results = garage.statuses("golf", NOW)
        assert [r.status for r in results] == [Status.OVERDUE, Status.REVIEW_NEEDED]

    def test_health_with_nothing_active(self, garage):
        assert garage.health("golf", NOW).score == 100.0

    def test_spend_split(self, garage):
        garage.add_record(oil_record(cost=80))
        garage.add_modification(
            Modification("", "golf", "LED bulbs", "lighting", 40, "2026-04-01")
        )
        assert garage.spend("golf") == {"maintenance": 80, "modifications": 40, "total": 120}


class TestModifications:
    """Tests for modifications and their expense records."""

    def test_installed_mod_logs_expense(self, garage):
        mod = garage.add_modification(
            Modification("", "golf", "Spoiler", "exterior", 150, "2026-04-01"), now=STAMP
        )
        expense = garage.get_record(mod.expense_id)
        assert expense.cost == 150
        assert expense.shop_name == "Mod: exterior"
        assert expense.notes == "Spoiler"
        assert expense.mileage == 50000
        config = garage.get_config(expense.maintenance_config_id)
        assert config.category == "modification"
        assert not config.is_active

    def test_wishlist_has_no_expense(self, garage):
        mod = garage.add_modification(
            Modification("", "golf", "Coilovers", "performance", 900, "2026-04-01", is_wishlist=True)
        )
        assert mod.expense_id is None
        assert garage.history == []
        assert garage.modifications_for("golf", wishlist=True) == [mod]

    def test_install_wishlist(self, garage):
        mod = garage.add_modification(
            Modification("", "golf", "Coilovers", "performance", 900, "2026-04-01", is_wishlist=True)
        )
        garage.install_wishlist(mod.id, 850, "2026-05-10")
        assert not mod.is_wishlist
        assert mod.cost == 850
        assert mod.date == "2026-05-10"
        assert garage.get_record(mod.expense_id).cost == 850

    def test_install_twice_rejected(self, garage):
        mod = garage.add_modification(
            Modification("", "golf", "Spoiler", "exterior", 150, "2026-04-01")
        )
        with pytest.raises(InvalidRecordError, match="already installed"):
            garage.install_wishlist(mod.id, 150, "2026-05-10")

    def test_remove_modification_removes_expense(self, garage):
        mod = garage.add_modification(
            Modification("", "golf", "Spoiler", "exterior", 150, "2026-04-01")
        )
        garage.remove_modification(mod.id)
        assert garage.modifications == []
        assert garage.history == []

    def test_mod_expense_not_scored(self, garage):
        garage.add_modification(
            Modification("", "golf", "Spoiler", "exterior", 150, "2026-04-01")
        )
        assert garage.statuses("golf", NOW) == []

    def test_mod_expense_not_scored_when_active(self, garage):
        """A modification bucket switched on in the file is still left out."""
        garage.add_modification(
            Modification("", "golf", "Spoiler", "exterior", 150, "2026-04-01")
        )
        garage.configs = [
            replace(c, is_active=True) if c.category == "modification" else c
            for c in garage.configs
        ]
        report = garage.health("golf", NOW)
        assert report.results == []
        assert report.score == 100.0
