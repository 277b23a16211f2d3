#!/usr/bin/env python3
"""Tests for history/config consistency rules."""

from datetime import date, datetime

import pytest

from checkauto import InvalidRecordError, ServiceRecord
from checkauto.ledger import (
    apply_mileage,
    latest_record,
    recalculate_last_service,
    spend_by_config,
    total_spend,
    validate_service_record,
)

from helpers import NOW, make_config, make_vehicle


def record(ident, date_str, mileage, config_id="golf-engine_oil", cost=0):
    return ServiceRecord(ident, "golf", config_id, date_str, mileage, cost)


class TestLatestRecord:
    """Tests for latest_record."""

    def test_empty(self):
        assert latest_record([]) is None

    def test_most_recent_date_wins(self):
        records = [record("a", "2025-01-01", 30000), record("b", "2026-01-01", 20000)]
        assert latest_record(records).id == "b"

    def test_same_day_higher_mileage_wins(self):
        records = [record("a", "2026-01-01", 30000), record("b", "2026-01-01", 31000)]
        assert latest_record(records).id == "b"

    def test_unreadable_date_never_latest(self):
        records = [record("a", "garbage", 90000), record("b", "2020-01-01", 10000)]
        assert latest_record(records).id == "b"


class TestRecalculateLastService:
    """Tests for recalculate_last_service."""

    def test_takes_latest_record(self):
        config = make_config(last_mileage=None)
        records = [
            record("a", "2025-01-01", 30000),
            record("b", "2026-02-01", 45000),
            record("c", "2026-03-01", 99999, config_id="golf-tires"),
        ]
        updated = recalculate_last_service(config, records)
        assert updated.last_replaced_mileage == 45000
        assert updated.last_replaced_date == "2026-02-01"
        assert config.last_replaced_mileage is None

    def test_no_records_resets_to_unknown(self):
        config = make_config(last_mileage=40000)
        now = datetime(2026, 6, 1, 12, 0)
        updated = recalculate_last_service(config, [], now)
        assert updated.last_replaced_mileage is None
        assert updated.last_replaced_date == "2026-06-01T12:00:00"


class TestApplyMileage:
    """Tests for apply_mileage."""

    def test_raises_odometer(self):
        vehicle = make_vehicle(50000)
        assert apply_mileage(vehicle, 51000)
        assert vehicle.current_mileage == 51000

    def test_never_lowers(self):
        vehicle = make_vehicle(50000)
        assert not apply_mileage(vehicle, 49000)
        assert not apply_mileage(vehicle, 50000)
        assert not apply_mileage(vehicle, None)
        assert vehicle.current_mileage == 50000


class TestValidateServiceRecord:
    """Tests for validate_service_record."""

    def test_valid_record(self):
        validate_service_record(record("a", "2026-05-01", 45000, cost=80), "engine_oil", NOW)

    def test_negative_cost(self):
        with pytest.raises(InvalidRecordError, match="Cost"):
            validate_service_record(record("a", "2026-05-01", 45000, cost=-1), "engine_oil", NOW)

    def test_negative_mileage(self):
        with pytest.raises(InvalidRecordError, match="Mileage"):
            validate_service_record(record("a", "2026-05-01", -5), "engine_oil", NOW)

    def test_bad_date(self):
        with pytest.raises(InvalidRecordError, match="Invalid service date"):
            validate_service_record(record("a", "yesterday", 45000), "engine_oil", NOW)

    def test_future_service_date(self):
        with pytest.raises(InvalidRecordError, match="future"):
            validate_service_record(record("a", "2026-07-01", 45000), "engine_oil", NOW)

    def test_future_expiry_allowed_for_legal_items(self):
        validate_service_record(record("a", "2027-06-01", 45000), "insurance", NOW)

    def test_invalid_record_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_service_record(record("a", "2026-05-01", -5), "engine_oil", date(2026, 6, 1))


class TestSpend:
    """Tests for total_spend and spend_by_config."""

    def test_total(self):
        records = [record("a", "2026-01-01", 1, cost=10.5), record("b", "2026-01-02", 2, cost=20)]
        assert total_spend(records) == 30.5

    def test_none_cost_ignored(self):
        records = [record("a", "2026-01-01", 1, cost=None), record("b", "2026-01-02", 2, cost=5)]
        assert total_spend(records) == 5
        assert spend_by_config(records) == {"golf-engine_oil": 5}

    def test_by_config(self):
        records = [
            record("a", "2026-01-01", 1, cost=10),
            record("b", "2026-01-02", 2, cost=20),
            record("c", "2026-01-03", 3, config_id="golf-tires", cost=300),
        ]
        assert spend_by_config(records) == {"golf-engine_oil": 30, "golf-tires": 300}
