#!/usr/bin/env python3
"""Tests for overdue alert detection."""

import logging

from checkauto import OverdueAlerts

from helpers import NOW, days_ago, make_config, make_vehicle


def garage_data():
    vehicle = make_vehicle()
    configs = [
        make_config("engine_oil", last_mileage=30000),
        make_config("insurance", 0, 12, last_date=days_ago(3)),
        make_config("tires", 45000, 60, last_mileage=40000),
        make_config("brake_pads", 40000, 36, last_mileage=0, active=False),
        make_config("air_filter", 30000, 24, last_mileage=None),
    ]
    return [vehicle], configs


class TestOverdueAlerts:
    """Tests for OverdueAlerts."""

    def test_reports_active_overdue_items(self):
        vehicles, configs = garage_data()
        alerts = OverdueAlerts().check(vehicles, configs, NOW)
        by_category = {a.config.category: a for a in alerts}
        assert set(by_category) == {"engine_oil", "insurance"}
        assert by_category["engine_oil"].kind == "replace"
        assert by_category["insurance"].kind == "renew"

    def test_alert_keys(self):
        vehicles, configs = garage_data()
        alert = OverdueAlerts().check(vehicles, configs[:1], NOW)[0]
        assert alert.key == "golf-engine_oil-OVERDUE"
        assert alert.title_key == "alert_title"
        assert alert.body_key == "alert_msg_replace"

    def test_each_item_reported_once(self):
        vehicles, configs = garage_data()
        notifier = OverdueAlerts()
        assert len(notifier.check(vehicles, configs, NOW)) == 2
        assert notifier.check(vehicles, configs, NOW) == []

    def test_clear_reports_again(self):
        vehicles, configs = garage_data()
        notifier = OverdueAlerts()
        notifier.check(vehicles, configs, NOW)
        notifier.clear()
        assert len(notifier.check(vehicles, configs, NOW)) == 2

    def test_logs_each_alert(self, caplog):
        vehicles, configs = garage_data()
        with caplog.at_level(logging.INFO, logger="checkauto.alerts"):
            OverdueAlerts().check(vehicles, configs, NOW)
        assert "engine_oil" in caplog.text
