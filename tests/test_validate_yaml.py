#!/usr/bin/env python3
"""Tests for garage file validation script."""

from pathlib import Path

from checkauto.loader import load_schema
from validate_yaml import check_references, main, validate_garage_file

VALID = """
vehicles:
  - {id: golf, make: VW, model: Golf, year: 2015, plate: X, currentMileage: 1000}
configs:
  - id: golf-engine_oil
    vehicleId: golf
    category: engine_oil
    intervalKm: 15000
    intervalMonths: 12
    lastReplacedMileage: -1
    lastReplacedDate: 2026-01-01
    isActive: false
history: []
modifications: []
"""


def write(tmp_path: Path, text: str, name="garage.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text)
    return path


class TestValidateGarageFile:
    """Tests for validate_garage_file."""

    def test_valid_file(self, tmp_path):
        assert validate_garage_file(write(tmp_path, VALID), load_schema()) == []

    def test_empty_file_is_valid(self, tmp_path):
        assert validate_garage_file(write(tmp_path, ""), load_schema()) == []

    def test_schema_error_reports_path(self, tmp_path):
        text = VALID.replace("lastReplacedMileage: -1", "lastReplacedMileage: -5")
        errors = validate_garage_file(write(tmp_path, text), load_schema())
        assert errors[0].startswith("Schema validation error")
        assert "configs.0.lastReplacedMileage" in errors[1]

    def test_yaml_error(self, tmp_path):
        errors = validate_garage_file(write(tmp_path, "vehicles: [oops\n"), load_schema())
        assert errors[0].startswith("YAML parse error")

    def test_unknown_top_level_key(self, tmp_path):
        errors = validate_garage_file(write(tmp_path, VALID + "extra: 1\n"), load_schema())
        assert errors


class TestCheckReferences:
    """Tests for check_references."""

    def test_dangling_references(self):
        data = {
            "vehicles": [],
            "configs": [
                {"id": "c1", "vehicleId": "golf", "category": "warp_core"},
            ],
            "history": [{"id": "r1", "maintenanceConfigId": "c2"}],
            "modifications": [{"id": "m1", "vehicleId": "golf"}],
        }
        errors = check_references(data)
        assert len(errors) == 4
        assert any("unknown category 'warp_core'" in e for e in errors)


class TestMain:
    """Tests for main entry point."""

    def test_directory_of_files(self, tmp_path, capsys):
        write(tmp_path, VALID, "a.yaml")
        write(tmp_path, "vehicles: [oops\n", "b.yml")
        assert main([str(tmp_path)]) == 1
        out = capsys.readouterr().out
        assert "OK: a.yaml" in out
        assert "FAIL: b.yml" in out

    def test_all_valid(self, tmp_path):
        assert main([str(write(tmp_path, VALID))]) == 0

    def test_missing_path(self, tmp_path):
        assert main([str(tmp_path / "nope.yaml")]) == 1
