#!/usr/bin/env python3
"""Validate garage YAML files against the schema."""
import argparse
import json
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

from checkauto.catalog import default_catalog
from checkauto.loader import load_schema


def check_references(data: dict) -> list[str]:
    """Cross-record checks the schema cannot express. Returns list of errors."""
    errors = []
    catalog = default_catalog()
    vehicle_ids = {v["id"] for v in data.get("vehicles") or []}
    config_ids = set()
    for config in data.get("configs") or []:
        config_ids.add(config["id"])
        if config["vehicleId"] not in vehicle_ids:
            errors.append(f"Config {config['id']}: unknown vehicle '{config['vehicleId']}'")
        if config["category"] not in catalog:
            errors.append(f"Config {config['id']}: unknown category '{config['category']}'")
    for record in data.get("history") or []:
        if record["maintenanceConfigId"] not in config_ids:
            errors.append(
                f"Record {record['id']}: unknown config '{record['maintenanceConfigId']}'"
            )
    for modification in data.get("modifications") or []:
        if modification["vehicleId"] not in vehicle_ids:
            errors.append(
                f"Modification {modification['id']}: unknown vehicle '{modification['vehicleId']}'"
            )
    return errors


def validate_garage_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single garage YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        if data is None:
            return errors
        # Unquoted YAML dates load as date objects; the schema expects strings
        data = json.loads(json.dumps(data, default=str))
        validate(instance=data, schema=schema)
        errors.extend(check_references(data))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except Exception as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the given garage files, or every YAML file in a directory."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("paths", nargs="+", type=Path, help="Garage files or directories")
    args = parser.parse_args(argv)

    schema = load_schema()
    yaml_files = []
    for path in args.paths:
        if path.is_dir():
            yaml_files.extend(path.glob("*.yaml"))
            yaml_files.extend(path.glob("*.yml"))
        elif path.exists():
            yaml_files.append(path)
        else:
            print(f"Error: not found: {path}")
            return 1

    if not yaml_files:
        print("Warning: No YAML files found")
        return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_garage_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
