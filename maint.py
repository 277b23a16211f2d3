#!/usr/bin/env python3
"""
Unified CLI for vehicle maintenance tracking.

Commands:
  init          - Create an empty garage file
  add-vehicle   - Register a vehicle (all items start inactive)
  vehicles      - List vehicles with their health score
  status        - Show what maintenance is due, overdue, or needs review
  history       - View service history and spend
  log           - Record a service or a document renewal
  edit-record   - Change a history entry
  delete-record - Delete a history entry
  update-miles  - Update current vehicle mileage
  edit-vehicle  - Change make, model, year, plate or image
  delete-vehicle - Delete a vehicle and everything tracked for it
  configure     - Change an item's intervals, state or last service
  setup         - First-run wizard: inspection, road tax, oil change
  alerts        - List overdue items not yet reported
  catalog       - List maintenance categories and default intervals
  mods          - List modifications and wishlist
  add-mod       - Add a modification or wishlist entry
  install-mod   - Mark a wishlist entry as installed
  delete-mod    - Delete a modification and its expense
"""

import argparse
import logging
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from checkauto import (
    CheckAutoError,
    Garage,
    Modification,
    NotFoundError,
    OverdueAlerts,
    ServiceRecord,
    Status,
    StatusResult,
    Vehicle,
    create_garage,
    default_catalog,
    edit_garage,
    load_garage,
    to_day,
)
from checkauto.anchor import parse_day
from checkauto.ledger import spend_by_config, validate_service_record
from checkauto.records import MODIFICATION_KINDS
from checkauto.wizard import apply_setup

logger = logging.getLogger("maint")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format kilometres for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"€{cost:,.2f}" if cost is not None else "-"


def format_remaining(result: StatusResult) -> str:
    """Format remaining km for display."""
    if result.status == Status.REVIEW_NEEDED or result.km_remaining is None:
        return "-"
    if result.km_remaining < 0:
        return f"-{abs(result.km_remaining):,.0f}"
    return f"{result.km_remaining:,.0f}"


def format_time_remaining(result: StatusResult) -> str:
    """Format remaining time for display (e.g., '3mo 15d' or '-2mo 5d')."""
    if result.status == Status.REVIEW_NEEDED or result.days_remaining is None:
        return "-"

    days = int(result.days_remaining)
    sign = "-" if days < 0 else ""
    days = abs(days)
    months = days // 30
    remaining_days = days % 30
    if months > 0:
        return f"{sign}{months}mo {remaining_days}d"
    return f"{sign}{days}d"


def format_progress(result: StatusResult) -> str:
    return f"{result.display_progress:.0f}%"


def format_last_done(result: StatusResult) -> str:
    """Last service as 'date @ km', or the expiry date for legal items."""
    config = result.config
    if result.status == Status.REVIEW_NEEDED:
        return "-"
    day = parse_day(config.last_replaced_date)
    day_str = day.isoformat() if day else "-"
    if result.expiration_based:
        return f"expires {day_str}"
    return f"{day_str} @ {config.last_replaced_mileage:,.0f}"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_as_of(value: Optional[str]) -> date:
    """The evaluation date: --as-of if given, today otherwise."""
    return to_day(value) if value else date.today()


# =============================================================================
# Table builders
# =============================================================================


def make_status_table(results: List[StatusResult]) -> List[List[str]]:
    """Convert status results to table rows."""
    catalog = default_catalog()
    rows = []
    for result in results:
        category = result.config.category
        section = (
            catalog.get(category).section.value if category in catalog else "-"
        )
        rows.append(
            [
                category,
                section,
                format_last_done(result),
                format_remaining(result),
                format_time_remaining(result),
                format_progress(result),
            ]
        )
    return rows


def make_history_table(
    records: List[ServiceRecord], garage: Garage
) -> List[List[str]]:
    """Convert service records to table rows."""
    rows = []
    for record in records:
        try:
            category = garage.get_config(record.maintenance_config_id).category
        except CheckAutoError:
            category = record.maintenance_config_id
        day = parse_day(record.date)
        rows.append(
            [
                record.id,
                day.isoformat() if day else record.date,
                format_km(record.mileage),
                category,
                record.shop_name or "-",
                format_cost(record.cost),
                truncate(record.notes),
            ]
        )
    return rows


# =============================================================================
# Garage and vehicle commands
# =============================================================================


def cmd_init(args):
    """Create an empty garage file."""
    create_garage(args.garage_file)
    print(f"Created {args.garage_file}")
    return 0


def cmd_add_vehicle(args):
    """Register a vehicle with default (inactive) maintenance items."""
    vehicle = Vehicle(
        id=args.vehicle_id,
        make=args.make,
        model=args.model,
        year=args.year,
        plate=args.plate or "",
        current_mileage=args.mileage,
    )
    with edit_garage(args.garage_file) as garage:
        configs = garage.add_vehicle(vehicle)
    print(f"Added {vehicle.name} ({len(configs)} maintenance items, all inactive)")
    print(f"Run '{args.garage_file} setup {vehicle.id}' to activate the basics.")
    return 0


def cmd_vehicles(args):
    """List vehicles with health score and tier."""
    garage = load_garage(args.garage_file)
    now = parse_as_of(args.as_of)

    if not garage.vehicles:
        print("No vehicles yet.")
        return 0

    rows = []
    for vehicle in garage.vehicles:
        report = garage.health(vehicle.id, now)
        counts = report.counts
        badge = " *" if report.meta.responsible_driver else ""
        rows.append(
            [
                vehicle.id,
                vehicle.name,
                vehicle.plate or "-",
                format_km(vehicle.current_mileage),
                f"{report.score:.0f}%{badge}",
                report.meta.tier.value,
                counts[Status.OVERDUE],
                counts[Status.WARNING],
                counts[Status.REVIEW_NEEDED],
            ]
        )

    headers = ["ID", "Vehicle", "Plate", "Km", "Health", "Tier", "Overdue", "Soon", "Review"]
    print(f"As of {now.isoformat()}")
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    if any(row[4].endswith("*") for row in rows):
        print("\n* responsible driver (score above 95%)")
    return 0


def cmd_status(args):
    """Show what maintenance is due, overdue, or needs review."""
    garage = load_garage(args.garage_file)
    vehicle = garage.get_vehicle(args.vehicle_id)
    now = parse_as_of(args.as_of)
    report = garage.health(vehicle.id, now)

    print(f"Vehicle: {vehicle.name}")
    print(f"Current mileage: {vehicle.current_mileage:,.0f} km (as of {now.isoformat()})")
    print(f"Health: {report.score:.0f}% ({report.meta.tier.value})")
    if report.meta.responsible_driver:
        print("Badge: responsible driver")
    print(f"Active items: {len(report.results)}")
    due = sum(1 for r in report.results if r.is_due)
    if due:
        print(f"Needs attention: {due}")
    print()

    headers = ["Item", "Section", "Last Done", "Remaining (km)", "Remaining (time)", "Used"]
    groups = [
        (Status.OVERDUE, "OVERDUE:"),
        (Status.WARNING, "DUE SOON:"),
        (Status.OK, "OK:"),
    ]
    results = sorted(report.results, key=lambda r: r.config.category)
    for status, title in groups:
        selected = [r for r in results if r.status == status]
        if selected:
            print(title)
            print(tabulate(make_status_table(selected), headers=headers, tablefmt="simple"))
            print()

    review = [r for r in results if r.status == Status.REVIEW_NEEDED]
    if review:
        print("REVIEW NEEDED (no usable history):")
        for result in review:
            print(f"  {result.config.category}")
        print()

    if not report.results:
        print("No active maintenance items. Use 'setup' or 'configure --on'.")
    return 0


def cmd_update_miles(args):
    """Update current vehicle mileage."""
    garage = load_garage(args.garage_file)
    vehicle = garage.get_vehicle(args.vehicle_id)
    old_miles = vehicle.current_mileage

    print(f"Vehicle: {vehicle.name}")
    print(f"Current mileage: {old_miles:,.0f}")
    print(f"New mileage:     {args.mileage:,.0f}")
    if args.mileage < old_miles:
        print("Warning: new mileage is lower than the current reading")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    with edit_garage(args.garage_file) as garage:
        garage.set_mileage(args.vehicle_id, args.mileage)
    print("Mileage updated.")
    return 0


def cmd_edit_vehicle(args):
    """Change vehicle details."""
    changes = {}
    for name in ("make", "model", "year", "plate", "image"):
        value = getattr(args, name)
        if value is not None:
            changes[name] = value
    if not changes:
        print("Error: nothing to change (use --make, --model, --year, --plate or --image)")
        return 1

    with edit_garage(args.garage_file) as garage:
        vehicle = garage.update_vehicle(args.vehicle_id, changes)
    print(f"Updated {vehicle.name} ({vehicle.plate or 'no plate'})")
    return 0


def cmd_delete_vehicle(args):
    """Delete a vehicle with its items, history and modifications."""
    garage = load_garage(args.garage_file)
    vehicle = garage.get_vehicle(args.vehicle_id)

    print(f"Vehicle: {vehicle.name}")
    print(f"  Maintenance items: {len(garage.configs_for(vehicle.id))}")
    print(f"  History entries:   {len(garage.history_for(vehicle.id))}")
    print(f"  Modifications:     {len(garage.modifications_for(vehicle.id))}")
    print()

    if not args.yes:
        print("(dry run - pass --yes to delete)")
        return 0

    with edit_garage(args.garage_file) as garage:
        garage.remove_vehicle(vehicle.id)
    print("Vehicle deleted.")
    return 0


# =============================================================================
# Maintenance commands
# =============================================================================


def cmd_history(args):
    """View service history."""
    garage = load_garage(args.garage_file)
    vehicle = garage.get_vehicle(args.vehicle_id)

    records = garage.history_for(vehicle.id)
    if args.asc:
        records = list(reversed(records))

    if args.category:
        wanted = args.category.lower()
        records = [
            r
            for r in records
            if wanted in garage.get_config(r.maintenance_config_id).category
        ]
    if args.since:
        since = to_day(args.since)
        records = [r for r in records if (parse_day(r.date) or date.min) >= since]

    spend = garage.spend(vehicle.id)

    print(f"Vehicle: {vehicle.name}")
    print(f"Total records: {len(garage.history_for(vehicle.id))}")
    if args.category or args.since:
        print(f"Showing: {len(records)} (filtered)")
    print(f"Maintenance spend: {format_cost(spend['maintenance'])}")
    print(f"Modification spend: {format_cost(spend['modifications'])}")
    print()

    if args.by_item:
        totals = spend_by_config(garage.history_for(vehicle.id))
        rows = []
        for config_id_, cost in sorted(totals.items(), key=lambda t: t[1], reverse=True):
            try:
                item = garage.get_config(config_id_).category
            except CheckAutoError:
                item = config_id_
            rows.append([item, format_cost(cost)])
        print(tabulate(rows, headers=["Item", "Spend"], tablefmt="simple"))
        print()

    if not records:
        print("No history entries found.")
        return 0

    headers = ["ID", "Date", "Km", "Item", "Shop", "Cost", "Notes"]
    print(tabulate(make_history_table(records, garage), headers=headers, tablefmt="simple"))
    return 0


def cmd_log(args):
    """Record a service, or a renewal for legal items."""
    catalog = default_catalog()
    garage = load_garage(args.garage_file)
    vehicle = garage.get_vehicle(args.vehicle_id)
    category = args.category.lower()
    config = garage.find_config(vehicle.id, category)

    if config is None:
        print(f"Error: Unknown item '{args.category}' for {vehicle.name}")
        print("\nAvailable items:")
        for c in sorted(garage.configs_for(vehicle.id), key=lambda c: c.category):
            print(f"  {c.category}")
        return 1
    if category in catalog and not catalog.is_tracked(category):
        print(f"Error: '{category}' is not a maintenance item (use add-mod)")
        return 1

    expiration = catalog.is_expiration_based(category)
    today = parse_as_of(args.as_of)
    if expiration:
        if not args.date:
            print("Error: --date (the new expiry date) is required for renewals")
            return 1
        # Renewals are logged at the current odometer reading
        mileage = vehicle.current_mileage
    else:
        mileage = args.mileage if args.mileage is not None else vehicle.current_mileage

    record = ServiceRecord(
        id="",
        vehicle_id=vehicle.id,
        maintenance_config_id=config.id,
        date=args.date or today.isoformat(),
        mileage=mileage,
        cost=args.cost or 0,
        shop_name=args.shop or "",
        notes=args.notes,
    )
    validate_service_record(record, category, today, catalog)

    print(f"{'Renewing' if expiration else 'Adding service for'} {category} on {vehicle.name}:")
    print(f"  {'Expires' if expiration else 'Date'}: {record.date}")
    print(f"  Km:      {record.mileage:,.0f}")
    if record.shop_name:
        print(f"  Shop:    {record.shop_name}")
    if record.notes:
        print(f"  Notes:   {record.notes}")
    if record.cost:
        print(f"  Cost:    {format_cost(record.cost)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    with edit_garage(args.garage_file) as garage:
        garage.add_record(record)
        if not garage.get_config(config.id).is_active:
            garage.update_config(replace(garage.get_config(config.id), is_active=True))
    print(f"Entry saved ({record.id}).")
    return 0


def _record_of(garage: Garage, vehicle_id: str, record_id: str) -> ServiceRecord:
    record = garage.get_record(record_id)
    if record.vehicle_id != garage.get_vehicle(vehicle_id).id:
        raise NotFoundError("Service record", record_id)
    return record


def cmd_edit_record(args):
    """Change a logged service; the item is recalculated from its history."""
    changes = {}
    if args.date:
        changes["date"] = to_day(args.date).isoformat()
    if args.mileage is not None:
        changes["mileage"] = args.mileage
    if args.cost is not None:
        changes["cost"] = args.cost
    if args.shop is not None:
        changes["shop_name"] = args.shop
    if args.notes is not None:
        changes["notes"] = args.notes
    if not changes:
        print("Error: nothing to change")
        return 1

    now = parse_as_of(args.as_of)
    with edit_garage(args.garage_file) as garage:
        record = _record_of(garage, args.vehicle_id, args.record_id)
        garage.update_record(record.id, changes, now=now)
    print(f"Entry {record.id} updated.")
    return 0


def cmd_delete_record(args):
    """Delete a logged service; the item falls back to the previous one."""
    with edit_garage(args.garage_file) as garage:
        record = _record_of(garage, args.vehicle_id, args.record_id)
        garage.remove_record(record.id)
        config = garage.get_config(record.maintenance_config_id)
    if config.is_known:
        print(f"Entry deleted. {config.category} now last done {config.last_replaced_date}.")
    else:
        print(f"Entry deleted. {config.category} has no history left.")
    return 0


def cmd_configure(args):
    """Change intervals, active state or last service of one item."""
    with edit_garage(args.garage_file) as garage:
        vehicle = garage.get_vehicle(args.vehicle_id)
        config = garage.find_config(vehicle.id, args.category.lower())
        if config is None:
            print(f"Error: Unknown item '{args.category}' for {vehicle.name}")
            return 1

        changes = {}
        if args.interval_km is not None:
            changes["interval_km"] = args.interval_km
        if args.interval_months is not None:
            changes["interval_months"] = args.interval_months
        if args.on:
            changes["is_active"] = True
        if args.off:
            changes["is_active"] = False
        if args.unknown:
            changes["last_replaced_mileage"] = None
        if args.last_mileage is not None:
            changes["last_replaced_mileage"] = args.last_mileage
        if args.last_date:
            changes["last_replaced_date"] = to_day(args.last_date).isoformat()

        updated = garage.update_config(replace(config, **changes))

    state = "active" if updated.is_active else "inactive"
    print(
        f"{updated.category}: {format_km(updated.interval_km)} km / "
        f"{updated.interval_months} months, {state}"
    )
    return 0


def cmd_setup(args):
    """Activate and seed the main items in one go."""
    extra = [c.strip() for c in args.extra.split(",")] if args.extra else []
    with edit_garage(args.garage_file) as garage:
        vehicle = garage.get_vehicle(args.vehicle_id)
        updates = apply_setup(
            garage.configs_for(vehicle.id),
            vehicle,
            inspection_date=args.inspection_date,
            inspection_interval_months=args.inspection_interval,
            road_tax_date=args.road_tax_date,
            oil_km=args.oil_km,
            oil_date=args.oil_date,
            oil_interval_km=args.oil_interval,
            extra_categories=extra,
        )
        garage.save_configs(updates)

    print(f"Updated {len(updates)} items for {vehicle.name}:")
    for config in updates:
        print(f"  {config.category}")
    return 0


def cmd_alerts(args):
    """List overdue items across all vehicles."""
    garage = load_garage(args.garage_file)
    now = parse_as_of(args.as_of)
    alerts = OverdueAlerts().check(garage.vehicles, garage.configs, now)

    if not alerts:
        print("Nothing overdue.")
        return 0

    for alert in alerts:
        action = "Renew" if alert.kind == "renew" else "Replace"
        print(f"{alert.vehicle.name}: {action} {alert.config.category}")
    return 0


def cmd_catalog(args):
    """List maintenance categories grouped by section."""
    catalog = default_catalog()
    rows = []
    for section, definitions in catalog.by_section().items():
        for d in definitions:
            limits = catalog.limits_for(d.category)
            rows.append(
                [
                    section.value,
                    d.category,
                    format_km(d.interval_km) if d.interval_km else "-",
                    f"{d.interval_months} mo" if d.interval_months else "-",
                    "expiry" if d.is_expiration_based else "usage",
                    f"{limits.min:,}-{limits.max:,} / {limits.step:,}",
                ]
            )
    headers = ["Section", "Item", "Km", "Time", "Kind", "Km limits"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Modification commands
# =============================================================================


def cmd_mods(args):
    """List modifications and wishlist entries."""
    garage = load_garage(args.garage_file)
    vehicle = garage.get_vehicle(args.vehicle_id)
    mods = garage.modifications_for(vehicle.id, wishlist=True if args.wishlist else None)

    if not mods:
        print("No modifications found.")
        return 0

    rows = [
        [
            m.id,
            m.date,
            m.name,
            m.category,
            format_cost(m.cost),
            "wishlist" if m.is_wishlist else "installed",
        ]
        for m in mods
    ]
    print(f"Vehicle: {vehicle.name}")
    print(tabulate(rows, headers=["ID", "Date", "Name", "Kind", "Cost", "State"], tablefmt="simple"))
    installed = sum(m.cost for m in mods if not m.is_wishlist)
    wishlist = sum(m.cost for m in mods if m.is_wishlist)
    print()
    print(f"Installed: {format_cost(installed)}  Wishlist: {format_cost(wishlist)}")
    return 0


def cmd_add_mod(args):
    modification = Modification(
        id="",
        vehicle_id=args.vehicle_id,
        name=args.name,
        category=args.category,
        cost=args.cost,
        date=to_day(args.date).isoformat() if args.date else parse_as_of(args.as_of).isoformat(),
        is_wishlist=args.wishlist,
    )
    with edit_garage(args.garage_file) as garage:
        garage.add_modification(modification)
    state = "wishlist" if modification.is_wishlist else "installed"
    print(f"Added {modification.name} ({state}, {modification.id})")
    return 0


def cmd_install_mod(args):
    install_date = args.date or parse_as_of(args.as_of).isoformat()
    with edit_garage(args.garage_file) as garage:
        garage.get_vehicle(args.vehicle_id)
        modification = garage.install_wishlist(args.mod_id, args.cost, install_date)
    print(f"Installed {modification.name} for {format_cost(modification.cost)}")
    return 0


def cmd_delete_mod(args):
    """Delete a modification and its expense entry."""
    with edit_garage(args.garage_file) as garage:
        garage.get_vehicle(args.vehicle_id)
        modification = garage.get_modification(args.mod_id)
        if modification.vehicle_id != args.vehicle_id:
            raise NotFoundError("Modification", args.mod_id)
        garage.remove_modification(modification.id)
    print(f"Deleted {modification.name}")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s garage.yaml init
  %(prog)s garage.yaml add-vehicle golf --make Volkswagen --model Golf \\
      --year 2015 --plate 1234ABC --mileage 98000
  %(prog)s garage.yaml setup golf --inspection-date 2025-03-01 \\
      --oil-km 90000 --oil-date 2025-02-10
  %(prog)s garage.yaml status golf
  %(prog)s garage.yaml log golf engine_oil --mileage 105000 --cost 89.90
  %(prog)s garage.yaml log golf insurance --date 2026-11-01 --cost 420
  %(prog)s garage.yaml configure golf timing_belt --interval-km 90000 --on
  %(prog)s garage.yaml update-miles golf 106500
  %(prog)s garage.yaml history golf --by-item
  %(prog)s garage.yaml edit-record golf <entry-id> --cost 95
  %(prog)s garage.yaml delete-vehicle golf --yes
  %(prog)s garage.yaml --as-of 2026-01-01 vehicles
""",
    )
    parser.add_argument("garage_file", type=Path, help="Path to garage YAML file")
    parser.add_argument(
        "--as-of",
        type=str,
        help="Evaluate as of this date (YYYY-MM-DD, default: today)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create an empty garage file")

    add_vehicle = subparsers.add_parser("add-vehicle", help="Register a vehicle")
    add_vehicle.add_argument("vehicle_id", help="Short id (e.g., 'golf')")
    add_vehicle.add_argument("--make", required=True)
    add_vehicle.add_argument("--model", required=True)
    add_vehicle.add_argument("--year", type=int, required=True)
    add_vehicle.add_argument("--plate", type=str)
    add_vehicle.add_argument("--mileage", type=int, default=0, help="Current km")

    subparsers.add_parser("vehicles", help="List vehicles with health score")

    status_parser = subparsers.add_parser("status", help="Show maintenance status")
    status_parser.add_argument("vehicle_id")

    history_parser = subparsers.add_parser("history", help="View service history")
    history_parser.add_argument("vehicle_id")
    history_parser.add_argument(
        "--category", type=str, help="Filter to items containing text (e.g., 'oil')"
    )
    history_parser.add_argument(
        "--since", type=str, help="Show only entries since date (YYYY-MM-DD)"
    )
    history_parser.add_argument(
        "--asc", action="store_true", help="Oldest first instead of newest first"
    )
    history_parser.add_argument(
        "--by-item", action="store_true", help="Show total spend per item"
    )

    log_parser = subparsers.add_parser("log", help="Record a service or renewal")
    log_parser.add_argument("vehicle_id")
    log_parser.add_argument("category", help="Item (e.g., 'engine_oil', 'insurance')")
    log_parser.add_argument(
        "--date",
        type=str,
        help="Service date, or new expiry date for legal items (YYYY-MM-DD)",
    )
    log_parser.add_argument(
        "--mileage", type=int, help="Km at time of service (default: current)"
    )
    log_parser.add_argument("--cost", type=float, help="Cost of service")
    log_parser.add_argument("--shop", type=str, help="Workshop or insurer name")
    log_parser.add_argument("--notes", type=str, help="Notes about the service")
    log_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    miles_parser = subparsers.add_parser("update-miles", help="Update current mileage")
    miles_parser.add_argument("vehicle_id")
    miles_parser.add_argument("mileage", type=int, help="Current km")
    miles_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be updated without saving"
    )

    configure = subparsers.add_parser("configure", help="Change one maintenance item")
    configure.add_argument("vehicle_id")
    configure.add_argument("category")
    configure.add_argument("--interval-km", type=int)
    configure.add_argument("--interval-months", type=int)
    toggle = configure.add_mutually_exclusive_group()
    toggle.add_argument("--on", action="store_true", help="Track this item")
    toggle.add_argument("--off", action="store_true", help="Stop tracking this item")
    last = configure.add_mutually_exclusive_group()
    last.add_argument("--last-mileage", type=int, help="Km at last service")
    last.add_argument("--unknown", action="store_true", help="Forget last service")
    configure.add_argument(
        "--last-date", type=str, help="Last service date, or expiry date for legal items"
    )

    setup = subparsers.add_parser("setup", help="First-run setup wizard")
    setup.add_argument("vehicle_id")
    setup.add_argument("--inspection-date", type=str, help="Date of last inspection")
    setup.add_argument("--inspection-interval", type=int, default=12, help="Months")
    setup.add_argument("--road-tax-date", type=str, help="Road tax expiry date")
    setup.add_argument("--oil-km", type=int, help="Km at last oil change")
    setup.add_argument("--oil-date", type=str, help="Date of last oil change")
    setup.add_argument("--oil-interval", type=int, help="Oil change interval (km)")
    setup.add_argument(
        "--extra", type=str, help="More items to track (comma-separated, e.g., 'tires,battery')"
    )

    edit_vehicle = subparsers.add_parser("edit-vehicle", help="Change vehicle details")
    edit_vehicle.add_argument("vehicle_id")
    edit_vehicle.add_argument("--make")
    edit_vehicle.add_argument("--model")
    edit_vehicle.add_argument("--year", type=int)
    edit_vehicle.add_argument("--plate")
    edit_vehicle.add_argument("--image", help="Image path or URL")

    delete_vehicle = subparsers.add_parser("delete-vehicle", help="Delete a vehicle")
    delete_vehicle.add_argument("vehicle_id")
    delete_vehicle.add_argument(
        "--yes", action="store_true", help="Really delete (default: dry run)"
    )

    edit_record = subparsers.add_parser("edit-record", help="Change a history entry")
    edit_record.add_argument("vehicle_id")
    edit_record.add_argument("record_id")
    edit_record.add_argument("--date", type=str, help="Service date (YYYY-MM-DD)")
    edit_record.add_argument("--mileage", type=int)
    edit_record.add_argument("--cost", type=float)
    edit_record.add_argument("--shop", type=str)
    edit_record.add_argument("--notes", type=str)

    delete_record = subparsers.add_parser("delete-record", help="Delete a history entry")
    delete_record.add_argument("vehicle_id")
    delete_record.add_argument("record_id")

    subparsers.add_parser("alerts", help="List overdue items")
    subparsers.add_parser("catalog", help="List maintenance categories")

    mods = subparsers.add_parser("mods", help="List modifications")
    mods.add_argument("vehicle_id")
    mods.add_argument("--wishlist", action="store_true", help="Only wishlist entries")

    add_mod = subparsers.add_parser("add-mod", help="Add a modification")
    add_mod.add_argument("vehicle_id")
    add_mod.add_argument("name")
    add_mod.add_argument("--category", choices=MODIFICATION_KINDS, default="other")
    add_mod.add_argument("--cost", type=float, default=0)
    add_mod.add_argument("--date", type=str, help="Install date (YYYY-MM-DD)")
    add_mod.add_argument("--wishlist", action="store_true", help="Not bought yet")

    install_mod = subparsers.add_parser("install-mod", help="Install a wishlist entry")
    install_mod.add_argument("vehicle_id")
    install_mod.add_argument("mod_id")
    install_mod.add_argument("--cost", type=float, required=True, help="Final cost")
    install_mod.add_argument("--date", type=str, help="Install date (YYYY-MM-DD)")

    delete_mod = subparsers.add_parser("delete-mod", help="Delete a modification")
    delete_mod.add_argument("vehicle_id")
    delete_mod.add_argument("mod_id")

    return parser


COMMANDS = {
    "init": cmd_init,
    "add-vehicle": cmd_add_vehicle,
    "vehicles": cmd_vehicles,
    "status": cmd_status,
    "history": cmd_history,
    "log": cmd_log,
    "edit-record": cmd_edit_record,
    "delete-record": cmd_delete_record,
    "update-miles": cmd_update_miles,
    "edit-vehicle": cmd_edit_vehicle,
    "delete-vehicle": cmd_delete_vehicle,
    "configure": cmd_configure,
    "setup": cmd_setup,
    "alerts": cmd_alerts,
    "catalog": cmd_catalog,
    "mods": cmd_mods,
    "add-mod": cmd_add_mod,
    "install-mod": cmd_install_mod,
    "delete-mod": cmd_delete_mod,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate garage file exists
    if args.command != "init" and not args.garage_file.exists():
        print(f"Error: File not found: {args.garage_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except CheckAutoError as e:
        print(f"Error: {e}")
        return 1
    except ValueError as e:
        # Bad dates or numbers typed on the command line
        logger.debug("Invalid input", exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
