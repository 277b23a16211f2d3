"""Flask web application for vehicle maintenance tracking."""

import os
from datetime import date
from pathlib import Path

from flask import Flask, current_app, jsonify, request

from checkauto import (
    CheckAutoError,
    NotFoundError,
    OverdueAlerts,
    ServiceRecord,
    Status,
    StatusResult,
    default_catalog,
    edit_garage,
    load_garage,
    to_day,
)
from checkauto.ledger import validate_service_record


def status_color(status: Status) -> str:
    """Get Tailwind color classes for status."""
    colors = {
        Status.OVERDUE: "bg-red-100 text-red-800 border-red-200",
        Status.WARNING: "bg-yellow-100 text-yellow-800 border-yellow-200",
        Status.OK: "bg-green-100 text-green-800 border-green-200",
        Status.REVIEW_NEEDED: "bg-purple-100 text-purple-800 border-purple-200",
    }
    return colors.get(status, "bg-gray-100 text-gray-800")


def get_as_of() -> date:
    """Evaluation date from the ?asOf= query parameter, today otherwise."""
    value = request.args.get("asOf")
    return to_day(value) if value else date.today()


def garage_path() -> Path:
    return Path(current_app.config["GARAGE_FILE"])


def result_to_json(result: StatusResult) -> dict:
    config = result.config
    return {
        "configId": config.id,
        "category": config.category,
        "status": result.status.name,
        "statusColor": status_color(result.status),
        "kmRemaining": result.km_remaining,
        "daysRemaining": result.days_remaining,
        "progress": result.progress,
        "displayProgress": result.display_progress,
        "isDue": result.is_due,
        "expirationBased": result.expiration_based,
        "intervalKm": config.interval_km,
        "intervalMonths": config.interval_months,
        "lastReplacedMileage": config.last_replaced_mileage,
        "lastReplacedDate": config.last_replaced_date,
    }


def vehicle_summary(garage, vehicle, now: date) -> dict:
    report = garage.health(vehicle.id, now)
    return {
        "id": vehicle.id,
        "name": vehicle.name,
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "plate": vehicle.plate,
        "currentMileage": vehicle.current_mileage,
        "image": vehicle.image,
        "health": {
            "score": report.score,
            "tier": report.meta.tier.value,
            "level": report.meta.level,
            "description": report.meta.description,
            "color": report.meta.color,
            "shortMsg": report.meta.short_msg,
            "responsibleDriver": report.meta.responsible_driver,
            "counts": {s.name: n for s, n in report.counts.items()},
        },
    }


def record_to_json(record: ServiceRecord) -> dict:
    return {
        "id": record.id,
        "maintenanceConfigId": record.maintenance_config_id,
        "date": record.date,
        "mileage": record.mileage,
        "cost": record.cost,
        "shopName": record.shop_name,
        "notes": record.notes,
    }


def create_app(garage_file=None) -> Flask:
    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
    app.config["GARAGE_FILE"] = garage_file or os.environ.get(
        "CHECKAUTO_GARAGE_FILE", "garage.yaml"
    )

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify(error=str(e)), 404

    @app.errorhandler(CheckAutoError)
    def handle_error(e):
        return jsonify(error=str(e)), 400

    @app.errorhandler(ValueError)
    def handle_bad_value(e):
        return jsonify(error=str(e)), 400

    @app.route("/api/vehicles")
    def list_vehicles():
        """All vehicles with health score."""
        garage = load_garage(garage_path())
        now = get_as_of()
        return jsonify(
            asOf=now.isoformat(),
            vehicles=[vehicle_summary(garage, v, now) for v in garage.vehicles],
        )

    @app.route("/api/vehicles/<vehicle_id>")
    def vehicle_detail(vehicle_id: str):
        """Vehicle with health and the status of every active item."""
        garage = load_garage(garage_path())
        now = get_as_of()
        vehicle = garage.get_vehicle(vehicle_id)
        summary = vehicle_summary(garage, vehicle, now)
        summary["items"] = [result_to_json(r) for r in garage.statuses(vehicle.id, now)]
        summary["spend"] = garage.spend(vehicle.id)
        return jsonify(asOf=now.isoformat(), vehicle=summary)

    @app.route("/api/vehicles/<vehicle_id>/history")
    def vehicle_history(vehicle_id: str):
        garage = load_garage(garage_path())
        vehicle = garage.get_vehicle(vehicle_id)
        return jsonify(history=[record_to_json(r) for r in garage.history_for(vehicle.id)])

    @app.route("/api/vehicles/<vehicle_id>/mileage", methods=["POST"])
    def update_mileage(vehicle_id: str):
        data = request.get_json(silent=True) or request.form
        mileage = data.get("mileage")
        if mileage in (None, ""):
            return jsonify(error="mileage is required"), 400
        with edit_garage(garage_path()) as garage:
            vehicle = garage.set_mileage(vehicle_id, int(mileage))
        return jsonify(id=vehicle.id, currentMileage=vehicle.current_mileage)

    @app.route("/api/vehicles/<vehicle_id>/history", methods=["POST"])
    def log_service(vehicle_id: str):
        """Log a service or renewal for one category."""
        data = request.get_json(silent=True) or request.form
        category = data.get("category")
        if not category:
            return jsonify(error="category is required"), 400

        catalog = default_catalog()
        today = get_as_of()
        with edit_garage(garage_path()) as garage:
            vehicle = garage.get_vehicle(vehicle_id)
            config = garage.find_config(vehicle.id, category)
            if config is None:
                raise NotFoundError("Maintenance config", f"{vehicle_id}/{category}")
            mileage = data.get("mileage")
            record = ServiceRecord(
                id="",
                vehicle_id=vehicle.id,
                maintenance_config_id=config.id,
                date=data.get("date") or today.isoformat(),
                mileage=int(mileage) if mileage not in (None, "") else vehicle.current_mileage,
                cost=float(data.get("cost") or 0),
                shop_name=data.get("shopName") or "",
                notes=data.get("notes") or None,
            )
            validate_service_record(record, category, today, catalog)
            garage.add_record(record)
        return jsonify(record=record_to_json(record)), 201

    @app.route("/api/alerts")
    def alerts():
        """Overdue items across all vehicles."""
        garage = load_garage(garage_path())
        found = OverdueAlerts().check(garage.vehicles, garage.configs, get_as_of())
        return jsonify(
            alerts=[
                {
                    "key": a.key,
                    "vehicleId": a.vehicle.id,
                    "category": a.config.category,
                    "kind": a.kind,
                    "titleKey": a.title_key,
                    "bodyKey": a.body_key,
                }
                for a in found
            ]
        )

    @app.route("/api/catalog")
    def catalog():
        cat = default_catalog()
        return jsonify(
            categories=[
                {
                    "category": d.category,
                    "section": d.section.value,
                    "intervalKm": d.interval_km,
                    "intervalMonths": d.interval_months,
                    "expirationBased": d.is_expiration_based,
                }
                for d in cat.tracked_definitions()
            ]
        )

    return app


app = create_app()

if __name__ == "__main__":
    app.run(debug=True, port=5000)
