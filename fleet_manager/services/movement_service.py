# fleet_manager/services/movement_service.py
"""
Trip (movement) records.

A movement can only be recorded against an active vehicle. Its end-of-trip
odometer reading is always stored as given, but only moves the vehicle's
odometer when it is higher (see vehicle_lifecycle.record_movement).
"""

import math
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session

from fleet_manager.config import settings
from fleet_manager.models.movement import Movement
from fleet_manager.models.vehicle import Vehicle
from fleet_manager.services.authorization import Principal
from fleet_manager.services.outcomes import NotFound, ValidationFailed, Removed
from fleet_manager.services.vehicle_lifecycle import record_movement
from fleet_manager.utils.logger import get_logger

logger = get_logger(__name__)

TRIP_FIELDS = (
    "driver_name", "supervisor_name", "department", "client", "route",
    "departure_time", "arrival_time", "odometer_reading", "fuel_cost", "notes",
)


def any_movement_references_vehicle(db: Session, vehicle_id: int) -> bool:
    return db.query(Movement).filter(Movement.vehicle_id == vehicle_id).first() is not None


def _as_naive_utc(value):
    """Stored timestamps are naive UTC; offset-aware input is converted."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _normalise_times(fields: dict) -> dict:
    fields = dict(fields)
    for name in ("date", "departure_time", "arrival_time"):
        if name in fields:
            fields[name] = _as_naive_utc(fields[name])
    return fields


def _validate_trip(fields: dict):
    if fields["arrival_time"] < fields["departure_time"]:
        return ValidationFailed("arrival_time", "Arrival time can't be before departure time")
    if fields["fuel_cost"] < 0:
        return ValidationFailed("fuel_cost", "Fuel cost can't be negative")
    return None


def _usable_vehicle(db: Session, car_code: str):
    """Vehicle for `car_code` if it exists and is active, otherwise a failure."""
    vehicle = db.query(Vehicle).filter(Vehicle.car_code == car_code).first()
    if not vehicle:
        return NotFound("Vehicle", car_code)
    if vehicle.status != "active":
        return ValidationFailed("status", f"Vehicle is currently {vehicle.status} and cannot be used")
    return vehicle


def create_movement(db: Session, actor: Principal, fields: dict):
    fields = _normalise_times(fields)
    invalid = _validate_trip(fields)
    if invalid:
        return invalid

    vehicle = _usable_vehicle(db, fields["car_code"])
    if not isinstance(vehicle, Vehicle):
        logger.warning(f"[MOVE] Rejected movement for {fields['car_code']}: {vehicle.message}")
        return vehicle

    now = datetime.utcnow()
    movement = Movement(
        date=fields.get("date") or now,
        vehicle_id=vehicle.id,
        car_code=vehicle.car_code,
        plate_number=vehicle.plate_number,
        created_by=actor.id,
        created_at=now,
        updated_at=now,
        **{name: fields.get(name) for name in TRIP_FIELDS},
    )
    record_movement(vehicle, movement.odometer_reading)

    db.add(movement)
    db.commit()
    db.refresh(movement)
    logger.info(f"[MOVE] {movement.car_code} | driver={movement.driver_name} | route={movement.route}")
    return movement


def update_movement(db: Session, movement_id: int, fields: dict):
    movement = db.query(Movement).filter(Movement.id == movement_id).first()
    if not movement:
        return NotFound("Movement record", movement_id)

    fields = _normalise_times(fields)
    invalid = _validate_trip(fields)
    if invalid:
        return invalid

    if fields["car_code"] != movement.car_code:
        vehicle = _usable_vehicle(db, fields["car_code"])
        if not isinstance(vehicle, Vehicle):
            return vehicle
        movement.vehicle_id = vehicle.id
        movement.car_code = vehicle.car_code
        movement.plate_number = vehicle.plate_number
    else:
        vehicle = db.query(Vehicle).filter(Vehicle.id == movement.vehicle_id).first()

    for name in TRIP_FIELDS:
        setattr(movement, name, fields.get(name))
    if fields.get("date"):
        movement.date = fields["date"]
    movement.updated_at = datetime.utcnow()

    if vehicle is not None:
        record_movement(vehicle, movement.odometer_reading)

    db.commit()
    db.refresh(movement)
    logger.info(f"[MOVE] Updated movement {movement_id} ({movement.car_code})")
    return movement


def delete_movement(db: Session, movement_id: int):
    movement = db.query(Movement).filter(Movement.id == movement_id).first()
    if not movement:
        return NotFound("Movement record", movement_id)
    db.delete(movement)
    db.commit()
    logger.info(f"[MOVE] Removed movement {movement_id} ({movement.car_code})")
    return Removed("Movement record", movement_id)


def get_movement(db: Session, movement_id: int):
    movement = db.query(Movement).filter(Movement.id == movement_id).first()
    return movement or NotFound("Movement record", movement_id)


# ── Listing / search ─────────────────────────────────────────────────────────

def filter_movements(q, car_code=None, driver_name=None, supervisor_name=None,
                     department=None, client=None, start_date=None, end_date=None):
    """Apply the movement list/report filters to a Movement query."""
    if car_code:
        q = q.filter(Movement.car_code == car_code)
    if driver_name:
        q = q.filter(Movement.driver_name.ilike(f"%{driver_name}%"))
    if supervisor_name:
        q = q.filter(Movement.supervisor_name.ilike(f"%{supervisor_name}%"))
    if department:
        q = q.filter(Movement.department == department)
    if client:
        q = q.filter(Movement.client == client)
    if start_date:
        q = q.filter(Movement.date >= start_date)
    if end_date:
        q = q.filter(Movement.date <= end_date)
    return q


def paginate(total: int, page: int, limit: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "total": total,
        "total_pages": total_pages,
        "current_page": page,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }


def list_movements(db: Session, page: int = 1, limit: int = None, **filters) -> dict:
    page = max(page or 1, 1)
    limit = max(limit or settings.DEFAULT_PAGE_SIZE, 1)

    q = filter_movements(db.query(Movement), **filters)
    total = q.count()
    movements = (
        q.order_by(Movement.date.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"movements": movements, "pagination": paginate(total, page, limit)}


def movements_by_car_code(db: Session, car_code: str):
    return (
        db.query(Movement)
        .filter(Movement.car_code == car_code)
        .order_by(Movement.date.desc())
        .all()
    )


def movements_by_driver_name(db: Session, driver_name: str):
    return (
        db.query(Movement)
        .filter(Movement.driver_name.ilike(f"%{driver_name}%"))
        .order_by(Movement.date.desc())
        .all()
    )


def recent_movements(db: Session, days: int = None):
    since = datetime.utcnow() - timedelta(days=days or settings.RECENT_MOVEMENT_DAYS)
    return (
        db.query(Movement)
        .filter(Movement.date >= since)
        .order_by(Movement.date.desc())
        .all()
    )
