# fleet_manager/services/vehicle_lifecycle.py
"""
Vehicle lifecycle: creation, updates, odometer ratchet, maintenance history
and deletion.

Invariants kept here:
  - car_code and plate_number are unique across vehicles
  - current_odometer >= last_oil_change_odometer after every write
  - current_odometer only moves up through movements and maintenance records
  - a vehicle referenced by any movement can't be deleted (set it inactive)

Oil-change baseline (last_oil_change_odometer) follows two named rules:
  - last-write-wins  (add / update record): an oil-change record sets the
    baseline to its reading, whatever its date.
  - latest-by-date   (delete record): removing an oil-change record re-derives
    the baseline from the remaining oil-change record with the newest date;
    with none left the baseline is kept as is.
"""

from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fleet_manager.config import settings
from fleet_manager.models.vehicle import Vehicle, MaintenanceRecord
from fleet_manager.services.outcomes import NotFound, Conflict, ValidationFailed, Blocked, Removed, integrity_conflict
from fleet_manager.utils.logger import get_logger

logger = get_logger(__name__)

OIL_CHANGE_MARKER = "oil change"
NULLABLE_FIELDS = {"sim_number", "license_expiry_date", "insurance_expiry_date"}


def is_oil_change(record_type: str) -> bool:
    return OIL_CHANGE_MARKER in (record_type or "").lower()


# ── Oil-change rules ─────────────────────────────────────────────────────────

class OilChangeRule:
    name = "oil-change-rule"

    def apply(self, vehicle: Vehicle, record: MaintenanceRecord) -> bool:
        """Update vehicle.last_oil_change_odometer; True if it was set."""
        raise NotImplementedError


class LastWriteWinsRule(OilChangeRule):
    name = "last-write-wins"

    def apply(self, vehicle, record):
        if not is_oil_change(record.type):
            return False
        vehicle.last_oil_change_odometer = record.odometer_reading
        return True


class LatestByDateRule(OilChangeRule):
    name = "latest-by-date"

    def apply(self, vehicle, record):
        if not is_oil_change(record.type):
            return False
        remaining = [m for m in vehicle.maintenance if is_oil_change(m.type)]
        if not remaining:
            return False
        latest = max(remaining, key=lambda m: m.date)
        vehicle.last_oil_change_odometer = latest.odometer_reading
        return True


ON_RECORD_WRITTEN = LastWriteWinsRule()
ON_RECORD_REMOVED = LatestByDateRule()


def ratchet_odometer(vehicle: Vehicle, reading) -> bool:
    """Raise current_odometer to `reading` if higher. Never lowers it."""
    if reading is not None and reading > (vehicle.current_odometer or 0):
        vehicle.current_odometer = reading
        return True
    return False


def record_movement(vehicle: Vehicle, odometer_reading) -> bool:
    """Apply a movement's end-of-trip reading to its vehicle (ratchet only)."""
    moved = ratchet_odometer(vehicle, odometer_reading)
    if moved:
        vehicle.updated_at = datetime.utcnow()
        logger.info(f"[VEHICLE] {vehicle.car_code} odometer → {vehicle.current_odometer} km")
    return moved


def _odometer_violation(current, last_oil):
    if current is not None and last_oil is not None and current < last_oil:
        return ValidationFailed(
            "current_odometer",
            "Current odometer can't be lower than the last oil change odometer",
        )
    return None


# ── Queries ──────────────────────────────────────────────────────────────────

def get_vehicle(db: Session, vehicle_id: int):
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    return vehicle or NotFound("Vehicle", vehicle_id)


def get_vehicle_by_car_code(db: Session, car_code: str):
    vehicle = db.query(Vehicle).filter(Vehicle.car_code == car_code).first()
    return vehicle or NotFound("Vehicle", car_code)


def list_vehicles(db: Session, status: str = None):
    q = db.query(Vehicle)
    if status:
        q = q.filter(Vehicle.status == status)
    return q.order_by(Vehicle.car_code).all()


def vehicles_needing_oil_change(db: Session):
    """Vehicles that have run OIL_CHANGE_INTERVAL_KM or more since the last oil change."""
    distance = Vehicle.current_odometer - Vehicle.last_oil_change_odometer
    return (
        db.query(Vehicle)
        .filter(distance >= settings.OIL_CHANGE_INTERVAL_KM)
        .order_by(Vehicle.car_code)
        .all()
    )


# ── Vehicle CRUD ─────────────────────────────────────────────────────────────

def create_vehicle(db: Session, fields: dict):
    car_code = fields["car_code"]
    plate_number = fields["plate_number"]

    if db.query(Vehicle).filter(Vehicle.car_code == car_code).first():
        return Conflict("car_code", "Vehicle with this car code already exists")
    if db.query(Vehicle).filter(Vehicle.plate_number == plate_number).first():
        return Conflict("plate_number", "Vehicle with this plate number already exists")

    violation = _odometer_violation(fields.get("current_odometer"), fields.get("last_oil_change_odometer"))
    if violation:
        return violation

    now = datetime.utcnow()
    vehicle = Vehicle(**fields, created_at=now, updated_at=now)
    vehicle.maintenance = []
    db.add(vehicle)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent insert: the unique index caught it
        db.rollback()
        logger.warning(f"[VEHICLE] Duplicate key on insert: {car_code} / {plate_number}")
        return integrity_conflict(e, Vehicle, "Vehicle")
    db.refresh(vehicle)
    logger.info(f"[VEHICLE] Created {car_code} ({plate_number})")
    return vehicle


def update_vehicle(db: Session, vehicle_id: int, fields: dict):
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if not vehicle:
        return NotFound("Vehicle", vehicle_id)

    new_code = fields.get("car_code")
    if new_code is not None and new_code != vehicle.car_code:
        clash = db.query(Vehicle).filter(Vehicle.car_code == new_code, Vehicle.id != vehicle.id).first()
        if clash:
            return Conflict("car_code", "Vehicle with this car code already exists")

    new_plate = fields.get("plate_number")
    if new_plate is not None and new_plate != vehicle.plate_number:
        clash = db.query(Vehicle).filter(Vehicle.plate_number == new_plate, Vehicle.id != vehicle.id).first()
        if clash:
            return Conflict("plate_number", "Vehicle with this plate number already exists")

    current = fields.get("current_odometer")
    last_oil = fields.get("last_oil_change_odometer")
    violation = _odometer_violation(
        vehicle.current_odometer if current is None else current,
        vehicle.last_oil_change_odometer if last_oil is None else last_oil,
    )
    if violation:
        return violation

    for name, value in fields.items():
        if value is None and name not in NULLABLE_FIELDS:
            continue
        setattr(vehicle, name, value)
    vehicle.updated_at = datetime.utcnow()

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        return integrity_conflict(e, Vehicle, "Vehicle")
    db.refresh(vehicle)
    logger.info(f"[VEHICLE] Updated {vehicle.car_code}: {sorted(fields)}")
    return vehicle


def delete_vehicle(db: Session, vehicle_id: int):
    from fleet_manager.services import movement_service

    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if not vehicle:
        return NotFound("Vehicle", vehicle_id)

    if movement_service.any_movement_references_vehicle(db, vehicle_id):
        logger.warning(f"[VEHICLE] Delete blocked for {vehicle.car_code}: has movement records")
        return Blocked("Cannot delete vehicle that has movement records. Update status to inactive instead.")

    db.delete(vehicle)
    db.commit()
    logger.info(f"[VEHICLE] Removed {vehicle.car_code}")
    return Removed("Vehicle", vehicle_id)


# ── Maintenance history ──────────────────────────────────────────────────────

def _find_record(vehicle: Vehicle, maintenance_id: int):
    for record in vehicle.maintenance:
        if record.id == maintenance_id:
            return record
    return None


def add_maintenance_record(db: Session, vehicle_id: int, fields: dict):
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if not vehicle:
        return NotFound("Vehicle", vehicle_id)

    now = datetime.utcnow()
    position = max((m.position or 0 for m in vehicle.maintenance), default=0) + 1
    record = MaintenanceRecord(**fields, position=position, created_at=now, updated_at=now)
    vehicle.maintenance.insert(0, record)

    if ON_RECORD_WRITTEN.apply(vehicle, record):
        logger.info(f"[MAINT] {vehicle.car_code} oil change baseline → {vehicle.last_oil_change_odometer} km")
    ratchet_odometer(vehicle, record.odometer_reading)
    vehicle.updated_at = now

    db.commit()
    db.refresh(vehicle)
    logger.info(f"[MAINT] Added '{record.type}' to {vehicle.car_code} at {record.odometer_reading} km")
    return vehicle


def update_maintenance_record(db: Session, vehicle_id: int, maintenance_id: int, fields: dict):
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if not vehicle:
        return NotFound("Vehicle", vehicle_id)

    record = _find_record(vehicle, maintenance_id)
    if record is None:
        return NotFound("Maintenance record", maintenance_id)

    for name, value in fields.items():
        setattr(record, name, value)
    now = datetime.utcnow()
    record.updated_at = now

    if ON_RECORD_WRITTEN.apply(vehicle, record):
        logger.info(f"[MAINT] {vehicle.car_code} oil change baseline → {vehicle.last_oil_change_odometer} km")
    # Keeps current >= baseline when a record is re-typed as an oil change
    ratchet_odometer(vehicle, record.odometer_reading)
    vehicle.updated_at = now

    db.commit()
    db.refresh(vehicle)
    logger.info(f"[MAINT] Updated record {maintenance_id} on {vehicle.car_code}")
    return vehicle


def delete_maintenance_record(db: Session, vehicle_id: int, maintenance_id: int):
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if not vehicle:
        return NotFound("Vehicle", vehicle_id)

    record = _find_record(vehicle, maintenance_id)
    if record is None:
        return NotFound("Maintenance record", maintenance_id)

    vehicle.maintenance.remove(record)
    if ON_RECORD_REMOVED.apply(vehicle, record):
        logger.info(f"[MAINT] {vehicle.car_code} oil change baseline re-derived → {vehicle.last_oil_change_odometer} km")
    # A re-derived baseline may sit above a manually lowered odometer
    ratchet_odometer(vehicle, vehicle.last_oil_change_odometer)
    vehicle.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(vehicle)
    logger.info(f"[MAINT] Removed record {maintenance_id} from {vehicle.car_code}")
    return vehicle
