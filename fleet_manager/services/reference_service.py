# fleet_manager/services/reference_service.py
"""
CRUD for the reference lists (drivers, clients, routes, departments,
supervisors). One set of functions serves every kind; names are unique
within a kind.
"""

from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fleet_manager.models.reference import Driver, Client, Route, Department, Supervisor
from fleet_manager.services.outcomes import NotFound, Conflict, Removed, integrity_conflict
from fleet_manager.utils.logger import get_logger

logger = get_logger(__name__)

REFERENCE_MODELS = {
    "drivers": Driver,
    "clients": Client,
    "routes": Route,
    "departments": Department,
    "supervisors": Supervisor,
}


def _label(model) -> str:
    return model.__name__


def list_entries(db: Session, model, search: str = None):
    q = db.query(model)
    if search:
        q = q.filter(model.name.ilike(f"%{search}%"))
    return q.order_by(model.name).all()


def get_entry(db: Session, model, entry_id: int):
    entry = db.query(model).filter(model.id == entry_id).first()
    return entry or NotFound(_label(model), entry_id)


def create_entry(db: Session, model, fields: dict):
    if db.query(model).filter(model.name == fields["name"]).first():
        return Conflict("name", f"{_label(model)} '{fields['name']}' already exists")

    entry = model(**fields, created_at=datetime.utcnow())
    db.add(entry)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        return integrity_conflict(e, model, _label(model))
    db.refresh(entry)
    logger.info(f"[REF] Created {_label(model)} '{entry.name}'")
    return entry


def update_entry(db: Session, model, entry_id: int, fields: dict):
    entry = db.query(model).filter(model.id == entry_id).first()
    if not entry:
        return NotFound(_label(model), entry_id)

    new_name = fields.get("name")
    if new_name and new_name != entry.name:
        if db.query(model).filter(model.name == new_name, model.id != entry_id).first():
            return Conflict("name", f"{_label(model)} '{new_name}' already exists")

    for name, value in fields.items():
        setattr(entry, name, value)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        return integrity_conflict(e, model, _label(model))
    db.refresh(entry)
    logger.info(f"[REF] Updated {_label(model)} {entry_id}")
    return entry


def delete_entry(db: Session, model, entry_id: int):
    entry = db.query(model).filter(model.id == entry_id).first()
    if not entry:
        return NotFound(_label(model), entry_id)
    db.delete(entry)
    db.commit()
    logger.info(f"[REF] Removed {_label(model)} '{entry.name}'")
    return Removed(_label(model), entry_id)
