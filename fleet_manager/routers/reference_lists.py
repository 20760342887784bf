# fleet_manager/routers/reference_lists.py
"""
Reference lists: /reference/{drivers|clients|routes|departments|supervisors}.
Same five endpoints for every kind; reads need canView, writes need canEdit.
"""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleet_manager.database import get_db
from fleet_manager.routers.deps import raise_for_failure, require
from fleet_manager.schemas import reference as schemas
from fleet_manager.services import reference_service
from fleet_manager.services.authorization import Capability

router = APIRouter()

can_view = require(Capability.CAN_VIEW)
can_edit = require(Capability.CAN_EDIT)

SCHEMAS = {
    "drivers": (schemas.DriverIn, schemas.DriverOut),
    "clients": (schemas.ClientIn, schemas.ClientOut),
    "routes": (schemas.RouteIn, schemas.RouteOut),
    "departments": (schemas.DepartmentIn, schemas.DepartmentOut),
    "supervisors": (schemas.SupervisorIn, schemas.SupervisorOut),
}


def _register(kind: str, model, schema_in, schema_out):
    path = f"/reference/{kind}"
    label = model.__name__.lower()

    @router.get(path, response_model=list[schema_out], summary=f"List {kind}")
    def list_entries(search: Optional[str] = None, db: Session = Depends(get_db), _=Depends(can_view)):
        return reference_service.list_entries(db, model, search)

    @router.get(path + "/{entry_id}", response_model=schema_out, summary=f"Get a {label}")
    def get_entry(entry_id: int, db: Session = Depends(get_db), _=Depends(can_view)):
        return raise_for_failure(reference_service.get_entry(db, model, entry_id))

    @router.post(path, response_model=schema_out, summary=f"Create a {label}")
    def create_entry(body: schema_in, db: Session = Depends(get_db), _=Depends(can_edit)):
        return raise_for_failure(reference_service.create_entry(db, model, body.model_dump()))

    @router.put(path + "/{entry_id}", response_model=schema_out, summary=f"Update a {label}")
    def update_entry(entry_id: int, body: schema_in, db: Session = Depends(get_db), _=Depends(can_edit)):
        return raise_for_failure(reference_service.update_entry(db, model, entry_id, body.model_dump()))

    @router.delete(path + "/{entry_id}", summary=f"Delete a {label}")
    def delete_entry(entry_id: int, db: Session = Depends(get_db), _=Depends(can_edit)):
        removed = raise_for_failure(reference_service.delete_entry(db, model, entry_id))
        return {"message": removed.message}


for _kind, _model in reference_service.REFERENCE_MODELS.items():
    _register(_kind, _model, *SCHEMAS[_kind])
