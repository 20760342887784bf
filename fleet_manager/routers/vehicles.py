# fleet_manager/routers/vehicles.py
"""Vehicles + maintenance history. Reads need canView, writes need canEdit."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleet_manager.database import get_db
from fleet_manager.routers.deps import raise_for_failure, require
from fleet_manager.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleOut, MaintenanceIn
from fleet_manager.services import vehicle_lifecycle
from fleet_manager.services.authorization import Capability

router = APIRouter()

can_view = require(Capability.CAN_VIEW)
can_edit = require(Capability.CAN_EDIT)


@router.get("/vehicles", response_model=list[VehicleOut], summary="List vehicles")
def list_vehicles(status: Optional[str] = None, db: Session = Depends(get_db), _=Depends(can_view)):
    return vehicle_lifecycle.list_vehicles(db, status)


@router.get("/vehicles/oil-change-needed", response_model=list[VehicleOut],
            summary="Vehicles due for an oil change")
def oil_change_needed(db: Session = Depends(get_db), _=Depends(can_view)):
    return vehicle_lifecycle.vehicles_needing_oil_change(db)


@router.get("/vehicles/code/{car_code}", response_model=VehicleOut, summary="Get a vehicle by car code")
def get_by_car_code(car_code: str, db: Session = Depends(get_db), _=Depends(can_view)):
    return raise_for_failure(vehicle_lifecycle.get_vehicle_by_car_code(db, car_code))


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Get a vehicle")
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db), _=Depends(can_view)):
    return raise_for_failure(vehicle_lifecycle.get_vehicle(db, vehicle_id))


@router.post("/vehicles", response_model=VehicleOut, summary="Register a vehicle")
def create_vehicle(body: VehicleCreate, db: Session = Depends(get_db), _=Depends(can_edit)):
    return raise_for_failure(vehicle_lifecycle.create_vehicle(db, body.model_dump()))


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Update a vehicle")
def update_vehicle(vehicle_id: int, body: VehicleUpdate, db: Session = Depends(get_db), _=Depends(can_edit)):
    fields = body.model_dump(exclude_unset=True)
    return raise_for_failure(vehicle_lifecycle.update_vehicle(db, vehicle_id, fields))


@router.delete("/vehicles/{vehicle_id}", summary="Delete a vehicle")
def delete_vehicle(vehicle_id: int, db: Session = Depends(get_db), _=Depends(can_edit)):
    """Refused (400) when movements reference the vehicle: set it inactive instead."""
    removed = raise_for_failure(vehicle_lifecycle.delete_vehicle(db, vehicle_id))
    return {"message": removed.message}


# ── Maintenance ──────────────────────────────────────────────────────────────

@router.post("/vehicles/{vehicle_id}/maintenance", response_model=VehicleOut,
             summary="Add a maintenance record")
def add_maintenance(vehicle_id: int, body: MaintenanceIn, db: Session = Depends(get_db), _=Depends(can_edit)):
    return raise_for_failure(vehicle_lifecycle.add_maintenance_record(db, vehicle_id, body.model_dump()))


@router.put("/vehicles/{vehicle_id}/maintenance/{maintenance_id}", response_model=VehicleOut,
            summary="Update a maintenance record")
def update_maintenance(vehicle_id: int, maintenance_id: int, body: MaintenanceIn,
                       db: Session = Depends(get_db), _=Depends(can_edit)):
    return raise_for_failure(
        vehicle_lifecycle.update_maintenance_record(db, vehicle_id, maintenance_id, body.model_dump())
    )


@router.delete("/vehicles/{vehicle_id}/maintenance/{maintenance_id}", response_model=VehicleOut,
               summary="Remove a maintenance record")
def delete_maintenance(vehicle_id: int, maintenance_id: int, db: Session = Depends(get_db), _=Depends(can_edit)):
    return raise_for_failure(vehicle_lifecycle.delete_maintenance_record(db, vehicle_id, maintenance_id))
