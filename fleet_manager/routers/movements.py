# fleet_manager/routers/movements.py
"""Vehicle movements (trip log). Reads need canView, writes need canEdit."""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleet_manager.database import get_db
from fleet_manager.routers.deps import raise_for_failure, require
from fleet_manager.schemas.movement import MovementIn, MovementOut, MovementPageOut
from fleet_manager.services import movement_service
from fleet_manager.services.auth_service import AuthSession
from fleet_manager.services.authorization import Capability

router = APIRouter()

can_view = require(Capability.CAN_VIEW)
can_edit = require(Capability.CAN_EDIT)


@router.get("/movements", response_model=MovementPageOut, summary="List movements (paginated)")
def list_movements(
    page: int = 1,
    limit: Optional[int] = None,
    car_code: Optional[str] = None,
    driver_name: Optional[str] = None,
    supervisor_name: Optional[str] = None,
    department: Optional[str] = None,
    client: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
    _=Depends(can_view),
):
    """Newest first. driver_name / supervisor_name match case-insensitively anywhere in the name."""
    return movement_service.list_movements(
        db, page=page, limit=limit, car_code=car_code, driver_name=driver_name,
        supervisor_name=supervisor_name, department=department, client=client,
        start_date=start_date, end_date=end_date,
    )


@router.get("/movements/recent", response_model=list[MovementOut], summary="Movements of the last 30 days")
def recent(db: Session = Depends(get_db), _=Depends(can_view)):
    return movement_service.recent_movements(db)


@router.get("/movements/car/{car_code}", response_model=list[MovementOut], summary="Movements of one vehicle")
def by_car_code(car_code: str, db: Session = Depends(get_db), _=Depends(can_view)):
    return movement_service.movements_by_car_code(db, car_code)


@router.get("/movements/driver/{driver_name}", response_model=list[MovementOut],
            summary="Movements by driver name")
def by_driver(driver_name: str, db: Session = Depends(get_db), _=Depends(can_view)):
    return movement_service.movements_by_driver_name(db, driver_name)


@router.get("/movements/{movement_id}", response_model=MovementOut, summary="Get a movement")
def get_movement(movement_id: int, db: Session = Depends(get_db), _=Depends(can_view)):
    return raise_for_failure(movement_service.get_movement(db, movement_id))


@router.post("/movements", response_model=MovementOut, summary="Record a movement")
def create_movement(body: MovementIn, db: Session = Depends(get_db), session: AuthSession = Depends(can_edit)):
    """The vehicle must be active. A higher odometer reading moves the vehicle's odometer up."""
    return raise_for_failure(movement_service.create_movement(db, session.principal, body.model_dump()))


@router.put("/movements/{movement_id}", response_model=MovementOut, summary="Update a movement")
def update_movement(movement_id: int, body: MovementIn, db: Session = Depends(get_db), _=Depends(can_edit)):
    return raise_for_failure(movement_service.update_movement(db, movement_id, body.model_dump()))


@router.delete("/movements/{movement_id}", summary="Delete a movement")
def delete_movement(movement_id: int, db: Session = Depends(get_db), _=Depends(can_edit)):
    removed = raise_for_failure(movement_service.delete_movement(db, movement_id))
    return {"message": removed.message}
