# fleet_manager/routers/reports.py
"""Excel report downloads: require canExport."""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session
from fleet_manager.database import get_db
from fleet_manager.models.movement import Movement
from fleet_manager.routers.deps import raise_for_failure, require
from fleet_manager.services import report_service, vehicle_lifecycle
from fleet_manager.services.authorization import Capability
from fleet_manager.services.movement_service import filter_movements

router = APIRouter()

can_export = require(Capability.CAN_EXPORT)


def _xlsx(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=report_service.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/reports/movements", summary="Movement report (.xlsx)")
def movement_report(
    car_code: Optional[str] = None,
    driver_name: Optional[str] = None,
    supervisor_name: Optional[str] = None,
    department: Optional[str] = None,
    client: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
    _=Depends(can_export),
):
    """Same filters as GET /movements, without pagination."""
    q = filter_movements(
        db.query(Movement), car_code=car_code, driver_name=driver_name,
        supervisor_name=supervisor_name, department=department, client=client,
        start_date=start_date, end_date=end_date,
    )
    movements = q.order_by(Movement.date.desc()).all()
    return _xlsx(report_service.build_movement_report(movements), "vehicle_movements_report.xlsx")


@router.get("/reports/maintenance/{vehicle_id}", summary="Maintenance report for one vehicle (.xlsx)")
def maintenance_report(vehicle_id: int, db: Session = Depends(get_db), _=Depends(can_export)):
    vehicle = raise_for_failure(vehicle_lifecycle.get_vehicle(db, vehicle_id))
    return _xlsx(
        report_service.build_maintenance_report(vehicle),
        f"vehicle_{vehicle.car_code}_maintenance_report.xlsx",
    )


@router.get("/reports/fleet-status", summary="Fleet status report (.xlsx)")
def fleet_status_report(db: Session = Depends(get_db), _=Depends(can_export)):
    vehicles = vehicle_lifecycle.list_vehicles(db)
    return _xlsx(report_service.build_fleet_status_report(vehicles), "fleet_status_report.xlsx")
