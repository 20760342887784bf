# fleet_manager/services/report_service.py
"""
Excel (.xlsx) reports built with openpyxl.
Each builder is a pure function of the entities passed in and returns the
workbook as bytes, ready to be streamed by the reports router.
"""

import io
from collections import OrderedDict
from datetime import datetime, timedelta

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from fleet_manager.config import settings
from fleet_manager.utils.logger import get_logger

logger = get_logger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADER_FONT = Font(bold=True)
HEADER_ALIGN = Alignment(vertical="center", horizontal="center")
ALERT_FONT = Font(bold=True, color="FF0000")

MOVEMENT_COLUMNS = [
    ("Date", 15), ("Car Code", 12), ("Plate Number", 15), ("Driver Name", 20),
    ("Supervisor Name", 20), ("Department", 15), ("Client", 20), ("Route", 20),
    ("Departure Time", 20), ("Arrival Time", 20), ("Odometer Reading", 18),
    ("Fuel Cost", 15), ("Notes", 30),
]

MAINTENANCE_COLUMNS = [
    ("Date", 15), ("Type", 20), ("Description", 35), ("Cost", 15),
    ("Location", 25), ("Odometer Reading", 18), ("Performed By", 20),
]

FLEET_COLUMNS = [
    ("Car Code", 12), ("Plate Number", 15), ("Make & Model", 20), ("Year", 8),
    ("Status", 12), ("Current Odometer", 18), ("Last Oil Change", 18),
    ("Since Last Oil Change", 20), ("Oil Change Needed", 18),
    ("License Expiry", 15), ("Insurance Expiry", 15), ("Owner", 20),
]


def _fmt_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _fmt_datetime(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else ""


def _write_header(ws, columns):
    for col, (title, width) in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=col, value=title)
        cell.font = HEADER_FONT
        cell.alignment = HEADER_ALIGN
        ws.column_dimensions[cell.column_letter].width = width


def _to_bytes(wb: Workbook) -> bytes:
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _expires_soon(value, horizon: datetime) -> bool:
    return value is not None and value <= horizon


# ── Reports ──────────────────────────────────────────────────────────────────

def build_movement_report(movements) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Vehicle Movements"
    _write_header(ws, MOVEMENT_COLUMNS)

    for m in movements:
        ws.append([
            _fmt_date(m.date), m.car_code, m.plate_number, m.driver_name,
            m.supervisor_name, m.department, m.client, m.route,
            _fmt_datetime(m.departure_time), _fmt_datetime(m.arrival_time),
            m.odometer_reading, m.fuel_cost, m.notes or "",
        ])

    logger.info(f"[REPORT] Movement report: {len(movements)} rows")
    return _to_bytes(wb)


def maintenance_summary(records) -> tuple:
    """Returns ({type: {"cost", "count"}}, total_cost), types in first-seen order."""
    summary = OrderedDict()
    total = 0.0
    for r in records:
        entry = summary.setdefault(r.type, {"cost": 0.0, "count": 0})
        entry["cost"] += r.cost or 0
        entry["count"] += 1
        total += r.cost or 0
    return summary, total


def build_maintenance_report(vehicle) -> bytes:
    wb = Workbook()

    info = wb.active
    info.title = "Vehicle Information"
    _write_header(info, [("Property", 25), ("Value", 35)])
    rows = [
        ("Car Code", vehicle.car_code),
        ("Plate Number", vehicle.plate_number),
        ("Make", vehicle.make),
        ("Model", vehicle.model),
        ("Year", vehicle.year),
        ("Chassis Number", vehicle.chassis_number),
        ("Engine Number", vehicle.engine_number),
        ("SIM Number", vehicle.sim_number or "N/A"),
        ("Owner Name", vehicle.owner_name),
        ("License Expiry Date", _fmt_date(vehicle.license_expiry_date)),
        ("Insurance Expiry Date", _fmt_date(vehicle.insurance_expiry_date)),
        ("Last Oil Change Odometer", vehicle.last_oil_change_odometer),
        ("Current Odometer", vehicle.current_odometer),
        ("Distance Since Last Oil Change", vehicle.distance_since_last_oil_change),
        ("Oil Change Needed", "YES" if vehicle.needs_oil_change else "No"),
        ("Status", vehicle.status),
    ]
    for row in rows:
        info.append(list(row))

    history = wb.create_sheet("Maintenance History")
    _write_header(history, MAINTENANCE_COLUMNS)
    records = list(vehicle.maintenance or [])
    if records:
        for r in sorted(records, key=lambda r: r.date, reverse=True):
            history.append([
                _fmt_date(r.date), r.type, r.description, r.cost,
                r.location, r.odometer_reading, r.performed_by,
            ])
    else:
        history.append(["", "", "No maintenance records found"])

    summary_ws = wb.create_sheet("Maintenance Summary")
    _write_header(summary_ws, [("Category", 25), ("Total Cost", 15), ("Count", 10)])
    if records:
        summary, total = maintenance_summary(records)
        for record_type, entry in summary.items():
            summary_ws.append([record_type, round(entry["cost"], 2), entry["count"]])
        summary_ws.append(["TOTAL MAINTENANCE COST", round(total, 2), len(records)])
        last = summary_ws.max_row
        summary_ws.cell(row=last, column=1).font = HEADER_FONT
        summary_ws.cell(row=last, column=2).font = ALERT_FONT
        summary_ws.cell(row=last, column=3).font = HEADER_FONT
    else:
        summary_ws.append(["No maintenance records found"])

    logger.info(f"[REPORT] Maintenance report for {vehicle.car_code}: {len(records)} records")
    return _to_bytes(wb)


def build_fleet_status_report(vehicles, now: datetime = None) -> bytes:
    now = now or datetime.utcnow()
    horizon = now + timedelta(days=settings.EXPIRY_WARNING_DAYS)

    wb = Workbook()
    ws = wb.active
    ws.title = "Fleet Status"
    _write_header(ws, FLEET_COLUMNS)

    for v in sorted(vehicles, key=lambda v: v.car_code):
        ws.append([
            v.car_code, v.plate_number, f"{v.make} {v.model}", v.year, v.status,
            v.current_odometer, v.last_oil_change_odometer,
            v.distance_since_last_oil_change,
            "YES" if v.needs_oil_change else "No",
            _fmt_date(v.license_expiry_date), _fmt_date(v.insurance_expiry_date),
            v.owner_name,
        ])
        row = ws.max_row
        if v.needs_oil_change:
            ws.cell(row=row, column=9).font = ALERT_FONT
        if _expires_soon(v.license_expiry_date, horizon):
            ws.cell(row=row, column=10).font = ALERT_FONT
        if _expires_soon(v.insurance_expiry_date, horizon):
            ws.cell(row=row, column=11).font = ALERT_FONT

    logger.info(f"[REPORT] Fleet status report: {len(vehicles)} vehicles")
    return _to_bytes(wb)
