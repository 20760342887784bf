# tests/test_report_service.py
"""Unit tests for the Excel report builders."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import io
from datetime import datetime, timedelta
from openpyxl import load_workbook
from fleet_manager.models.movement import Movement
from fleet_manager.models.vehicle import Vehicle, MaintenanceRecord
from fleet_manager.services import report_service

NOW = datetime(2026, 6, 1)


def make_vehicle(car_code="CAR-01", current=5000, last_oil=1000, license_in_days=200):
    vehicle = Vehicle(
        id=1, car_code=car_code, plate_number=f"P-{car_code}", make="Toyota", model="Hilux",
        year=2021, chassis_number="CH", engine_number="EN", owner_name="Fleet",
        current_odometer=current, last_oil_change_odometer=last_oil, status="active",
        license_expiry_date=NOW + timedelta(days=license_in_days),
        insurance_expiry_date=NOW + timedelta(days=365),
    )
    vehicle.maintenance = []
    return vehicle


def record(type_, cost, date, reading=1000):
    return MaintenanceRecord(type=type_, cost=cost, date=date, description="d",
                             location="Garage", odometer_reading=reading, performed_by="M")


def open_xlsx(content):
    return load_workbook(io.BytesIO(content))


class TestFleetStatusReport:
    def test_rows_sorted_and_flagged(self):
        due = make_vehicle("CAR-02", current=5000, last_oil=1000, license_in_days=10)
        fine = make_vehicle("CAR-01", current=2000, last_oil=1000)

        wb = open_xlsx(report_service.build_fleet_status_report([due, fine], now=NOW))
        ws = wb["Fleet Status"]

        assert ws["A1"].value == "Car Code"
        assert ws["A1"].font.bold
        assert [ws["A2"].value, ws["A3"].value] == ["CAR-01", "CAR-02"]
        assert ws["I3"].value == "YES"
        assert ws["I3"].font.bold
        assert ws["J3"].font.bold            # licence expires within 30 days
        assert not ws["I2"].font.bold
        assert ws["H3"].value == 4000


class TestMaintenanceReport:
    def test_sheets_and_summary(self):
        vehicle = make_vehicle()
        vehicle.maintenance = [
            record("Oil Change", 80.0, datetime(2026, 1, 1)),
            record("Tyres", 400.0, datetime(2026, 3, 1)),
            record("Oil Change", 90.5, datetime(2026, 2, 1)),
        ]

        wb = open_xlsx(report_service.build_maintenance_report(vehicle))

        assert wb.sheetnames == ["Vehicle Information", "Maintenance History", "Maintenance Summary"]
        history = wb["Maintenance History"]
        assert [history.cell(row=r, column=1).value for r in (2, 3, 4)] == [
            "2026-03-01", "2026-02-01", "2026-01-01",
        ]
        summary = wb["Maintenance Summary"]
        assert summary["A2"].value == "Oil Change"
        assert summary["B2"].value == 170.5
        assert summary["C2"].value == 2
        assert summary["A4"].value == "TOTAL MAINTENANCE COST"
        assert summary["B4"].value == 570.5

    def test_empty_history(self):
        wb = open_xlsx(report_service.build_maintenance_report(make_vehicle()))
        assert wb["Maintenance Summary"]["A2"].value == "No maintenance records found"


class TestMovementReport:
    def test_one_row_per_movement(self):
        movement = Movement(
            date=NOW, car_code="CAR-01", plate_number="P-1", driver_name="Sam",
            supervisor_name="Lee", department="Ops", client="Acme", route="A → B",
            departure_time=NOW, arrival_time=NOW + timedelta(hours=1),
            odometer_reading=5100, fuel_cost=30.0, notes=None,
        )
        ws = open_xlsx(report_service.build_movement_report([movement]))["Vehicle Movements"]
        assert ws.max_row == 2
        assert ws["D2"].value == "Sam"
        assert ws["K2"].value == 5100
