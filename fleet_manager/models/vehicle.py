# fleet_manager/models/vehicle.py
"""
Fleet vehicles + their embedded maintenance history.
Maintenance records belong to exactly one vehicle and are only reachable
through it (cascade delete-orphan). Oil-change state is derived on read:
distance_since_last_oil_change / needs_oil_change are never stored.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Text, ForeignKey
from sqlalchemy.orm import relationship
from fleet_manager.database import Base
from fleet_manager.config import settings

VEHICLE_STATUSES = ("active", "maintenance", "inactive")


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    car_code = Column(String(50), unique=True, nullable=False, index=True)
    plate_number = Column(String(50), unique=True, nullable=False, index=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    chassis_number = Column(String(100), nullable=False)
    engine_number = Column(String(100), nullable=False)
    sim_number = Column(String(100))
    owner_name = Column(String(200), nullable=False)
    license_expiry_date = Column(DateTime)
    insurance_expiry_date = Column(DateTime)
    last_oil_change_odometer = Column(Integer, nullable=False, default=0)   # km
    current_odometer = Column(Integer, nullable=False, default=0)           # km
    status = Column(String(20), nullable=False, default="active")           # active | maintenance | inactive
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    # Most recently inserted first (position grows on every insert)
    maintenance = relationship(
        "MaintenanceRecord",
        back_populates="vehicle",
        cascade="all, delete-orphan",
        order_by="MaintenanceRecord.position.desc()",
    )

    @property
    def distance_since_last_oil_change(self) -> int:
        return (self.current_odometer or 0) - (self.last_oil_change_odometer or 0)

    @property
    def needs_oil_change(self) -> bool:
        return self.distance_since_last_oil_change >= settings.OIL_CHANGE_INTERVAL_KM

    def __repr__(self):
        return f"<Vehicle {self.car_code} plate={self.plate_number} status={self.status}>"


class MaintenanceRecord(Base):
    __tablename__ = "maintenance_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)   # insertion order within the vehicle
    date = Column(DateTime, nullable=False)
    type = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    cost = Column(Float, nullable=False)
    location = Column(String(200), nullable=False)
    odometer_reading = Column(Integer, nullable=False)
    performed_by = Column(String(200), nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    vehicle = relationship("Vehicle", back_populates="maintenance")

    def __repr__(self):
        return f"<MaintenanceRecord {self.id} type={self.type} odo={self.odometer_reading}>"
