# fleet_manager/models/movement.py
"""
Trip log table. One row per vehicle movement.
car_code / plate_number are copied from the vehicle when the movement is
recorded; driver, supervisor, department, client and route are free text.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Text
from fleet_manager.database import Base


class Movement(Base):
    __tablename__ = "movements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(DateTime, nullable=False, index=True)
    vehicle_id = Column(Integer, nullable=False, index=True)   # vehicles.id
    car_code = Column(String(50), nullable=False, index=True)
    plate_number = Column(String(50), nullable=False)
    driver_name = Column(String(200), nullable=False, index=True)
    supervisor_name = Column(String(200), nullable=False, index=True)
    department = Column(String(200), nullable=False)
    client = Column(String(200), nullable=False)
    route = Column(String(200), nullable=False)
    departure_time = Column(DateTime, nullable=False)
    arrival_time = Column(DateTime, nullable=False)
    odometer_reading = Column(Integer, nullable=False)
    fuel_cost = Column(Float, nullable=False)
    notes = Column(Text)
    created_by = Column(Integer, nullable=False)   # users.id
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Movement {self.id} car={self.car_code} driver={self.driver_name}>"
