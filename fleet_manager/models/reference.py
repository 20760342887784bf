# fleet_manager/models/reference.py
"""
Reference lists used to fill in movement forms.
Movements store these as plain names, so editing or deleting an entry
never touches existing trip records.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Text
from fleet_manager.database import Base


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    license_number = Column(String(100), unique=True, nullable=False)
    license_expiry_date = Column(DateTime)
    contact_number = Column(String(50))
    department = Column(String(200))
    status = Column(String(20), nullable=False, default="active")   # active | inactive
    created_at = Column(DateTime)


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    contact_person = Column(String(200))
    contact_email = Column(String(255))
    contact_phone = Column(String(50))
    address = Column(Text)
    created_at = Column(DateTime)


class Route(Base):
    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    start_location = Column(String(200), nullable=False)
    end_location = Column(String(200), nullable=False)
    distance = Column(Float, nullable=False)          # km
    estimated_time = Column(Integer, nullable=False)  # minutes
    description = Column(Text)
    created_at = Column(DateTime)


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    description = Column(Text)
    created_at = Column(DateTime)


class Supervisor(Base):
    __tablename__ = "supervisors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    department = Column(String(200))
    contact_number = Column(String(50))
    created_at = Column(DateTime)
