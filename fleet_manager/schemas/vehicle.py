# fleet_manager/schemas/vehicle.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional

VehicleStatus = Literal["active", "maintenance", "inactive"]


class VehicleCreate(BaseModel):
    car_code: str = Field(min_length=1)
    plate_number: str = Field(min_length=1)
    make: str
    model: str
    year: int
    chassis_number: str
    engine_number: str
    sim_number: Optional[str] = None
    owner_name: str
    license_expiry_date: Optional[datetime] = None
    insurance_expiry_date: Optional[datetime] = None
    last_oil_change_odometer: int = Field(ge=0)
    current_odometer: int = Field(ge=0)
    status: VehicleStatus = "active"


class VehicleUpdate(BaseModel):
    """Every field optional: only the fields sent are changed."""
    car_code: Optional[str] = Field(default=None, min_length=1)
    plate_number: Optional[str] = Field(default=None, min_length=1)
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    chassis_number: Optional[str] = None
    engine_number: Optional[str] = None
    sim_number: Optional[str] = None
    owner_name: Optional[str] = None
    license_expiry_date: Optional[datetime] = None
    insurance_expiry_date: Optional[datetime] = None
    last_oil_change_odometer: Optional[int] = Field(default=None, ge=0)
    current_odometer: Optional[int] = Field(default=None, ge=0)
    status: Optional[VehicleStatus] = None


class MaintenanceIn(BaseModel):
    date: datetime
    type: str = Field(min_length=1)           # e.g. "Oil Change", "Tyres", "Brake Service"
    description: str = Field(min_length=1)
    cost: float = Field(ge=0)
    location: str = Field(min_length=1)
    odometer_reading: int = Field(ge=0)
    performed_by: str = Field(min_length=1)


class MaintenanceOut(BaseModel):
    id: int
    date: datetime
    type: str
    description: str
    cost: float
    location: str
    odometer_reading: int
    performed_by: str

    class Config:
        from_attributes = True


class VehicleOut(BaseModel):
    id: int
    car_code: str
    plate_number: str
    make: str
    model: str
    year: int
    chassis_number: str
    engine_number: str
    sim_number: Optional[str]
    owner_name: str
    license_expiry_date: Optional[datetime]
    insurance_expiry_date: Optional[datetime]
    last_oil_change_odometer: int
    current_odometer: int
    status: str
    # Derived on read, never stored
    distance_since_last_oil_change: int
    needs_oil_change: bool
    maintenance: list[MaintenanceOut] = []
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
