# fleet_manager/schemas/movement.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class MovementIn(BaseModel):
    car_code: str = Field(min_length=1)
    driver_name: str = Field(min_length=1)
    supervisor_name: str = Field(min_length=1)
    department: str = Field(min_length=1)
    client: str = Field(min_length=1)
    route: str = Field(min_length=1)
    date: Optional[datetime] = None        # defaults to now on create
    departure_time: datetime
    arrival_time: datetime
    odometer_reading: int = Field(ge=0)
    fuel_cost: float
    notes: Optional[str] = None


class MovementOut(BaseModel):
    id: int
    date: datetime
    vehicle_id: int
    car_code: str
    plate_number: str
    driver_name: str
    supervisor_name: str
    department: str
    client: str
    route: str
    departure_time: datetime
    arrival_time: datetime
    odometer_reading: int
    fuel_cost: float
    notes: Optional[str]
    created_by: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class PaginationOut(BaseModel):
    total: int
    total_pages: int
    current_page: int
    has_next_page: bool
    has_prev_page: bool


class MovementPageOut(BaseModel):
    movements: list[MovementOut]
    pagination: PaginationOut
