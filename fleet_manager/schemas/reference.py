# fleet_manager/schemas/reference.py
"""Request/response shapes for the reference lists (one In/Out pair per kind)."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional


class DriverIn(BaseModel):
    name: str = Field(min_length=1)
    license_number: str = Field(min_length=1)
    license_expiry_date: Optional[datetime] = None
    contact_number: Optional[str] = None
    department: Optional[str] = None
    status: Literal["active", "inactive"] = "active"


class DriverOut(DriverIn):
    id: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class ClientIn(BaseModel):
    name: str = Field(min_length=1)
    contact_person: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None


class ClientOut(ClientIn):
    id: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class RouteIn(BaseModel):
    name: str = Field(min_length=1)
    start_location: str = Field(min_length=1)
    end_location: str = Field(min_length=1)
    distance: float = Field(ge=0)        # km
    estimated_time: int = Field(ge=0)    # minutes
    description: Optional[str] = None


class RouteOut(RouteIn):
    id: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class DepartmentIn(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class DepartmentOut(DepartmentIn):
    id: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class SupervisorIn(BaseModel):
    name: str = Field(min_length=1)
    department: Optional[str] = None
    contact_number: Optional[str] = None


class SupervisorOut(SupervisorIn):
    id: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
