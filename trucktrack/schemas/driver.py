import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from trucktrack.models.user import DriverStatus
from trucktrack.schemas.auth import PerformanceMetrics, UserProfile
from trucktrack.schemas.common import GeoPoint, Page


class DriverCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    license_number: str | None = Field(default=None, max_length=64)
    license_expiry: datetime | None = None
    status: DriverStatus = DriverStatus.ACTIVE
    assigned_vehicle_id: uuid.UUID | None = None
    address: str | None = Field(default=None, max_length=512)
    joining_date: datetime | None = None
    rating: float = Field(default=0.0, ge=0, le=5)

    @field_validator("name", "email", "phone", "license_number", "address")
    @classmethod
    def strip_strings(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return value.strip()


class DriverUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    license_number: str | None = Field(default=None, max_length=64)
    license_expiry: datetime | None = None
    status: DriverStatus | None = None
    assigned_vehicle_id: uuid.UUID | None = None
    address: str | None = Field(default=None, max_length=512)
    joining_date: datetime | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    current_location: GeoPoint | None = None
    performance_metrics: PerformanceMetrics | None = None


class DriverResponse(UserProfile):
    license_expiry: datetime | None
    address: str | None
    joining_date: datetime | None
    updated_at: datetime


class DriversListResponse(Page[DriverResponse]):
    pass
