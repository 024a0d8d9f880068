import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from trucktrack.models.vehicle import VehicleStatus
from trucktrack.schemas.common import GeoPoint, Page, ResponseModel


class VehicleCapacity(BaseModel):
    weight_kg: float = Field(default=0.0, ge=0)
    volume_m3: float = Field(default=0.0, ge=0)


class MaintenanceRecord(BaseModel):
    date: datetime
    description: str = Field(min_length=1, max_length=1000)
    cost: float | None = Field(default=None, ge=0)


class VehicleCreate(BaseModel):
    registration_number: str = Field(min_length=1, max_length=32)
    type: str = Field(default="truck", min_length=1, max_length=32)
    capacity: VehicleCapacity = Field(default_factory=VehicleCapacity)
    status: VehicleStatus = VehicleStatus.AVAILABLE
    current_location: GeoPoint | None = None
    maintenance_records: list[MaintenanceRecord] = Field(default_factory=list)
    fuel_efficiency_kml: float | None = Field(default=None, ge=0)
    last_serviced: datetime | None = None

    @field_validator("registration_number")
    @classmethod
    def normalize_registration(cls, value: str) -> str:
        return value.strip().upper()


class VehicleUpdate(BaseModel):
    registration_number: str | None = Field(default=None, min_length=1, max_length=32)
    type: str | None = Field(default=None, min_length=1, max_length=32)
    capacity: VehicleCapacity | None = None
    status: VehicleStatus | None = None
    current_location: GeoPoint | None = None
    maintenance_records: list[MaintenanceRecord] | None = None
    fuel_efficiency_kml: float | None = Field(default=None, ge=0)
    last_serviced: datetime | None = None

    @field_validator("registration_number")
    @classmethod
    def normalize_registration(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return value.strip().upper()


class VehicleAssignRequest(BaseModel):
    driver_id: uuid.UUID | None = None


class VehicleResponse(ResponseModel):
    id: uuid.UUID
    registration_number: str
    type: str
    capacity: VehicleCapacity
    status: str
    current_location: GeoPoint | None
    assigned_driver_id: uuid.UUID | None
    maintenance_records: list[MaintenanceRecord]
    fuel_efficiency_kml: float | None
    last_serviced: datetime | None
    created_at: datetime
    updated_at: datetime


class VehiclesListResponse(Page[VehicleResponse]):
    pass
