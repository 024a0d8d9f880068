import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from trucktrack.models.delivery import DeliveryPriority, DeliveryStatus
from trucktrack.schemas.common import GeoPoint, Page, ResponseModel, TimeWindow

DriverTaskTab = Literal["all", "pending", "in_progress", "completed"]


class Stop(BaseModel):
    location: GeoPoint | None = None
    address: str = Field(default="", max_length=512)
    landmark: str | None = Field(default=None, max_length=255)
    contact_name: str | None = Field(default=None, max_length=255)
    contact_phone: str | None = Field(default=None, max_length=50)
    time_window: TimeWindow = Field(default_factory=TimeWindow)


class Customer(BaseModel):
    name: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=50)
    email: str = Field(default="", max_length=255)


class Cargo(BaseModel):
    type: str = Field(default="", max_length=100)
    description: str = Field(default="", max_length=1000)
    quantity: int = Field(default=0, ge=0)
    weight_kg: float = Field(default=0.0, ge=0)
    volume_m3: float = Field(default=0.0, ge=0)
    special_handling: str = Field(default="", max_length=255)


class TimelineEntry(BaseModel):
    status: str
    timestamp: datetime
    notes: str = ""


class ProofOfDelivery(BaseModel):
    signature: str = Field(default="", max_length=4096)
    photos: list[str] = Field(default_factory=list)
    notes: str = Field(default="", max_length=2000)
    timestamp: datetime | None = None


class DeliveryCreate(BaseModel):
    status: DeliveryStatus = DeliveryStatus.PENDING
    priority: DeliveryPriority = DeliveryPriority.NORMAL
    assigned_driver_id: uuid.UUID | None = None
    assigned_vehicle_id: uuid.UUID | None = None
    pickup: Stop = Field(default_factory=Stop)
    dropoff: Stop = Field(default_factory=Stop)
    customer: Customer = Field(default_factory=Customer)
    cargo: Cargo = Field(default_factory=Cargo)
    items: list[dict[str, Any]] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=2000)
    document_ids: list[str] = Field(default_factory=list)
    scheduled_date: datetime | None = None
    estimated_distance_km: float | None = Field(default=None, ge=0)
    estimated_duration_min: float | None = Field(default=None, ge=0)


class DeliveryUpdate(BaseModel):
    status: DeliveryStatus | None = None
    priority: DeliveryPriority | None = None
    assigned_driver_id: uuid.UUID | None = None
    assigned_vehicle_id: uuid.UUID | None = None
    pickup: Stop | None = None
    dropoff: Stop | None = None
    customer: Customer | None = None
    cargo: Cargo | None = None
    items: list[dict[str, Any]] | None = None
    notes: str | None = Field(default=None, max_length=2000)
    document_ids: list[str] | None = None
    scheduled_date: datetime | None = None
    estimated_distance_km: float | None = Field(default=None, ge=0)
    estimated_duration_min: float | None = Field(default=None, ge=0)


class DeliveryAssignRequest(BaseModel):
    driver_id: uuid.UUID
    vehicle_id: uuid.UUID | None = None


class DeliveryCompleteRequest(BaseModel):
    notes: str = Field(default="", max_length=2000)
    proof_of_delivery: ProofOfDelivery | None = None


class DeliveryResponse(ResponseModel):
    id: uuid.UUID
    status: str
    priority: str
    assigned_driver_id: uuid.UUID | None
    assigned_vehicle_id: uuid.UUID | None
    pickup: Stop
    dropoff: Stop
    customer: Customer
    cargo: Cargo
    items: list[dict[str, Any]]
    timeline: list[TimelineEntry]
    notes: str | None
    document_ids: list[str]
    proof_of_delivery: ProofOfDelivery | None
    scheduled_date: datetime | None
    start_time: datetime | None
    completion_time: datetime | None
    created_by: str | None
    estimated_distance_km: float | None
    estimated_duration_min: float | None
    created_at: datetime
    updated_at: datetime


class DeliveriesListResponse(Page[DeliveryResponse]):
    pass
