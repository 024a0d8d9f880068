import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from trucktrack.models.location import LocationType
from trucktrack.schemas.common import GeoPoint, ResponseModel
from trucktrack.schemas.delivery import DeliveryResponse


class LocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: LocationType = LocationType.CUSTOMER
    address: str = Field(default="", max_length=512)
    location: GeoPoint | None = None
    landmark: str | None = Field(default=None, max_length=255)
    contact_name: str | None = Field(default=None, max_length=255)
    contact_phone: str | None = Field(default=None, max_length=50)
    access_notes: str | None = Field(default=None, max_length=2000)
    frequently_visited: bool = False


class LocationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: LocationType | None = None
    address: str | None = Field(default=None, max_length=512)
    location: GeoPoint | None = None
    landmark: str | None = Field(default=None, max_length=255)
    contact_name: str | None = Field(default=None, max_length=255)
    contact_phone: str | None = Field(default=None, max_length=50)
    access_notes: str | None = Field(default=None, max_length=2000)
    frequently_visited: bool | None = None


class LocationResponse(ResponseModel):
    id: uuid.UUID
    name: str
    type: str
    address: str
    location: GeoPoint | None
    landmark: str | None
    contact_name: str | None
    contact_phone: str | None
    access_notes: str | None
    frequently_visited: bool
    created_at: datetime


class LocationsListResponse(BaseModel):
    items: list[LocationResponse]


class NavigationResponse(BaseModel):
    current_delivery: DeliveryResponse | None
    recent_locations: list[LocationResponse]
