from pydantic import BaseModel

from trucktrack.schemas.common import GeoPoint
from trucktrack.schemas.delivery import DeliveryResponse
from trucktrack.schemas.vehicle import VehicleResponse


class AdminDashboardResponse(BaseModel):
    active_deliveries: list[DeliveryResponse]
    pending_deliveries: list[DeliveryResponse]
    completed_today: int
    available_drivers: int
    total_drivers: int
    vehicles: list[VehicleResponse]
    map_center: GeoPoint
    error: str | None = None
    errors: list[str] = []


class DriverDashboardStats(BaseModel):
    total: int
    completed: int
    pending: int
    in_progress: int
    rating: float


class DriverDashboardResponse(BaseModel):
    stats: DriverDashboardStats
    upcoming: list[DeliveryResponse]
