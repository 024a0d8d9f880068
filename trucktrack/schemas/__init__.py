from trucktrack.schemas.analytics import AnalyticsResponse
from trucktrack.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserProfile
from trucktrack.schemas.dashboard import AdminDashboardResponse, DriverDashboardResponse
from trucktrack.schemas.delivery import (
    DeliveriesListResponse,
    DeliveryAssignRequest,
    DeliveryCompleteRequest,
    DeliveryCreate,
    DeliveryResponse,
    DeliveryUpdate,
)
from trucktrack.schemas.document import (
    DocumentCreate,
    DocumentResponse,
    DocumentsListResponse,
    DocumentUpdate,
)
from trucktrack.schemas.driver import DriverCreate, DriverResponse, DriversListResponse, DriverUpdate
from trucktrack.schemas.location import LocationCreate, LocationResponse, LocationUpdate
from trucktrack.schemas.message import MessageCreate, MessageResponse, MessagesListResponse
from trucktrack.schemas.vehicle import VehicleCreate, VehicleResponse, VehiclesListResponse, VehicleUpdate

__all__ = [
    "AnalyticsResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserProfile",
    "AdminDashboardResponse",
    "DriverDashboardResponse",
    "DeliveriesListResponse",
    "DeliveryAssignRequest",
    "DeliveryCompleteRequest",
    "DeliveryCreate",
    "DeliveryResponse",
    "DeliveryUpdate",
    "DocumentCreate",
    "DocumentResponse",
    "DocumentsListResponse",
    "DocumentUpdate",
    "DriverCreate",
    "DriverResponse",
    "DriversListResponse",
    "DriverUpdate",
    "LocationCreate",
    "LocationResponse",
    "LocationUpdate",
    "MessageCreate",
    "MessageResponse",
    "MessagesListResponse",
    "VehicleCreate",
    "VehicleResponse",
    "VehiclesListResponse",
    "VehicleUpdate",
]
