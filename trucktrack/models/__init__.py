# Import SQLAlchemy models so they register on Base.metadata
from trucktrack.models.delivery import Delivery, DeliveryPriority, DeliveryStatus  # noqa: F401
from trucktrack.models.document import Document, DocumentStatus, DocumentType  # noqa: F401
from trucktrack.models.location import Location, LocationType  # noqa: F401
from trucktrack.models.message import Message, MessageType  # noqa: F401
from trucktrack.models.user import DriverStatus, User, UserRole  # noqa: F401
from trucktrack.models.vehicle import Vehicle, VehicleStatus  # noqa: F401
