import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from trucktrack.db.base import Base
from trucktrack.models.common import now_utc


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "available"
    ON_DELIVERY = "on_delivery"
    MAINTENANCE = "maintenance"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    registration_number: Mapped[str] = mapped_column(
        String(32), unique=True, nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="truck")
    capacity: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=VehicleStatus.AVAILABLE.value, index=True
    )
    current_location: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    assigned_driver_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    maintenance_records: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    fuel_efficiency_kml: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_serviced: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc
    )
