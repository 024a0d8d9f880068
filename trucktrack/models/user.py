import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from trucktrack.db.base import Base
from trucktrack.models.common import now_utc


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    DRIVER = "driver"


class DriverStatus(str, enum.Enum):
    AVAILABLE = "available"
    ON_DELIVERY = "on_delivery"
    OFF_DUTY = "off_duty"
    ACTIVE = "active"
    INACTIVE = "inactive"


def empty_performance_metrics() -> dict:
    return {"deliveries_completed": 0, "on_time_percentage": 0.0, "average_rating": 0.0}


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    language: Mapped[str] = mapped_column(String(8), nullable=False, default="en")
    profile_picture: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # driver-only fields
    license_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    license_expiry: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    joining_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    assigned_vehicle_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    status: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    current_location: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    performance_metrics: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=empty_performance_metrics
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc
    )
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
