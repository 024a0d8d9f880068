import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from trucktrack.db.base import Base
from trucktrack.models.common import now_utc


class DeliveryStatus(str, enum.Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DeliveryPriority(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Delivery(Base):
    __tablename__ = "deliveries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=DeliveryStatus.PENDING.value, index=True
    )
    priority: Mapped[str] = mapped_column(
        String(16), nullable=False, default=DeliveryPriority.NORMAL.value
    )
    assigned_driver_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    assigned_vehicle_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    pickup: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    dropoff: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    customer: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    cargo: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    timeline: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    document_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    proof_of_delivery: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    scheduled_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completion_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    estimated_distance_km: Mapped[float | None] = mapped_column(Float, nullable=True)
    estimated_duration_min: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc
    )
