import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from trucktrack.db.base import Base
from trucktrack.models.common import now_utc


class LocationType(str, enum.Enum):
    CUSTOMER = "customer"
    WAREHOUSE = "warehouse"
    HUB = "hub"


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default=LocationType.CUSTOMER.value)
    address: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    location: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    landmark: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    access_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    frequently_visited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc
    )
