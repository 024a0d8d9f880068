import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from trucktrack.db.base import Base
from trucktrack.models.common import now_utc


class DocumentType(str, enum.Enum):
    INVOICE = "invoice"
    RECEIPT = "receipt"
    PROOF_OF_DELIVERY = "proof_of_delivery"
    LICENSE = "license"
    INSURANCE = "insurance"
    OTHER = "other"


class DocumentStatus(str, enum.Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    EXPIRED = "expired"


class RelatedEntityType(str, enum.Enum):
    DELIVERY = "delivery"
    DRIVER = "driver"
    VEHICLE = "vehicle"
    CUSTOMER = "customer"


class Document(Base):
    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=DocumentType.INVOICE.value, index=True
    )
    related_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    related_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    file_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=DocumentStatus.ACTIVE.value
    )
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    uploaded_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    upload_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc, index=True
    )
    expiry_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc
    )
