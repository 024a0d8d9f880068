import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from trucktrack.models.document import DocumentStatus, DocumentType, RelatedEntityType
from trucktrack.schemas.common import Page, ResponseModel


class RelatedTo(BaseModel):
    type: RelatedEntityType
    id: str = Field(min_length=1, max_length=64)


class DocumentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    type: DocumentType = DocumentType.INVOICE
    related_to: RelatedTo | None = None
    file_url: str | None = Field(default=None, max_length=1024)
    thumbnail_url: str | None = Field(default=None, max_length=1024)
    description: str | None = Field(default=None, max_length=2000)
    status: DocumentStatus = DocumentStatus.ACTIVE
    tags: list[str] = Field(default_factory=list)
    expiry_date: datetime | None = None


class DocumentUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    type: DocumentType | None = None
    related_to: RelatedTo | None = None
    file_url: str | None = Field(default=None, max_length=1024)
    thumbnail_url: str | None = Field(default=None, max_length=1024)
    description: str | None = Field(default=None, max_length=2000)
    status: DocumentStatus | None = None
    tags: list[str] | None = None
    expiry_date: datetime | None = None


class DocumentResponse(ResponseModel):
    id: uuid.UUID
    title: str
    type: str
    related_type: str | None
    related_id: str | None
    file_url: str | None
    thumbnail_url: str | None
    description: str | None
    status: str
    tags: list[str]
    uploaded_by: str | None
    upload_date: datetime
    expiry_date: datetime | None
    created_at: datetime
    updated_at: datetime


class DocumentsListResponse(Page[DocumentResponse]):
    pass
