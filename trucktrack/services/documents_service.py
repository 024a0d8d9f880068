import uuid
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext
from trucktrack.models.common import now_utc
from trucktrack.models.document import Document, DocumentStatus, DocumentType, RelatedEntityType
from trucktrack.observability import log_event
from trucktrack.schemas.document import DocumentCreate, DocumentUpdate
from trucktrack.services.common import apply_changes, like_needle, paginate, resolve_uuid


def get_document(db: Session, document_id: str | uuid.UUID) -> Document:
    document = db.get(Document, resolve_uuid(document_id, "Document not found"))
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return document


def list_documents(
    db: Session,
    *,
    page: int,
    page_size: int,
    type_filter: DocumentType | None = None,
    status_filter: DocumentStatus | None = None,
    related_type: RelatedEntityType | None = None,
    related_id: str | None = None,
    search: str | None = None,
) -> tuple[list[Document], int]:
    filters: list[Any] = []
    if type_filter:
        filters.append(Document.type == type_filter.value)
    if status_filter:
        filters.append(Document.status == status_filter.value)
    if related_type:
        filters.append(Document.related_type == related_type.value)
    if related_id:
        filters.append(Document.related_id == related_id)
    if search and search.strip():
        needle = like_needle(search)
        filters.append(
            or_(
                func.lower(Document.title).like(needle),
                func.lower(func.coalesce(Document.description, "")).like(needle),
                func.lower(Document.type).like(needle),
            )
        )

    stmt = select(Document)
    if filters:
        stmt = stmt.where(and_(*filters))
    stmt = stmt.order_by(Document.upload_date.desc(), Document.created_at.desc())
    return paginate(db, stmt, page, page_size)


def create_document(db: Session, auth: AuthContext, payload: DocumentCreate) -> Document:
    now = now_utc()
    document = Document(
        title=payload.title.strip(),
        type=payload.type.value,
        related_type=payload.related_to.type.value if payload.related_to else None,
        related_id=payload.related_to.id if payload.related_to else None,
        file_url=payload.file_url,
        thumbnail_url=payload.thumbnail_url,
        description=payload.description,
        status=payload.status.value,
        tags=payload.tags,
        uploaded_by=auth.user_id,
        upload_date=now,
        expiry_date=payload.expiry_date,
        created_at=now,
        updated_at=now,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    log_event("document_created", user_id=auth.user_id)
    return document


def update_document(db: Session, document_id: str, payload: DocumentUpdate) -> Document:
    document = get_document(db, document_id)
    changes = payload.model_dump(exclude_unset=True)

    if "related_to" in changes:
        related = payload.related_to
        changes.pop("related_to")
        changes["related_type"] = related.type.value if related else None
        changes["related_id"] = related.id if related else None
    for field, enum_type in (("type", DocumentType), ("status", DocumentStatus)):
        if changes.get(field) is not None:
            changes[field] = enum_type(changes[field]).value

    apply_changes(document, changes)
    db.commit()
    db.refresh(document)
    log_event("document_updated")
    return document


def delete_document(db: Session, document_id: str) -> None:
    document = get_document(db, document_id)
    db.delete(document)
    db.commit()
    log_event("document_deleted")
