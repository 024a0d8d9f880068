from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, require_admin, require_any_user
from trucktrack.db.session import get_db
from trucktrack.models.document import DocumentStatus, DocumentType, RelatedEntityType
from trucktrack.schemas.document import (
    DocumentCreate,
    DocumentResponse,
    DocumentsListResponse,
    DocumentUpdate,
)
from trucktrack.services.documents_service import (
    create_document,
    delete_document,
    get_document,
    list_documents,
    update_document,
)

router = APIRouter(prefix="/api/v1/documents", tags=["documents"])


@router.get("", response_model=DocumentsListResponse, summary="List documents")
def list_documents_endpoint(
    db: Session = Depends(get_db),
    type_filter: DocumentType | None = Query(default=None, alias="type"),
    status_filter: DocumentStatus | None = Query(default=None, alias="status"),
    related_type: RelatedEntityType | None = Query(default=None),
    related_id: str | None = Query(default=None),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    _auth: AuthContext = Depends(require_any_user),
) -> DocumentsListResponse:
    items, total = list_documents(
        db,
        page=page,
        page_size=page_size,
        type_filter=type_filter,
        status_filter=status_filter,
        related_type=related_type,
        related_id=related_id,
        search=search,
    )
    return DocumentsListResponse(
        items=[DocumentResponse.model_validate(document) for document in items],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.post(
    "",
    response_model=DocumentResponse,
    summary="Create document record",
    status_code=status.HTTP_201_CREATED,
)
def create_document_endpoint(
    payload: DocumentCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_admin),
) -> DocumentResponse:
    return DocumentResponse.model_validate(create_document(db, auth, payload))


@router.get("/{document_id}", response_model=DocumentResponse, summary="Get document")
def get_document_endpoint(
    document_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_any_user),
) -> DocumentResponse:
    return DocumentResponse.model_validate(get_document(db, document_id))


@router.patch("/{document_id}", response_model=DocumentResponse, summary="Update document")
def update_document_endpoint(
    document_id: str,
    payload: DocumentUpdate,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> DocumentResponse:
    return DocumentResponse.model_validate(update_document(db, document_id, payload))


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete document",
)
def delete_document_endpoint(
    document_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> Response:
    delete_document(db, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
