from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, require_any_user
from trucktrack.db.session import get_db
from trucktrack.schemas.message import MessageCreate, MessageResponse, MessagesListResponse
from trucktrack.services.messages_service import list_messages, mark_read, send_message

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.get("", response_model=MessagesListResponse, summary="My conversation")
def list_messages_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_any_user),
) -> MessagesListResponse:
    return MessagesListResponse(
        items=[MessageResponse.model_validate(message) for message in list_messages(db, auth)]
    )


@router.post(
    "",
    response_model=MessageResponse,
    summary="Send message",
    status_code=status.HTTP_201_CREATED,
)
def send_message_endpoint(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_any_user),
) -> MessageResponse:
    return MessageResponse.model_validate(send_message(db, auth, payload))


@router.post("/{message_id}/read", response_model=MessageResponse, summary="Mark as read")
def mark_read_endpoint(
    message_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_any_user),
) -> MessageResponse:
    return MessageResponse.model_validate(mark_read(db, auth, message_id))
