import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext
from trucktrack.models.common import now_utc
from trucktrack.models.message import Message
from trucktrack.models.user import User
from trucktrack.observability import log_event, metrics_store
from trucktrack.schemas.message import MessageCreate
from trucktrack.services.common import resolve_uuid


def list_messages(db: Session, auth: AuthContext) -> list[Message]:
    # participants is a JSON array; membership is checked in Python to stay dialect neutral
    messages = db.scalars(select(Message).order_by(Message.created_at.asc()))
    return [message for message in messages if auth.user_id in (message.participants or [])]


def _sender_name(db: Session, auth: AuthContext) -> str | None:
    try:
        user_id = uuid.UUID(auth.user_id)
    except ValueError:
        return None
    user = db.get(User, user_id)
    return user.name if user else None


def send_message(db: Session, auth: AuthContext, payload: MessageCreate) -> Message:
    content = payload.content.strip()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Message content must not be empty",
        )

    participants = [auth.user_id]
    for recipient in payload.recipients:
        if recipient and recipient not in participants:
            participants.append(recipient)

    message = Message(
        sender_id=auth.user_id,
        sender_name=_sender_name(db, auth),
        participants=participants,
        content=content,
        type=payload.type.value,
        read_by=[auth.user_id],
        attachments=payload.attachments,
        created_at=now_utc(),
    )
    db.add(message)
    db.commit()
    db.refresh(message)

    metrics_store.increment("messages_sent_total")
    log_event("message_sent", user_id=auth.user_id)
    return message


def mark_read(db: Session, auth: AuthContext, message_id: str) -> Message:
    message = db.get(Message, resolve_uuid(message_id, "Message not found"))
    if message is None or auth.user_id not in (message.participants or []):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")

    if auth.user_id not in (message.read_by or []):
        message.read_by = [*(message.read_by or []), auth.user_id]
        db.commit()
        db.refresh(message)
    return message
