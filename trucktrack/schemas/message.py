import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from trucktrack.models.message import MessageType
from trucktrack.schemas.common import ResponseModel


class MessageCreate(BaseModel):
    content: str = Field(max_length=4000)
    recipients: list[str] = Field(default_factory=lambda: ["support"])
    type: MessageType = MessageType.TEXT
    attachments: list[str] = Field(default_factory=list)


class MessageResponse(ResponseModel):
    id: uuid.UUID
    sender_id: str
    sender_name: str | None
    participants: list[str]
    content: str
    type: str
    read_by: list[str]
    attachments: list[str]
    created_at: datetime


class MessagesListResponse(BaseModel):
    items: list[MessageResponse]
