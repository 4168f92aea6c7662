from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from uuid import UUID

from .user import UserSummary


class MessageCreate(BaseModel):
    to_user_id: UUID
    content: str = Field(min_length=1)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        # Stored verbatim: only reject, never strip
        if not value.strip():
            raise ValueError("content must not be blank")
        return value


class MessageRead(BaseModel):
    id: int
    from_user_id: UUID
    to_user_id: UUID
    content: str
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ThreadMessageRead(MessageRead):
    sender: UserSummary


class ConversationRead(BaseModel):
    peer: UserSummary
    last_message: MessageRead
    unread_count: int

    model_config = ConfigDict(from_attributes=True)


class MarkReadResult(BaseModel):
    updated: int
