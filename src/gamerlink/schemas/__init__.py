"""Pydantic DTOs for the HTTP boundary."""

from .user import UserSummary
from .message import MessageCreate, MessageRead, ThreadMessageRead, ConversationRead, MarkReadResult
from .notification import NotificationRead
from .play_request import PlayRequestCreate, PlayRequestUpdate, PlayRequestRead

__all__ = [
    "UserSummary",
    "MessageCreate",
    "MessageRead",
    "ThreadMessageRead",
    "ConversationRead",
    "MarkReadResult",
    "NotificationRead",
    "PlayRequestCreate",
    "PlayRequestUpdate",
    "PlayRequestRead",
]
