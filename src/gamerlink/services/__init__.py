"""
Service layer: the operations callers drive, composed from repositories.

    from gamerlink.services import MessagingService
"""

from .conversation_index import Conversation, ConversationIndexer, build_conversations
from .messaging import MessagingService
from .notifications import NotificationEmitter, NotificationSink, DatabaseNotificationSink, NotificationService
from .play_requests import PlayRequestService

__all__ = [
    "Conversation",
    "ConversationIndexer",
    "build_conversations",
    "MessagingService",
    "NotificationEmitter",
    "NotificationSink",
    "DatabaseNotificationSink",
    "NotificationService",
    "PlayRequestService",
]
