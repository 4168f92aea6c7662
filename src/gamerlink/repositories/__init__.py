"""
Repository layer.

    from gamerlink.repositories import UserRepository, MessageRepository
"""

from .base_repository import BaseRepository
from .user_repository import UserRepository
from .message_repository import MessageRepository
from .notification_repository import NotificationRepository
from .play_request_repository import PlayRequestRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "MessageRepository",
    "NotificationRepository",
    "PlayRequestRepository",
]
