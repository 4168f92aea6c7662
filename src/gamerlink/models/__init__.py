"""
Single import point for the ORM models.

Importing this package registers every table on `Base.metadata`:

    from gamerlink.models import User, Message, Notification, PlayRequest
"""

from .user import User
from .message import Message
from .notification import Notification, NotificationCategory
from .play_request import PlayRequest, PlayRequestStatus

__all__ = [
    "User",
    "Message",
    "Notification",
    "NotificationCategory",
    "PlayRequest",
    "PlayRequestStatus",
]
