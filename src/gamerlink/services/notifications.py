"""
Notification emission and the notification inbox.

`NotificationEmitter.emit` is the side channel fired after a message or play
request is created. Delivery is best-effort and at-most-once: a failing sink is
logged and ignored, never retried, and never undoes the write that triggered it.
"""

from typing import Protocol
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from gamerlink.config import Settings, get_settings
from gamerlink.exceptions.base import ForbiddenError, NotFoundError
from gamerlink.models.notification import Notification
from gamerlink.repositories.notification_repository import NotificationRepository
from gamerlink.validators.input_validators import require_uuid

logger = logging.getLogger(__name__)

TITLE_MAX_CHARS = Notification.__table__.c.title.type.length


class NotificationSink(Protocol):
    """Anything that can deliver a notification to a user."""

    async def emit(self, user_id: UUID, title: str, body: str | None, category: str) -> None:
        ...


class DatabaseNotificationSink:
    """Writes notifications to the `notifications` table through a SAVEPOINT."""

    def __init__(self, repository: NotificationRepository):
        self.repository = repository

    async def emit(self, user_id: UUID, title: str, body: str | None, category: str) -> None:
        await self.repository.add_isolated(user_id, title, body, category)


class NotificationEmitter:

    def __init__(self, sink: NotificationSink | None, *, enabled: bool = True):
        self.sink = sink
        self.enabled = enabled and sink is not None

    @classmethod
    def for_session(cls, db: AsyncSession, settings: Settings | None = None) -> "NotificationEmitter":
        settings = settings or get_settings()
        return cls(
            DatabaseNotificationSink(NotificationRepository(db)),
            enabled=settings.NOTIFICATIONS_ENABLED,
        )

    async def emit(self, target_user_id: UUID, title: str, body: str | None, category: str) -> bool:
        """
        Fire-and-forget. Returns True when the sink accepted the notification,
        False when emission is disabled or the sink failed.
        """
        if not self.enabled:
            return False

        # Titles embed display names and game names; clamp to the column width
        title = preview(title, TITLE_MAX_CHARS)

        try:
            await self.sink.emit(target_user_id, title, body, category)
        except Exception:
            logger.warning(
                "notifications.emit_failed",
                extra={"target_user_id": target_user_id, "category": category},
                exc_info=True,
            )
            return False

        logger.debug("notifications.emitted", extra={"target_user_id": target_user_id, "category": category})
        return True


def preview(text: str, limit: int) -> str:
    """Shorten `text` to at most `limit` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)].rstrip() + "…"


class NotificationService:
    """Inbox operations; every call is scoped to the owning user."""

    def __init__(self, db: AsyncSession):
        self.notifications = NotificationRepository(db)

    async def list_notifications(self, user_id: UUID | str, *, unread_only: bool = False) -> list[Notification]:
        return await self.notifications.list_for_user(require_uuid(user_id), unread_only=unread_only)

    async def count_unread(self, user_id: UUID | str) -> int:
        return await self.notifications.count_unread(require_uuid(user_id))

    async def _get_owned(self, notification_id: UUID | str, user_id: UUID | str) -> Notification:
        notification_id = require_uuid(notification_id, "notification_id")
        user_id = require_uuid(user_id)

        notification = await self.notifications.get_by_id(notification_id)
        if notification is None:
            raise NotFoundError(f"Notification with ID {notification_id} not found", fields=["notification_id"])
        if notification.user_id != user_id:
            raise ForbiddenError("Notification belongs to another user", fields=["notification_id"])
        return notification

    async def mark_read(self, notification_id: UUID | str, user_id: UUID | str) -> Notification:
        notification = await self._get_owned(notification_id, user_id)
        return await self.notifications.mark_read(notification)

    async def delete_notification(self, notification_id: UUID | str, user_id: UUID | str) -> None:
        notification = await self._get_owned(notification_id, user_id)
        await self.notifications.delete(notification.id)
