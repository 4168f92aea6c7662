"""
Notification repository: the store behind the database notification sink and
the user's notification inbox.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging

from gamerlink.exceptions.mapper import db_error_handler
from gamerlink.models.notification import Notification
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class NotificationRepository(BaseRepository[Notification]):

    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    async def add_isolated(self, user_id: UUID, title: str, body: str | None, category: str) -> Notification:
        """
        Insert a notification inside a SAVEPOINT.

        A failure here only rolls back the savepoint, leaving whatever else the
        session holds (the message that triggered it) intact. Errors propagate
        to the caller unmapped; the emitter decides what to do with them.
        """
        async with self.db.begin_nested():
            notification = Notification(user_id=user_id, title=title, body=body, category=category, read=False)
            self.db.add(notification)
            await self.db.flush()

        logger.debug("notifications.add", extra={"notification_id": notification.id, "category": category})
        return notification

    async def list_for_user(self, user_id: UUID, *, unread_only: bool = False, limit: int = 100) -> list[Notification]:
        """Newest first."""
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.read.is_(False))
        query = query.order_by(Notification.created_at.desc()).limit(limit)

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def count_unread(self, user_id: UUID) -> int:
        query = select(func.count(Notification.id)).where(
            Notification.user_id == user_id, Notification.read.is_(False)
        )
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return result.scalar() or 0

    async def mark_read(self, notification: Notification) -> Notification:
        if not notification.read:
            async with db_error_handler(self.db, self.model_name):
                notification.read = True
                await self.db.flush()
        return notification
