"""
Message repository: the append-only Message Log.

Provides appending, point deletion, the two-party thread query and the
per-user scan the conversation indexer partitions. Ordering is always
`(created_at, id)`: the database clock first, then the insertion sequence.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, and_, or_
from sqlalchemy.orm import selectinload
import logging
import time

from gamerlink.exceptions.base import NotFoundError
from gamerlink.exceptions.mapper import db_error_handler
from gamerlink.models.message import Message
from gamerlink.validators.input_validators import require_distinct_participants, require_text
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def _between(user_a: UUID, user_b: UUID):
    """WHERE clause for the unordered pair {user_a, user_b}."""
    return or_(
        and_(Message.from_user_id == user_a, Message.to_user_id == user_b),
        and_(Message.from_user_id == user_b, Message.to_user_id == user_a),
    )


class MessageRepository(BaseRepository[Message]):

    def __init__(self, db: AsyncSession):
        super().__init__(Message, db)

    # =================================================================================================================
    # Append
    # =================================================================================================================

    async def append(self, from_user_id: UUID, to_user_id: UUID, content: str) -> Message:
        """
        Persist a new message with `read=False`.

        `id` and `created_at` come from the database so that concurrent writers on
        the same pair cannot produce an out-of-order transcript.

        Raises:
            ValidationError: self-messaging or empty content
            NotFoundError: sender or recipient row does not exist (foreign key)
        """
        require_distinct_participants(from_user_id, to_user_id)
        require_text(content, "content")

        start = time.perf_counter()
        message = await self.create(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            content=content,
            read=False,
        )

        logger.info(
            "messages.append.success",
            extra={
                "message_id": message.id,
                "from_user_id": from_user_id,
                "to_user_id": to_user_id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return message

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def find_between(self, user_a: UUID, user_b: UUID, *, with_sender: bool = False) -> list[Message]:
        """
        Every message exchanged by the pair, oldest first.

        Symmetric: `find_between(a, b)` and `find_between(b, a)` return the same list.

        Args:
            with_sender: eager-load `Message.sender` for display
        """
        query = (
            select(Message)
            .where(_between(user_a, user_b))
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        if with_sender:
            query = query.options(selectinload(Message.sender))

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            messages = list(result.scalars().all())

        logger.debug("messages.find_between", extra={"count": len(messages)})
        return messages

    async def find_for_user(self, user_id: UUID) -> list[Message]:
        """Every message the user sent or received, oldest first."""
        query = (
            select(Message)
            .where(or_(Message.from_user_id == user_id, Message.to_user_id == user_id))
            .order_by(Message.created_at.asc(), Message.id.asc())
        )

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            messages = list(result.scalars().all())

        logger.debug("messages.find_for_user", extra={"user_id": user_id, "count": len(messages)})
        return messages

    async def count_unread(self, user_id: UUID) -> int:
        """Total unread messages addressed to `user_id` across all peers."""
        query = select(func.count(Message.id)).where(
            Message.to_user_id == user_id, Message.read.is_(False)
        )
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return result.scalar() or 0

    # =================================================================================================================
    # Read state (false -> true only)
    # =================================================================================================================

    async def mark_read_from(self, peer_id: UUID, viewer_id: UUID) -> int:
        """
        Mark every unread `peer -> viewer` message as read.

        Returns:
            Number of messages that changed state (0 when already read).
        """
        stmt = (
            update(Message)
            .where(
                Message.from_user_id == peer_id,
                Message.to_user_id == viewer_id,
                Message.read.is_(False),
            )
            .values(read=True)
            .execution_options(synchronize_session="fetch")
        )
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(stmt)

        logger.info(
            "messages.mark_read",
            extra={"viewer_id": viewer_id, "peer_id": peer_id, "changed": result.rowcount},
        )
        return result.rowcount

    async def mark_read(self, message: Message) -> Message:
        if not message.read:
            async with db_error_handler(self.db, self.model_name):
                message.read = True
                await self.db.flush()
        return message

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete_by_id(self, message_id: int) -> None:
        """
        Hard delete, fail-closed.

        Raises:
            NotFoundError: no message has this id
        """
        if not await self.delete(message_id):
            raise NotFoundError(f"Message with ID {message_id} not found", fields=["message_id"])
