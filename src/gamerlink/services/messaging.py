"""
Direct messaging: the operations the HTTP layer (or any other caller) drives.

`MessagingService` composes the Message Log, the UserStore, the conversation
indexer and the notification emitter over one `AsyncSession`. It never commits;
the caller owns the transaction.
"""

from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from gamerlink.config import Settings, get_settings
from gamerlink.exceptions.base import ForbiddenError, NotFoundError
from gamerlink.models.message import Message
from gamerlink.models.notification import NotificationCategory
from gamerlink.models.user import User
from gamerlink.repositories.message_repository import MessageRepository
from gamerlink.repositories.user_repository import UserRepository
from gamerlink.validators.input_validators import (
    require_uuid,
    require_message_id,
    require_distinct_participants,
    require_text,
)
from .conversation_index import Conversation, ConversationIndexer
from .notifications import NotificationEmitter, preview

logger = logging.getLogger(__name__)


class MessagingService:

    def __init__(
        self,
        db: AsyncSession,
        emitter: NotificationEmitter | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.messages = MessageRepository(db)
        self.users = UserRepository(db)
        self.indexer = ConversationIndexer(self.messages, self.users)
        self.emitter = emitter or NotificationEmitter.for_session(db, self.settings)

    async def _resolve(self, user_id: UUID, field: str) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found", fields=[field])
        return user

    # =================================================================================================================
    # Send
    # =================================================================================================================

    async def send_message(self, from_user_id: UUID | str, to_user_id: UUID | str, content: str) -> Message:
        """
        Append a message and notify the recipient.

        Input is validated before any query runs. The notification is emitted
        after the append and its failure is logged, not raised: the message stays.

        Raises:
            ValidationError: empty or malformed ids, self-messaging, empty content
            NotFoundError: sender or recipient does not resolve to an active account
        """
        from_user_id = require_uuid(from_user_id, "from_user_id")
        to_user_id = require_uuid(to_user_id, "to_user_id")
        require_distinct_participants(from_user_id, to_user_id)
        require_text(content, "content")

        sender = await self._resolve(from_user_id, "from_user_id")
        await self._resolve(to_user_id, "to_user_id")

        message = await self.messages.append(from_user_id, to_user_id, content)

        await self.emitter.emit(
            to_user_id,
            f"New message from {sender.display_name}",
            preview(content, self.settings.NOTIFICATION_PREVIEW_CHARS),
            NotificationCategory.MESSAGE.value,
        )
        return message

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def list_conversations(self, user_id: UUID | str) -> list[Conversation]:
        """Inbox for `user_id`, most recently active first. Empty when the user has no messages."""
        return await self.indexer.list_for(require_uuid(user_id))

    async def get_thread(self, user_a: UUID | str, user_b: UUID | str) -> list[Message]:
        """
        The full transcript between two users, oldest first, each message with its
        `sender` loaded. An empty list is the normal state of a new conversation.
        """
        user_a = require_uuid(user_a, "user_a")
        user_b = require_uuid(user_b, "user_b")
        return await self.messages.find_between(user_a, user_b, with_sender=True)

    async def unread_total(self, user_id: UUID | str) -> int:
        return await self.messages.count_unread(require_uuid(user_id))

    # =================================================================================================================
    # Read state
    # =================================================================================================================

    async def mark_read(self, viewer_id: UUID | str, peer_id: UUID | str) -> int:
        """Mark everything `peer` sent to `viewer` as read. Returns how many messages changed."""
        viewer_id = require_uuid(viewer_id, "viewer_id")
        peer_id = require_uuid(peer_id, "peer_id")
        return await self.messages.mark_read_from(peer_id, viewer_id)

    async def mark_message_read(self, message_id: int | str, reader_id: UUID | str) -> Message:
        """
        Raises:
            NotFoundError: no such message
            ForbiddenError: `reader_id` is not the recipient
        """
        message_id = require_message_id(message_id)
        reader_id = require_uuid(reader_id, "reader_id")

        message = await self.messages.get_by_id(message_id)
        if message is None:
            raise NotFoundError(f"Message with ID {message_id} not found", fields=["message_id"])
        if message.to_user_id != reader_id:
            raise ForbiddenError("Only the recipient can mark a message read", fields=["message_id"])
        return await self.messages.mark_read(message)

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete_message(self, message_id: int | str, actor_id: UUID | str | None = None) -> None:
        """
        Hard delete by id. Fails with NotFoundError when the id does not exist.

        When `actor_id` is given, only the sender may delete the message.
        """
        message_id = require_message_id(message_id)

        if actor_id is not None:
            actor_id = require_uuid(actor_id, "actor_id")
            message = await self.messages.get_by_id(message_id)
            if message is None:
                raise NotFoundError(f"Message with ID {message_id} not found", fields=["message_id"])
            if message.from_user_id != actor_id:
                raise ForbiddenError("Only the sender can delete a message", fields=["message_id"])

        await self.messages.delete_by_id(message_id)
