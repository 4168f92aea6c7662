"""
User repository: the `UserStore` the messaging core resolves identities through.

Lookups used by the core (`get`, `get_many`) only see active accounts. A
deactivated account behaves exactly like a deleted one: it does not resolve,
and conversations with it drop out of the inbox.
"""

from typing import Iterable
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, or_
import logging

from gamerlink.exceptions.mapper import db_error_handler
from gamerlink.models.user import User
from gamerlink.models.message import Message
from gamerlink.models.notification import Notification
from gamerlink.models.play_request import PlayRequest
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create_user(
        self,
        username: str,
        hashed_password: str,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        is_active: bool = True,
    ) -> User:
        """
        Create a user after normalizing the identity fields.

        Username is stripped; email is stripped and lower-cased so that
        `Bob@Example.com` and `bob@example.com` collide on the unique index.

        Raises:
            DuplicateError: username or email already taken
        """
        logger.info("users.create", extra={"username": username.strip()})

        return await self.create(
            username=username.strip(),
            email=email.strip().lower() if email else None,
            hashed_password=hashed_password,
            first_name=first_name,
            last_name=last_name,
            is_active=is_active,
        )

    # =================================================================================================================
    # Read (UserStore contract)
    # =================================================================================================================

    async def get(self, user_id: UUID) -> User | None:
        """Resolve an active user by id, or None for unknown and deactivated accounts."""
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(
                select(User).where(User.id == user_id, User.is_active.is_(True))
            )
            return result.scalar_one_or_none()

    async def get_many(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        """
        Batch variant of `get` used to resolve every peer of an inbox in one query.

        Ids that do not resolve are simply absent from the returned mapping.
        """
        ids = set(user_ids)
        if not ids:
            return {}

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(
                select(User).where(User.id.in_(ids), User.is_active.is_(True))
            )
            users = result.scalars().all()

        logger.debug("users.get_many", extra={"requested": len(ids), "resolved": len(users)})
        return {u.id: u for u in users}

    async def get_by_username(self, username: str) -> User | None:
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(select(User).where(User.username == username.strip()))
            return result.scalar_one_or_none()

    # =================================================================================================================
    # Account removal
    # =================================================================================================================

    async def deactivate_user(self, user_id: UUID) -> bool:
        """Soft delete. Message history is kept but the account stops resolving."""
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(
                update(User)
                .where(User.id == user_id)
                .values(is_active=False)
                .execution_options(synchronize_session="fetch")
            )

        changed = result.rowcount > 0
        logger.info("users.deactivate", extra={"user_id": user_id, "changed": changed})
        return changed

    async def delete_user(self, user_id: UUID) -> bool:
        """
        Hard delete a user together with every row that references them
        (messages in both directions, notifications, play requests).

        Returns:
            True if the user row existed.
        """
        async with db_error_handler(self.db, self.model_name):
            await self.db.execute(
                delete(Message).where(or_(Message.from_user_id == user_id, Message.to_user_id == user_id))
            )
            await self.db.execute(
                delete(PlayRequest).where(
                    or_(PlayRequest.from_user_id == user_id, PlayRequest.to_user_id == user_id)
                )
            )
            await self.db.execute(delete(Notification).where(Notification.user_id == user_id))

        return await self.delete(user_id)
