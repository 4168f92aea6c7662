"""Play request repository: invitations between two users to play a game."""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
import logging

from gamerlink.exceptions.mapper import db_error_handler
from gamerlink.models.play_request import PlayRequest, PlayRequestStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class PlayRequestRepository(BaseRepository[PlayRequest]):

    def __init__(self, db: AsyncSession):
        super().__init__(PlayRequest, db)

    async def create_request(
        self,
        from_user_id: UUID,
        to_user_id: UUID,
        game: str,
        message: str | None = None,
    ) -> PlayRequest:
        return await self.create(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            game=game.strip(),
            message=message,
            status=PlayRequestStatus.PENDING,
        )

    async def list_for_user(self, user_id: UUID) -> list[PlayRequest]:
        """Requests the user sent or received, newest first."""
        query = (
            select(PlayRequest)
            .where(or_(PlayRequest.from_user_id == user_id, PlayRequest.to_user_id == user_id))
            .order_by(PlayRequest.created_at.desc())
        )
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def set_status(self, play_request: PlayRequest, status: PlayRequestStatus) -> PlayRequest:
        async with db_error_handler(self.db, self.model_name):
            play_request.status = status
            await self.db.flush()

        logger.info(
            "play_requests.status_changed",
            extra={"play_request_id": play_request.id, "status": status.value},
        )
        return play_request
