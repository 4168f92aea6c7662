"""Play requests: one user inviting another to a game, answered once by the recipient."""

from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from gamerlink.config import Settings, get_settings
from gamerlink.exceptions.base import ForbiddenError, NotFoundError, ValidationError
from gamerlink.models.notification import NotificationCategory
from gamerlink.models.play_request import PlayRequest, PlayRequestStatus
from gamerlink.models.user import User
from gamerlink.repositories.play_request_repository import PlayRequestRepository
from gamerlink.repositories.user_repository import UserRepository
from gamerlink.validators.input_validators import require_uuid, require_distinct_participants, require_text
from .notifications import NotificationEmitter

logger = logging.getLogger(__name__)

_ANSWERS = (PlayRequestStatus.ACCEPTED, PlayRequestStatus.REJECTED)


def _parse_answer(status: PlayRequestStatus | str) -> PlayRequestStatus:
    try:
        answer = PlayRequestStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown play request status: {status!r}", fields=["status"]) from None
    if answer not in _ANSWERS:
        raise ValidationError("A play request can only be accepted or rejected", fields=["status"])
    return answer


class PlayRequestService:

    def __init__(
        self,
        db: AsyncSession,
        emitter: NotificationEmitter | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.requests = PlayRequestRepository(db)
        self.users = UserRepository(db)
        self.emitter = emitter or NotificationEmitter.for_session(db, settings)

    async def _resolve(self, user_id: UUID, field: str) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found", fields=[field])
        return user

    async def send_play_request(
        self,
        from_user_id: UUID | str,
        to_user_id: UUID | str,
        game: str,
        message: str | None = None,
    ) -> PlayRequest:
        """
        Create a pending request and notify the recipient.

        Raises:
            ValidationError: malformed ids, self-invitation, empty game
            NotFoundError: either user does not resolve
        """
        from_user_id = require_uuid(from_user_id, "from_user_id")
        to_user_id = require_uuid(to_user_id, "to_user_id")
        require_distinct_participants(from_user_id, to_user_id)
        require_text(game, "game")

        sender = await self._resolve(from_user_id, "from_user_id")
        await self._resolve(to_user_id, "to_user_id")

        play_request = await self.requests.create_request(from_user_id, to_user_id, game, message)

        await self.emitter.emit(
            to_user_id,
            f"{sender.display_name} wants to play {play_request.game}",
            message,
            NotificationCategory.PLAY.value,
        )
        return play_request

    async def list_play_requests(self, user_id: UUID | str) -> list[PlayRequest]:
        return await self.requests.list_for_user(require_uuid(user_id))

    async def respond_to_play_request(
        self,
        request_id: UUID | str,
        responder_id: UUID | str,
        status: PlayRequestStatus | str,
    ) -> PlayRequest:
        """
        Accept or reject a pending request. Only its recipient may answer, and only once.

        Raises:
            ValidationError: status is not accepted/rejected, or the request was already answered
            NotFoundError: no such request
            ForbiddenError: responder is not the recipient
        """
        request_id = require_uuid(request_id, "request_id")
        responder_id = require_uuid(responder_id, "responder_id")
        answer = _parse_answer(status)

        play_request = await self.requests.get_by_id(request_id)
        if play_request is None:
            raise NotFoundError(f"PlayRequest with ID {request_id} not found", fields=["request_id"])
        if play_request.to_user_id != responder_id:
            raise ForbiddenError("Only the recipient can answer a play request", fields=["request_id"])
        if play_request.status is not PlayRequestStatus.PENDING:
            raise ValidationError(
                f"Play request was already {play_request.status.value}", fields=["status"]
            )

        play_request = await self.requests.set_status(play_request, answer)

        responder = await self.users.get(responder_id)
        name = responder.display_name if responder else "Your friend"
        await self.emitter.emit(
            play_request.from_user_id,
            f"{name} {answer.value} your play request",
            play_request.game,
            NotificationCategory.PLAY.value,
        )
        return play_request
