"""Fixtures for service tests: sinks, settings and wired services."""

from uuid import UUID

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from gamerlink.config import Settings
from gamerlink.services.messaging import MessagingService
from gamerlink.services.notifications import NotificationEmitter, NotificationService
from gamerlink.services.play_requests import PlayRequestService


class RecordingSink:
    """In-memory sink: remembers every emitted notification."""

    def __init__(self):
        self.events: list[dict] = []

    async def emit(self, user_id: UUID, title: str, body: str | None, category: str) -> None:
        self.events.append({"user_id": user_id, "title": title, "body": body, "category": category})


class ExplodingSink:
    """Sink whose delivery always fails."""

    def __init__(self):
        self.calls = 0

    async def emit(self, user_id: UUID, title: str, body: str | None, category: str) -> None:
        self.calls += 1
        raise RuntimeError("notification backend is down")


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(ENV="testing", NOTIFICATION_PREVIEW_CHARS=20)


@pytest.fixture
async def messaging_service(db_session: AsyncSession, test_settings: Settings) -> MessagingService:
    """MessagingService with the database-backed notification sink."""
    return MessagingService(db_session, settings=test_settings)


@pytest.fixture
async def recording_messaging_service(
    db_session: AsyncSession, test_settings: Settings, recording_sink: RecordingSink
) -> MessagingService:
    return MessagingService(db_session, emitter=NotificationEmitter(recording_sink), settings=test_settings)


@pytest.fixture
async def notification_service(db_session: AsyncSession) -> NotificationService:
    return NotificationService(db_session)


@pytest.fixture
async def play_request_service(db_session: AsyncSession, test_settings: Settings) -> PlayRequestService:
    return PlayRequestService(db_session, settings=test_settings)
