"""Fixtures for repository tests."""

import uuid

import pytest
from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession

from gamerlink.models.user import User
from gamerlink.repositories.base_repository import BaseRepository
from gamerlink.repositories.user_repository import UserRepository
from gamerlink.repositories.message_repository import MessageRepository
from gamerlink.repositories.notification_repository import NotificationRepository
from gamerlink.repositories.play_request_repository import PlayRequestRepository

# NOTE: everything here depends on `db_session` from conftest.py


@pytest.fixture(scope="session")
def fake() -> Faker:
    Faker.seed(1234)
    return Faker()


@pytest.fixture
async def base_repo(db_session: AsyncSession) -> BaseRepository[User]:
    """BaseRepository bound to the User model, for the generic CRUD tests."""
    return BaseRepository(User, db_session)


@pytest.fixture
async def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
async def message_repository(db_session: AsyncSession) -> MessageRepository:
    return MessageRepository(db_session)


@pytest.fixture
async def notification_repository(db_session: AsyncSession) -> NotificationRepository:
    return NotificationRepository(db_session)


@pytest.fixture
async def play_request_repository(db_session: AsyncSession) -> PlayRequestRepository:
    return PlayRequestRepository(db_session)


@pytest.fixture
def sample_user_data() -> dict[str, str]:
    """Deterministic payload for `create()` calls."""
    return {
        "username": "testuser",
        "email": "testuser@example.com",
        "hashed_password": "s3cret",
    }


@pytest.fixture
async def create_user(user_repository: UserRepository, fake: Faker):
    """
    Factory for persisted users with Faker-generated identity fields.

    Usage:
        user = await create_user(username="bob", is_active=False)
    """
    async def _create(**overrides) -> User:
        suffix = uuid.uuid4().hex[:6]
        data = {
            "username": f"{fake.user_name()[:40]}_{suffix}",
            "email": f"{suffix}.{fake.email()}",
            "hashed_password": "pw",
            "first_name": fake.first_name(),
            "last_name": None,
        }
        data.update(overrides)
        return await user_repository.create_user(**data)

    return _create


@pytest.fixture
async def created_user(create_user, sample_user_data) -> User:
    return await create_user(**sample_user_data)


@pytest.fixture
async def multiple_users(create_user) -> list[User]:
    """Three unique, active users."""
    return [await create_user() for _ in range(3)]


@pytest.fixture
async def alice(create_user) -> User:
    return await create_user(username="alice", first_name="Alice", last_name="Liddell")


@pytest.fixture
async def bob(create_user) -> User:
    return await create_user(username="bob", first_name=None)


@pytest.fixture
async def carol(create_user) -> User:
    return await create_user(username="carol", first_name="Carol")
