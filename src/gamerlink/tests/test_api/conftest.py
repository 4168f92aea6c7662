from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from gamerlink.api.deps import get_db
from gamerlink.config import Settings
from gamerlink.main import create_app


@pytest.fixture
async def app(db_session):
    """App wired to the per-test database session; commits/rolls back like `get_db`."""
    app = create_app(Settings(ENV="testing", LOG_FORMAT="text"))

    async def _override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def as_user(user) -> dict[str, str]:
    return {"X-User-ID": str(user.id)}


# Error responses roll the shared session back, which expires the user fixtures;
# resolve ids and headers once, before any request is made.

@pytest.fixture
def alice_headers(alice) -> dict[str, str]:
    return as_user(alice)


@pytest.fixture
def bob_headers(bob) -> dict[str, str]:
    return as_user(bob)


@pytest.fixture
def bob_id(bob) -> str:
    return str(bob.id)
