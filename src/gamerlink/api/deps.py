"""
Request-scoped dependencies.

`get_db` owns the transaction boundary for a request: services and repositories
only flush, the session is committed once the endpoint returns and rolled back
if it raises.
"""

from typing import AsyncGenerator
from uuid import UUID
import logging

from fastapi import Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from gamerlink.database.session import get_session_factory
from gamerlink.validators.input_validators import require_uuid

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_current_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """
    Caller identity as asserted by the upstream auth gateway in `X-User-ID`.

    A missing header is a 401; a malformed one is a ValidationError (422).
    """
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-ID header")
    return require_uuid(x_user_id, "X-User-ID")
