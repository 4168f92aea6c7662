"""
ASGI entrypoint.

    uvicorn gamerlink.main:app
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from gamerlink import __version__
from gamerlink.api.v1 import api_router
from gamerlink.api.v1.error_handlers import register_exception_handlers
from gamerlink.config import Settings, get_settings
from gamerlink.core.logging import RequestIDMiddleware, setup_logging, stop_queue_logging
from gamerlink.database.session import get_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app.startup", extra={"version": __version__})
    yield
    await get_engine().dispose()
    logger.info("app.shutdown")
    stop_queue_logging()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title="GamerLink Messaging API", version=__version__, lifespan=lifespan)
    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
