from fastapi import APIRouter

from .messages import router as messages_router
from .notifications import router as notifications_router
from .play_requests import router as play_requests_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(messages_router)
api_router.include_router(notifications_router)
api_router.include_router(play_requests_router)

__all__ = ["api_router"]
