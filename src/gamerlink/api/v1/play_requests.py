from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from gamerlink.api.deps import get_db, get_current_user_id
from gamerlink.schemas.play_request import PlayRequestCreate, PlayRequestRead, PlayRequestUpdate
from gamerlink.services.play_requests import PlayRequestService

router = APIRouter(prefix="/play-requests", tags=["play-requests"])


@router.post("", response_model=PlayRequestRead, status_code=status.HTTP_201_CREATED)
async def send_play_request(
    payload: PlayRequestCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await PlayRequestService(db).send_play_request(
        current_user_id, payload.to_user_id, payload.game, payload.message
    )


@router.get("", response_model=List[PlayRequestRead])
async def list_play_requests(
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Sent and received, newest first."""
    return await PlayRequestService(db).list_play_requests(current_user_id)


@router.patch("/{request_id}", response_model=PlayRequestRead)
async def respond_to_play_request(
    request_id: UUID,
    payload: PlayRequestUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await PlayRequestService(db).respond_to_play_request(request_id, current_user_id, payload.status)
