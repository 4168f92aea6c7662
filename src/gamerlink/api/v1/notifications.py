from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from gamerlink.api.deps import get_db, get_current_user_id
from gamerlink.schemas.notification import NotificationRead
from gamerlink.services.notifications import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationRead])
async def list_notifications(
    unread_only: bool = False,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Newest first."""
    return await NotificationService(db).list_notifications(current_user_id, unread_only=unread_only)


@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_notification_read(
    notification_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService(db).mark_read(notification_id, current_user_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await NotificationService(db).delete_notification(notification_id, current_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
