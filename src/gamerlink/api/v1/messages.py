from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from gamerlink.api.deps import get_db, get_current_user_id
from gamerlink.schemas.message import (
    ConversationRead,
    MarkReadResult,
    MessageCreate,
    MessageRead,
    ThreadMessageRead,
)
from gamerlink.services.messaging import MessagingService

router = APIRouter(tags=["messages"])


@router.get("/conversations", response_model=List[ConversationRead])
async def list_conversations(
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Inbox: one entry per peer, most recently active first."""
    conversations = await MessagingService(db).list_conversations(current_user_id)
    # Conversation is a dataclass over ORM rows; validate by attribute instead of asdict()
    return [ConversationRead.model_validate(c) for c in conversations]


@router.get("/messages/{other_user_id}", response_model=List[ThreadMessageRead])
async def get_thread(
    other_user_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Full transcript with `other_user_id`, oldest first."""
    return await MessagingService(db).get_thread(current_user_id, other_user_id)


@router.post("/messages", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await MessagingService(db).send_message(current_user_id, payload.to_user_id, payload.content)


@router.post("/messages/{other_user_id}/read", response_model=MarkReadResult)
async def mark_thread_read(
    other_user_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Mark everything `other_user_id` sent to the caller as read."""
    updated = await MessagingService(db).mark_read(current_user_id, other_user_id)
    return MarkReadResult(updated=updated)


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: int,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await MessagingService(db).delete_message(message_id, actor_id=current_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
