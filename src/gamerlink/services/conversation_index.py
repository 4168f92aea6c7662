"""
Conversation index: turns a user's raw message rows into an inbox.

The grouping itself (`build_conversations`) is a pure function over already
fetched rows so it can be exercised without a database; `ConversationIndexer`
wires it to the Message Log and the UserStore.

Rules:
  - one entry per distinct peer the user has at least one message with
  - `last_message` is the message with the greatest `(created_at, id)`
  - `unread_count` counts `peer -> user` messages with `read=False`
  - peers that no longer resolve (deleted / deactivated accounts) are dropped
  - most recently active first; equal timestamps fall back to peer id ascending
"""

from dataclasses import dataclass
from typing import Iterable, Mapping
from uuid import UUID
import logging

from gamerlink.models.message import Message
from gamerlink.models.user import User
from gamerlink.repositories.message_repository import MessageRepository
from gamerlink.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conversation:
    """Per-peer summary of a thread, from one user's point of view. Never persisted."""
    peer: User
    last_message: Message
    unread_count: int


@dataclass
class _Partition:
    last_message: Message
    unread_count: int = 0


def _is_newer(candidate: Message, current: Message) -> bool:
    return (candidate.created_at, candidate.id) > (current.created_at, current.id)


def partition_by_peer(user_id: UUID, messages: Iterable[Message]) -> dict[UUID, _Partition]:
    partitions: dict[UUID, _Partition] = {}

    for message in messages:
        if user_id not in (message.from_user_id, message.to_user_id):
            continue

        peer_id = message.peer_of(user_id)
        part = partitions.get(peer_id)
        if part is None:
            part = partitions[peer_id] = _Partition(last_message=message)
        elif _is_newer(message, part.last_message):
            part.last_message = message

        if message.to_user_id == user_id and not message.read:
            part.unread_count += 1

    return partitions


def build_conversations(
    user_id: UUID,
    messages: Iterable[Message],
    peers: Mapping[UUID, User],
) -> list[Conversation]:
    """
    Partition `messages` by peer and reduce each partition to a `Conversation`.

    Args:
        user_id: the viewing user
        messages: every message the viewer sent or received (any order)
        peers: resolved peer accounts; partitions whose peer is missing are skipped
    """
    conversations = []
    for peer_id, part in partition_by_peer(user_id, messages).items():
        peer = peers.get(peer_id)
        if peer is None:
            logger.debug("conversations.peer_unresolved", extra={"user_id": user_id, "peer_id": peer_id})
            continue
        conversations.append(Conversation(peer=peer, last_message=part.last_message, unread_count=part.unread_count))

    # Two stable sorts: tie-break key first, then the primary key descending
    conversations.sort(key=lambda c: c.peer.id)
    conversations.sort(key=lambda c: c.last_message.created_at, reverse=True)
    return conversations


class ConversationIndexer:
    """Recomputes a user's conversation list from the Message Log on every call."""

    def __init__(self, messages: MessageRepository, users: UserRepository):
        self.messages = messages
        self.users = users

    async def list_for(self, user_id: UUID) -> list[Conversation]:
        rows = await self.messages.find_for_user(user_id)
        if not rows:
            return []

        peer_ids = {m.peer_of(user_id) for m in rows}
        peers = await self.users.get_many(peer_ids)
        conversations = build_conversations(user_id, rows, peers)

        logger.debug(
            "conversations.indexed",
            extra={
                "user_id": user_id,
                "messages": len(rows),
                "conversations": len(conversations),
                "dropped_peers": len(peer_ids) - len(conversations),
            },
        )
        return conversations
