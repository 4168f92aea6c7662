from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, Text, UUID, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from gamerlink.database.base import Base, statement_clock
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .user import User


# BIGINT on real databases, INTEGER on SQLite (only INTEGER PRIMARY KEY autoincrements there)
MessageId = BigInteger().with_variant(Integer, "sqlite")


class Message(Base):
    """
    One directed text message between two users.

    Rows are append-only: after insertion only `read` changes (false -> true).
    `id` is assigned by the database sequence, so it grows with insertion order and
    breaks ties between messages sharing the same `created_at`.
    """
    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint("from_user_id <> to_user_id", name="no_self_message"),
        # Thread lookups filter on the (sender, recipient) pair in both directions
        Index("ix_messages_pair", "from_user_id", "to_user_id"),
    )

    id: Mapped[int] = mapped_column(
        MessageId,
        primary_key=True,
        autoincrement=True
    )

    from_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    to_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    # Stored verbatim
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    read: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False
    )

    # Assigned by the database clock at insert time, never by the caller
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=statement_clock(),
        nullable=False,
        index=True
    )

    # --- Relationships ---

    sender: Mapped["User"] = relationship(
        "User",
        foreign_keys=[from_user_id],
        lazy="raise"
    )

    recipient: Mapped["User"] = relationship(
        "User",
        foreign_keys=[to_user_id],
        lazy="raise"
    )

    def peer_of(self, user_id: uuid.UUID) -> uuid.UUID:
        """Return the other participant relative to `user_id`."""
        return self.to_user_id if self.from_user_id == user_id else self.from_user_id

    def __repr__(self) -> str:
        return (
            f"<Message(id={self.id!r}, from_user_id={self.from_user_id!r}, "
            f"to_user_id={self.to_user_id!r}, read={self.read!r})>"
        )
