from sqlalchemy import DateTime, ForeignKey, String, Text, UUID, CheckConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from datetime import datetime
from enum import Enum as PyEnum
from gamerlink.database.base import Base
import uuid


class PlayRequestStatus(PyEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class PlayRequest(Base):
    """
    An invitation from one user to another to play a game together.

    Status only moves out of PENDING, once, and only by the recipient.
    """
    __tablename__ = "play_requests"
    __table_args__ = (
        CheckConstraint("from_user_id <> to_user_id", name="no_self_request"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True
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

    game: Mapped[str] = mapped_column(String(120), nullable=False)

    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[PlayRequestStatus] = mapped_column(
        SQLEnum(PlayRequestStatus, values_callable=lambda e: [m.value for m in e]),
        default=PlayRequestStatus.PENDING,
        nullable=False,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<PlayRequest(id={self.id!r}, game={self.game!r}, "
            f"status={self.status.value!r})>"
        )
