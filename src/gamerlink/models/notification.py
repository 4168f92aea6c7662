from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from datetime import datetime
from enum import Enum as PyEnum
from gamerlink.database.base import Base
import uuid


class NotificationCategory(str, PyEnum):
    """Categories produced inside this package. The column itself accepts any tag."""
    MESSAGE = "message"
    PLAY = "play"
    SHOP = "shop"
    REQUEST = "request"


class Notification(Base):
    """A cross-user event delivered to a single user's inbox."""
    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    body: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Opaque string tag ("message", "play", "shop", ...)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id!r}, user_id={self.user_id!r}, category={self.category!r})>"
