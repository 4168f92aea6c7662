from sqlalchemy import String, DateTime, Boolean, UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from datetime import datetime
from gamerlink.database.base import Base
import uuid


class User(Base):
    """
    SQLAlchemy model for a platform account.

    Only the identity fields the messaging core needs are mapped here; profile,
    shop and role data live elsewhere. `is_active=False` is the soft-delete state:
    such an account no longer resolves through `UserRepository.get`.
    """
    __tablename__ = "users"

    # Unique identifier for the user (primary key)
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True
    )

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False
    )

    email: Mapped[str | None] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=True
    )

    # Hashed password (never store plain-text passwords)
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Soft-deletion toggle
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    @property
    def display_name(self) -> str:
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.username

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, username={self.username!r})>"
