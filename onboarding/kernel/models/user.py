"""
User model for identity management.
"""

import uuid

from sqlalchemy import Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from onboarding.kernel.models.base import Base, TimestampMixin, generate_uuid


def normalize_email(email_address: str) -> str:
    """Canonical form used for storage and lookup (case-insensitive match)."""
    return email_address.strip().lower()


class User(Base, TimestampMixin):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    given_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    maiden_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email_address: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    is_activated: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User {self.email_address}>"
