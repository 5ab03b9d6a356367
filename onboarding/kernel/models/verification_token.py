"""
Single-use verification tokens for account activation and recovery.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from onboarding.kernel.models.base import Base, generate_uuid, utc_now


class VerificationToken(Base):
    """
    Bearer token mailed to a user inside an activation or recovery link.

    The row id is the token value. A token is consumed by deleting it in the
    same transaction as the effect it authorizes; rows are never updated.
    """

    __tablename__ = "verification_tokens"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    def belongs_to(self, user_id: uuid.UUID) -> bool:
        return self.user_id == user_id

    def __repr__(self) -> str:
        return f"<VerificationToken {self.id} user={self.user_id}>"
