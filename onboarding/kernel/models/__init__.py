"""
Kernel Data Models

SQLAlchemy models owned by the persistence gateway.
"""

from onboarding.kernel.models.base import Base, TimestampMixin, generate_uuid, utc_now
from onboarding.kernel.models.user import User, normalize_email
from onboarding.kernel.models.verification_token import VerificationToken

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "utc_now",
    # User
    "User",
    "normalize_email",
    # Tokens
    "VerificationToken",
]
