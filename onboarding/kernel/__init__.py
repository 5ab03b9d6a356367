"""
Kernel Layer

Transactional identity-and-token workflow:
- Identity Core (credential hashing, bearer tokens, account lifecycle)
- Persistence Gateway (unit of work over users and verification tokens)
- Notification Port (outbound email)

Invariants:
- An email address identifies at most one user
- Verification tokens are single-use and consumed atomically with their effect
- Every workflow operation commits once or rolls back entirely
"""

from onboarding.kernel.models import User, VerificationToken
from onboarding.kernel.errors import (
    IdentityError,
    InvalidInput,
    Conflict,
    NotFound,
    Unauthorized,
    PersistenceError,
    UniqueViolation,
    NotificationError,
)

__all__ = [
    # Models
    "User",
    "VerificationToken",
    # Errors
    "IdentityError",
    "InvalidInput",
    "Conflict",
    "NotFound",
    "Unauthorized",
    "PersistenceError",
    "UniqueViolation",
    "NotificationError",
]
