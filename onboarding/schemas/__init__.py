"""
Pydantic schemas for API request/response validation.
"""

from onboarding.schemas.auth import (
    RegisterRequest,
    SignInRequest,
    ActivateRequest,
    ForgetPasswordRequest,
    RecoverRequest,
    TokenResponse,
    UserResponse,
)
from onboarding.schemas.common import (
    ErrorResponse,
    FieldError,
    MessageResponse,
    HealthResponse,
)

__all__ = [
    # Auth
    "RegisterRequest",
    "SignInRequest",
    "ActivateRequest",
    "ForgetPasswordRequest",
    "RecoverRequest",
    "TokenResponse",
    "UserResponse",
    # Common
    "ErrorResponse",
    "FieldError",
    "MessageResponse",
    "HealthResponse",
]
