"""
Authentication request and response schemas.

Request models guarantee every field is present, a string, trimmed and
non-empty. Semantic checks (email syntax, confirmation match, token
ownership) belong to the identity workflow.
"""

from pydantic import BaseModel, ConfigDict, Field

from onboarding.kernel.identity.jwt import PublicUser


class TrimmedRequest(BaseModel):
    """Base for request bodies: strings are stripped, unknown fields ignored."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class RegisterRequest(TrimmedRequest):
    """Account registration request."""

    given_name: str = Field(..., min_length=1, max_length=255)
    maiden_name: str = Field(..., min_length=1, max_length=255)
    email_address: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)
    password_confirmation: str = Field(..., min_length=1)


class SignInRequest(TrimmedRequest):
    """Credential sign-in request."""

    email_address: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class ActivateRequest(TrimmedRequest):
    """Account activation request (values from the activation link)."""

    email_address: str = Field(..., min_length=1, max_length=255)
    token: str = Field(..., min_length=1)


class ForgetPasswordRequest(TrimmedRequest):
    """Password recovery request."""

    email_address: str = Field(..., min_length=1, max_length=255)


class RecoverRequest(TrimmedRequest):
    """Password reset using a recovery token."""

    email_address: str = Field(..., min_length=1, max_length=255)
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    password_confirmation: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Sign-in response."""

    token: str


class UserResponse(PublicUser):
    """Account profile as exposed over HTTP."""
