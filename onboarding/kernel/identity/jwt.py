"""
Bearer token issuing for signed-in users.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from onboarding.config import get_settings


class PublicUser(BaseModel):
    """
    Public view of a user account.

    The only shape ever signed into a token or returned over HTTP; it has no
    password field, so the hash cannot leak through either path.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    given_name: str
    maiden_name: str
    email_address: str
    is_activated: bool
    created_at: datetime
    updated_at: datetime


class TokenIssuer:
    """
    JWT creation and decoding.

    Tokens carry the ``PublicUser`` claims plus ``iat``. An ``exp`` claim is
    added only when an expiry is configured.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm
        self.expire_minutes = (
            expire_minutes
            if expire_minutes is not None
            else settings.access_token_expire_minutes
        )

    def issue(self, user: PublicUser) -> str:
        """
        Sign a token for a user.

        Args:
            user: Public projection of the account

        Returns:
            Encoded JWT
        """
        now = datetime.now(timezone.utc)
        claims: dict[str, Any] = user.model_dump(mode="json")
        claims["iat"] = int(now.timestamp())
        if self.expire_minutes is not None:
            claims["exp"] = int((now + timedelta(minutes=self.expire_minutes)).timestamp())

        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[PublicUser]:
        """
        Verify and decode a token.

        Returns:
            PublicUser if the signature (and expiry, when present) is valid,
            None otherwise
        """
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

        try:
            return PublicUser.model_validate(claims)
        except ValidationError:
            return None


# Default issuer instance
_token_issuer: Optional[TokenIssuer] = None


def get_token_issuer() -> TokenIssuer:
    """Get or create the default token issuer."""
    global _token_issuer
    if _token_issuer is None:
        _token_issuer = TokenIssuer()
    return _token_issuer
