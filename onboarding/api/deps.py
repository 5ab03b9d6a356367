"""
FastAPI dependencies for the identity workflow and bearer authentication.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from onboarding.config import get_settings
from onboarding.database import get_unit_of_work
from onboarding.kernel.identity.identity_service import IdentityService
from onboarding.kernel.identity.jwt import PublicUser, TokenIssuer, get_token_issuer
from onboarding.kernel.identity.password import PasswordHasher
from onboarding.kernel.notifications.mailer import Notifier, build_notifier


# Security scheme
security = HTTPBearer(auto_error=False)

_notifier: Optional[Notifier] = None


def get_notifier() -> Notifier:
    """Notifier selected by configuration, created once per process."""
    global _notifier
    if _notifier is None:
        _notifier = build_notifier(get_settings())
    return _notifier


def get_identity_service(
    notifier: Annotated[Notifier, Depends(get_notifier)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> IdentityService:
    """Identity workflow bound to the application database."""
    settings = get_settings()
    return IdentityService(
        unit_of_work=get_unit_of_work(),
        notifier=notifier,
        hasher=PasswordHasher(settings.bcrypt_rounds),
        issuer=issuer,
        settings=settings,
    )


Identity = Annotated[IdentityService, Depends(get_identity_service)]


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> PublicUser:
    """Decode the bearer token or raise 401."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = issuer.decode(credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


CurrentUser = Annotated[PublicUser, Depends(get_current_user)]
