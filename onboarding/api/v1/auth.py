"""
Authentication endpoints.

Workflow errors propagate as ``IdentityError`` subclasses and are turned
into responses by the handlers registered in ``onboarding.main``.
"""

from fastapi import APIRouter, status

from onboarding.api.deps import CurrentUser, Identity
from onboarding.schemas.auth import (
    ActivateRequest,
    ForgetPasswordRequest,
    RecoverRequest,
    RegisterRequest,
    SignInRequest,
    TokenResponse,
    UserResponse,
)
from onboarding.schemas.common import MessageResponse

router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, identity: Identity):
    """
    Register a new, inactive account.

    An activation link is mailed to the address.
    """
    message = await identity.register(
        given_name=data.given_name,
        maiden_name=data.maiden_name,
        email_address=data.email_address,
        password=data.password,
        password_confirmation=data.password_confirmation,
    )
    return MessageResponse(message=message)


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(data: SignInRequest, identity: Identity):
    """Exchange credentials for a bearer token."""
    token = await identity.sign_in(
        email_address=data.email_address,
        password=data.password,
    )
    return TokenResponse(token=token)


@router.post("/activate", response_model=MessageResponse)
async def activate(data: ActivateRequest, identity: Identity):
    """Activate an account with the token from its activation link."""
    message = await identity.activate(
        email_address=data.email_address,
        token_id=data.token,
    )
    return MessageResponse(message=message)


@router.post("/forget-password", response_model=MessageResponse)
async def forget_password(data: ForgetPasswordRequest, identity: Identity):
    """Mail a recovery link to the account's address."""
    message = await identity.forget_password(email_address=data.email_address)
    return MessageResponse(message=message)


@router.post("/recover", response_model=MessageResponse)
async def recover(data: RecoverRequest, identity: Identity):
    """Set a new password with the token from a recovery link."""
    message = await identity.recover(
        email_address=data.email_address,
        token_id=data.token,
        password=data.password,
        password_confirmation=data.password_confirmation,
    )
    return MessageResponse(message=message)


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(user: CurrentUser):
    """Profile carried by the presented bearer token."""
    return UserResponse.model_validate(user.model_dump())
