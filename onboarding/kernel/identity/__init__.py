"""
Identity Core - credential hashing, bearer tokens and the account workflow.
"""

from onboarding.kernel.identity.password import PasswordHasher, verify_password, hash_password
from onboarding.kernel.identity.jwt import PublicUser, TokenIssuer, get_token_issuer
from onboarding.kernel.identity.identity_service import IdentityService

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "PublicUser",
    "TokenIssuer",
    "get_token_issuer",
    "IdentityService",
]
