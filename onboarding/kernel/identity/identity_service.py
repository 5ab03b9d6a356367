"""
Identity workflow: registration, sign-in, activation and password recovery.
"""

import re
import uuid
from functools import lru_cache
from typing import Optional

from onboarding.config import Settings, get_settings
from onboarding.kernel.errors import Conflict, InvalidInput, NotFound, Unauthorized, UniqueViolation
from onboarding.kernel.identity.jwt import PublicUser, TokenIssuer
from onboarding.kernel.identity.password import PasswordHasher
from onboarding.kernel.models.user import User, normalize_email
from onboarding.kernel.models.verification_token import VerificationToken
from onboarding.kernel.notifications import templates
from onboarding.kernel.notifications.mailer import Notifier
from onboarding.kernel.persistence.unit_of_work import Transaction, UnitOfWork
from onboarding.logging_config import get_logger, mask_email

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(
    r'^(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)

SIGN_IN_FAILED = "Sign in failed! Please check your email address or password."
PASSWORD_MISMATCH = "Your password did not match confirmation."

REGISTERED = "You are successfully registered. Please check your email inbox to activate your account."
ACTIVATED = "Your account has been successfully activated. You now may sign in to enjoy our services."
RECOVERY_SENT = (
    "A recovery email has been sent to your email address. "
    "Please check your email inbox to recover your account."
)
RECOVERED = "Your account has been successfully recovered. You now may sign in with newly created passwords."


def is_valid_email(email_address: str) -> bool:
    return EMAIL_PATTERN.match(email_address) is not None


@lru_cache(maxsize=None)
def unknown_user_digest(rounds: int) -> str:
    """Digest at the given cost that no submitted password matches."""
    return PasswordHasher(rounds).hash(uuid.uuid4().hex)


def _parse_token_id(token_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(token_id))
    except ValueError:
        return None


class IdentityService:
    """
    Orchestrates the account lifecycle.

    Every operation runs inside one transaction: it either commits exactly
    once, or rolls back and re-raises the original error. Email delivery
    happens before commit, so a failed send leaves no state change behind.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        notifier: Notifier,
        hasher: Optional[PasswordHasher] = None,
        issuer: Optional[TokenIssuer] = None,
        settings: Optional[Settings] = None,
    ):
        self.unit_of_work = unit_of_work
        self.notifier = notifier
        self.hasher = hasher or PasswordHasher()
        self.issuer = issuer or TokenIssuer()
        self.settings = settings or get_settings()

    async def register(
        self,
        given_name: str,
        maiden_name: str,
        email_address: str,
        password: str,
        password_confirmation: str,
    ) -> str:
        """
        Create an inactive account and mail its activation link.

        Raises:
            InvalidInput: Malformed email address or mismatched confirmation
            Conflict: Email address already registered
        """
        async with self.unit_of_work.transaction() as tx:
            if not is_valid_email(email_address):
                raise InvalidInput(
                    f'Registration failed. Email address "{email_address}" is not a valid email address.'
                )

            email = normalize_email(email_address)
            if await tx.find_one(User, email_address=email) is not None:
                raise Conflict(f"User with email address {email} is already registered.")

            if password != password_confirmation:
                raise InvalidInput(PASSWORD_MISMATCH)

            user = User(
                given_name=given_name,
                maiden_name=maiden_name,
                email_address=email,
                password_hash=self.hasher.hash(password),
                is_activated=False,
            )
            try:
                user = await tx.save(user)
            except UniqueViolation as exc:
                # Lost a race with a concurrent registration
                raise Conflict(f"User with email address {email} is already registered.") from exc

            token = await tx.save(VerificationToken(user_id=user.id))

            await self.notifier.send(
                templates.activation_email(self.settings, user.given_name, user.email_address, str(token.id))
            )
            await tx.commit()

        logger.info("User registered", extra={"user_id": str(user.id), "email": mask_email(email)})
        return REGISTERED

    async def sign_in(self, email_address: str, password: str) -> str:
        """
        Check credentials and issue a bearer token.

        Unknown accounts and wrong passwords fail with the same message.

        Raises:
            Unauthorized: Credentials did not match
        """
        async with self.unit_of_work.transaction() as tx:
            user = await tx.find_one(User, email_address=normalize_email(email_address))
            # Unknown accounts still pay for one bcrypt check
            digest = user.password_hash if user is not None else unknown_user_digest(self.hasher.rounds)
            if not self.hasher.verify(password, digest) or user is None:
                logger.info("Sign in rejected", extra={"email": mask_email(email_address)})
                raise Unauthorized(SIGN_IN_FAILED)

            if self.settings.sign_in_requires_activation and not user.is_activated:
                logger.info("Sign in rejected: account not activated", extra={"user_id": str(user.id)})
                raise Unauthorized(SIGN_IN_FAILED)

            token = self.issuer.issue(PublicUser.model_validate(user))
            await tx.commit()

        logger.info("User signed in", extra={"user_id": str(user.id)})
        return token

    async def activate(self, email_address: str, token_id: str) -> str:
        """
        Consume an activation token and mark the account active.

        Raises:
            NotFound: No account for the email address
            InvalidInput: Token unknown or issued to another account
        """
        async with self.unit_of_work.transaction() as tx:
            user = await self._require_user(tx, email_address)
            await self._consume_token(
                tx,
                user,
                token_id,
                "Your activation token is invalid. Please re-check your activation link!",
            )

            user.is_activated = True
            user = await tx.save(user)

            await self.notifier.send(
                templates.welcome_email(self.settings, user.given_name, user.email_address)
            )
            await tx.commit()

        logger.info("User activated", extra={"user_id": str(user.id)})
        return ACTIVATED

    async def forget_password(self, email_address: str) -> str:
        """
        Issue a recovery token and mail its link.

        Raises:
            NotFound: No account for the email address
        """
        async with self.unit_of_work.transaction() as tx:
            user = await self._require_user(tx, email_address)

            if self.settings.revoke_outstanding_tokens:
                revoked = await tx.remove_where(VerificationToken, user_id=user.id)
                if revoked:
                    logger.info(
                        "Revoked outstanding tokens",
                        extra={"user_id": str(user.id), "count": revoked},
                    )

            token = await tx.save(VerificationToken(user_id=user.id))

            await self.notifier.send(
                templates.recovery_email(self.settings, user.given_name, user.email_address, str(token.id))
            )
            await tx.commit()

        logger.info("Recovery requested", extra={"user_id": str(user.id)})
        return RECOVERY_SENT

    async def recover(
        self,
        email_address: str,
        token_id: str,
        password: str,
        password_confirmation: str,
    ) -> str:
        """
        Consume a recovery token and replace the password.

        Raises:
            NotFound: No account for the email address
            InvalidInput: Token unknown, issued to another account, or mismatched confirmation
        """
        async with self.unit_of_work.transaction() as tx:
            user = await self._require_user(tx, email_address)
            await self._consume_token(
                tx,
                user,
                token_id,
                "Your recovery token is invalid. Please re-check your recovery link!",
            )

            if password != password_confirmation:
                raise InvalidInput(PASSWORD_MISMATCH)

            user.password_hash = self.hasher.hash(password)
            user = await tx.save(user)
            await tx.commit()

        logger.info("User recovered", extra={"user_id": str(user.id)})
        return RECOVERED

    async def _require_user(self, tx: Transaction, email_address: str) -> User:
        user = await tx.find_one(User, email_address=normalize_email(email_address))
        if user is None:
            raise NotFound(f"There is no account registered with email address {email_address}.")
        return user

    async def _consume_token(
        self,
        tx: Transaction,
        user: User,
        token_id: str,
        message: str,
    ) -> None:
        """
        Lock, check and delete a token belonging to ``user``.

        The delete must hit exactly one row; a concurrent consumer that got
        there first leaves nothing to delete and the token counts as invalid.
        """
        token_uuid = _parse_token_id(token_id)
        token = None
        if token_uuid is not None:
            token = await tx.find_one(VerificationToken, for_update=True, id=token_uuid)

        if token is None or not token.belongs_to(user.id):
            logger.warning("Invalid verification token", extra={"user_id": str(user.id)})
            raise InvalidInput(message)

        if await tx.remove_where(VerificationToken, id=token.id) != 1:
            logger.warning("Verification token already consumed", extra={"user_id": str(user.id)})
            raise InvalidInput(message)
