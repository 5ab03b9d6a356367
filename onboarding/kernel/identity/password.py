"""
Password hashing utilities using bcrypt.
"""

from typing import Optional

import bcrypt

from onboarding.config import get_settings

# Work factor used when none is configured
DEFAULT_BCRYPT_ROUNDS = 10


class PasswordHasher:
    """
    Salted one-way password hashing.

    The salt and cost factor are embedded in each digest, so ``verify`` needs
    nothing but the stored string. Comparison is delegated to
    ``bcrypt.checkpw``, which compares in constant time.
    """

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or get_settings().bcrypt_rounds or DEFAULT_BCRYPT_ROUNDS

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """
        Encode and truncate to 72 bytes.

        bcrypt only uses the first 72 bytes of a password; recent releases
        raise instead of truncating silently, so both hash and verify cut the
        input the same way.
        """
        return password.encode("utf-8")[:72]

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Digest string, e.g. ``$2b$10$...``
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(self._truncate_password(password), salt)
        return hashed.decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Plain text password to verify
            hashed_password: Stored digest

        Returns:
            True if password matches, False otherwise (including malformed digests)
        """
        try:
            return bcrypt.checkpw(
                self._truncate_password(plain_password),
                hashed_password.encode("utf-8"),
            )
        except ValueError:
            return False

    def needs_rehash(self, hashed_password: str) -> bool:
        """
        Check if a digest was produced with a different cost factor.

        Format: $2b$XX$... where XX is the rounds
        """
        parts = hashed_password.split("$")
        if len(parts) < 3 or not parts[2].isdigit():
            return True
        return int(parts[2]) != self.rounds


# Convenience functions
def hash_password(password: str) -> str:
    """Hash a password with the configured cost."""
    return PasswordHasher().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return PasswordHasher().verify(plain_password, hashed_password)
