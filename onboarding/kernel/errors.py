"""
Error taxonomy for the identity workflow.

Every failure raised by the kernel is an ``IdentityError``. The HTTP layer maps
``code`` to a status; the kernel itself knows nothing about transport.
"""


class IdentityError(Exception):
    """Base class for identity workflow failures."""

    code = "identity_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(IdentityError):
    """Malformed or inconsistent input (bad email, mismatched confirmation, bad token)."""

    code = "invalid_input"


class Conflict(IdentityError):
    """A uniqueness rule would be violated."""

    code = "conflict"


class NotFound(IdentityError):
    """The referenced account does not exist."""

    code = "not_found"


class Unauthorized(IdentityError):
    """Credential check failed."""

    code = "unauthorized"


class PersistenceError(IdentityError):
    """Underlying storage failed."""

    code = "persistence_error"


class UniqueViolation(PersistenceError):
    """Storage rejected a write because of a unique constraint."""

    code = "unique_violation"


class NotificationError(IdentityError):
    """Outbound email could not be delivered."""

    code = "notification_error"
