"""
Domain exceptions - Semantic error types for the account and report lifecycle.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The API boundary maps each type to a status code and a stable message.
"""


class LifecycleError(Exception):
    """Base class for lifecycle domain errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LifecycleError):
    """Malformed or missing input."""

    pass


class ConflictError(LifecycleError):
    """Duplicate unique key (e.g. an email that is already registered)."""

    pass


class AuthError(LifecycleError):
    """Authentication refused."""

    pass


class InvalidCredentials(AuthError):
    """
    Unknown email or password mismatch.

    Both cases share this type and message so callers cannot tell
    which emails are registered.
    """

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class AccountBlocked(AuthError):
    """Credentials are valid but the account is blocked."""

    def __init__(self) -> None:
        super().__init__("Your account is on hold")


class NotFoundError(LifecycleError):
    """No matching record."""

    pass


class StorageError(LifecycleError):
    """Underlying store unreachable, timed out or failed."""

    pass
