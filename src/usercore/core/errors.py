"""Error taxonomy for the user management core.

Every error raised by the validation rules, the storage backends or the
service derives from :class:`UserCoreError`. Each carries a stable ``error``
code plus the structured context (identifier, email or field) needed to build
an actionable message at the transport layer.
"""

from __future__ import annotations


class UserCoreError(Exception):
    """Base class for all domain errors."""

    error: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UserNotFoundError(UserCoreError):
    """The referenced user does not exist."""

    error = "not_found"

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class UserAlreadyExistsError(UserCoreError):
    """Another live user already owns the email."""

    error = "conflict"

    def __init__(self, email: str) -> None:
        super().__init__(f"User with email '{email}' already exists")
        self.email = email


class FieldValidationError(UserCoreError):
    """A single field failed a business rule."""

    error = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Validation error: {field} - {message}")
        self.field = field
        self.reason = message


class InvalidInputError(UserCoreError):
    """The request as a whole has the wrong shape."""

    error = "invalid_input"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class StorageError(UserCoreError):
    """The backing store failed unexpectedly."""

    error = "database_error"


class InternalError(UserCoreError):
    """Unexpected condition inside the service."""

    error = "internal_error"
