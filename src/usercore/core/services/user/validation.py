"""Business rules for user payloads.

Pure functions; each raises on the first rule a value breaks. Lengths are
counted in UTF-8 bytes.
"""

from usercore.core.errors import FieldValidationError, InvalidInputError
from usercore.entities.core.user.entity import CreateUserRequest, UpdateUserRequest

MAX_EMAIL_LENGTH = 254
MAX_NAME_LENGTH = 100


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def validate_email(email: str) -> None:
    if not email:
        raise FieldValidationError("email", "Email cannot be empty")
    if "@" not in email:
        raise FieldValidationError("email", "Invalid email format")
    if _byte_length(email) > MAX_EMAIL_LENGTH:
        raise FieldValidationError("email", "Email too long")


def validate_name(name: str) -> None:
    if not name:
        raise FieldValidationError("name", "Name cannot be empty")
    if _byte_length(name) > MAX_NAME_LENGTH:
        raise FieldValidationError("name", "Name too long")
    if not name.strip():
        raise FieldValidationError("name", "Name cannot be only whitespace")


def validate_create(request: CreateUserRequest) -> None:
    validate_email(request.email)
    validate_name(request.name)


def validate_update(request: UpdateUserRequest) -> None:
    """Require at least one field, then check only the fields present."""
    if request.is_empty():
        raise InvalidInputError("At least one field must be provided for update")
    if request.email is not None:
        validate_email(request.email)
    if request.name is not None:
        validate_name(request.name)
