from .user_management import UserService
from .validation import (
    validate_create,
    validate_email,
    validate_name,
    validate_update,
)

__all__ = [
    "UserService",
    "validate_create",
    "validate_email",
    "validate_name",
    "validate_update",
]
