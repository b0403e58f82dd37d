"""Core services."""

from .database.db_session import DbSessionService
from .user.user_management import UserService

__all__ = ["DbSessionService", "UserService"]
