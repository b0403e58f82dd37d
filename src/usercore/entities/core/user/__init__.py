"""User entity module.

This module contains all User-related classes organized by responsibility:
- User and its request/response shapes: Domain model
- UserTable: Database persistence model
- UserRepository: Storage contract
- InMemoryUserRepository / SqlUserRepository: Storage implementations
"""

from .entity import (
    CreateUserRequest,
    UpdateUserRequest,
    User,
    UserListResponse,
    UserResponse,
)
from .memory import InMemoryUserRepository
from .repository import UserRepository
from .sql import SqlUserRepository
from .table import UserTable

__all__ = [
    "User",
    "CreateUserRequest",
    "UpdateUserRequest",
    "UserResponse",
    "UserListResponse",
    "UserTable",
    "UserRepository",
    "InMemoryUserRepository",
    "SqlUserRepository",
]
