"""Entities organised by business concept.

Each entity package colocates:
- entity.py: Domain model and its request/response shapes
- table.py: Database persistence model
- repository.py: Storage contract
- memory.py / sql.py: Storage implementations
"""

from .core.user import (
    InMemoryUserRepository,
    SqlUserRepository,
    User,
    UserRepository,
    UserTable,
)

__all__ = [
    "User",
    "UserTable",
    "UserRepository",
    "InMemoryUserRepository",
    "SqlUserRepository",
]
