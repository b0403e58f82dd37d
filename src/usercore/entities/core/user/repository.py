"""Storage contract for users.

Any backing store usable by :class:`~usercore.core.services.user.UserService`
implements :class:`UserRepository`. Implementations must behave identically:
absence on lookups is ``None`` rather than an error, the email uniqueness
invariant holds atomically, and every returned user is an independent copy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from usercore.entities.core.user.entity import (
    CreateUserRequest,
    UpdateUserRequest,
    User,
)


class UserRepository(ABC):
    """Abstract interface for user storage backends."""

    @abstractmethod
    async def create(self, request: CreateUserRequest) -> User:
        """Persist a new user.

        Args:
            request: Email and name of the new user

        Returns:
            The stored user with its generated id and timestamps

        Raises:
            UserAlreadyExistsError: A live user already has this email
            StorageError: The backing store failed
        """
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> User | None:
        """Look up a user by identifier.

        Returns:
            The user, or None if no such user exists
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> User | None:
        """Look up a user by exact email.

        Returns:
            The user, or None if no user owns the email
        """
        pass

    @abstractmethod
    async def find_all(self) -> list[User]:
        """Return a consistent snapshot of all live users."""
        pass

    @abstractmethod
    async def update(self, user_id: str, request: UpdateUserRequest) -> User:
        """Apply the present fields of ``request`` to a user.

        Args:
            user_id: Identifier of the user to modify
            request: Fields to change; absent fields are left untouched

        Returns:
            The updated user with an advanced ``updated_at``

        Raises:
            UserNotFoundError: No user has this identifier
            UserAlreadyExistsError: The new email belongs to a different user;
                the target is left unmodified
            StorageError: The backing store failed
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """Permanently remove a user.

        Raises:
            UserNotFoundError: No user has this identifier
            StorageError: The backing store failed
        """
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check whether a live user owns the email."""
        pass
