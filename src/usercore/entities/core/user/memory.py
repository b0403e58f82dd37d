"""In-memory user storage guarded by a single reader/writer lock."""

from __future__ import annotations

from loguru import logger

from usercore.core.errors import UserAlreadyExistsError, UserNotFoundError
from usercore.core.storage.rw_lock import ReadWriteLock
from usercore.entities.core.user.entity import (
    CreateUserRequest,
    UpdateUserRequest,
    User,
)
from usercore.entities.core.user.repository import UserRepository


class InMemoryUserRepository(UserRepository):
    """Reference storage backend keeping users in a process-local map.

    Reads take the lock in shared mode; ``create``, ``update`` and ``delete``
    take it exclusively for their whole check-and-mutate sequence, so the
    email uniqueness check and the write that follows it are atomic. The
    stored objects never leave this class: callers always get deep copies.
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._ids_by_email: dict[str, str] = {}
        self._lock = ReadWriteLock()

    async def create(self, request: CreateUserRequest) -> User:
        async with self._lock.write():
            if request.email in self._ids_by_email:
                logger.debug("Rejecting create, email {} already taken", request.email)
                raise UserAlreadyExistsError(request.email)

            user = User(email=request.email, name=request.name)
            self._users[user.id] = user
            self._ids_by_email[user.email] = user.id
            logger.debug("Stored user {}", user.id)
            return user.model_copy(deep=True)

    async def find_by_id(self, user_id: str) -> User | None:
        async with self._lock.read():
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user is not None else None

    async def find_by_email(self, email: str) -> User | None:
        async with self._lock.read():
            user_id = self._ids_by_email.get(email)
            if user_id is None:
                return None
            return self._users[user_id].model_copy(deep=True)

    async def find_all(self) -> list[User]:
        async with self._lock.read():
            return [user.model_copy(deep=True) for user in self._users.values()]

    async def update(self, user_id: str, request: UpdateUserRequest) -> User:
        async with self._lock.write():
            if request.email is not None:
                owner = self._ids_by_email.get(request.email)
                if owner is not None and owner != user_id:
                    logger.debug(
                        "Rejecting update of {}, email {} owned by {}",
                        user_id,
                        request.email,
                        owner,
                    )
                    raise UserAlreadyExistsError(request.email)

            user = self._users.get(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            previous_email = user.email
            user.apply(request)
            if user.email != previous_email:
                del self._ids_by_email[previous_email]
                self._ids_by_email[user.email] = user.id
            return user.model_copy(deep=True)

    async def delete(self, user_id: str) -> None:
        async with self._lock.write():
            user = self._users.pop(user_id, None)
            if user is None:
                raise UserNotFoundError(user_id)
            del self._ids_by_email[user.email]
            logger.debug("Removed user {}", user_id)

    async def exists_by_email(self, email: str) -> bool:
        async with self._lock.read():
            return email in self._ids_by_email

    async def count(self) -> int:
        """Number of live users."""
        async with self._lock.read():
            return len(self._users)
