from loguru import logger

from usercore.core.errors import InternalError, UserCoreError, UserNotFoundError
from usercore.core.services.user.validation import validate_create, validate_update
from usercore.entities.core.user.entity import (
    CreateUserRequest,
    UpdateUserRequest,
    UserListResponse,
    UserResponse,
)
from usercore.entities.core.user.repository import UserRepository


class UserService:
    """Validates requests, delegates to a storage backend and projects results.

    Holds no mutable state of its own, so one instance can serve any number of
    concurrent callers.
    """

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def create_user(self, request: CreateUserRequest) -> UserResponse:
        """Create a user.

        Args:
            request: Email and name of the new user

        Returns:
            Projection of the stored user
        """
        validate_create(request)
        try:
            user = await self._repository.create(request)
        except UserCoreError as e:
            logger.warning("User creation rejected: {}", e)
            raise
        except Exception as e:
            raise self._internal_error("create_user", e) from e

        logger.info("Created user {}", user.id)
        return UserResponse.from_user(user)

    async def get_user(self, user_id: str) -> UserResponse:
        """Fetch a user by id; a missing user is an error at this layer."""
        try:
            user = await self._repository.find_by_id(user_id)
        except UserCoreError:
            raise
        except Exception as e:
            raise self._internal_error("get_user", e) from e

        if user is None:
            raise UserNotFoundError(user_id)
        return UserResponse.from_user(user)

    async def list_users(self) -> UserListResponse:
        try:
            users = await self._repository.find_all()
        except UserCoreError:
            raise
        except Exception as e:
            raise self._internal_error("list_users", e) from e
        return UserListResponse.from_users(users)

    async def update_user(self, user_id: str, request: UpdateUserRequest) -> UserResponse:
        """Apply a partial update.

        Args:
            user_id: Identifier of the user to modify
            request: Fields to change; at least one must be present

        Returns:
            Projection of the updated user
        """
        validate_update(request)
        try:
            user = await self._repository.update(user_id, request)
        except UserCoreError as e:
            logger.warning("Update of user {} rejected: {}", user_id, e)
            raise
        except Exception as e:
            raise self._internal_error("update_user", e) from e

        logger.info("Updated user {}", user_id)
        return UserResponse.from_user(user)

    async def delete_user(self, user_id: str) -> None:
        try:
            await self._repository.delete(user_id)
        except UserCoreError as e:
            logger.warning("Deletion of user {} rejected: {}", user_id, e)
            raise
        except Exception as e:
            raise self._internal_error("delete_user", e) from e

        logger.info("Deleted user {}", user_id)

    @staticmethod
    def _internal_error(operation: str, error: Exception) -> InternalError:
        logger.error("Unexpected error during {}: {}", operation, error)
        return InternalError(f"{operation} failed unexpectedly: {error}")
