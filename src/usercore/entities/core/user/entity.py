"""User domain entity and its request/response shapes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from usercore.entities.core._base import Entity


class CreateUserRequest(BaseModel):
    """Payload for creating a user. Identifier and timestamps are server-assigned."""

    email: str = Field(description="User's email address")
    name: str = Field(description="User's display name")


class UpdateUserRequest(BaseModel):
    """Partial update payload; absent fields leave the stored value unchanged."""

    email: str | None = Field(default=None, description="New email address")
    name: str | None = Field(default=None, description="New display name")

    def is_empty(self) -> bool:
        return self.email is None and self.name is None


class User(Entity):
    """User entity representing a person in the system.

    The email is unique among all live users; storage backends enforce that.
    """

    email: str = Field(description="User's email address")
    name: str = Field(description="User's display name")

    def apply(self, update: UpdateUserRequest) -> None:
        """Apply the fields present in ``update`` and bump ``updated_at``."""
        if update.email is not None:
            self.email = update.email
        if update.name is not None:
            self.name = update.name
        self.touch()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.email == other.email
            and self.name == other.name
            and self.created_at == other.created_at
            and self.updated_at == other.updated_at
        )

    def __hash__(self) -> int:
        return hash((self.id, self.email, self.name))


class UserResponse(BaseModel):
    """Read-only projection of a user."""

    id: str
    email: str
    name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserListResponse(BaseModel):
    """Read-only projection of a list of users."""

    users: list[UserResponse]
    total: int

    @classmethod
    def from_users(cls, users: list[User]) -> "UserListResponse":
        items = [UserResponse.from_user(user) for user in users]
        return cls(users=items, total=len(items))
