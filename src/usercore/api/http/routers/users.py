"""User API router with CRUD operations."""

import uuid
from typing import Any

from fastapi import APIRouter, Depends, status

from usercore.api.http.deps import get_user_service
from usercore.core.services import UserService
from usercore.entities.core.user import CreateUserRequest, UpdateUserRequest

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: CreateUserRequest,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    """Create a new user."""
    user = await service.create_user(payload)
    return {"success": True, "data": user.model_dump(mode="json")}


@router.get("")
async def list_users(
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    """List all users."""
    users = await service.list_users()
    return {"success": True, "data": users.model_dump(mode="json")}


@router.get("/{user_id}")
async def get_user(
    user_id: uuid.UUID,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    """Get a user by ID."""
    user = await service.get_user(str(user_id))
    return {"success": True, "data": user.model_dump(mode="json")}


@router.put("/{user_id}")
async def update_user(
    user_id: uuid.UUID,
    payload: UpdateUserRequest,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    """Update a user; only the fields present in the body change."""
    user = await service.update_user(str(user_id), payload)
    return {"success": True, "data": user.model_dump(mode="json")}


@router.delete("/{user_id}")
async def delete_user(
    user_id: uuid.UUID,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    """Delete a user."""
    await service.delete_user(str(user_id))
    return {"success": True, "message": "User deleted successfully"}
