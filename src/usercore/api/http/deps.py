"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import Request

from usercore.api.http.app_data import ApplicationDependencies
from usercore.core.services import UserService


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_user_service(request: Request) -> UserService:
    """Get the shared user service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.user_service
