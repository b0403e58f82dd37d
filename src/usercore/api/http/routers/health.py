"""Health check endpoint for monitoring service availability."""

from fastapi import APIRouter

from usercore import __version__

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe; does not check dependencies."""
    return {"status": "healthy", "service": "usercore", "version": __version__}
