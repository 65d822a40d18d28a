"""Health check route for the service2 API."""

from fastapi import APIRouter

from service2.utils.constants import SERVICE

router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Liveness check; does not touch downstream services."""
    return {"status": "healthy", "service": SERVICE}
