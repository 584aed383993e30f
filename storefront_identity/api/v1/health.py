"""Health check endpoint with in-memory store size."""

from fastapi import APIRouter

from storefront_identity.api.deps import Sessions
from storefront_identity.core.config import settings
from storefront_identity.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(sessions: Sessions) -> HealthResponse:
    """
    Return service health status and number of registered users.
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        users=sessions.store.count(),
    )
