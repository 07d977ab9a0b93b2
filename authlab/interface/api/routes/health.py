"""Health check routes."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from authlab.config import Settings
from authlab.domain.service import IdentityObserver

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str
    observer_active: bool
    has_identity: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings], observer: FromDishka[IdentityObserver]
) -> HealthResponse:
    """Basic health check endpoint.

    A provider that never reports a session leaves ``has_identity`` false;
    that is a degraded state, not an error.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(),
        version="0.1.0",
        git_sha=settings.git_sha,
        observer_active=observer.is_active,
        has_identity=observer.current_identity() is not None,
    )
