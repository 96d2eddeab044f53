"""
Liveness check procedure.
"""

from datetime import datetime, timezone
from fastapi import APIRouter, status

from app.schemas.translation_job import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/healthcheck", status_code=status.HTTP_200_OK, response_model=HealthResponse)
def healthcheck() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat()
    )
