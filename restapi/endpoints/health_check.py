"""Health check endpoint for monitoring application status."""

from fastapi import APIRouter, Request

from tracker.core import schemas

router = APIRouter(
    prefix="/health_check",
    tags=["services"],
    responses={200: {"description": "Service is healthy"}},
)


@router.get("/", response_model=schemas.HealthCheck)
async def health_check(request: Request) -> schemas.HealthCheck:
    """Check the health status of the service."""
    return schemas.HealthCheck(
        service_name=request.app.state.settings.SERVICE_NAME,
        status="healthy"
    )
