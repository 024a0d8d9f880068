from fastapi import APIRouter, Response, status

from trucktrack.db.session import SessionLocal
from trucktrack.schemas.health import HealthResponse, ReadinessDependency, ReadinessResponse
from trucktrack.services.readiness_service import (
    database_dependency_status,
    safe_dependency_status,
)

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    summary="Readiness check",
    response_model=ReadinessResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ReadinessResponse}},
)
def readiness(response: Response) -> ReadinessResponse:
    database_status = safe_dependency_status(
        "database", lambda: database_dependency_status(SessionLocal)
    )
    dependencies = [ReadinessDependency(name="database", status=database_status)]

    readiness_status = "ok" if all(dep.status == "ok" for dep in dependencies) else "degraded"
    if readiness_status != "ok":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status=readiness_status, dependencies=dependencies)
