from fastapi import APIRouter, Depends, Header, Response
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, require_admin, require_driver
from trucktrack.db.session import get_db
from trucktrack.schemas.dashboard import AdminDashboardResponse, DriverDashboardResponse
from trucktrack.services.dashboard_service import (
    build_admin_dashboard,
    build_driver_dashboard,
    build_etag,
    etag_matches,
)

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])

DASHBOARD_CACHE_CONTROL_VALUE = "private, no-cache"

ETAG_RESPONSE_HEADER = {
    "ETag": {
        "description": "Entity tag representing the current dashboard payload",
        "schema": {"type": "string"},
    }
}

CACHE_CONTROL_HEADER = {
    "Cache-Control": {
        "description": "Clients revalidate with If-None-Match on every poll",
        "schema": {"type": "string"},
    }
}


@router.get(
    "/admin",
    response_model=AdminDashboardResponse,
    summary="Admin dashboard",
    responses={
        200: {"headers": {**ETAG_RESPONSE_HEADER, **CACHE_CONTROL_HEADER}},
        304: {
            "description": "Not Modified",
            "headers": {**ETAG_RESPONSE_HEADER, **CACHE_CONTROL_HEADER},
        },
    },
)
def admin_dashboard_endpoint(
    response: Response,
    db: Session = Depends(get_db),
    if_none_match: str | None = Header(default=None, alias="If-None-Match"),
    _auth: AuthContext = Depends(require_admin),
) -> AdminDashboardResponse | Response:
    payload = build_admin_dashboard(db)
    etag = build_etag(payload)
    response.headers["ETag"] = etag
    response.headers["Cache-Control"] = DASHBOARD_CACHE_CONTROL_VALUE

    if etag_matches(if_none_match, etag):
        response.status_code = 304
        return response

    return payload


@router.get("/driver", response_model=DriverDashboardResponse, summary="Driver dashboard")
def driver_dashboard_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_driver),
) -> DriverDashboardResponse:
    return build_driver_dashboard(db, auth)
