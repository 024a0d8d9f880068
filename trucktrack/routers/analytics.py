from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, require_admin
from trucktrack.db.session import get_db
from trucktrack.schemas.analytics import AnalyticsResponse
from trucktrack.services.analytics_service import build_report

router = APIRouter(prefix="/api/v1/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsResponse, summary="Delivery analytics")
def analytics_endpoint(
    time_range: str | None = Query(default=None),
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> AnalyticsResponse:
    return build_report(db, time_range)
