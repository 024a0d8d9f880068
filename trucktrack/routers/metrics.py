from fastapi import APIRouter, Depends

from trucktrack.auth.dependencies import AuthContext, require_admin
from trucktrack.observability import metrics_store
from trucktrack.schemas.metrics import DeliveryFlowCounters, MetricsResponse

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("", summary="Observability metrics", response_model=MetricsResponse)
def metrics_endpoint(
    _auth: AuthContext = Depends(require_admin),
) -> MetricsResponse:
    """In-process counters and timings; admin only."""
    snapshot = metrics_store.snapshot()

    return MetricsResponse(
        counters=snapshot.counters or {},
        timings=snapshot.timings or {},
        deliveries=DeliveryFlowCounters.from_counters(snapshot.counters),
    )
