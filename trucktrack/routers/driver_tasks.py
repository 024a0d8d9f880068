from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, require_driver
from trucktrack.db.session import get_db
from trucktrack.schemas.delivery import DeliveryCompleteRequest, DeliveryResponse
from trucktrack.schemas.location import LocationResponse, NavigationResponse
from trucktrack.services.deliveries_service import (
    complete_delivery,
    current_navigation_delivery,
    get_driver_delivery,
    list_driver_tasks,
    start_delivery,
)
from trucktrack.services.locations_service import list_locations

router = APIRouter(prefix="/api/v1/me", tags=["driver"])


@router.get("/deliveries", response_model=list[DeliveryResponse], summary="My delivery tasks")
def my_deliveries_endpoint(
    tab: str = Query(default="all"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_driver),
) -> list[DeliveryResponse]:
    return [DeliveryResponse.model_validate(d) for d in list_driver_tasks(db, auth, tab)]


@router.get("/deliveries/{delivery_id}", response_model=DeliveryResponse, summary="My delivery")
def my_delivery_endpoint(
    delivery_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_driver),
) -> DeliveryResponse:
    return DeliveryResponse.model_validate(get_driver_delivery(db, auth, delivery_id))


@router.post(
    "/deliveries/{delivery_id}/start",
    response_model=DeliveryResponse,
    summary="Start a delivery",
)
def start_delivery_endpoint(
    delivery_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_driver),
) -> DeliveryResponse:
    return DeliveryResponse.model_validate(start_delivery(db, auth, delivery_id))


@router.post(
    "/deliveries/{delivery_id}/complete",
    response_model=DeliveryResponse,
    summary="Complete a delivery with proof",
)
def complete_delivery_endpoint(
    delivery_id: str,
    payload: DeliveryCompleteRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_driver),
) -> DeliveryResponse:
    return DeliveryResponse.model_validate(complete_delivery(db, auth, delivery_id, payload))


@router.get("/navigation", response_model=NavigationResponse, summary="Current route")
def navigation_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_driver),
) -> NavigationResponse:
    current = current_navigation_delivery(db, auth)
    return NavigationResponse(
        current_delivery=DeliveryResponse.model_validate(current) if current else None,
        recent_locations=[LocationResponse.model_validate(loc) for loc in list_locations(db)],
    )
