import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, require_admin
from trucktrack.db.session import get_db
from trucktrack.models.delivery import DeliveryPriority, DeliveryStatus
from trucktrack.schemas.delivery import (
    DeliveriesListResponse,
    DeliveryAssignRequest,
    DeliveryCreate,
    DeliveryResponse,
    DeliveryUpdate,
)
from trucktrack.services.deliveries_service import (
    assign_delivery,
    create_delivery,
    delete_delivery,
    get_delivery,
    list_deliveries,
    update_delivery,
)

router = APIRouter(prefix="/api/v1/deliveries", tags=["deliveries"])


@router.get("", response_model=DeliveriesListResponse, summary="List deliveries")
def list_deliveries_endpoint(
    db: Session = Depends(get_db),
    status_filter: DeliveryStatus | None = Query(default=None, alias="status"),
    driver_id: uuid.UUID | None = Query(default=None),
    priority: DeliveryPriority | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    _auth: AuthContext = Depends(require_admin),
) -> DeliveriesListResponse:
    items, total = list_deliveries(
        db,
        page=page,
        page_size=page_size,
        status_filter=status_filter,
        driver_id=driver_id,
        priority=priority,
    )
    return DeliveriesListResponse(
        items=[DeliveryResponse.model_validate(delivery) for delivery in items],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.post(
    "",
    response_model=DeliveryResponse,
    summary="Create delivery",
    status_code=status.HTTP_201_CREATED,
)
def create_delivery_endpoint(
    payload: DeliveryCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_admin),
) -> DeliveryResponse:
    return DeliveryResponse.model_validate(create_delivery(db, auth, payload))


@router.get("/{delivery_id}", response_model=DeliveryResponse, summary="Get delivery")
def get_delivery_endpoint(
    delivery_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> DeliveryResponse:
    return DeliveryResponse.model_validate(get_delivery(db, delivery_id))


@router.patch("/{delivery_id}", response_model=DeliveryResponse, summary="Update delivery")
def update_delivery_endpoint(
    delivery_id: str,
    payload: DeliveryUpdate,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> DeliveryResponse:
    return DeliveryResponse.model_validate(update_delivery(db, delivery_id, payload))


@router.post(
    "/{delivery_id}/assign",
    response_model=DeliveryResponse,
    summary="Assign a driver (and vehicle)",
)
def assign_delivery_endpoint(
    delivery_id: str,
    payload: DeliveryAssignRequest,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> DeliveryResponse:
    return DeliveryResponse.model_validate(assign_delivery(db, delivery_id, payload))


@router.delete(
    "/{delivery_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete delivery",
)
def delete_delivery_endpoint(
    delivery_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> Response:
    delete_delivery(db, delivery_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
