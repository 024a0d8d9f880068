from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, require_admin
from trucktrack.db.session import get_db
from trucktrack.models.user import DriverStatus
from trucktrack.schemas.driver import DriverCreate, DriverResponse, DriversListResponse, DriverUpdate
from trucktrack.services.drivers_service import (
    create_driver,
    delete_driver,
    get_driver,
    list_drivers,
    update_driver,
)

router = APIRouter(prefix="/api/v1/drivers", tags=["drivers"])


@router.get("", response_model=DriversListResponse, summary="List drivers")
def list_drivers_endpoint(
    db: Session = Depends(get_db),
    status_filter: DriverStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    _auth: AuthContext = Depends(require_admin),
) -> DriversListResponse:
    items, total = list_drivers(
        db, page=page, page_size=page_size, status_filter=status_filter, search=search
    )
    return DriversListResponse(
        items=[DriverResponse.model_validate(driver) for driver in items],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.post(
    "",
    response_model=DriverResponse,
    summary="Create driver",
    status_code=status.HTTP_201_CREATED,
)
def create_driver_endpoint(
    payload: DriverCreate,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> DriverResponse:
    return DriverResponse.model_validate(create_driver(db, payload))


@router.get("/{driver_id}", response_model=DriverResponse, summary="Get driver")
def get_driver_endpoint(
    driver_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> DriverResponse:
    return DriverResponse.model_validate(get_driver(db, driver_id))


@router.patch("/{driver_id}", response_model=DriverResponse, summary="Update driver")
def update_driver_endpoint(
    driver_id: str,
    payload: DriverUpdate,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> DriverResponse:
    return DriverResponse.model_validate(update_driver(db, driver_id, payload))


@router.delete(
    "/{driver_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete driver",
)
def delete_driver_endpoint(
    driver_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> Response:
    delete_driver(db, driver_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
