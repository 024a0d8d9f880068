from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, require_admin
from trucktrack.db.session import get_db
from trucktrack.models.vehicle import VehicleStatus
from trucktrack.schemas.vehicle import (
    VehicleAssignRequest,
    VehicleCreate,
    VehicleResponse,
    VehiclesListResponse,
    VehicleUpdate,
)
from trucktrack.services.vehicles_service import (
    assign_driver,
    create_vehicle,
    delete_vehicle,
    get_vehicle,
    list_vehicles,
    update_vehicle,
)

router = APIRouter(prefix="/api/v1/vehicles", tags=["vehicles"])


@router.get("", response_model=VehiclesListResponse, summary="List vehicles")
def list_vehicles_endpoint(
    db: Session = Depends(get_db),
    status_filter: VehicleStatus | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    _auth: AuthContext = Depends(require_admin),
) -> VehiclesListResponse:
    items, total = list_vehicles(db, page=page, page_size=page_size, status_filter=status_filter)
    return VehiclesListResponse(
        items=[VehicleResponse.model_validate(vehicle) for vehicle in items],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.post(
    "",
    response_model=VehicleResponse,
    summary="Register vehicle",
    status_code=status.HTTP_201_CREATED,
)
def create_vehicle_endpoint(
    payload: VehicleCreate,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> VehicleResponse:
    return VehicleResponse.model_validate(create_vehicle(db, payload))


@router.get("/{vehicle_id}", response_model=VehicleResponse, summary="Get vehicle")
def get_vehicle_endpoint(
    vehicle_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> VehicleResponse:
    return VehicleResponse.model_validate(get_vehicle(db, vehicle_id))


@router.patch("/{vehicle_id}", response_model=VehicleResponse, summary="Update vehicle")
def update_vehicle_endpoint(
    vehicle_id: str,
    payload: VehicleUpdate,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> VehicleResponse:
    return VehicleResponse.model_validate(update_vehicle(db, vehicle_id, payload))


@router.post(
    "/{vehicle_id}/assign-driver",
    response_model=VehicleResponse,
    summary="Link or unlink the vehicle's driver",
)
def assign_driver_endpoint(
    vehicle_id: str,
    payload: VehicleAssignRequest,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> VehicleResponse:
    return VehicleResponse.model_validate(assign_driver(db, vehicle_id, payload.driver_id))


@router.delete(
    "/{vehicle_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete vehicle",
)
def delete_vehicle_endpoint(
    vehicle_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> Response:
    delete_vehicle(db, vehicle_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
