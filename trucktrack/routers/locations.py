from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, require_admin, require_any_user
from trucktrack.db.session import get_db
from trucktrack.models.location import LocationType
from trucktrack.schemas.location import (
    LocationCreate,
    LocationResponse,
    LocationsListResponse,
    LocationUpdate,
)
from trucktrack.services.locations_service import (
    create_location,
    delete_location,
    get_location,
    list_locations,
    update_location,
)

router = APIRouter(prefix="/api/v1/locations", tags=["locations"])


@router.get("", response_model=LocationsListResponse, summary="Saved locations")
def list_locations_endpoint(
    type_filter: LocationType | None = Query(default=None, alias="type"),
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_any_user),
) -> LocationsListResponse:
    return LocationsListResponse(
        items=[
            LocationResponse.model_validate(location)
            for location in list_locations(db, type_filter=type_filter)
        ]
    )


@router.post(
    "",
    response_model=LocationResponse,
    summary="Save location",
    status_code=status.HTTP_201_CREATED,
)
def create_location_endpoint(
    payload: LocationCreate,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> LocationResponse:
    return LocationResponse.model_validate(create_location(db, payload))


@router.get("/{location_id}", response_model=LocationResponse, summary="Get location")
def get_location_endpoint(
    location_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_any_user),
) -> LocationResponse:
    return LocationResponse.model_validate(get_location(db, location_id))


@router.patch("/{location_id}", response_model=LocationResponse, summary="Update location")
def update_location_endpoint(
    location_id: str,
    payload: LocationUpdate,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> LocationResponse:
    return LocationResponse.model_validate(update_location(db, location_id, payload))


@router.delete(
    "/{location_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete location",
)
def delete_location_endpoint(
    location_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> Response:
    delete_location(db, location_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
