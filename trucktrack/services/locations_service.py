import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from trucktrack.models.common import now_utc
from trucktrack.models.location import Location, LocationType
from trucktrack.observability import log_event
from trucktrack.schemas.location import LocationCreate, LocationUpdate
from trucktrack.services.common import apply_changes, resolve_uuid


def get_location(db: Session, location_id: str | uuid.UUID) -> Location:
    location = db.get(Location, resolve_uuid(location_id, "Location not found"))
    if location is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return location


def list_locations(db: Session, *, type_filter: LocationType | None = None) -> list[Location]:
    stmt = select(Location)
    if type_filter:
        stmt = stmt.where(Location.type == type_filter.value)
    return list(
        db.scalars(stmt.order_by(Location.frequently_visited.desc(), Location.name.asc()))
    )


def create_location(db: Session, payload: LocationCreate) -> Location:
    data = payload.model_dump(mode="json")
    data["created_at"] = now_utc()
    location = Location(**data)
    db.add(location)
    db.commit()
    db.refresh(location)
    log_event("location_created")
    return location


def update_location(db: Session, location_id: str, payload: LocationUpdate) -> Location:
    location = get_location(db, location_id)
    apply_changes(location, payload.model_dump(mode="json", exclude_unset=True))
    db.commit()
    db.refresh(location)
    return location


def delete_location(db: Session, location_id: str) -> None:
    location = get_location(db, location_id)
    db.delete(location)
    db.commit()
    log_event("location_deleted")
