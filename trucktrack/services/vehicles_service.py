import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from trucktrack.models.common import now_utc
from trucktrack.models.user import User
from trucktrack.models.vehicle import Vehicle, VehicleStatus
from trucktrack.observability import log_event
from trucktrack.schemas.vehicle import VehicleCreate, VehicleUpdate
from trucktrack.services.common import apply_changes, paginate, resolve_uuid
from trucktrack.services.drivers_service import get_driver, link_vehicle


def get_vehicle(db: Session, vehicle_id: str | uuid.UUID) -> Vehicle:
    vehicle = db.get(Vehicle, resolve_uuid(vehicle_id, "Vehicle not found"))
    if vehicle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
    return vehicle


def _ensure_registration_available(
    db: Session, registration_number: str, *, exclude: Vehicle | None = None
) -> None:
    existing = db.scalar(
        select(Vehicle).where(Vehicle.registration_number == registration_number)
    )
    if existing is not None and existing is not exclude:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Registration number already exists",
        )


def list_vehicles(
    db: Session,
    *,
    page: int,
    page_size: int,
    status_filter: VehicleStatus | None = None,
) -> tuple[list[Vehicle], int]:
    stmt = select(Vehicle)
    if status_filter:
        stmt = stmt.where(Vehicle.status == status_filter.value)
    return paginate(db, stmt.order_by(Vehicle.registration_number.asc()), page, page_size)


def list_all_vehicles(db: Session) -> list[Vehicle]:
    return list(db.scalars(select(Vehicle).order_by(Vehicle.created_at.asc())))


def create_vehicle(db: Session, payload: VehicleCreate) -> Vehicle:
    _ensure_registration_available(db, payload.registration_number)

    data = payload.model_dump(mode="json")
    now = now_utc()
    vehicle = Vehicle(
        registration_number=payload.registration_number,
        type=payload.type,
        capacity=data["capacity"],
        status=payload.status.value,
        current_location=data["current_location"],
        maintenance_records=data["maintenance_records"],
        fuel_efficiency_kml=payload.fuel_efficiency_kml,
        last_serviced=payload.last_serviced,
        created_at=now,
        updated_at=now,
    )
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    log_event("vehicle_created")
    return vehicle


def update_vehicle(db: Session, vehicle_id: str, payload: VehicleUpdate) -> Vehicle:
    vehicle = get_vehicle(db, vehicle_id)
    changes = payload.model_dump(exclude_unset=True)
    json_changes = payload.model_dump(mode="json", exclude_unset=True)

    if changes.get("registration_number"):
        _ensure_registration_available(db, changes["registration_number"], exclude=vehicle)
    if changes.get("status") is not None:
        changes["status"] = VehicleStatus(changes["status"]).value
    for field in ("capacity", "current_location", "maintenance_records"):
        if field in changes:
            changes[field] = json_changes[field]

    apply_changes(vehicle, changes)
    db.commit()
    db.refresh(vehicle)
    log_event("vehicle_updated")
    return vehicle


def delete_vehicle(db: Session, vehicle_id: str) -> None:
    vehicle = get_vehicle(db, vehicle_id)
    for driver in db.scalars(select(User).where(User.assigned_vehicle_id == vehicle.id)):
        driver.assigned_vehicle_id = None
    db.delete(vehicle)
    db.commit()
    log_event("vehicle_deleted")


def assign_driver(db: Session, vehicle_id: str, driver_id: uuid.UUID | None) -> Vehicle:
    vehicle = get_vehicle(db, vehicle_id)
    driver = get_driver(db, driver_id) if driver_id is not None else None
    link_vehicle(db, vehicle, driver)
    db.commit()
    db.refresh(vehicle)
    log_event(
        "vehicle_driver_assigned",
        driver_id=str(driver_id) if driver_id else None,
    )
    return vehicle
