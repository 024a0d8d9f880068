import uuid

from fastapi import HTTPException, status
from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from trucktrack.models.common import now_utc
from trucktrack.models.delivery import Delivery, DeliveryStatus
from trucktrack.models.user import DriverStatus, User, UserRole, empty_performance_metrics
from trucktrack.models.vehicle import Vehicle
from trucktrack.observability import log_event
from trucktrack.schemas.driver import DriverCreate, DriverUpdate
from trucktrack.services.auth_service import ensure_email_available
from trucktrack.services.common import apply_changes, like_needle, paginate, resolve_uuid

ACTIVE_DELIVERY_STATUSES = (DeliveryStatus.ASSIGNED.value, DeliveryStatus.IN_PROGRESS.value)


def get_driver(db: Session, driver_id: str | uuid.UUID) -> User:
    driver = db.get(User, resolve_uuid(driver_id, "Driver not found"))
    if driver is None or driver.role != UserRole.DRIVER.value:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Driver not found")
    return driver


def list_drivers(
    db: Session,
    *,
    page: int,
    page_size: int,
    status_filter: DriverStatus | None = None,
    search: str | None = None,
) -> tuple[list[User], int]:
    filters = [User.role == UserRole.DRIVER.value]
    if status_filter:
        filters.append(User.status == status_filter.value)
    if search and search.strip():
        needle = like_needle(search)
        filters.append(
            or_(
                func.lower(User.name).like(needle),
                func.lower(func.coalesce(User.email, "")).like(needle),
                func.lower(func.coalesce(User.phone, "")).like(needle),
                func.lower(func.coalesce(User.license_number, "")).like(needle),
            )
        )
    stmt = select(User).where(and_(*filters)).order_by(User.name.asc(), User.created_at.asc())
    return paginate(db, stmt, page, page_size)


def list_all_drivers(db: Session) -> list[User]:
    return list(
        db.scalars(
            select(User).where(User.role == UserRole.DRIVER.value).order_by(User.name.asc())
        )
    )


def release_vehicle(db: Session, driver: User) -> None:
    """Drop the driver's vehicle link along with the vehicle's back-reference."""
    if driver.assigned_vehicle_id is None:
        return
    vehicle = db.get(Vehicle, driver.assigned_vehicle_id)
    if vehicle is not None and vehicle.assigned_driver_id == driver.id:
        vehicle.assigned_driver_id = None
    driver.assigned_vehicle_id = None


def link_vehicle(db: Session, vehicle: Vehicle, driver: User | None) -> None:
    """Point vehicle and driver at each other.

    Whoever held the vehicle before loses it and the driver's previous
    vehicle is freed. Passing no driver just empties the vehicle.
    """
    if vehicle.assigned_driver_id is not None and (
        driver is None or vehicle.assigned_driver_id != driver.id
    ):
        previous = db.get(User, vehicle.assigned_driver_id)
        if previous is not None and previous.assigned_vehicle_id == vehicle.id:
            previous.assigned_vehicle_id = None

    if driver is None:
        vehicle.assigned_driver_id = None
        return

    if driver.assigned_vehicle_id != vehicle.id:
        release_vehicle(db, driver)
    driver.assigned_vehicle_id = vehicle.id
    vehicle.assigned_driver_id = driver.id


def _metrics_with_rating(current: dict | None, rating: float | None) -> dict:
    metrics = {**empty_performance_metrics(), **(current or {})}
    if rating is not None:
        metrics["average_rating"] = rating
    return metrics


def create_driver(db: Session, payload: DriverCreate) -> User:
    ensure_email_available(db, payload.email)
    vehicle = None
    if payload.assigned_vehicle_id is not None:
        vehicle = _get_vehicle(db, payload.assigned_vehicle_id)

    now = now_utc()
    driver = User(
        name=payload.name,
        email=payload.email.lower() if payload.email else None,
        phone=payload.phone,
        role=UserRole.DRIVER.value,
        license_number=payload.license_number,
        license_expiry=payload.license_expiry,
        status=payload.status.value,
        address=payload.address,
        joining_date=payload.joining_date or now,
        performance_metrics=_metrics_with_rating(None, payload.rating),
        created_at=now,
        updated_at=now,
    )
    db.add(driver)
    if vehicle is not None:
        db.flush()
        link_vehicle(db, vehicle, driver)
    db.commit()
    db.refresh(driver)
    log_event("driver_created", driver_id=str(driver.id))
    return driver


def update_driver(db: Session, driver_id: str, payload: DriverUpdate) -> User:
    driver = get_driver(db, driver_id)
    changes = payload.model_dump(exclude_unset=True)

    if "email" in changes:
        email = changes["email"].strip().lower() if changes["email"] else None
        ensure_email_available(db, email, exclude=driver)
        changes["email"] = email
    if "assigned_vehicle_id" in changes:
        vehicle_id = changes.pop("assigned_vehicle_id")
        if vehicle_id is None:
            release_vehicle(db, driver)
        else:
            link_vehicle(db, _get_vehicle(db, vehicle_id), driver)
    if "status" in changes and changes["status"] is not None:
        changes["status"] = DriverStatus(changes["status"]).value

    rating = changes.pop("rating", None)
    metrics = changes.pop("performance_metrics", None)
    if metrics is not None or rating is not None:
        driver.performance_metrics = _metrics_with_rating(
            metrics if metrics is not None else driver.performance_metrics, rating
        )

    apply_changes(driver, changes)
    db.commit()
    db.refresh(driver)
    log_event("driver_updated", driver_id=str(driver.id))
    return driver


def delete_driver(db: Session, driver_id: str) -> None:
    driver = get_driver(db, driver_id)
    deliveries = list(db.scalars(select(Delivery).where(Delivery.assigned_driver_id == driver.id)))
    if any(delivery.status in ACTIVE_DELIVERY_STATUSES for delivery in deliveries):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Driver has active deliveries",
        )

    # Pending and finished work goes back to the unassigned pool.
    for delivery in deliveries:
        delivery.assigned_driver_id = None
    release_vehicle(db, driver)
    for vehicle in db.scalars(select(Vehicle).where(Vehicle.assigned_driver_id == driver.id)):
        vehicle.assigned_driver_id = None
    db.delete(driver)
    db.commit()
    log_event("driver_deleted", driver_id=str(driver_id))


def _get_vehicle(db: Session, vehicle_id: uuid.UUID) -> Vehicle:
    vehicle = db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
    return vehicle
