import uuid
from datetime import datetime
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import Select, and_, select
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext
from trucktrack.models.common import as_utc, now_utc, parse_timestamp
from trucktrack.models.delivery import Delivery, DeliveryPriority, DeliveryStatus
from trucktrack.models.user import DriverStatus, User
from trucktrack.models.vehicle import Vehicle, VehicleStatus
from trucktrack.observability import log_event, metrics_store
from trucktrack.schemas.delivery import (
    DeliveryAssignRequest,
    DeliveryCompleteRequest,
    DeliveryCreate,
    DeliveryUpdate,
    DriverTaskTab,
)
from trucktrack.services.common import apply_changes, paginate, resolve_uuid
from trucktrack.services.drivers_service import get_driver
from trucktrack.services.state_machine import append_timeline_entry, transition_delivery_status
from trucktrack.services.vehicles_service import get_vehicle

_JSON_FIELDS = ("pickup", "dropoff", "customer", "cargo", "items")

TAB_STATUSES: dict[str, set[str]] = {
    "pending": {DeliveryStatus.PENDING.value},
    "in_progress": {DeliveryStatus.IN_PROGRESS.value},
    "completed": {DeliveryStatus.COMPLETED.value},
}


def get_delivery(db: Session, delivery_id: str | uuid.UUID) -> Delivery:
    delivery = db.get(Delivery, resolve_uuid(delivery_id, "Delivery not found"))
    if delivery is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Delivery not found")
    return delivery


def _ordered(stmt: Select[Any]) -> Select[Any]:
    return stmt.order_by(Delivery.scheduled_date.desc().nulls_last(), Delivery.created_at.desc())


def list_deliveries(
    db: Session,
    *,
    page: int,
    page_size: int,
    status_filter: DeliveryStatus | None = None,
    driver_id: uuid.UUID | None = None,
    priority: DeliveryPriority | None = None,
) -> tuple[list[Delivery], int]:
    filters: list[Any] = []
    if status_filter:
        filters.append(Delivery.status == status_filter.value)
    if driver_id:
        filters.append(Delivery.assigned_driver_id == driver_id)
    if priority:
        filters.append(Delivery.priority == priority.value)

    stmt = select(Delivery)
    if filters:
        stmt = stmt.where(and_(*filters))
    return paginate(db, _ordered(stmt), page, page_size)


def list_all_deliveries(db: Session, *, created_since: datetime | None = None) -> list[Delivery]:
    stmt = select(Delivery)
    if created_since is not None:
        stmt = stmt.where(Delivery.created_at >= created_since)
    return list(db.scalars(stmt.order_by(Delivery.created_at.asc())))


def list_driver_deliveries(db: Session, driver_id: uuid.UUID) -> list[Delivery]:
    stmt = select(Delivery).where(Delivery.assigned_driver_id == driver_id)
    return list(db.scalars(_ordered(stmt)))


def create_delivery(db: Session, auth: AuthContext, payload: DeliveryCreate) -> Delivery:
    if payload.assigned_driver_id is not None:
        get_driver(db, payload.assigned_driver_id)
    if payload.assigned_vehicle_id is not None:
        get_vehicle(db, payload.assigned_vehicle_id)

    data = payload.model_dump(mode="json")
    now = now_utc()
    delivery = Delivery(
        status=payload.status.value,
        priority=payload.priority.value,
        assigned_driver_id=payload.assigned_driver_id,
        assigned_vehicle_id=payload.assigned_vehicle_id,
        notes=payload.notes,
        document_ids=payload.document_ids,
        scheduled_date=payload.scheduled_date,
        created_by=auth.user_id,
        estimated_distance_km=payload.estimated_distance_km,
        estimated_duration_min=payload.estimated_duration_min,
        timeline=[],
        created_at=now,
        updated_at=now,
        **{field: data[field] for field in _JSON_FIELDS},
    )
    append_timeline_entry(delivery, delivery.status, "Delivery created", at=now)
    db.add(delivery)
    db.commit()
    db.refresh(delivery)

    metrics_store.increment("deliveries_created_total")
    log_event("delivery_created", delivery_id=str(delivery.id), user_id=auth.user_id)
    return delivery


def update_delivery(db: Session, delivery_id: str, payload: DeliveryUpdate) -> Delivery:
    delivery = get_delivery(db, delivery_id)
    changes = payload.model_dump(exclude_unset=True)
    json_changes = payload.model_dump(mode="json", exclude_unset=True)

    next_status = changes.pop("status", None)
    if changes.get("assigned_driver_id") is not None:
        get_driver(db, changes["assigned_driver_id"])
    if changes.get("assigned_vehicle_id") is not None:
        get_vehicle(db, changes["assigned_vehicle_id"])
    if changes.get("priority") is not None:
        changes["priority"] = DeliveryPriority(changes["priority"]).value
    for field in _JSON_FIELDS:
        if field in changes:
            changes[field] = json_changes[field]

    apply_changes(delivery, changes)
    if next_status is not None and transition_delivery_status(
        delivery, next_status, "Status updated"
    ):
        log_event(
            "delivery_status_changed",
            delivery_id=str(delivery.id),
            driver_id=_str_or_none(delivery.assigned_driver_id),
        )

    db.commit()
    db.refresh(delivery)
    return delivery


def delete_delivery(db: Session, delivery_id: str) -> None:
    delivery = get_delivery(db, delivery_id)
    db.delete(delivery)
    db.commit()
    log_event("delivery_deleted", delivery_id=str(delivery_id))


def assign_delivery(db: Session, delivery_id: str, payload: DeliveryAssignRequest) -> Delivery:
    delivery = get_delivery(db, delivery_id)
    driver = get_driver(db, payload.driver_id)
    vehicle_id = payload.vehicle_id or driver.assigned_vehicle_id
    if payload.vehicle_id is not None:
        get_vehicle(db, payload.vehicle_id)

    transition_delivery_status(delivery, DeliveryStatus.ASSIGNED, f"Assigned to {driver.name}")
    delivery.assigned_driver_id = driver.id
    delivery.assigned_vehicle_id = vehicle_id
    db.commit()
    db.refresh(delivery)

    metrics_store.increment("deliveries_assigned_total")
    log_event("delivery_assigned", delivery_id=str(delivery.id), driver_id=str(driver.id))
    return delivery


def _driver_uuid(auth: AuthContext) -> uuid.UUID:
    return resolve_uuid(auth.user_id, "Driver not found")


def get_driver_delivery(db: Session, auth: AuthContext, delivery_id: str) -> Delivery:
    delivery = get_delivery(db, delivery_id)
    if delivery.assigned_driver_id != _driver_uuid(auth):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Delivery not found")
    return delivery


def filter_by_tab(deliveries: list[Delivery], tab: DriverTaskTab | str) -> list[Delivery]:
    statuses = TAB_STATUSES.get(tab)
    if statuses is None:
        return list(deliveries)
    return [delivery for delivery in deliveries if delivery.status in statuses]


def list_driver_tasks(db: Session, auth: AuthContext, tab: DriverTaskTab | str) -> list[Delivery]:
    return filter_by_tab(list_driver_deliveries(db, _driver_uuid(auth)), tab)


def _set_fleet_status(
    db: Session,
    delivery: Delivery,
    driver_status: DriverStatus,
    vehicle_status: VehicleStatus,
) -> User | None:
    driver = db.get(User, delivery.assigned_driver_id) if delivery.assigned_driver_id else None
    if driver is not None:
        driver.status = driver_status.value
    if delivery.assigned_vehicle_id is not None:
        vehicle = db.get(Vehicle, delivery.assigned_vehicle_id)
        if vehicle is not None and vehicle.status != VehicleStatus.MAINTENANCE.value:
            vehicle.status = vehicle_status.value
    return driver


def start_delivery(db: Session, auth: AuthContext, delivery_id: str) -> Delivery:
    delivery = get_driver_delivery(db, auth, delivery_id)
    now = now_utc()
    transition_delivery_status(
        delivery, DeliveryStatus.IN_PROGRESS, "Delivery started", at=now, strict=True
    )
    delivery.start_time = now
    _set_fleet_status(db, delivery, DriverStatus.ON_DELIVERY, VehicleStatus.ON_DELIVERY)
    db.commit()
    db.refresh(delivery)

    log_event("delivery_started", delivery_id=str(delivery.id), driver_id=auth.user_id)
    return delivery


def _was_on_time(delivery: Delivery, completed_at: datetime) -> bool:
    window_end = parse_timestamp(((delivery.dropoff or {}).get("time_window") or {}).get("end"))
    return window_end is None or completed_at <= window_end


def _record_completion(driver: User, on_time: bool) -> None:
    metrics = dict(driver.performance_metrics or {})
    completed = int(metrics.get("deliveries_completed", 0))
    on_time_pct = float(metrics.get("on_time_percentage", 0.0))
    metrics["on_time_percentage"] = round(
        (on_time_pct * completed + (100.0 if on_time else 0.0)) / (completed + 1), 2
    )
    metrics["deliveries_completed"] = completed + 1
    metrics.setdefault("average_rating", 0.0)
    driver.performance_metrics = metrics


def complete_delivery(
    db: Session,
    auth: AuthContext,
    delivery_id: str,
    payload: DeliveryCompleteRequest,
) -> Delivery:
    delivery = get_driver_delivery(db, auth, delivery_id)
    now = now_utc()
    transition_delivery_status(
        delivery, DeliveryStatus.COMPLETED, payload.notes, at=now, strict=True
    )
    delivery.completion_time = now
    delivery.notes = payload.notes
    if payload.proof_of_delivery is not None:
        proof = payload.proof_of_delivery.model_dump(mode="json")
        proof["timestamp"] = proof["timestamp"] or now.isoformat()
        delivery.proof_of_delivery = proof

    driver = _set_fleet_status(db, delivery, DriverStatus.AVAILABLE, VehicleStatus.AVAILABLE)
    if driver is not None:
        _record_completion(driver, _was_on_time(delivery, now))
    db.commit()
    db.refresh(delivery)

    metrics_store.increment("deliveries_completed_total")
    log_event("delivery_completed", delivery_id=str(delivery.id), driver_id=auth.user_id)
    return delivery


def current_navigation_delivery(db: Session, auth: AuthContext) -> Delivery | None:
    return db.scalar(
        select(Delivery)
        .where(
            Delivery.assigned_driver_id == _driver_uuid(auth),
            Delivery.status == DeliveryStatus.IN_PROGRESS.value,
        )
        .order_by(Delivery.start_time.asc().nulls_last(), Delivery.created_at.asc())
        .limit(1)
    )


def completed_at(delivery: Delivery) -> datetime | None:
    """Timestamp of the timeline's ``completed`` entry, if any."""
    for entry in delivery.timeline or []:
        if entry.get("status") == DeliveryStatus.COMPLETED.value:
            return parse_timestamp(entry.get("timestamp"))
    return None


def scheduled_sort_key(delivery: Delivery) -> float:
    scheduled = as_utc(delivery.scheduled_date)
    return scheduled.timestamp() if scheduled else 0.0


def _str_or_none(value: uuid.UUID | None) -> str | None:
    return str(value) if value else None
