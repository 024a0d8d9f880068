"""Admin and driver dashboard aggregation.

The admin dashboard is built from three independently loaded sources
(vehicles, drivers, deliveries). A source that fails to load contributes an
empty list and an error message; the remaining sources are still returned.
"""

import hashlib
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext
from trucktrack.config import settings
from trucktrack.models.common import now_utc
from trucktrack.models.delivery import Delivery, DeliveryStatus
from trucktrack.models.user import DriverStatus, User
from trucktrack.observability import log_event, metrics_store, observe_timing
from trucktrack.schemas.dashboard import (
    AdminDashboardResponse,
    DriverDashboardResponse,
    DriverDashboardStats,
)
from trucktrack.schemas.delivery import DeliveryResponse
from trucktrack.schemas.vehicle import VehicleResponse
from trucktrack.services.auth_service import get_current_user
from trucktrack.services.deliveries_service import (
    completed_at,
    list_all_deliveries,
    list_driver_deliveries,
    scheduled_sort_key,
)
from trucktrack.services.drivers_service import list_all_drivers
from trucktrack.services.vehicles_service import list_all_vehicles

T = TypeVar("T")

UPCOMING_LIMIT = 5
PENDING_STATUSES = {DeliveryStatus.PENDING.value, DeliveryStatus.ASSIGNED.value}


def _load_source(
    db: Session,
    name: str,
    loader: Callable[[], list[T]],
    errors: list[str],
) -> list[T]:
    try:
        return loader()
    except SQLAlchemyError:
        db.rollback()
        metrics_store.increment("dashboard_source_error_total")
        log_event(f"dashboard_{name}_load_failed", level=logging.ERROR)
        errors.append(f"Failed to load {name} data")
        return []


def local_midnight(now: datetime, tz_name: str | None = None) -> datetime:
    local_now = now.astimezone(ZoneInfo(tz_name or settings.reporting_timezone))
    return local_now.replace(hour=0, minute=0, second=0, microsecond=0)


def completed_since(deliveries: list[Delivery], since: datetime) -> list[Delivery]:
    result = []
    for delivery in deliveries:
        if delivery.status != DeliveryStatus.COMPLETED.value:
            continue
        finished = completed_at(delivery)
        if finished is not None and finished >= since:
            result.append(delivery)
    return result


def build_admin_dashboard(db: Session, *, now: datetime | None = None) -> AdminDashboardResponse:
    errors: list[str] = []
    with observe_timing("dashboard_build_seconds"):
        vehicles = _load_source(db, "vehicle", lambda: list_all_vehicles(db), errors)
        drivers = _load_source(db, "driver", lambda: list_all_drivers(db), errors)
        deliveries = _load_source(db, "delivery", lambda: list_all_deliveries(db), errors)

        midnight = local_midnight(now or now_utc())
        active = [d for d in deliveries if d.status == DeliveryStatus.IN_PROGRESS.value]
        pending = [d for d in deliveries if d.status in PENDING_STATUSES]
        available = [d for d in drivers if d.status == DriverStatus.AVAILABLE.value]

        map_center = {"lat": settings.default_map_center_lat, "lng": settings.default_map_center_lng}
        if vehicles and vehicles[0].current_location:
            map_center = vehicles[0].current_location

        return AdminDashboardResponse(
            active_deliveries=[DeliveryResponse.model_validate(d) for d in active],
            pending_deliveries=[DeliveryResponse.model_validate(d) for d in pending],
            completed_today=len(completed_since(deliveries, midnight)),
            available_drivers=len(available),
            total_drivers=len(drivers),
            vehicles=[VehicleResponse.model_validate(v) for v in vehicles],
            map_center=map_center,
            error=errors[0] if errors else None,
            errors=errors,
        )


def build_driver_dashboard(db: Session, auth: AuthContext) -> DriverDashboardResponse:
    driver: User = get_current_user(db, auth)
    deliveries = list_driver_deliveries(db, driver.id)

    def count(status_value: DeliveryStatus) -> int:
        return sum(1 for d in deliveries if d.status == status_value.value)

    upcoming = sorted(
        (
            d
            for d in deliveries
            if d.status in {DeliveryStatus.PENDING.value, DeliveryStatus.IN_PROGRESS.value}
        ),
        key=scheduled_sort_key,
    )[:UPCOMING_LIMIT]

    metrics = driver.performance_metrics or {}
    return DriverDashboardResponse(
        stats=DriverDashboardStats(
            total=len(deliveries),
            completed=count(DeliveryStatus.COMPLETED),
            pending=count(DeliveryStatus.PENDING),
            in_progress=count(DeliveryStatus.IN_PROGRESS),
            rating=float(metrics.get("average_rating", 0.0)),
        ),
        upcoming=[DeliveryResponse.model_validate(d) for d in upcoming],
    )


def build_etag(payload: Any) -> str:
    body = payload.model_dump_json() if hasattr(payload, "model_dump_json") else str(payload)
    return '"' + hashlib.sha256(body.encode()).hexdigest()[:32] + '"'


def _split_etag_header(header: str) -> list[str]:
    tokens: list[str] = []
    current = []
    in_quotes = False
    for char in header:
        if char == '"':
            in_quotes = not in_quotes
        if char == "," and not in_quotes:
            tokens.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tokens.append("".join(current).strip())
    return [token for token in tokens if token]


def etag_matches(if_none_match: str | None, etag: str) -> bool:
    if not if_none_match:
        return False
    for token in _split_etag_header(if_none_match):
        if token == "*" or token.removeprefix("W/") == etag:
            return True
    return False

