import calendar
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from trucktrack.config import settings
from trucktrack.models.common import as_utc, now_utc
from trucktrack.models.delivery import Delivery, DeliveryStatus
from trucktrack.models.user import User
from trucktrack.observability import observe_timing
from trucktrack.schemas.analytics import (
    AnalyticsResponse,
    DateBucket,
    DeliveryStats,
    DriverPerformance,
    StatusSlice,
    TimeRange,
)
from trucktrack.services.deliveries_service import list_all_deliveries
from trucktrack.services.drivers_service import list_all_drivers

TIME_RANGES: tuple[str, ...] = ("week", "month", "quarter", "year")
DEFAULT_TIME_RANGE: TimeRange = "month"
TOP_DRIVERS = 5

_STATUS_FIELDS = {
    DeliveryStatus.COMPLETED.value: "completed",
    DeliveryStatus.PENDING.value: "pending",
    DeliveryStatus.IN_PROGRESS.value: "in_progress",
    DeliveryStatus.CANCELLED.value: "cancelled",
}

_DATE_LABEL_FORMATS = {
    "week": "%m/%d",
    "month": "%b %d",
    "quarter": "%b %d",
    "year": "%b %d, %y",
}


def normalize_time_range(value: str | None) -> TimeRange:
    if value in TIME_RANGES:
        return value  # type: ignore[return-value]
    return DEFAULT_TIME_RANGE


def subtract_months(value: datetime, months: int) -> datetime:
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def start_date_for(time_range: str, now: datetime) -> datetime:
    if time_range == "week":
        return now - timedelta(days=7)
    if time_range == "quarter":
        return subtract_months(now, 3)
    if time_range == "year":
        return subtract_months(now, 12)
    return subtract_months(now, 1)


def delivery_stats(deliveries: list[Delivery]) -> DeliveryStats:
    stats = DeliveryStats(total=len(deliveries))
    for delivery in deliveries:
        field = _STATUS_FIELDS.get(delivery.status)
        if field:
            setattr(stats, field, getattr(stats, field) + 1)
    return stats


def group_by_date(
    deliveries: list[Delivery],
    time_range: str,
    tz_name: str | None = None,
) -> list[DateBucket]:
    tz = ZoneInfo(tz_name or settings.reporting_timezone)
    label_format = _DATE_LABEL_FORMATS.get(time_range, _DATE_LABEL_FORMATS[DEFAULT_TIME_RANGE])

    grouped: dict[date, DateBucket] = {}
    for delivery in deliveries:
        created = as_utc(delivery.created_at)
        if created is None:
            continue
        day = created.astimezone(tz).date()
        bucket = grouped.get(day)
        if bucket is None:
            bucket = grouped[day] = DateBucket(date=day.strftime(label_format))
        bucket.total += 1
        field = _STATUS_FIELDS.get(delivery.status)
        if field:
            setattr(bucket, field, getattr(bucket, field) + 1)

    return [grouped[day] for day in sorted(grouped)]


def status_breakdown(stats: DeliveryStats) -> list[StatusSlice]:
    return [
        StatusSlice(name="completed", value=stats.completed),
        StatusSlice(name="pending", value=stats.pending),
        StatusSlice(name="in_progress", value=stats.in_progress),
        StatusSlice(name="cancelled", value=stats.cancelled),
    ]


def driver_performance(
    drivers: list[User],
    deliveries: list[Delivery],
    limit: int = TOP_DRIVERS,
) -> list[DriverPerformance]:
    rows = []
    for driver in drivers:
        own = [d for d in deliveries if d.assigned_driver_id == driver.id]
        if not own:
            continue
        rows.append(
            DriverPerformance(
                driver_id=str(driver.id),
                name=driver.name or "Unknown Driver",
                completed=sum(1 for d in own if d.status == DeliveryStatus.COMPLETED.value),
                in_progress=sum(1 for d in own if d.status == DeliveryStatus.IN_PROGRESS.value),
                total=len(own),
                rating=float((driver.performance_metrics or {}).get("average_rating", 0.0)),
            )
        )
    rows.sort(key=lambda row: row.completed, reverse=True)
    return rows[:limit]


def build_report(
    db: Session,
    time_range: str | None = None,
    *,
    now: datetime | None = None,
) -> AnalyticsResponse:
    selected = normalize_time_range(time_range)
    start = start_date_for(selected, now or now_utc())

    with observe_timing("analytics_build_seconds"):
        deliveries = list_all_deliveries(db, created_since=start)
        stats = delivery_stats(deliveries)
        return AnalyticsResponse(
            time_range=selected,
            start_date=start,
            stats=stats,
            by_date=group_by_date(deliveries, selected),
            by_status=status_breakdown(stats),
            driver_performance=driver_performance(list_all_drivers(db), deliveries),
        )
