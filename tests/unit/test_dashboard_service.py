from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import OperationalError

from trucktrack.models.delivery import DeliveryStatus
from trucktrack.models.user import DriverStatus
from trucktrack.observability import metrics_store
from trucktrack.services import dashboard_service
from trucktrack.services.dashboard_service import (
    build_admin_dashboard,
    build_driver_dashboard,
    build_etag,
    completed_since,
    etag_matches,
    local_midnight,
)

NOW = datetime(2026, 5, 10, 12, 0, tzinfo=timezone.utc)


def _completed_entry(at: datetime) -> list[dict]:
    return [
        {"status": "in_progress", "timestamp": (at - timedelta(hours=1)).isoformat(), "notes": ""},
        {"status": "completed", "timestamp": at.isoformat(), "notes": ""},
    ]


def test_local_midnight_in_reporting_timezone():
    assert local_midnight(NOW, "UTC") == datetime(2026, 5, 10, tzinfo=timezone.utc)
    kampala = local_midnight(datetime(2026, 5, 10, 22, 0, tzinfo=timezone.utc), "Africa/Kampala")
    assert kampala.day == 11
    assert kampala.hour == 0


def test_completed_today_uses_timeline_completion(make_delivery):
    today = make_delivery(DeliveryStatus.COMPLETED, timeline=_completed_entry(NOW))
    deliveries = [
        today,
        make_delivery(DeliveryStatus.COMPLETED, timeline=_completed_entry(NOW - timedelta(days=1))),
        make_delivery(DeliveryStatus.COMPLETED, timeline=[]),
        make_delivery(DeliveryStatus.IN_PROGRESS),
    ]

    result = completed_since(deliveries, local_midnight(NOW, "UTC"))
    assert result == [today]


def test_admin_dashboard_aggregates_sources(db_session, make_driver, make_vehicle, make_delivery):
    make_vehicle(current_location={"lat": 1.5, "lng": 32.1})
    make_driver("A", status=DriverStatus.AVAILABLE.value)
    make_driver("B", status=DriverStatus.ON_DELIVERY.value)
    make_delivery(DeliveryStatus.IN_PROGRESS)
    make_delivery(DeliveryStatus.PENDING)
    make_delivery(DeliveryStatus.ASSIGNED)
    make_delivery(DeliveryStatus.COMPLETED, timeline=_completed_entry(NOW - timedelta(hours=2)))
    make_delivery(DeliveryStatus.COMPLETED, timeline=_completed_entry(NOW - timedelta(days=2)))

    dashboard = build_admin_dashboard(db_session, now=NOW)

    assert len(dashboard.active_deliveries) == 1
    assert len(dashboard.pending_deliveries) == 2
    assert dashboard.completed_today == 1
    assert dashboard.available_drivers == 1
    assert dashboard.total_drivers == 2
    assert dashboard.map_center.lat == 1.5
    assert dashboard.error is None
    assert "dashboard_build_seconds" in metrics_store.snapshot().timings


def test_admin_dashboard_uses_default_map_center_without_vehicles(db_session):
    dashboard = build_admin_dashboard(db_session, now=NOW)

    assert dashboard.vehicles == []
    assert dashboard.map_center.lat == dashboard_service.settings.default_map_center_lat


def test_admin_dashboard_isolates_failing_source(db_session, make_driver, make_delivery, monkeypatch):
    make_driver("A")
    make_delivery(DeliveryStatus.PENDING)

    def broken_vehicles(_db):
        raise OperationalError("SELECT vehicles", {}, Exception("connection lost"))

    monkeypatch.setattr(dashboard_service, "list_all_vehicles", broken_vehicles)

    dashboard = build_admin_dashboard(db_session, now=NOW)

    assert dashboard.error == "Failed to load vehicle data"
    assert dashboard.errors == ["Failed to load vehicle data"]
    assert dashboard.vehicles == []
    assert dashboard.total_drivers == 1
    assert len(dashboard.pending_deliveries) == 1
    assert metrics_store.snapshot().counters["dashboard_source_error_total"] == 1


def test_driver_dashboard_counts_and_upcoming(db_session, make_driver, make_delivery, driver_auth):
    driver = make_driver(performance_metrics={"average_rating": 4.2})
    for offset in range(6):
        make_delivery(
            DeliveryStatus.PENDING,
            assigned_driver_id=driver.id,
            scheduled_date=NOW + timedelta(days=offset + 1),
        )
    unscheduled = make_delivery(DeliveryStatus.IN_PROGRESS, assigned_driver_id=driver.id)
    make_delivery(DeliveryStatus.COMPLETED, assigned_driver_id=driver.id)

    dashboard = build_driver_dashboard(db_session, driver_auth(driver))

    assert dashboard.stats.total == 8
    assert dashboard.stats.pending == 6
    assert dashboard.stats.in_progress == 1
    assert dashboard.stats.completed == 1
    assert dashboard.stats.rating == 4.2
    assert len(dashboard.upcoming) == 5
    assert dashboard.upcoming[0].id == unscheduled.id


def test_build_etag_is_stable_for_same_payload(db_session):
    first = build_etag(build_admin_dashboard(db_session, now=NOW))
    second = build_etag(build_admin_dashboard(db_session, now=NOW))

    assert first == second
    assert first.startswith('"') and first.endswith('"')


def test_etag_matches_accepts_exact_weak_list_and_wildcard():
    etag = '"abc123"'

    assert etag_matches(etag, etag)
    assert etag_matches(f"W/{etag}", etag)
    assert etag_matches(f'"other", {etag}', etag)
    assert etag_matches("*", etag)
    assert etag_matches('"a,b", "abc123"', etag)


def test_etag_matches_rejects_non_matching_and_empty_headers():
    etag = '"abc123"'

    assert not etag_matches(None, etag)
    assert not etag_matches("", etag)
    assert not etag_matches('"a,b", "c,d"', etag)
