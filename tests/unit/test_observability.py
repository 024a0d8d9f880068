import json
import logging

from trucktrack.db.session import SessionLocal
from trucktrack.observability import (
    JsonFormatter,
    metrics_store,
    observe_timing,
    set_request_id,
)
from trucktrack.services.readiness_service import (
    database_dependency_status,
    safe_dependency_status,
)
from trucktrack.services.seed import seed_data


def test_json_formatter_includes_request_and_entity_ids():
    set_request_id("req-1")
    record = logging.LogRecord("trucktrack.api", logging.INFO, __file__, 1, "delivery_started", None, None)
    record.delivery_id = "d-1"
    record.driver_id = "drv-1"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "delivery_started"
    assert payload["request_id"] == "req-1"
    assert payload["delivery_id"] == "d-1"
    assert payload["driver_id"] == "drv-1"
    assert payload["user_id"] is None


def test_metrics_store_snapshot_and_timing():
    metrics_store.increment("deliveries_created_total")
    metrics_store.increment("deliveries_created_total", 2)
    with observe_timing("analytics_build_seconds"):
        pass

    snapshot = metrics_store.snapshot()

    assert snapshot.counters["deliveries_created_total"] == 3
    assert snapshot.timings["analytics_build_seconds"]["count"] == 1.0


def test_safe_dependency_status_fails_closed():
    def broken():
        raise ConnectionError("down")

    assert safe_dependency_status("database", broken) == "error"
    assert safe_dependency_status("database", lambda: "ok") == "ok"
    assert metrics_store.snapshot().counters["readiness_dependency_error_total"] == 1


def test_database_dependency_status_ok():
    assert database_dependency_status(SessionLocal) == "ok"


def test_seed_data_runs_once(db_session):
    assert seed_data(db_session) is True
    assert seed_data(db_session) is False
