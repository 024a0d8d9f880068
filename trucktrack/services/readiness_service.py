from collections.abc import Callable
from typing import Literal

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trucktrack.observability import log_event, metrics_store

ReadinessStatus = Literal["ok", "error"]


def safe_dependency_status(
    dependency_name: str,
    checker: Callable[[], ReadinessStatus],
) -> ReadinessStatus:
    metrics_store.increment("readiness_dependency_checked_total")
    try:
        status = checker()
    except Exception as exc:  # readiness must fail closed to degraded
        metrics_store.increment("readiness_dependency_error_total")
        log_event(f"readiness_dependency_check_failed:{dependency_name}:{type(exc).__name__}")
        return "error"

    if status != "ok":
        metrics_store.increment("readiness_dependency_error_total")
        return "error"
    return "ok"


def database_dependency_status(
    session_factory: Callable[[], Session],
) -> ReadinessStatus:
    try:
        with session_factory() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return "error"
    return "ok"
