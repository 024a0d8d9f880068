import uuid
from datetime import datetime

import pytest

from trucktrack.auth.dependencies import AuthContext
from trucktrack.models.common import now_utc
from trucktrack.models.delivery import Delivery, DeliveryStatus
from trucktrack.models.user import DriverStatus, User, UserRole, empty_performance_metrics
from trucktrack.models.vehicle import Vehicle


@pytest.fixture
def admin_auth() -> AuthContext:
    return AuthContext(user_id=str(uuid.uuid4()), role="admin")


@pytest.fixture
def make_driver(db_session):
    def _make(name: str = "Amos Driver", **fields) -> User:
        now = now_utc()
        driver = User(
            name=name,
            email=fields.pop("email", f"{uuid.uuid4().hex[:8]}@fleet.test"),
            role=UserRole.DRIVER.value,
            status=fields.pop("status", DriverStatus.AVAILABLE.value),
            performance_metrics=fields.pop("performance_metrics", empty_performance_metrics()),
            created_at=now,
            updated_at=now,
            **fields,
        )
        db_session.add(driver)
        db_session.commit()
        db_session.refresh(driver)
        return driver

    return _make


@pytest.fixture
def make_vehicle(db_session):
    def _make(registration_number: str = "UBA 123X", **fields) -> Vehicle:
        vehicle = Vehicle(registration_number=registration_number, **fields)
        db_session.add(vehicle)
        db_session.commit()
        db_session.refresh(vehicle)
        return vehicle

    return _make


@pytest.fixture
def make_delivery(db_session):
    def _make(
        status: DeliveryStatus = DeliveryStatus.PENDING,
        *,
        created_at: datetime | None = None,
        timeline: list[dict] | None = None,
        **fields,
    ) -> Delivery:
        created = created_at or now_utc()
        delivery = Delivery(
            status=status.value,
            created_at=created,
            updated_at=created,
            timeline=timeline
            if timeline is not None
            else [{"status": status.value, "timestamp": created.isoformat(), "notes": ""}],
            **fields,
        )
        db_session.add(delivery)
        db_session.commit()
        db_session.refresh(delivery)
        return delivery

    return _make


@pytest.fixture
def driver_auth():
    def _auth(driver: User) -> AuthContext:
        return AuthContext(user_id=str(driver.id), role="driver")

    return _auth
