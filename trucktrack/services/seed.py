from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from trucktrack.auth.passwords import hash_password
from trucktrack.models.common import now_utc
from trucktrack.models.delivery import Delivery, DeliveryPriority, DeliveryStatus
from trucktrack.models.location import Location, LocationType
from trucktrack.models.user import DriverStatus, User, UserRole, empty_performance_metrics
from trucktrack.models.vehicle import Vehicle, VehicleStatus
from trucktrack.observability import log_event

DEMO_ADMIN_EMAIL = "admin@trucktrack.test"
DEMO_DRIVER_EMAIL = "driver@trucktrack.test"
DEMO_PASSWORD = "trucktrack-demo"


def seed_data(db: Session) -> bool:
    if db.scalar(select(User.id).limit(1)) is not None:
        return False

    now = now_utc()
    admin = User(
        name="Demo Admin",
        email=DEMO_ADMIN_EMAIL,
        role=UserRole.ADMIN.value,
        password_hash=hash_password(DEMO_PASSWORD),
    )
    driver = User(
        name="Demo Driver",
        email=DEMO_DRIVER_EMAIL,
        phone="+256700000001",
        role=UserRole.DRIVER.value,
        password_hash=hash_password(DEMO_PASSWORD),
        license_number="DL-0001",
        status=DriverStatus.AVAILABLE.value,
        performance_metrics=empty_performance_metrics(),
    )
    vehicle = Vehicle(
        registration_number="UAA 001A",
        type="truck",
        capacity={"weight_kg": 8000, "volume_m3": 40},
        status=VehicleStatus.AVAILABLE.value,
        current_location={"lat": 0.3476, "lng": 32.5825},
    )
    db.add_all([admin, driver, vehicle])
    db.flush()

    driver.assigned_vehicle_id = vehicle.id
    vehicle.assigned_driver_id = driver.id

    warehouse = Location(
        name="Central Warehouse",
        type=LocationType.WAREHOUSE.value,
        address="Plot 12, Industrial Area",
        location={"lat": 0.3136, "lng": 32.6053},
        frequently_visited=True,
    )
    db.add(warehouse)

    for offset, status_value in enumerate(
        (DeliveryStatus.PENDING, DeliveryStatus.ASSIGNED, DeliveryStatus.PENDING)
    ):
        created = now - timedelta(days=offset)
        db.add(
            Delivery(
                status=status_value.value,
                priority=DeliveryPriority.NORMAL.value,
                assigned_driver_id=driver.id if status_value == DeliveryStatus.ASSIGNED else None,
                assigned_vehicle_id=vehicle.id if status_value == DeliveryStatus.ASSIGNED else None,
                pickup={"address": warehouse.address, "location": warehouse.location},
                dropoff={"address": f"Customer site {offset + 1}"},
                customer={"name": f"Customer {offset + 1}", "phone": "", "email": ""},
                cargo={"type": "general", "quantity": 10, "weight_kg": 250.0},
                timeline=[
                    {
                        "status": status_value.value,
                        "timestamp": created.isoformat(),
                        "notes": "Delivery created",
                    }
                ],
                scheduled_date=created + timedelta(days=1),
                created_by=str(admin.id),
                created_at=created,
                updated_at=created,
            )
        )

    db.commit()
    log_event("demo_data_seeded")
    return True
