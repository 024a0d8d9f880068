import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import Response

from trucktrack.config import allowed_origins, ensure_secure_runtime_settings, settings
from trucktrack.db.migration_check import assert_db_is_up_to_date, maybe_create_schema
from trucktrack.db.session import SessionLocal, engine
from trucktrack.observability import configure_logging, log_event, metrics_store, set_request_id
from trucktrack.routers.analytics import router as analytics_router
from trucktrack.routers.auth import router as auth_router
from trucktrack.routers.dashboard import router as dashboard_router
from trucktrack.routers.deliveries import router as deliveries_router
from trucktrack.routers.documents import router as documents_router
from trucktrack.routers.driver_tasks import router as driver_tasks_router
from trucktrack.routers.drivers import router as drivers_router
from trucktrack.routers.health import router as health_router
from trucktrack.routers.locations import router as locations_router
from trucktrack.routers.messages import router as messages_router
from trucktrack.routers.metrics import router as metrics_router
from trucktrack.routers.vehicles import router as vehicles_router
from trucktrack.services.seed import seed_data


@asynccontextmanager
async def lifespan(_app: FastAPI):
    import trucktrack.models  # noqa: F401 (register all SQLAlchemy models)

    ensure_secure_runtime_settings()
    if not settings.testing:
        configure_logging()
    if not maybe_create_schema(engine):
        assert_db_is_up_to_date(engine)
    if settings.app_mode == "demo":
        with SessionLocal() as db:
            seed_data(db)
    yield


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="TruckTrack logistics API for admins and drivers",
    lifespan=lifespan,
)


def custom_openapi():
    """Adds HTTP Bearer (JWT) auth to the OpenAPI schema for the Swagger 'Authorize' button."""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    components = openapi_schema.setdefault("components", {})
    security_schemes = components.setdefault("securitySchemes", {})
    security_schemes["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    openapi_schema["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    set_request_id(request_id)

    start = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start

    response.headers["X-Request-ID"] = request_id
    metrics_store.increment("http_requests_total")
    metrics_store.observe("http_request_duration_seconds", elapsed)
    log_event(
        f"http_request {request.method} {request.url.path} {response.status_code}",
        delivery_id=request.path_params.get("delivery_id"),
        driver_id=request.path_params.get("driver_id"),
    )
    return response


app.include_router(health_router)
app.include_router(auth_router)
app.include_router(drivers_router)
app.include_router(vehicles_router)
app.include_router(deliveries_router)
app.include_router(driver_tasks_router)
app.include_router(documents_router)
app.include_router(messages_router)
app.include_router(locations_router)
app.include_router(dashboard_router)
app.include_router(analytics_router)
app.include_router(metrics_router)
