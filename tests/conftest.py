import os

os.environ.setdefault("TRUCKTRACK_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("TRUCKTRACK_TESTING", "true")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

import trucktrack.models  # noqa: E402,F401
from trucktrack.auth.dependencies import reset_rate_limits  # noqa: E402
from trucktrack.config import settings  # noqa: E402
from trucktrack.db.base import Base  # noqa: E402
from trucktrack.db.session import engine as app_engine  # noqa: E402
from trucktrack.db.session import get_db  # noqa: E402
from trucktrack.main import app  # noqa: E402
from trucktrack.observability import metrics_store  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_schema():
    Base.metadata.drop_all(bind=app_engine)
    Base.metadata.create_all(bind=app_engine)
    yield
    Base.metadata.drop_all(bind=app_engine)


@pytest.fixture(autouse=True)
def reset_db():
    reset_rate_limits()
    Base.metadata.drop_all(bind=app_engine)
    Base.metadata.create_all(bind=app_engine)
    yield


@pytest.fixture(autouse=True)
def reset_metrics_store():
    metrics_store.reset()
    yield


@pytest.fixture
def db_session():
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=app_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=app_engine)

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope="session", autouse=True)
def enable_test_auth_bypass():
    original = settings.enable_test_auth_bypass
    settings.enable_test_auth_bypass = True
    yield
    settings.enable_test_auth_bypass = original


@pytest.fixture(scope="session", autouse=True)
def enable_testing_mode():
    original = settings.testing
    settings.testing = True
    yield
    settings.testing = original


@pytest.fixture(scope="session", autouse=True)
def fast_password_hashing():
    original = settings.password_hash_iterations
    settings.password_hash_iterations = 1_000
    yield
    settings.password_hash_iterations = original
