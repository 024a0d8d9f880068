from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext
from trucktrack.auth.jwt import issue_access_token, jwt_http_exception
from trucktrack.auth.passwords import hash_password, verify_password
from trucktrack.config import settings
from trucktrack.models.common import now_utc
from trucktrack.models.user import DriverStatus, User, UserRole, empty_performance_metrics
from trucktrack.observability import log_event, metrics_store
from trucktrack.schemas.auth import LoginRequest, RegisterRequest
from trucktrack.services.common import resolve_uuid


def issue_token_for(user: User) -> str:
    return issue_access_token(
        str(user.id),
        user.role,
        secret=settings.jwt_secret,
        expires_in_s=settings.jwt_expires_in_s,
    )


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(func.lower(User.email) == email.strip().lower()))


def ensure_email_available(db: Session, email: str | None, *, exclude: User | None = None) -> None:
    if not email:
        return
    existing = find_user_by_email(db, email)
    if existing is not None and existing is not exclude:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")


def _claim_driver_account(db: Session, driver: User, payload: RegisterRequest) -> User:
    now = now_utc()
    driver.password_hash = hash_password(payload.password)
    driver.language = payload.language
    if payload.phone:
        driver.phone = payload.phone
    driver.updated_at = now
    driver.last_active = now
    db.commit()
    db.refresh(driver)
    return driver


def register_user(db: Session, payload: RegisterRequest) -> tuple[User, str]:
    existing = find_user_by_email(db, payload.email)
    if (
        existing is not None
        and existing.password_hash is None
        and existing.role == UserRole.DRIVER.value
        and payload.role == UserRole.DRIVER
    ):
        # Drivers added by an admin get their login on first registration.
        user = _claim_driver_account(db, existing, payload)
        metrics_store.increment("auth_registrations_total")
        log_event("driver_account_claimed", driver_id=str(user.id))
        return user, issue_token_for(user)
    ensure_email_available(db, payload.email)

    now = now_utc()
    user = User(
        name=payload.name.strip(),
        email=payload.email,
        phone=payload.phone,
        role=payload.role.value,
        language=payload.language,
        password_hash=hash_password(payload.password),
        created_at=now,
        updated_at=now,
        last_active=now,
    )
    if payload.role == UserRole.DRIVER:
        user.status = DriverStatus.AVAILABLE.value
        user.performance_metrics = empty_performance_metrics()

    db.add(user)
    db.commit()
    db.refresh(user)

    metrics_store.increment("auth_registrations_total")
    log_event("user_registered", user_id=str(user.id))
    return user, issue_token_for(user)


def login_user(db: Session, payload: LoginRequest) -> tuple[User, str]:
    user = find_user_by_email(db, payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        metrics_store.increment("auth_login_failed_total")
        log_event("login_failed")
        raise jwt_http_exception("Invalid credentials")

    user.last_active = now_utc()
    db.commit()
    db.refresh(user)

    log_event("login_succeeded", user_id=str(user.id))
    return user, issue_token_for(user)


def get_current_user(db: Session, auth: AuthContext) -> User:
    user_id = resolve_uuid(auth.user_id, "User not found")
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
