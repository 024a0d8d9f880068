from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "trucktrack-jwt-secret"
ALLOWED_APP_MODES = {"demo", "pilot", "production"}
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    app_name: str = "TruckTrack Logistics API"
    app_mode: str = Field(default="pilot", validation_alias="TRUCKTRACK_APP_MODE")

    database_url: str = Field(
        default="sqlite+pysqlite:///./trucktrack.db",
        validation_alias="TRUCKTRACK_DATABASE_URL",
    )
    auto_create_schema: bool = Field(default=True, validation_alias="TRUCKTRACK_AUTO_CREATE_SCHEMA")
    cors_allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_expires_in_s: int = 12 * 60 * 60
    allowed_roles: str = "admin,driver"
    enable_test_auth_bypass: bool = False
    testing: bool = Field(default=False, validation_alias="TRUCKTRACK_TESTING")

    login_rate_limit_requests: int = 10
    login_rate_limit_window_s: int = 60
    password_hash_iterations: int = 260_000

    reporting_timezone: str = "UTC"
    default_map_center_lat: float = 0.3476
    default_map_center_lng: float = 32.5825

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("app_mode")
    @classmethod
    def validate_app_mode(cls, value: str) -> str:
        mode = value.lower().strip()
        if mode not in ALLOWED_APP_MODES:
            allowed = ", ".join(sorted(ALLOWED_APP_MODES))
            raise ValueError(f"TRUCKTRACK_APP_MODE must be one of: {allowed}")
        return mode


settings = Settings()


def is_production_mode() -> bool:
    return settings.app_mode == "production"


def allowed_origins() -> list[str]:
    return [origin.strip() for origin in settings.cors_allowed_origins.split(",") if origin.strip()]


def allowed_roles_list() -> list[str]:
    return [value.strip() for value in settings.allowed_roles.split(",") if value.strip()]


def ensure_secure_runtime_settings() -> None:
    """Fail fast when production-like runtime uses insecure defaults."""
    if not settings.testing and settings.jwt_secret == DEFAULT_JWT_SECRET:
        raise RuntimeError(
            "JWT_SECRET must be set to a non-default value when TRUCKTRACK_TESTING is false"
        )
    if not settings.testing and len(settings.jwt_secret) < MIN_SECRET_LENGTH:
        raise RuntimeError(
            "JWT_SECRET must be at least "
            f"{MIN_SECRET_LENGTH} characters when TRUCKTRACK_TESTING is false"
        )
    if not settings.testing and _is_sqlite_url(settings.database_url):
        raise RuntimeError(
            "TRUCKTRACK_DATABASE_URL must use postgres when TRUCKTRACK_TESTING is false"
        )


def _is_sqlite_url(database_url: str) -> bool:
    value = database_url.strip().lower()
    return value.startswith("sqlite")
