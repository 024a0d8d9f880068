import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from trucktrack.models.user import UserRole
from trucktrack.schemas.common import GeoPoint, ResponseModel


class PerformanceMetrics(BaseModel):
    deliveries_completed: int = Field(default=0, ge=0)
    on_time_percentage: float = Field(default=0.0, ge=0, le=100)
    average_rating: float = Field(default=0.0, ge=0, le=5)


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    password: str = Field(min_length=6, max_length=128)
    confirm_password: str | None = None
    role: UserRole = UserRole.DRIVER
    language: str = Field(default="en", min_length=2, max_length=8)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserProfile(ResponseModel):
    id: uuid.UUID
    name: str
    email: str | None
    phone: str | None
    role: str
    language: str
    profile_picture: str | None
    status: str | None
    license_number: str | None
    assigned_vehicle_id: uuid.UUID | None
    current_location: GeoPoint | None
    performance_metrics: PerformanceMetrics | None
    created_at: datetime
    last_active: datetime | None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserProfile
