from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from trucktrack.auth.dependencies import AuthContext, rate_limit_login, require_any_user
from trucktrack.config import settings
from trucktrack.db.session import get_db
from trucktrack.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserProfile
from trucktrack.services.auth_service import get_current_user, login_user, register_user

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    summary="Register an admin or driver account",
    status_code=status.HTTP_201_CREATED,
)
def register_endpoint(payload: RegisterRequest, db: Session = Depends(get_db)) -> TokenResponse:
    user, token = register_user(db, payload)
    return TokenResponse(
        access_token=token,
        expires_in=settings.jwt_expires_in_s,
        user=UserProfile.model_validate(user),
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Sign in with email and password",
    dependencies=[Depends(rate_limit_login)],
)
def login_endpoint(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    user, token = login_user(db, payload)
    return TokenResponse(
        access_token=token,
        expires_in=settings.jwt_expires_in_s,
        user=UserProfile.model_validate(user),
    )


@router.get("/me", response_model=UserProfile, summary="Current user profile")
def me_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_any_user),
) -> UserProfile:
    return UserProfile.model_validate(get_current_user(db, auth))
