import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Header, HTTPException, Request, status

from trucktrack.auth.jwt import JwtError, decode_jwt, jwt_http_exception
from trucktrack.config import allowed_roles_list, settings

AllowedRole = str


@dataclass
class AuthContext:
    user_id: str
    role: AllowedRole
    source: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_auth_context(
    authorization: str | None = Header(default=None),
) -> AuthContext:
    if not authorization and settings.enable_test_auth_bypass:
        return AuthContext(user_id="test-admin", role="admin", source="test")

    if not authorization or not authorization.startswith("Bearer "):
        raise jwt_http_exception("Missing bearer token")

    token = authorization.removeprefix("Bearer ").strip()
    try:
        payload = decode_jwt(token, settings.jwt_secret)
    except JwtError as err:
        raise jwt_http_exception("Invalid JWT") from err

    role = payload.get("role")
    user_id = payload.get("sub")
    if role not in allowed_roles_list() or not isinstance(user_id, str):
        raise jwt_http_exception("Invalid JWT claims")

    return AuthContext(user_id=user_id, role=role, source=payload.get("source"))


def require_roles(*roles: str) -> Callable[[AuthContext], AuthContext]:
    def dependency(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if auth.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return auth

    return dependency


require_admin = require_roles("admin")
require_driver = require_roles("driver")
require_any_user = require_roles("admin", "driver")


_LOGIN_BUCKETS: dict[str, list[float]] = {}


def rate_limit_login(request: Request) -> None:
    now = time.time()
    window = settings.login_rate_limit_window_s
    max_requests = settings.login_rate_limit_requests
    key = request.client.host if request.client else "unknown"
    history = [value for value in _LOGIN_BUCKETS.get(key, []) if value > now - window]
    if len(history) >= max_requests:
        retry_after = max(1, int(history[0] + window - now))
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts",
            headers={"Retry-After": str(retry_after)},
        )
    history.append(now)
    _LOGIN_BUCKETS[key] = history


def reset_rate_limits() -> None:
    _LOGIN_BUCKETS.clear()
