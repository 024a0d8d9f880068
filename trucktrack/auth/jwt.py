import base64
import hashlib
import hmac
import json
import time
from typing import Any

from fastapi import HTTPException, status

JWT_ALGORITHM = "HS256"


class JwtError(Exception):
    pass


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(signing_input: bytes, secret: str) -> str:
    return _b64url_encode(hmac.new(secret.encode(), signing_input, hashlib.sha256).digest())


def _encode_segment(value: dict[str, Any]) -> str:
    return _b64url_encode(json.dumps(value, separators=(",", ":")).encode())


def issue_jwt(payload: dict[str, Any], secret: str, expires_in_s: int = 3600) -> str:
    issued_at = int(time.time())
    claims = {**payload, "iat": issued_at, "exp": issued_at + expires_in_s}

    head = _encode_segment({"alg": JWT_ALGORITHM, "typ": "JWT"})
    body = _encode_segment(claims)
    return f"{head}.{body}.{_sign(f'{head}.{body}'.encode(), secret)}"


def issue_access_token(user_id: str, role: str, *, secret: str, expires_in_s: int) -> str:
    """Bearer token for a TruckTrack account: `sub` is the user id, `role` admin or driver."""
    return issue_jwt({"sub": user_id, "role": role}, secret, expires_in_s=expires_in_s)


def decode_jwt(token: str, secret: str) -> dict[str, Any]:
    try:
        head, body, signature = token.split(".")
    except ValueError as exc:
        raise JwtError("Malformed JWT") from exc

    try:
        header = json.loads(_b64url_decode(head))
    except ValueError as exc:
        raise JwtError("Malformed JWT header") from exc
    if not isinstance(header, dict) or header.get("alg") != JWT_ALGORITHM:
        raise JwtError("Unsupported JWT algorithm")

    if not hmac.compare_digest(_sign(f"{head}.{body}".encode(), secret), signature):
        raise JwtError("Invalid JWT signature")

    try:
        payload = json.loads(_b64url_decode(body))
    except ValueError as exc:
        raise JwtError("Malformed JWT payload") from exc

    exp = payload.get("exp")
    if not isinstance(exp, int) or exp < int(time.time()):
        raise JwtError("Expired JWT")

    return payload


def jwt_http_exception(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )
