from passlib.hash import pbkdf2_sha256

from trucktrack.config import settings


def hash_password(password: str, *, iterations: int | None = None) -> str:
    rounds = iterations or settings.password_hash_iterations
    return pbkdf2_sha256.using(rounds=rounds).hash(password)


def verify_password(password: str, encoded: str | None) -> bool:
    if not encoded:
        return False
    try:
        return pbkdf2_sha256.verify(password, encoded)
    except ValueError:
        return False
