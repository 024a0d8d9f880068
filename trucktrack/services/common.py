import uuid
from typing import Any, TypeVar

from fastapi import HTTPException, status
from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

T = TypeVar("T")


def resolve_uuid(value: str | uuid.UUID, not_found_detail: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found_detail) from err


def paginate(db: Session, stmt: Select[Any], page: int, page_size: int) -> tuple[list[Any], int]:
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    rows = list(db.scalars(stmt.offset((page - 1) * page_size).limit(page_size)))
    return rows, int(total)


def like_needle(search: str) -> str:
    return f"%{search.strip().lower()}%"


def apply_changes(target: Any, changes: dict[str, Any]) -> None:
    for field, value in changes.items():
        setattr(target, field, value)
