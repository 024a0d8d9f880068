from datetime import datetime

from fastapi import HTTPException, status

from trucktrack.models.common import now_utc
from trucktrack.models.delivery import Delivery, DeliveryStatus

DELIVERY_STATUS_TRANSITIONS: dict[DeliveryStatus, set[DeliveryStatus]] = {
    DeliveryStatus.PENDING: {
        DeliveryStatus.ASSIGNED,
        DeliveryStatus.IN_PROGRESS,
        DeliveryStatus.CANCELLED,
    },
    DeliveryStatus.ASSIGNED: {
        DeliveryStatus.PENDING,
        DeliveryStatus.IN_PROGRESS,
        DeliveryStatus.CANCELLED,
    },
    DeliveryStatus.IN_PROGRESS: {DeliveryStatus.COMPLETED, DeliveryStatus.CANCELLED},
    DeliveryStatus.COMPLETED: set(),
    DeliveryStatus.CANCELLED: set(),
}


def ensure_valid_transition(current: str, next_status: str, *, strict: bool = False) -> None:
    if next_status == current and not strict:
        return

    try:
        allowed = DELIVERY_STATUS_TRANSITIONS[DeliveryStatus(current)]
    except ValueError:
        # legacy free-text status: only cancellation is accepted
        allowed = {DeliveryStatus.CANCELLED}
    if DeliveryStatus(next_status) not in allowed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invalid status transition: {current} -> {next_status}",
        )


def append_timeline_entry(
    delivery: Delivery,
    status_value: str,
    notes: str = "",
    at: datetime | None = None,
) -> None:
    entry = {
        "status": status_value,
        "timestamp": (at or now_utc()).isoformat(),
        "notes": notes,
    }
    # reassign so the JSON column is flagged dirty
    delivery.timeline = [*(delivery.timeline or []), entry]


def transition_delivery_status(
    delivery: Delivery,
    next_status: DeliveryStatus | str,
    notes: str = "",
    at: datetime | None = None,
    *,
    strict: bool = False,
) -> bool:
    """Move ``delivery`` to ``next_status``; returns False when it was already there.

    With ``strict`` a delivery already in ``next_status`` is rejected as well.
    """
    target = DeliveryStatus(next_status).value
    ensure_valid_transition(delivery.status, target, strict=strict)
    if delivery.status == target:
        return False

    delivery.status = target
    append_timeline_entry(delivery, target, notes, at)
    return True
