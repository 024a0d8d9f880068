import pytest
from fastapi import HTTPException

from trucktrack.models.delivery import Delivery, DeliveryStatus
from trucktrack.services.state_machine import (
    append_timeline_entry,
    ensure_valid_transition,
    transition_delivery_status,
)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        ("pending", "assigned"),
        ("pending", "in_progress"),
        ("assigned", "pending"),
        ("assigned", "in_progress"),
        ("in_progress", "completed"),
        ("in_progress", "cancelled"),
    ],
)
def test_allowed_transitions(current, target):
    ensure_valid_transition(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        ("completed", "pending"),
        ("cancelled", "in_progress"),
        ("pending", "completed"),
        ("in_progress", "assigned"),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(HTTPException) as exc:
        ensure_valid_transition(current, target)

    assert exc.value.status_code == 409
    assert exc.value.detail == f"Invalid status transition: {current} -> {target}"


def test_legacy_status_can_only_be_cancelled():
    ensure_valid_transition("on_hold", "cancelled")
    with pytest.raises(HTTPException):
        ensure_valid_transition("on_hold", "completed")


def test_transition_appends_timeline_entry():
    delivery = Delivery(status=DeliveryStatus.PENDING.value, timeline=[])

    changed = transition_delivery_status(delivery, DeliveryStatus.ASSIGNED, "Assigned")

    assert changed is True
    assert delivery.status == "assigned"
    assert [entry["status"] for entry in delivery.timeline] == ["assigned"]
    assert delivery.timeline[0]["notes"] == "Assigned"


def test_transition_to_same_status_is_a_noop():
    delivery = Delivery(status=DeliveryStatus.PENDING.value, timeline=[])

    assert transition_delivery_status(delivery, "pending") is False
    assert delivery.timeline == []


def test_append_timeline_entry_replaces_the_list():
    original: list[dict] = []
    delivery = Delivery(status="pending", timeline=original)

    append_timeline_entry(delivery, "pending", "Delivery created")

    assert delivery.timeline is not original
    assert len(delivery.timeline) == 1


def test_strict_transition_rejects_repeating_the_current_status():
    delivery = Delivery(status=DeliveryStatus.COMPLETED.value, timeline=[])

    with pytest.raises(HTTPException) as exc:
        transition_delivery_status(delivery, DeliveryStatus.COMPLETED, strict=True)

    assert exc.value.detail == "Invalid status transition: completed -> completed"
