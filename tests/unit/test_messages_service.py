import uuid

import pytest
from fastapi import HTTPException

from trucktrack.auth.dependencies import AuthContext
from trucktrack.schemas.message import MessageCreate
from trucktrack.services.messages_service import list_messages, mark_read, send_message


def test_send_message_defaults_to_support_and_marks_sender_read(db_session, make_driver, driver_auth):
    driver = make_driver("Sam")
    auth = driver_auth(driver)

    message = send_message(db_session, auth, MessageCreate(content="  Stuck in traffic  "))

    assert message.content == "Stuck in traffic"
    assert message.participants == [auth.user_id, "support"]
    assert message.read_by == [auth.user_id]
    assert message.sender_name == "Sam"


def test_send_message_rejects_blank_content(db_session, admin_auth):
    with pytest.raises(HTTPException) as exc:
        send_message(db_session, admin_auth, MessageCreate(content="   "))

    assert exc.value.status_code == 422
    assert exc.value.detail == "Message content must not be empty"


def test_list_messages_returns_own_conversation_oldest_first(db_session, admin_auth):
    driver_id = str(uuid.uuid4())
    first = send_message(db_session, admin_auth, MessageCreate(content="one", recipients=[driver_id]))
    second = send_message(
        db_session,
        AuthContext(user_id=driver_id, role="driver"),
        MessageCreate(content="two", recipients=[admin_auth.user_id]),
    )
    send_message(db_session, admin_auth, MessageCreate(content="elsewhere", recipients=["ops"]))

    messages = list_messages(db_session, AuthContext(user_id=driver_id, role="driver"))

    assert [message.id for message in messages] == [first.id, second.id]


def test_mark_read_is_idempotent_and_requires_participation(db_session, admin_auth):
    driver = AuthContext(user_id=str(uuid.uuid4()), role="driver")
    message = send_message(
        db_session, admin_auth, MessageCreate(content="hello", recipients=[driver.user_id])
    )

    mark_read(db_session, driver, str(message.id))
    updated = mark_read(db_session, driver, str(message.id))
    assert updated.read_by == [admin_auth.user_id, driver.user_id]

    with pytest.raises(HTTPException) as exc:
        mark_read(db_session, AuthContext(user_id="stranger", role="driver"), str(message.id))
    assert exc.value.status_code == 404
