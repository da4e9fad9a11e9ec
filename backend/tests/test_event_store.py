from datetime import datetime, timezone

import psycopg2.errors
import pytest

from backend.errors import Conflict, Forbidden, NotFound
from backend.events_service.models import Event, EventStore


def event_row(**overrides):
    row = {
        "id": 1,
        "name": "Meetup",
        "description": "Desc",
        "location": "Room 101",
        "date_time": datetime(2025, 1, 1, 10, 0, 0, tzinfo=timezone.utc),
        "user_id": 1,
    }
    row.update(overrides)
    return row

def test_create_event(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = event_row()

    event = EventStore(db).create(1, {"name": "Meetup"})

    assert event.id == 1
    args, _ = mock_cursor.execute.call_args
    assert args[1] == ("Meetup", None, None, None, 1)

def test_list_events(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchall.return_value = [event_row(), event_row(id=2, name="Other")]

    events = EventStore(db).list()

    assert [e.id for e in events] == [1, 2]

def test_event_to_dict():
    event = Event.from_row(event_row())

    assert event.to_dict() == {
        "id": 1,
        "name": "Meetup",
        "description": "Desc",
        "location": "Room 101",
        "date_time": "2025-01-01T10:00:00+00:00",
        "user_id": 1,
    }

def test_get_by_id_missing(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = None

    with pytest.raises(NotFound):
        EventStore(db).get_by_id(99)

def test_update_by_owner(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.side_effect = [{"user_id": 1}, event_row(name="Renamed")]

    event = EventStore(db).update(1, 1, {"name": "Renamed"})

    assert event.name == "Renamed"
    sql, values = mock_cursor.execute.call_args[0]
    assert sql.startswith("UPDATE events SET name = %s WHERE id = %s")
    assert values == ["Renamed", 1]

def test_update_by_other_user(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = {"user_id": 1}

    with pytest.raises(Forbidden):
        EventStore(db).update(1, 2, {"name": "Hijacked"})
    # Only the ownership lookup ran
    assert mock_cursor.execute.call_count == 1

def test_update_missing_event(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = None

    with pytest.raises(NotFound):
        EventStore(db).update(1, 1, {"name": "x"})

def test_delete_by_owner(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = {"user_id": 1}

    EventStore(db).delete(1, 1)

    sql, params = mock_cursor.execute.call_args[0]
    assert sql.startswith("DELETE FROM events")
    assert params == (1,)

def test_delete_by_other_user(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = {"user_id": 1}

    with pytest.raises(Forbidden):
        EventStore(db).delete(1, 2)

def test_register(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = (1,)

    EventStore(db).register(2, 1)

    sql, params = mock_cursor.execute.call_args[0]
    assert sql.startswith("INSERT INTO registrations")
    assert params == (2, 1)

def test_register_missing_event(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = None

    with pytest.raises(NotFound):
        EventStore(db).register(2, 1)

def test_register_twice_is_conflict(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = (1,)
    mock_cursor.execute.side_effect = [None, psycopg2.errors.UniqueViolation("duplicate key")]

    with pytest.raises(Conflict):
        EventStore(db).register(2, 1)

def test_register_event_deleted_concurrently(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = (1,)
    mock_cursor.execute.side_effect = [None, psycopg2.errors.ForeignKeyViolation("fk")]

    with pytest.raises(NotFound):
        EventStore(db).register(2, 1)

def test_unregister(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.rowcount = 1

    EventStore(db).unregister(2, 1)

def test_unregister_when_not_registered(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.rowcount = 0

    with pytest.raises(NotFound):
        EventStore(db).unregister(2, 1)

def test_list_registrations_owner_only(mock_db):
    db, mock_conn, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = {"user_id": 1}
    mock_cursor.fetchall.return_value = [
        {"user_id": 2, "event_id": 1, "email": "b@x.com", "created_at": None}
    ]
    store = EventStore(db)

    registrations = store.list_registrations(1, 1)
    assert registrations[0].to_dict()["email"] == "b@x.com"

    with pytest.raises(Forbidden):
        store.list_registrations(1, 2)
