"""
Event records and the event store.

The store owns every SQL statement touching the events and registrations
tables. Ownership is the only authorization rule it enforces: an event may
be updated, deleted or have its registrations listed only by its creator.
The UNIQUE(user_id, event_id) constraint on registrations decides whether
a registration already exists.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

import psycopg2.errors

from backend.database.db_connection import Database
from backend.errors import Conflict, Forbidden, NotFound

EVENT_COLUMNS = "id, name, description, location, date_time, user_id"
UPDATABLE_FIELDS = ("name", "description", "location", "date_time")


@dataclass
class Event:
    id: int
    name: str
    description: Optional[str]
    location: Optional[str]
    date_time: Optional[datetime]
    user_id: int

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Event":
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            location=row["location"],
            date_time=row["date_time"],
            user_id=row["user_id"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "date_time": self.date_time.isoformat() if self.date_time else None,
            "user_id": self.user_id,
        }


@dataclass
class Registration:
    user_id: int
    event_id: int
    email: str
    created_at: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "event_id": self.event_id,
            "email": self.email,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class EventStore:
    """Persists events and the registrations of users for them."""

    def __init__(self, db: Database):
        self.db = db

    def create(self, owner_id: int, fields: Dict[str, Any]) -> Event:
        sql = f"""
            INSERT INTO events (name, description, location, date_time, user_id)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING {EVENT_COLUMNS};
        """

        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    fields["name"],
                    fields.get("description"),
                    fields.get("location"),
                    fields.get("date_time"),
                    owner_id,
                ))
                row = cur.fetchone()

        return Event.from_row(row)

    def list(self) -> List[Event]:
        """
        Return every event. No pagination; rows come back ordered by id.
        """
        sql = f"SELECT {EVENT_COLUMNS} FROM events ORDER BY id;"

        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                rows = cur.fetchall()

        return [Event.from_row(row) for row in rows]

    def get_by_id(self, event_id: int) -> Event:
        sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE id = %s;"

        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (event_id,))
                row = cur.fetchone()

        if not row:
            raise NotFound("Event not found")
        return Event.from_row(row)

    @staticmethod
    def _check_owner(cur, event_id: int, requester_id: int) -> None:
        # Locks the event row for the rest of the transaction
        cur.execute("SELECT user_id FROM events WHERE id = %s FOR UPDATE;", (event_id,))
        row = cur.fetchone()
        if not row:
            raise NotFound("Event not found")
        if row["user_id"] != requester_id:
            raise Forbidden("Only the event creator can modify this event")

    def update(self, event_id: int, requester_id: int, fields: Dict[str, Any]) -> Event:
        """
        Change the given fields of an event owned by `requester_id`.

        Raises:
            NotFound: If the event does not exist.
            Forbidden: If the requester did not create the event.
        """
        changes = {k: fields[k] for k in UPDATABLE_FIELDS if k in fields}

        with self.db.connection() as conn:
            with conn.cursor() as cur:
                self._check_owner(cur, event_id, requester_id)

                if not changes:
                    cur.execute(f"SELECT {EVENT_COLUMNS} FROM events WHERE id = %s;", (event_id,))
                    return Event.from_row(cur.fetchone())

                set_clause = ", ".join(f"{k} = %s" for k in changes)
                values = list(changes.values()) + [event_id]
                cur.execute(
                    f"UPDATE events SET {set_clause} WHERE id = %s RETURNING {EVENT_COLUMNS};",
                    values,
                )
                row = cur.fetchone()

        return Event.from_row(row)

    def delete(self, event_id: int, requester_id: int) -> None:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                self._check_owner(cur, event_id, requester_id)
                cur.execute("DELETE FROM events WHERE id = %s;", (event_id,))

    def register(self, user_id: int, event_id: int) -> None:
        """
        Register a user for an event.

        Raises:
            NotFound: If the event does not exist.
            Conflict: If the user is already registered for it.
        """
        try:
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1 FROM events WHERE id = %s;", (event_id,))
                    if not cur.fetchone():
                        raise NotFound("Event not found")

                    cur.execute(
                        "INSERT INTO registrations (user_id, event_id) VALUES (%s, %s);",
                        (user_id, event_id),
                    )
        except psycopg2.errors.UniqueViolation:
            raise Conflict("Already registered for this event")
        except psycopg2.errors.ForeignKeyViolation:
            # Event removed between the existence check and the insert
            raise NotFound("Event not found")

    def unregister(self, user_id: int, event_id: int) -> None:
        """
        Remove a user's registration. A missing registration is an error.

        Raises:
            NotFound: If the user is not registered for the event.
        """
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM registrations WHERE user_id = %s AND event_id = %s;",
                    (user_id, event_id),
                )
                deleted = cur.rowcount

        if deleted == 0:
            raise NotFound("Not registered for this event")

    def list_registrations(self, event_id: int, requester_id: int) -> List[Registration]:
        sql = """
            SELECT r.user_id, r.event_id, u.email, r.created_at
            FROM registrations r
            JOIN users u ON r.user_id = u.id
            WHERE r.event_id = %s
            ORDER BY r.created_at;
        """

        with self.db.connection() as conn:
            with conn.cursor() as cur:
                self._check_owner(cur, event_id, requester_id)
                cur.execute(sql, (event_id,))
                rows = cur.fetchall()

        return [
            Registration(
                user_id=row["user_id"],
                event_id=row["event_id"],
                email=row["email"],
                created_at=row["created_at"],
            )
            for row in rows
        ]
