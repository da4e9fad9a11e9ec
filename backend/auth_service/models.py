"""
User records and the credential store.

The store owns every SQL statement touching the users table. Passwords
are hashed before they reach the database and are never read back in
clear form.
"""

from dataclasses import dataclass
from typing import Any, Mapping

import psycopg2.errors

from backend.auth_service.passwords import DUMMY_HASH, hash_password, verify_password
from backend.database.db_connection import Database
from backend.errors import Conflict, NotFound, Unauthorized


@dataclass
class User:
    id: int
    email: str
    password_hash: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        return cls(id=row["id"], email=row["email"], password_hash=row["password_hash"])

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email}


class UserStore:
    """Persists and looks up users by email."""

    def __init__(self, db: Database):
        self.db = db

    def create(self, email: str, password: str) -> int:
        """
        Insert a new user.

        Args:
            email (str): Normalised email address.
            password (str): Clear-text password, hashed before storage.

        Returns:
            int: The new user's id.

        Raises:
            Conflict: If the email is already registered.
        """
        pw_hash = hash_password(password)

        sql = """
            INSERT INTO users (email, password_hash)
            VALUES (%s, %s)
            RETURNING id;
        """

        try:
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (email, pw_hash))
                    row = cur.fetchone()
        except psycopg2.errors.UniqueViolation:
            raise Conflict("Email already exists")

        return row["id"]

    def find_by_email(self, email: str) -> User:
        sql = "SELECT id, email, password_hash FROM users WHERE email = %s;"

        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (email,))
                row = cur.fetchone()

        if not row:
            raise NotFound("User not found")
        return User.from_row(row)

    def validate_credentials(self, email: str, password: str) -> User:
        """
        Return the user if the password matches.

        An unknown email and a wrong password raise the same Unauthorized
        error, so callers cannot tell which one happened.
        """
        try:
            user = self.find_by_email(email)
        except NotFound:
            verify_password(DUMMY_HASH, password)
            raise Unauthorized("Invalid credentials")

        if not verify_password(user.password_hash, password):
            raise Unauthorized("Invalid credentials")
        return user
