"""
Shared authentication helpers.
Provides token creation, verification, and the login_required guard.
"""

import functools
import jwt
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Tuple
from flask import g, jsonify, request, Response

from backend.config import JWT_SECRET, TOKEN_EXPIRATION_MINUTES

if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET is missing. Set it in .env")

JWT_ALGORITHM = "HS256"


# --- JWT CREATION ---
def create_token(user_id: int) -> str:
    """
    Generates a new JWT for a given user.

    Args:
        user_id (int): The unique ID of the user.

    Returns:
        str: Encoded JWT string.
    """
    now = datetime.now(timezone.utc)

    payload = {
        # PyJWT requires the subject claim to be a string
        "sub": str(user_id),
        "exp": now + timedelta(minutes=TOKEN_EXPIRATION_MINUTES),
        "iat": now
    }

    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def _decode(token: str) -> int:
    payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM], options={"require": ["sub", "exp"]})
    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise jwt.InvalidTokenError("subject is not a user id")


# --- JWT VALIDATION ---
def verify_token_from_request() -> Tuple[Optional[int], Optional[Response], Optional[int]]:
    """
    Verify the JWT in the Authorization header.

    Returns:
        tuple: (user_id, error_response, status_code)
               If successful, error_response and status_code are None.
               If failed, user_id is None.
    """

    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer "):
        return None, jsonify({"error": "missing token"}), 401

    token = auth.split(" ", 1)[1].strip()

    try:
        user_id = _decode(token)
    except jwt.ExpiredSignatureError:
        return None, jsonify({"error": "token expired"}), 401
    except jwt.InvalidTokenError:
        return None, jsonify({"error": "invalid token"}), 401

    return user_id, None, None


def verify_token(token: str) -> Optional[int]:
    """
    Validate a JWT outside of a request.

    Args:
        token (str): JWT string.

    Returns:
        int: user_id if valid, None otherwise.
    """
    try:
        return _decode(token)
    except jwt.InvalidTokenError:
        return None


def login_required(view: Callable[..., Any]) -> Callable[..., Any]:
    """
    Reject the request with 401 unless it carries a valid bearer token.
    On success the caller's id is available to the view as `g.user_id`.
    """

    @functools.wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        user_id, err, code = verify_token_from_request()
        if err:
            return err, code
        g.user_id = user_id
        return view(*args, **kwargs)

    return wrapper
