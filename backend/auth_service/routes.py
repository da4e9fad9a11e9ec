"""
Authentication service route handlers.

Provides routes for:
- User signup
- User login

Credential storage is delegated to the UserStore injected into the app;
all JWT logic lives in `auth_service.utils`.
"""

import logging
from typing import Tuple

from flask import Blueprint, Response, current_app, jsonify, request

from backend.auth_service.models import UserStore
from backend.auth_service.utils import create_token
from backend.auth_service.validation import validate_credentials_payload
from backend.errors import BadRequest

auth_bp = Blueprint("auth", __name__)


def get_user_store() -> UserStore:
    return current_app.extensions["user_store"]


# --- REQUEST LOGGING ---
@auth_bp.before_request
def before_request() -> None:
    """
    Log every incoming request method and path to the authentication service.
    """
    logging.info(f"[Auth] Incoming {request.method} {request.path}")


@auth_bp.after_request
def after_request(response: Response) -> Response:
    """
    Log the response status code for every request.

    Args:
        response (Response): The Flask response object.

    Returns:
        Response: The passed-through response object.
    """
    logging.info(f"[Auth] Response {response.status}")
    return response


def _read_credentials() -> Tuple[str, str]:
    data = request.get_json(silent=True)
    cleaned, errors = validate_credentials_payload(data)
    if errors:
        raise BadRequest("Invalid request body", fields=errors)
    return cleaned["email"], cleaned["password"]


# --- SIGNUP ---
@auth_bp.route("/signup", methods=["POST"])
def signup() -> Tuple[Response, int]:
    """
    Register a new user in the system.

    Expects a JSON body with:
    - email (str): Unique email address.
    - password (str)

    Returns:
        201: JSON with a message and the new user_id.
        400: Missing or invalid fields.
        409: Email already exists.
    """
    email, password = _read_credentials()

    user_id = get_user_store().create(email, password)
    logging.info(f"[Auth] Created user {user_id}")

    return jsonify({"message": "User created successfully", "user_id": user_id}), 201


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: JSON with a message and the JWT token.
        400: Malformed body.
        401: Invalid credentials (wrong password or unknown email).
    """
    email, password = _read_credentials()

    user = get_user_store().validate_credentials(email, password)
    token = create_token(user.id)

    return jsonify({"message": "Login successful", "token": token}), 200
