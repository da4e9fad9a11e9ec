"""
Request body validation for signup and login.
"""

import re
from typing import Any, Dict, Tuple

EMAIL_MAX_LENGTH = 255
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_credentials_payload(data: Any) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Validate an {email, password} body.

    Args:
        data: The decoded JSON body (anything, it is checked here).

    Returns:
        tuple: (cleaned, errors). `cleaned` holds the normalised email and
               the password; `errors` maps each bad field to a message.
    """
    if not isinstance(data, dict):
        return {}, {"body": "Expected a JSON object"}

    errors: Dict[str, str] = {}
    email = data.get("email")
    password = data.get("password")

    if not isinstance(email, str) or not email.strip():
        errors["email"] = "Email is required"
    else:
        email = email.strip().lower()
        if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
            errors["email"] = "Email is not a valid address"

    if not isinstance(password, str) or not password:
        errors["password"] = "Password is required"

    if errors:
        return {}, errors
    return {"email": email, "password": password}, {}
