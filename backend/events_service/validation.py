"""
Request validation for the events service.

Each validator returns the cleaned values together with a dict mapping
every rejected field to a message, instead of raising on the first problem.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from backend.errors import BadRequest

# --- CONSTANTS FOR VALIDATION ---
NAME_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000
LOCATION_MAX_LENGTH = 255


def parse_dt(val: Optional[str]) -> Optional[datetime]:
    """
    Safely parse an ISO-8601 or datetime-local string to a datetime object.

    Args:
        val (str): The date string to parse.

    Returns:
        datetime: The parsed datetime, or None if invalid.
    """
    if not val or not isinstance(val, str):
        return None
    try:
        # Handles 'YYYY-MM-DDTHH:MM' and '...Z' or '...+00:00'
        if val.endswith('Z'):
            val = val[:-1] + '+00:00'
        parsed = datetime.fromisoformat(val)
    except (ValueError, TypeError):
        return None
    # Naive values are taken as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_event_id(raw: str) -> int:
    """
    Convert a path segment into an event id.

    Raises:
        BadRequest: If the value is not a positive integer.
    """
    # ASCII digits only: no sign, whitespace, underscores or non-Latin numerals
    if not isinstance(raw, str) or not (raw.isascii() and raw.isdigit()):
        raise BadRequest("Invalid event ID")
    event_id = int(raw)
    if event_id <= 0:
        raise BadRequest("Invalid event ID")
    return event_id


def _check_text(data: Dict[str, Any], key: str, max_length: int, errors: Dict[str, str],
                cleaned: Dict[str, Any], required: bool = False) -> None:
    value = data.get(key)

    if value is None:
        if required:
            errors[key] = f"{key} is required"
        elif key in data:
            cleaned[key] = None
        return

    if not isinstance(value, str):
        errors[key] = f"{key} must be a string"
        return

    value = value.strip()
    if required and not value:
        errors[key] = f"{key} cannot be empty"
    elif len(value) > max_length:
        errors[key] = f"{key} must be {max_length} characters or less"
    else:
        cleaned[key] = value


def validate_event_payload(data: Any, partial: bool = False) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Validate the body of a create (partial=False) or update (partial=True) request.

    Known fields are name, description, location and date_time; anything
    else is ignored. On create, name is required. On update, every field
    is optional but at least one must be supplied, and name cannot be
    cleared.

    Returns:
        tuple: (cleaned, errors)
    """
    if not isinstance(data, dict):
        return {}, {"body": "Expected a JSON object"}

    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}

    if not partial or "name" in data:
        _check_text(data, "name", NAME_MAX_LENGTH, errors, cleaned, required=True)
    _check_text(data, "description", DESCRIPTION_MAX_LENGTH, errors, cleaned)
    _check_text(data, "location", LOCATION_MAX_LENGTH, errors, cleaned)

    if "date_time" in data:
        raw = data["date_time"]
        if raw is None:
            cleaned["date_time"] = None
        else:
            parsed = parse_dt(raw)
            if parsed is None:
                errors["date_time"] = "date_time must be an ISO-8601 datetime"
            else:
                cleaned["date_time"] = parsed

    if partial and not errors and not cleaned:
        errors["body"] = "No valid fields to update"

    if errors:
        return {}, errors
    return cleaned, {}
