"""
Events service routes: create, read, update, delete events, and registration.
Handles event lifecycle management and participation.

Every protected route authenticates first, so an anonymous caller gets 401
before the event id, the body or ownership is examined.
"""

import logging
from typing import Tuple

from flask import Blueprint, Response, current_app, g, jsonify, request

from backend.auth_service.utils import login_required
from backend.errors import BadRequest
from backend.events_service.models import EventStore
from backend.events_service.validation import parse_event_id, validate_event_payload

events_bp = Blueprint("events", __name__)


def get_event_store() -> EventStore:
    return current_app.extensions["event_store"]


@events_bp.before_request
def before_request() -> None:
    logging.info(f"[Events] Incoming {request.method} {request.path}")


@events_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Events] Response {response.status}")
    return response


def _read_event_body(partial: bool) -> dict:
    fields, errors = validate_event_payload(request.get_json(silent=True), partial=partial)
    if errors:
        raise BadRequest("Invalid request body", fields=errors)
    return fields


@events_bp.route("", methods=["GET"])
def list_events() -> Tuple[Response, int]:
    """
    Return all events.

    No pagination; events come back in id order.

    Returns:
        200: List of event objects.
        500: Database error.
    """
    events = get_event_store().list()
    return jsonify([event.to_dict() for event in events]), 200


@events_bp.route("/<event_id>", methods=["GET"])
def get_event(event_id: str) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    Returns:
        200: Event object.
        400: Invalid event ID.
        404: Event not found.
    """
    event = get_event_store().get_by_id(parse_event_id(event_id))
    return jsonify(event.to_dict()), 200


@events_bp.route("", methods=["POST"])
@login_required
def create_event() -> Tuple[Response, int]:
    """
    Create an event owned by the caller.

    Expects a JSON body with:
    - name (str): Required, at most 200 characters.
    - description (str): Optional.
    - location (str): Optional.
    - date_time (str): Optional ISO-8601 datetime.

    Returns:
        201: The created event.
        400: Validation error.
        401: Missing or invalid token.
    """
    fields = _read_event_body(partial=False)

    event = get_event_store().create(g.user_id, fields)
    logging.info(f"[Events] User {g.user_id} created event {event.id}")

    return jsonify(event.to_dict()), 201


@events_bp.route("/<event_id>", methods=["PUT"])
@login_required
def update_event(event_id: str) -> Tuple[Response, int]:
    """
    Update an event. Only the fields present in the body change.

    Permission:
    - The creator of the event

    Returns:
        200: The updated event.
        400: Validation error.
        401: Missing or invalid token.
        403: Caller is not the creator.
        404: Event not found.
    """
    eid = parse_event_id(event_id)
    fields = _read_event_body(partial=True)

    event = get_event_store().update(eid, g.user_id, fields)
    return jsonify(event.to_dict()), 200


@events_bp.route("/<event_id>", methods=["DELETE"])
@login_required
def delete_event(event_id: str) -> Tuple[Response, int]:
    """
    Delete an event if the caller is its creator.
    """
    eid = parse_event_id(event_id)

    get_event_store().delete(eid, g.user_id)
    logging.info(f"[Events] User {g.user_id} deleted event {eid}")

    return jsonify({"message": "Event deleted successfully"}), 200


@events_bp.route("/<event_id>/register", methods=["POST"])
@login_required
def register_for_event(event_id: str) -> Tuple[Response, int]:
    """
    Register the caller for an event.

    Returns:
        200: Registered.
        400: Invalid event ID.
        404: Event not found.
        409: Already registered.
    """
    eid = parse_event_id(event_id)

    get_event_store().register(g.user_id, eid)

    return jsonify({"message": "Successfully registered for event"}), 200


@events_bp.route("/<event_id>/unregister", methods=["DELETE"])
@login_required
def unregister_from_event(event_id: str) -> Tuple[Response, int]:
    """
    Cancel the caller's registration. Not registered is a 404, not a no-op.
    """
    eid = parse_event_id(event_id)

    get_event_store().unregister(g.user_id, eid)

    return jsonify({"message": "Successfully unregistered from event"}), 200


@events_bp.route("/<event_id>/registrations", methods=["GET"])
@login_required
def list_registrations(event_id: str) -> Tuple[Response, int]:
    """
    Get the list of users registered for an event.
    Restricted to the event creator.
    """
    eid = parse_event_id(event_id)

    registrations = get_event_store().list_registrations(eid, g.user_id)

    return jsonify([r.to_dict() for r in registrations]), 200
