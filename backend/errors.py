"""
Error taxonomy for the API and the Flask handlers that render it.

Stores and validators raise ApiError subclasses; the handlers registered
by `register_error_handlers` turn them into JSON responses. Database and
unexpected failures become a generic 500 and are logged with traceback.
"""

import logging
from typing import Dict, Optional, Tuple

import psycopg2
from flask import Flask, Response, json, jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, fields: Optional[Dict[str, str]] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.fields = fields

    def to_dict(self) -> Dict[str, object]:
        body: Dict[str, object] = {"error": self.message}
        if self.fields:
            body["fields"] = self.fields
        return body


class BadRequest(ApiError):
    status_code = 400
    default_message = "Bad request"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Permission denied"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Conflict(ApiError):
    status_code = 409
    default_message = "Conflict"


class InternalError(ApiError):
    status_code = 500


def register_error_handlers(app: Flask) -> None:
    """
    Attach JSON error handlers to the application.

    Args:
        app (Flask): The application to configure.
    """

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError) -> Tuple[Response, int]:
        if err.status_code >= 500:
            logging.error(f"[API] {err.message}", exc_info=err)
        else:
            logging.info(f"[API] {err.status_code} {err.message}")
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(psycopg2.Error)
    def handle_database_error(err: psycopg2.Error) -> Tuple[Response, int]:
        logging.error(f"[API] Database error: {err}", exc_info=err)
        return jsonify(InternalError().to_dict()), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException) -> Response:
        # Keep werkzeug's headers (e.g. Allow on 405), replace the HTML body
        response = err.get_response()
        response.data = json.dumps({"error": err.description})
        response.content_type = "application/json"
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception) -> Tuple[Response, int]:
        logging.exception(f"[API] Unhandled error: {err}")
        return jsonify(InternalError().to_dict()), 500
