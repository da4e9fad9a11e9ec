"""
API gateway: combines the auth and events blueprints.
This is the local entrypoint for development.

Usage:
    python -m backend.gateway.server
"""

import logging
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from backend.auth_service.models import UserStore
from backend.auth_service.routes import auth_bp
from backend.config import GATEWAY_PORT, LOG_LEVEL, cors_origins
from backend.database.db_connection import Database, get_db
from backend.errors import register_error_handlers
from backend.events_service.models import EventStore
from backend.events_service.routes import events_bp

# Basic console logging during API requests
logging.basicConfig(level=LOG_LEVEL, format="[%(levelname)s] %(asctime)s - %(message)s")


def create_app(user_store: Optional[UserStore] = None,
               event_store: Optional[EventStore] = None,
               database: Optional[Database] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Stores are injected rather than looked up globally. Whatever is not
    passed in is built on `database`, which itself defaults to a pool
    opened from DATABASE_URL.

    Args:
        user_store (UserStore, optional): Credential store to use.
        event_store (EventStore, optional): Event store to use.
        database (Database, optional): Connection pool for the default stores.

    Returns:
        Flask: The configured Flask application.
    """
    app = Flask(__name__)
    CORS(app, resources={
        r"/*": {
            "origins": cors_origins(),
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    if user_store is None or event_store is None:
        database = database or get_db()
        user_store = user_store or UserStore(database)
        event_store = event_store or EventStore(database)

    app.extensions["user_store"] = user_store
    app.extensions["event_store"] = event_store

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(auth_bp)
    app.register_blueprint(events_bp, url_prefix="/events")
    register_error_handlers(app)

    logging.info("All blueprints registered successfully.")

    @app.route("/")
    def welcome():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"message": "Welcome to REST API"}), 200

    @app.route("/health")
    def health():
        """
        Health check endpoint.
        """
        return jsonify({"status": "ok"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=GATEWAY_PORT, debug=True)
