import os

# Ensure JWT_SECRET is set before the auth helpers are imported
os.environ["JWT_SECRET"] = "test-secret-at-least-32-bytes-long"

import pytest

from backend.auth_service.models import UserStore
from backend.events_service.models import EventStore
from backend.gateway.server import create_app


@pytest.fixture
def mock_db(mocker):
    """
    Mocks the Database handle, its pooled connection and the cursor.
    """
    db = mocker.MagicMock()
    mock_conn = mocker.MagicMock()
    mock_cursor = mocker.MagicMock()

    # db.connection() is a context manager yielding the connection
    db.connection.return_value.__enter__.return_value = mock_conn
    db.connection.return_value.__exit__.return_value = False

    # Setup the context manager for cursor
    mock_conn.cursor.return_value.__enter__.return_value = mock_cursor
    mock_conn.cursor.return_value.__exit__.return_value = False

    return db, mock_conn, mock_cursor


@pytest.fixture
def user_store(mocker):
    return mocker.Mock(spec=UserStore)


@pytest.fixture
def event_store(mocker):
    return mocker.Mock(spec=EventStore)


@pytest.fixture
def app(user_store, event_store):
    app = create_app(user_store=user_store, event_store=event_store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header():
    """
    Build an Authorization header carrying a valid token for a user id.
    """
    from backend.auth_service.utils import create_token

    def _make(user_id: int = 1) -> dict:
        return {"Authorization": f"Bearer {create_token(user_id)}"}

    return _make
