from backend.auth_service.models import User
from backend.auth_service.utils import verify_token
from backend.errors import Conflict, Unauthorized


def test_signup_success(client, user_store):
    user_store.create.return_value = 1

    response = client.post("/signup", json={"email": "A@x.com ", "password": "pw123"})

    assert response.status_code == 201
    data = response.get_json()
    assert data["user_id"] == 1
    assert "password" not in data
    # Email is normalised before it reaches the store
    user_store.create.assert_called_once_with("a@x.com", "pw123")

def test_signup_missing_fields(client, user_store):
    response = client.post("/signup", json={})

    assert response.status_code == 400
    data = response.get_json()
    assert data["error"] == "Invalid request body"
    assert set(data["fields"]) == {"email", "password"}
    user_store.create.assert_not_called()

def test_signup_invalid_email(client):
    response = client.post("/signup", json={"email": "not-an-email", "password": "pw123"})

    assert response.status_code == 400
    assert "email" in response.get_json()["fields"]

def test_signup_non_json_body(client):
    response = client.post("/signup", data="email=a@x.com", content_type="text/plain")

    assert response.status_code == 400

def test_signup_duplicate_email(client, user_store):
    user_store.create.side_effect = Conflict("Email already exists")

    response = client.post("/signup", json={"email": "a@x.com", "password": "pw123"})

    assert response.status_code == 409
    assert response.get_json()["error"] == "Email already exists"

def test_login_success(client, user_store):
    user_store.validate_credentials.return_value = User(id=7, email="a@x.com", password_hash="h")

    response = client.post("/login", json={"email": "a@x.com", "password": "pw123"})

    assert response.status_code == 200
    token = response.get_json()["token"]
    assert verify_token(token) == 7

def test_login_invalid_credentials(client, user_store):
    user_store.validate_credentials.side_effect = Unauthorized("Invalid credentials")

    response = client.post("/login", json={"email": "a@x.com", "password": "wrongpassword"})

    assert response.status_code == 401
    assert response.get_json() == {"error": "Invalid credentials"}

def test_login_missing_password(client, user_store):
    response = client.post("/login", json={"email": "a@x.com"})

    assert response.status_code == 400
    user_store.validate_credentials.assert_not_called()
