"""Integration tests for task endpoints."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from taskmanager.core.tokens import TokenIssuer


@pytest.fixture
def other_headers(register_and_login) -> dict[str, str]:
    """Authorization headers for a second user."""
    tokens = register_and_login("otheruser")
    return {"Authorization": f"Bearer {tokens['access_token']}"}


def test_create_task(client: TestClient, auth_headers, test_task_data):
    """Test creating a task."""
    response = client.post("/api/tasks", json=test_task_data, headers=auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == test_task_data["title"]
    assert data["description"] == test_task_data["description"]
    assert data["completed"] is False
    assert data["id"]
    assert data["user_id"]


def test_create_task_validation(client: TestClient, auth_headers):
    """Test that an empty title is rejected."""
    response = client.post("/api/tasks", json={"title": ""}, headers=auth_headers)
    assert response.status_code == 422


def test_list_tasks(client: TestClient, auth_headers, test_task_data):
    """Test listing tasks with and without the completed filter."""
    client.post("/api/tasks", json=test_task_data, headers=auth_headers)
    client.post(
        "/api/tasks", json={"title": "Done already", "completed": True}, headers=auth_headers
    )

    response = client.get("/api/tasks", headers=auth_headers)
    assert response.status_code == 200
    assert len(response.json()["data"]) == 2

    response = client.get("/api/tasks", params={"completed": "true"}, headers=auth_headers)
    assert [t["title"] for t in response.json()["data"]] == ["Done already"]


def test_get_task(client: TestClient, auth_headers, test_task_data):
    """Test getting a specific task."""
    created = client.post("/api/tasks", json=test_task_data, headers=auth_headers).json()

    response = client.get(f"/api/tasks/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == created


def test_get_missing_task(client: TestClient, auth_headers):
    """Test getting a task that does not exist."""
    response = client.get("/api/tasks/does-not-exist", headers=auth_headers)
    assert response.status_code == 404


def test_update_task(client: TestClient, auth_headers, test_task_data):
    """Test replacing a task."""
    created = client.post("/api/tasks", json=test_task_data, headers=auth_headers).json()

    response = client.put(
        f"/api/tasks/{created['id']}",
        json={"title": "Updated", "completed": True},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == created["id"]
    assert data["title"] == "Updated"
    assert data["completed"] is True
    # Full replacement: an omitted description is cleared
    assert data["description"] is None


def test_update_task_unchanged(client: TestClient, auth_headers, test_task_data):
    """Test that replacing with identical content still succeeds."""
    created = client.post("/api/tasks", json=test_task_data, headers=auth_headers).json()

    response = client.put(
        f"/api/tasks/{created['id']}", json=test_task_data, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json() == created


def test_update_missing_task(client: TestClient, auth_headers):
    """Test that updating a missing task does not create it."""
    response = client.put(
        "/api/tasks/does-not-exist", json={"title": "Ghost"}, headers=auth_headers
    )
    assert response.status_code == 404
    assert client.get("/api/tasks", headers=auth_headers).json()["data"] == []


def test_delete_task(client: TestClient, auth_headers, test_task_data):
    """Test deleting a task."""
    created = client.post("/api/tasks", json=test_task_data, headers=auth_headers).json()

    response = client.delete(f"/api/tasks/{created['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = client.get(f"/api/tasks/{created['id']}", headers=auth_headers)
    assert response.status_code == 404

    response = client.delete(f"/api/tasks/{created['id']}", headers=auth_headers)
    assert response.status_code == 404


def test_other_users_task_is_not_found(
    client: TestClient, auth_headers, other_headers, test_task_data
):
    """Test that another user's task cannot be read, changed or deleted."""
    created = client.post("/api/tasks", json=test_task_data, headers=auth_headers).json()
    url = f"/api/tasks/{created['id']}"

    assert client.get(url, headers=other_headers).status_code == 404
    assert client.put(url, json={"title": "Mine now"}, headers=other_headers).status_code == 404
    assert client.delete(url, headers=other_headers).status_code == 404
    assert client.get("/api/tasks", headers=other_headers).json()["data"] == []

    # The owner's task is untouched
    response = client.get(url, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == created


def test_tasks_require_authentication(client: TestClient):
    """Test that task endpoints reject unauthenticated calls."""
    assert client.get("/api/tasks").status_code == 401
    assert client.post("/api/tasks", json={"title": "x"}).status_code == 401
    assert client.get("/api/tasks/any").status_code == 401
    assert client.put("/api/tasks/any", json={"title": "x"}).status_code == 401
    assert client.delete("/api/tasks/any").status_code == 401


def test_refresh_token_is_not_a_bearer_token(client: TestClient, register_and_login):
    """Test that a refresh token cannot be used as an access token."""
    tokens = register_and_login("alice")

    response = client.get(
        "/api/tasks", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token."


def test_expired_access_token(client: TestClient, jwt_settings):
    """Test that an expired bearer token is rejected with its own message."""
    past = datetime.now(UTC) - timedelta(hours=1)
    token = TokenIssuer(jwt_settings, clock=lambda: past).generate_access_token(
        "some-user-id", "testuser"
    )

    response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired."
    assert response.headers["WWW-Authenticate"] == "Bearer"
