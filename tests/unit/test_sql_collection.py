"""Unit tests for the SQLAlchemy document collection."""
from datetime import UTC, datetime, timedelta

import pytest

from taskmanager.models import Task, User
from taskmanager.stores.collection import DuplicateDocumentError
from taskmanager.stores.sql import SqlAlchemyCollection


@pytest.fixture
def users(session_factory) -> SqlAlchemyCollection:
    return SqlAlchemyCollection(session_factory, User)


@pytest.fixture
def tasks(session_factory) -> SqlAlchemyCollection:
    return SqlAlchemyCollection(session_factory, Task)


def _user_document(username: str, email: str | None = None) -> dict:
    return {
        "username": username,
        "email": email or f"{username}@example.com",
        "password_hash": "hash",
        "password_salt": "salt",
        "refresh_token": None,
        "refresh_token_expires_at": None,
    }


def test_insert_and_find(users: SqlAlchemyCollection):
    """Test inserting a row and reading it back as a document."""
    user_id = users.insert_one(_user_document("alice"))

    document = users.find_one({"id": user_id})
    assert document["username"] == "alice"
    assert document["email"] == "alice@example.com"
    assert document["refresh_token"] is None
    assert users.find_one({"username": "nobody"}) is None


def test_duplicate_username(users: SqlAlchemyCollection):
    """Test that a duplicate username names the violated field."""
    users.insert_one(_user_document("alice"))

    with pytest.raises(DuplicateDocumentError) as exc_info:
        users.insert_one(_user_document("alice", "other@example.com"))
    assert exc_info.value.field == "username"


def test_duplicate_email(users: SqlAlchemyCollection):
    """Test that a duplicate email names the violated field."""
    users.insert_one(_user_document("alice"))

    with pytest.raises(DuplicateDocumentError) as exc_info:
        users.insert_one(_user_document("bob", "alice@example.com"))
    assert exc_info.value.field == "email"


def test_replace_counts(users: SqlAlchemyCollection):
    """Test that an identical replace matches without modifying."""
    document = _user_document("alice")
    user_id = users.insert_one(document)

    result = users.replace_one({"id": user_id}, document)
    assert (result.matched_count, result.modified_count) == (1, 0)

    expires_at = datetime.now(UTC) + timedelta(days=7)
    result = users.replace_one(
        {"id": user_id},
        {**document, "refresh_token": "token", "refresh_token_expires_at": expires_at},
    )
    assert (result.matched_count, result.modified_count) == (1, 1)
    assert users.find_one({"refresh_token": "token"})["id"] == user_id


def test_replace_missing_row(tasks: SqlAlchemyCollection):
    """Test that replace never inserts."""
    result = tasks.replace_one({"id": "missing"}, {"title": "a", "user_id": "u1"})

    assert (result.matched_count, result.modified_count) == (0, 0)
    assert tasks.find({}) == []


def test_find_with_compound_filter(users: SqlAlchemyCollection, tasks: SqlAlchemyCollection):
    """Test filtering on several columns."""
    owner_id = users.insert_one(_user_document("alice"))
    tasks.insert_one({"title": "a", "user_id": owner_id, "completed": True})
    tasks.insert_one({"title": "b", "user_id": owner_id, "completed": False})

    assert len(tasks.find({"user_id": owner_id})) == 2
    done = tasks.find({"user_id": owner_id, "completed": True})
    assert [doc["title"] for doc in done] == ["a"]


def test_delete_one(users: SqlAlchemyCollection, tasks: SqlAlchemyCollection):
    """Test filtered delete."""
    owner_id = users.insert_one(_user_document("alice"))
    task_id = tasks.insert_one({"title": "a", "user_id": owner_id})

    assert tasks.delete_one({"id": task_id, "user_id": "someone-else"}) == 0
    assert tasks.delete_one({"id": task_id, "user_id": owner_id}) == 1
    assert tasks.find_one({"id": task_id}) is None


def test_unknown_filter_field(tasks: SqlAlchemyCollection):
    """Test that filtering on a non-column is an error."""
    with pytest.raises(ValueError):
        tasks.find({"owner": "u1"})
