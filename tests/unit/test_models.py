"""Unit tests for database models."""

from sqlalchemy.orm import Session

from taskmanager.models import Task, User


def _make_user(session: Session, username: str = "testuser") -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash="hash",
        password_salt="salt",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def test_user_model(session_factory):
    """Test User model creation."""
    with session_factory() as session:
        user = _make_user(session)

        assert len(user.id) == 32
        assert user.username == "testuser"
        assert user.refresh_token is None
        assert user.refresh_token_expires_at is None
        assert user.inserted_at is not None
        assert user.updated_at is not None


def test_task_model(session_factory):
    """Test Task model creation."""
    with session_factory() as session:
        user = _make_user(session)

        task = Task(title="Test Task", description="Test Description", user_id=user.id)
        session.add(task)
        session.commit()
        session.refresh(task)

        assert task.id is not None
        assert task.completed is False
        assert task.owner.id == user.id
        assert [t.id for t in user.owned_tasks] == [task.id]
