"""Database models."""
from taskmanager.models.task import Task
from taskmanager.models.user import User

__all__ = [
    "User",
    "Task",
]
