"""Pydantic schemas for request/response validation."""
from taskmanager.schemas.task import TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from taskmanager.schemas.user import (
    CurrentUserResponse,
    RefreshTokenRequest,
    RegisterResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
)

__all__ = [
    # Task schemas
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskListResponse",
    # User schemas
    "UserCreate",
    "UserLogin",
    "RegisterResponse",
    "RefreshTokenRequest",
    "TokenResponse",
    "CurrentUserResponse",
]
