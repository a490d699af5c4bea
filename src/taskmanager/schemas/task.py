"""Task Pydantic schemas."""
from pydantic import BaseModel, Field


class TaskBase(BaseModel):
    """Fields shared by task requests and responses."""

    title: str = Field(..., min_length=1, max_length=200, description="Task title")
    description: str | None = Field(None, max_length=10000, description="Task description")
    completed: bool = Field(default=False, description="Whether the task is done")


class TaskCreate(TaskBase):
    """Schema for creating a task."""

    pass


class TaskUpdate(TaskBase):
    """Schema for replacing a task. Omitted fields take their defaults."""

    pass


class TaskResponse(TaskBase):
    """Schema for task response."""

    id: str
    user_id: str

    model_config = {"from_attributes": True}


class TaskListResponse(BaseModel):
    """Schema for task list response."""

    data: list[TaskResponse]
