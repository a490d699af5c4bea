"""Task routes."""
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status

from taskmanager.api.deps import CurrentScope, TaskStore
from taskmanager.schemas.task import TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from taskmanager.services.task_service import (
    create_task,
    delete_task,
    get_task,
    list_tasks,
    update_task,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Task not found",
    )


@router.get("", response_model=TaskListResponse)
def list_all_tasks(
    scope: CurrentScope,
    store: TaskStore,
    completed: Annotated[bool | None, Query(description="Filter by completed flag")] = None,
):
    """
    List the current user's tasks.

    Args:
        scope: Current user scope
        store: Task store
        completed: Optional completed filter

    Returns:
        List of tasks
    """
    tasks = list_tasks(store, scope, completed)
    return TaskListResponse(data=tasks)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_new_task(
    task_data: TaskCreate,
    scope: CurrentScope,
    store: TaskStore,
):
    """
    Create a new task.

    Args:
        task_data: Task creation data
        scope: Current user scope
        store: Task store

    Returns:
        Created task
    """
    return create_task(
        store,
        scope,
        title=task_data.title,
        description=task_data.description,
        completed=task_data.completed,
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_single_task(
    task_id: str,
    scope: CurrentScope,
    store: TaskStore,
):
    """
    Get a specific task.

    Raises:
        HTTPException: If the task does not exist or belongs to another user
    """
    task = get_task(store, scope, task_id)
    if not task:
        raise _not_found()
    return task


@router.put("/{task_id}", response_model=TaskResponse)
def update_existing_task(
    task_id: str,
    task_data: TaskUpdate,
    scope: CurrentScope,
    store: TaskStore,
):
    """
    Replace a task.

    Args:
        task_id: Task ID
        task_data: Full task content
        scope: Current user scope
        store: Task store

    Returns:
        Task as stored after the replace

    Raises:
        HTTPException: If the task does not exist or belongs to another user
    """
    task, _ = update_task(
        store,
        scope,
        task_id,
        title=task_data.title,
        description=task_data.description,
        completed=task_data.completed,
    )
    if task is None:
        raise _not_found()
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_existing_task(
    task_id: str,
    scope: CurrentScope,
    store: TaskStore,
):
    """
    Delete a task.

    Raises:
        HTTPException: If the task does not exist or belongs to another user
    """
    if not delete_task(store, scope, task_id):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
