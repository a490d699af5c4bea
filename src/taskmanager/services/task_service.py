"""Task service for the authenticated user's own tasks."""

import logging

from taskmanager.core.scope import Scope
from taskmanager.stores.tasks import TaskOwnershipStore, TaskRecord, UpdateOutcome

logger = logging.getLogger(__name__)


def create_task(
    store: TaskOwnershipStore,
    scope: Scope,
    title: str,
    description: str | None = None,
    completed: bool = False,
) -> TaskRecord:
    """
    Create a task owned by the current user.

    Args:
        store: Task store
        scope: Authorization scope
        title: Task title
        description: Optional description
        completed: Initial completed flag

    Returns:
        Created task with its id
    """
    task = store.insert(
        TaskRecord(
            title=title,
            description=description,
            completed=completed,
            user_id=scope.user_id,
        )
    )
    logger.info(f"Created task {task.id} for user {scope.user_id}")
    return task


def list_tasks(
    store: TaskOwnershipStore,
    scope: Scope,
    completed: bool | None = None,
) -> list[TaskRecord]:
    """
    List the current user's tasks.

    Args:
        store: Task store
        scope: Authorization scope
        completed: Optional completed filter

    Returns:
        List of tasks
    """
    return store.list_by_owner(scope.user_id, completed=completed)


def get_task(store: TaskOwnershipStore, scope: Scope, task_id: str) -> TaskRecord | None:
    """
    Get a task by ID.

    Returns:
        Task if it exists and belongs to the current user, None otherwise
    """
    return store.get_by_id_and_owner(task_id, scope.user_id)


def update_task(
    store: TaskOwnershipStore,
    scope: Scope,
    task_id: str,
    title: str,
    description: str | None,
    completed: bool,
) -> tuple[TaskRecord | None, UpdateOutcome]:
    """
    Replace a task's content.

    Args:
        store: Task store
        scope: Authorization scope
        task_id: Task ID
        title: New title
        description: New description (None clears it)
        completed: New completed flag

    Returns:
        tuple: (task, outcome)
            - task: The stored task after the replace, None if not found
            - outcome: Whether the task was found and whether it changed
    """
    content = TaskRecord(title=title, description=description, completed=completed)
    outcome = store.replace_if_owned(task_id, scope.user_id, content)
    if not outcome.found:
        return None, outcome

    if outcome.updated:
        logger.info(f"Updated task {task_id} for user {scope.user_id}")
    return store.get_by_id_and_owner(task_id, scope.user_id), outcome


def delete_task(store: TaskOwnershipStore, scope: Scope, task_id: str) -> bool:
    """
    Delete a task.

    Returns:
        True if a task owned by the current user was deleted
    """
    deleted = store.delete_if_owned(task_id, scope.user_id)
    if deleted:
        logger.info(f"Deleted task {task_id} for user {scope.user_id}")
    return deleted
