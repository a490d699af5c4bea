"""Persistence: document collections and the user/task stores built on them."""
from taskmanager.stores.collection import (
    DocumentCollection,
    DuplicateDocumentError,
    InMemoryCollection,
    ReplaceResult,
)
from taskmanager.stores.tasks import TaskOwnershipStore, TaskRecord, UpdateOutcome
from taskmanager.stores.users import USER_UNIQUE_FIELDS, UserCredential, UserStore

__all__ = [
    "DocumentCollection",
    "DuplicateDocumentError",
    "InMemoryCollection",
    "ReplaceResult",
    "TaskOwnershipStore",
    "TaskRecord",
    "UpdateOutcome",
    "UserCredential",
    "UserStore",
    "USER_UNIQUE_FIELDS",
]
