"""Ownership-scoped task persistence.

Every read and write filters on both the task id and the owning user id, so
a task that belongs to someone else is indistinguishable from one that does
not exist.
"""

from dataclasses import dataclass

from taskmanager.stores.collection import Document, DocumentCollection


@dataclass
class TaskRecord:
    """A task owned by a single user."""

    title: str
    user_id: str | None = None
    description: str | None = None
    completed: bool = False
    id: str | None = None

    @classmethod
    def from_document(cls, document: Document) -> "TaskRecord":
        return cls(
            id=document["id"],
            user_id=document["user_id"],
            title=document["title"],
            description=document.get("description"),
            completed=bool(document.get("completed", False)),
        )

    def to_document(self) -> Document:
        document: Document = {
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
        }
        if self.id is not None:
            document["id"] = self.id
        return document


@dataclass(frozen=True)
class UpdateOutcome:
    """Result of an ownership-scoped replace.

    ``found`` is True when a task matching id and owner existed; ``updated``
    is True when its stored content actually changed.
    """

    found: bool
    updated: bool


class TaskOwnershipStore:
    """CRUD over tasks, always scoped to the owning user."""

    def __init__(self, collection: DocumentCollection):
        self._collection = collection

    def list_by_owner(self, owner_id: str, completed: bool | None = None) -> list[TaskRecord]:
        """
        List the tasks owned by a user.

        Args:
            owner_id: Owning user id
            completed: If given, only tasks with this completed flag

        Returns:
            Matching tasks, in no particular order
        """
        filter: dict = {"user_id": owner_id}
        if completed is not None:
            filter["completed"] = completed
        return [TaskRecord.from_document(doc) for doc in self._collection.find(filter)]

    def get_by_id_and_owner(self, task_id: str, owner_id: str) -> TaskRecord | None:
        document = self._collection.find_one({"id": task_id, "user_id": owner_id})
        return TaskRecord.from_document(document) if document else None

    def insert(self, record: TaskRecord) -> TaskRecord:
        """Insert a task. The owner must already be set; the id is assigned if absent."""
        if not record.user_id:
            raise ValueError("Task owner must be set before insert")
        record.id = self._collection.insert_one(record.to_document())
        return record

    def replace_if_owned(self, task_id: str, owner_id: str, content: TaskRecord) -> UpdateOutcome:
        """
        Replace a task's content if it exists and belongs to the owner.

        The stored id and owner are kept whatever ``content`` carries. Never
        creates a task.
        """
        document = content.to_document()
        document["id"] = task_id
        document["user_id"] = owner_id

        result = self._collection.replace_one({"id": task_id, "user_id": owner_id}, document)
        found = result.matched_count > 0
        return UpdateOutcome(found=found, updated=found and result.modified_count > 0)

    def delete_if_owned(self, task_id: str, owner_id: str) -> bool:
        return self._collection.delete_one({"id": task_id, "user_id": owner_id}) > 0
