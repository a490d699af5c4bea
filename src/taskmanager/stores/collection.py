"""Generic document collection contract and an in-memory implementation.

A document is a plain ``dict`` keyed by field name; every stored document
has a string ``id``. Filters are field-equality mappings: a document matches
when every key in the filter is present with an equal value.
"""

import copy
import threading
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

Document = dict[str, Any]
Filter = Mapping[str, Any]


def new_document_id() -> str:
    """Generate an opaque document id."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ReplaceResult:
    """Outcome of a filtered replace."""

    matched_count: int
    modified_count: int


class DuplicateDocumentError(Exception):
    """Raised when an insert violates a unique field."""

    def __init__(self, field: str):
        super().__init__(f"Duplicate value for unique field '{field}'")
        self.field = field


class DocumentCollection(Protocol):
    """Query and mutation primitives over a collection of documents."""

    def find(self, filter: Filter) -> list[Document]: ...

    def find_one(self, filter: Filter) -> Document | None: ...

    def insert_one(self, document: Document) -> str:
        """Insert a document, assigning ``id`` if absent. Returns the id."""
        ...

    def replace_one(self, filter: Filter, document: Document) -> ReplaceResult:
        """Replace the first matching document. Never inserts."""
        ...

    def delete_one(self, filter: Filter) -> int:
        """Delete the first matching document. Returns the number removed."""
        ...


def matches(document: Mapping[str, Any], filter: Filter) -> bool:
    """Check whether a document satisfies an equality filter."""
    return all(key in document and document[key] == value for key, value in filter.items())


class InMemoryCollection:
    """
    Dict-backed document collection.

    Documents are copied on the way in and out, so callers never share
    state with the collection. Writes are serialized by a lock.
    """

    def __init__(self, unique_fields: Iterable[str] = ()):
        self._documents: dict[str, Document] = {}
        self._unique_fields = tuple(unique_fields)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._documents)

    def find(self, filter: Filter) -> list[Document]:
        with self._lock:
            return [copy.deepcopy(doc) for doc in self._documents.values() if matches(doc, filter)]

    def find_one(self, filter: Filter) -> Document | None:
        with self._lock:
            for doc in self._documents.values():
                if matches(doc, filter):
                    return copy.deepcopy(doc)
        return None

    def insert_one(self, document: Document) -> str:
        stored = copy.deepcopy(document)
        if not stored.get("id"):
            stored["id"] = new_document_id()

        with self._lock:
            if stored["id"] in self._documents:
                raise DuplicateDocumentError("id")
            self._check_unique(stored, exclude_id=None)
            self._documents[stored["id"]] = stored
        return stored["id"]

    def replace_one(self, filter: Filter, document: Document) -> ReplaceResult:
        with self._lock:
            current = next(
                (doc for doc in self._documents.values() if matches(doc, filter)), None
            )
            if current is None:
                return ReplaceResult(matched_count=0, modified_count=0)

            replacement = copy.deepcopy(document)
            replacement["id"] = current["id"]
            if replacement == current:
                return ReplaceResult(matched_count=1, modified_count=0)

            self._check_unique(replacement, exclude_id=current["id"])
            self._documents[current["id"]] = replacement
            return ReplaceResult(matched_count=1, modified_count=1)

    def delete_one(self, filter: Filter) -> int:
        with self._lock:
            for doc_id, doc in self._documents.items():
                if matches(doc, filter):
                    del self._documents[doc_id]
                    return 1
        return 0

    def _check_unique(self, document: Document, exclude_id: str | None) -> None:
        for field in self._unique_fields:
            value = document.get(field)
            if value is None:
                continue
            for doc_id, other in self._documents.items():
                if doc_id != exclude_id and other.get(field) == value:
                    raise DuplicateDocumentError(field)
