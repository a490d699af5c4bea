"""SQLAlchemy-backed document collection."""

import logging

from sqlalchemy import Select, inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from taskmanager.database import Base
from taskmanager.stores.collection import (
    Document,
    DuplicateDocumentError,
    Filter,
    ReplaceResult,
    new_document_id,
)

logger = logging.getLogger(__name__)


class SqlAlchemyCollection:
    """
    Document collection over the rows of one mapped model.

    Documents hold the model's column attributes. Each call runs in its own
    transaction. ``replace_one`` updates only the fields present in the
    replacement document and writes nothing when every value is unchanged,
    which is what makes ``modified_count`` meaningful.
    """

    def __init__(self, session_factory: sessionmaker, model: type[Base]):
        self._session_factory = session_factory
        self._model = model

        mapper = inspect(model)
        self._columns = {attr.key for attr in mapper.column_attrs}
        self._primary_keys = {column.key for column in mapper.primary_key}
        # Longest names first so "username" is tried before "id"
        unique = {column.key for column in mapper.columns if column.unique}
        self._unique_columns = sorted(unique | self._primary_keys, key=len, reverse=True)

    def find(self, filter: Filter) -> list[Document]:
        with self._session_factory() as session:
            rows = session.execute(self._select(filter)).scalars().all()
            return [self._to_document(row) for row in rows]

    def find_one(self, filter: Filter) -> Document | None:
        with self._session_factory() as session:
            row = session.execute(self._select(filter).limit(1)).scalars().first()
            return self._to_document(row) if row is not None else None

    def insert_one(self, document: Document) -> str:
        values = {key: value for key, value in document.items() if key in self._columns}
        if not values.get("id"):
            values["id"] = new_document_id()

        try:
            with self._session_factory.begin() as session:
                session.add(self._model(**values))
        except IntegrityError as e:
            field = self._duplicate_field(e)
            if field is None:
                raise
            raise DuplicateDocumentError(field) from e

        return values["id"]

    def replace_one(self, filter: Filter, document: Document) -> ReplaceResult:
        values = {
            key: value
            for key, value in document.items()
            if key in self._columns and key not in self._primary_keys
        }

        try:
            with self._session_factory.begin() as session:
                row = session.execute(
                    self._select(filter).limit(1).with_for_update()
                ).scalars().first()
                if row is None:
                    return ReplaceResult(matched_count=0, modified_count=0)

                changed = {
                    key: value for key, value in values.items() if getattr(row, key) != value
                }
                if not changed:
                    return ReplaceResult(matched_count=1, modified_count=0)

                for key, value in changed.items():
                    setattr(row, key, value)
        except IntegrityError as e:
            field = self._duplicate_field(e)
            if field is None:
                raise
            raise DuplicateDocumentError(field) from e

        return ReplaceResult(matched_count=1, modified_count=1)

    def delete_one(self, filter: Filter) -> int:
        with self._session_factory.begin() as session:
            row = session.execute(self._select(filter).limit(1).with_for_update()).scalars().first()
            if row is None:
                return 0
            session.delete(row)
        return 1

    def _select(self, filter: Filter) -> Select:
        unknown = set(filter) - self._columns
        if unknown:
            raise ValueError(f"Unknown fields for {self._model.__name__}: {sorted(unknown)}")
        return select(self._model).filter_by(**filter)

    def _to_document(self, row: Base) -> Document:
        return {key: getattr(row, key) for key in self._columns}

    def _duplicate_field(self, exc: IntegrityError) -> str | None:
        """Name the unique field an integrity error violated, if any."""
        # SQLite names "table.column", PostgreSQL reports "Key (column)=..."
        message = str(exc.orig).lower() if exc.orig else ""
        table = self._model.__tablename__
        for name in self._unique_columns:
            if f"{table}.{name}" in message or f"({name})" in message:
                return name

        logger.error(f"Integrity error on {table}: {message}")
        return None
