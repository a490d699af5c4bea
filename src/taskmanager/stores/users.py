"""User credential records and their store."""

from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from taskmanager.stores.collection import Document, DocumentCollection

USER_UNIQUE_FIELDS = ("username", "email")


def _as_utc(value: datetime | None) -> datetime | None:
    # Some backends (SQLite) hand back naive datetimes; they are stored as UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


@dataclass
class UserCredential:
    """Identity record with password material and refresh token state."""

    username: str
    email: str
    password_hash: str
    password_salt: str
    id: str | None = None
    refresh_token: str | None = None
    refresh_token_expires_at: datetime | None = None

    @classmethod
    def from_document(cls, document: Document) -> "UserCredential":
        return cls(
            id=document["id"],
            username=document["username"],
            email=document["email"],
            password_hash=document["password_hash"],
            password_salt=document["password_salt"],
            refresh_token=document.get("refresh_token"),
            refresh_token_expires_at=_as_utc(document.get("refresh_token_expires_at")),
        )

    def to_document(self) -> Document:
        document = asdict(self)
        if document["id"] is None:
            del document["id"]
        return document

    def __repr__(self) -> str:
        return f"<UserCredential(id={self.id}, username={self.username})>"


class UserStore:
    """Lookups and writes for user credentials."""

    def __init__(self, collection: DocumentCollection):
        self._collection = collection

    def _find_one(self, **filter) -> UserCredential | None:
        document = self._collection.find_one(filter)
        return UserCredential.from_document(document) if document else None

    def find_by_id(self, user_id: str) -> UserCredential | None:
        return self._find_one(id=user_id)

    def find_by_username(self, username: str) -> UserCredential | None:
        return self._find_one(username=username)

    def find_by_email(self, email: str) -> UserCredential | None:
        return self._find_one(email=email)

    def find_by_refresh_token(self, refresh_token: str) -> UserCredential | None:
        return self._find_one(refresh_token=refresh_token)

    def insert(self, user: UserCredential) -> UserCredential:
        """
        Insert a new user, assigning its id.

        Raises:
            DuplicateDocumentError: If the username or email is already stored
        """
        user.id = self._collection.insert_one(user.to_document())
        return user

    def replace(self, user: UserCredential) -> bool:
        """Replace a stored user by id. Returns False if no such user exists."""
        if user.id is None:
            raise ValueError("Cannot replace a user without an id")
        result = self._collection.replace_one({"id": user.id}, user.to_document())
        return result.matched_count > 0
