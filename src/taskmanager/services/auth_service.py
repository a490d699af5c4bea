"""Registration, login and refresh token rotation."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from opentelemetry import trace

from taskmanager.core.errors import (
    EmailTakenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    UsernameTakenError,
)
from taskmanager.core.passwords import hash_password, verify_password
from taskmanager.core.tokens import TokenIssuer, TokenPair
from taskmanager.stores.collection import DuplicateDocumentError
from taskmanager.stores.users import UserCredential, UserStore
from taskmanager.telemetry import set_span_attributes

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass(frozen=True)
class PublicUserInfo:
    """The parts of a user that are safe to hand back to the caller."""

    username: str
    email: str


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AuthService:
    """Authentication flow over a user store and a token issuer."""

    def __init__(
        self,
        user_store: UserStore,
        token_issuer: TokenIssuer,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.user_store = user_store
        self.token_issuer = token_issuer
        self._clock = clock

    def register(self, username: str, email: str, password: str) -> PublicUserInfo:
        """
        Register a new user.

        Args:
            username: Desired username
            email: Email address
            password: Plaintext password (hashed before storage)

        Returns:
            Username and email of the created user

        Raises:
            UsernameTakenError: If the username is already registered
            EmailTakenError: If the email belongs to another account
        """
        with tracer.start_as_current_span("auth.register") as span:
            if self.user_store.find_by_username(username) is not None:
                logger.info(f"Registration rejected, username taken: {username}")
                set_span_attributes(span, **{"auth.outcome": "username_taken"})
                raise UsernameTakenError()

            if self.user_store.find_by_email(email) is not None:
                logger.info(f"Registration rejected, email taken for username: {username}")
                set_span_attributes(span, **{"auth.outcome": "email_taken"})
                raise EmailTakenError()

            password_hash, password_salt = hash_password(password)
            user = UserCredential(
                username=username,
                email=email,
                password_hash=password_hash,
                password_salt=password_salt,
            )

            # The unique columns still catch a concurrent registration
            try:
                user = self.user_store.insert(user)
            except DuplicateDocumentError as e:
                logger.info(f"Registration lost a race on {e.field}: {username}")
                if e.field == "email":
                    raise EmailTakenError() from e
                raise UsernameTakenError() from e

            logger.info(f"Registered user {user.id} ({username})")
            set_span_attributes(span, **{"auth.outcome": "registered", "user.id": user.id})
            return PublicUserInfo(username=user.username, email=user.email)

    def login(self, username: str, password: str) -> TokenPair:
        """
        Verify credentials and issue a fresh token pair.

        Unknown usernames and wrong passwords fail identically.

        Raises:
            InvalidCredentialsError: If the credentials do not match a user
        """
        with tracer.start_as_current_span("auth.login") as span:
            user = self.user_store.find_by_username(username)
            if user is None or not verify_password(
                password, user.password_hash, user.password_salt
            ):
                logger.info("Login failed: invalid credentials")
                set_span_attributes(span, **{"auth.outcome": "invalid_credentials"})
                raise InvalidCredentialsError()

            tokens = self._issue_tokens(user)
            logger.info(f"User {user.id} logged in")
            set_span_attributes(span, **{"auth.outcome": "logged_in", "user.id": user.id})
            return tokens

    def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a new pair, rotating the refresh token.

        Args:
            refresh_token: Opaque refresh token from a previous login or refresh

        Returns:
            New token pair; the presented refresh token no longer works

        Raises:
            InvalidRefreshTokenError: If the token is unknown, superseded or expired
        """
        with tracer.start_as_current_span("auth.refresh") as span:
            user = self.user_store.find_by_refresh_token(refresh_token) if refresh_token else None
            if user is None or user.refresh_token != refresh_token:
                logger.info("Refresh rejected: unknown refresh token")
                set_span_attributes(span, **{"auth.outcome": "invalid_refresh_token"})
                raise InvalidRefreshTokenError()

            expires_at = user.refresh_token_expires_at
            if expires_at is None or expires_at <= self._clock():
                logger.info(f"Refresh rejected for user {user.id}: refresh token expired")
                set_span_attributes(
                    span, **{"auth.outcome": "expired_refresh_token", "user.id": user.id}
                )
                raise InvalidRefreshTokenError()

            tokens = self._issue_tokens(user)
            logger.info(f"Rotated refresh token for user {user.id}")
            set_span_attributes(span, **{"auth.outcome": "refreshed", "user.id": user.id})
            return tokens

    def get_user_info(self, user_id: str) -> PublicUserInfo:
        """
        Look up the public details of an authenticated user.

        Raises:
            InvalidTokenError: If the token names a user that no longer exists
        """
        user = self.user_store.find_by_id(user_id)
        if user is None:
            logger.info(f"Access token names unknown user {user_id}")
            raise InvalidTokenError()
        return PublicUserInfo(username=user.username, email=user.email)

    def _issue_tokens(self, user: UserCredential) -> TokenPair:
        """Generate a pair and persist its refresh half with a single replace."""
        tokens = self.token_issuer.generate_token_pair(user.id, user.username)
        user.refresh_token = tokens.refresh_token
        user.refresh_token_expires_at = tokens.refresh_token_expires_at
        self.user_store.replace(user)
        return tokens
