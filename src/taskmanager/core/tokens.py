"""Access and refresh token issuance and validation."""

import base64
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from taskmanager.config import JwtSettings
from taskmanager.core.errors import AuthErrorCode, ConfigurationError, error_for_code

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_BYTES = 64


@dataclass(frozen=True)
class TokenPair:
    """Access token plus the opaque refresh token that rotates it."""

    access_token: str
    refresh_token: str
    refresh_token_expires_at: datetime


@dataclass(frozen=True)
class AccessTokenClaims:
    """Identity extracted from a validated access token."""

    user_id: str
    username: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenValidation:
    """Result of validating an access token: claims or an error code."""

    claims: AccessTokenClaims | None = None
    error: AuthErrorCode | None = None

    @property
    def ok(self) -> bool:
        return self.claims is not None


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenIssuer:
    """Issues signed access tokens and opaque refresh tokens."""

    def __init__(
        self,
        settings: JwtSettings | None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if settings is None:
            raise ConfigurationError("JWT settings (JWT__SECRET and token lifetimes) must be set.")
        if not settings.secret:
            raise ConfigurationError("JWT__SECRET must be set.")
        if settings.token_expiration_in_minutes <= 0:
            raise ConfigurationError(
                "JWT__TOKEN_EXPIRATION_IN_MINUTES must be a positive integer."
            )
        if settings.refresh_token_expiration_in_days <= 0:
            raise ConfigurationError(
                "JWT__REFRESH_TOKEN_EXPIRATION_IN_DAYS must be a positive integer."
            )

        self._secret = settings.secret
        self._algorithm = settings.algorithm
        self.access_token_lifetime = timedelta(minutes=settings.token_expiration_in_minutes)
        self.refresh_token_lifetime = timedelta(days=settings.refresh_token_expiration_in_days)
        self._clock = clock

    def generate_access_token(self, user_id: str, username: str) -> str:
        """
        Generate a signed access token.

        Args:
            user_id: Stable user identifier (``sub`` claim)
            username: Display name (``name`` claim)

        Returns:
            Encoded JWT
        """
        now = self._clock()
        payload = {
            "sub": user_id,
            "name": username,
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + self.access_token_lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def generate_refresh_token(self) -> tuple[str, datetime]:
        """
        Generate an opaque refresh token.

        Returns:
            tuple: (token, expires_at)
                - token: URL-safe base64 of 64 random bytes, carries no claims
                - expires_at: Now plus the refresh token lifetime
        """
        token = base64.urlsafe_b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")
        return token, self._clock() + self.refresh_token_lifetime

    def generate_token_pair(self, user_id: str, username: str) -> TokenPair:
        """Generate a fresh access/refresh token pair for a user."""
        refresh_token, refresh_expires_at = self.generate_refresh_token()
        return TokenPair(
            access_token=self.generate_access_token(user_id, username),
            refresh_token=refresh_token,
            refresh_token_expires_at=refresh_expires_at,
        )

    def validate_access_token(self, token: str) -> TokenValidation:
        """
        Validate an access token.

        Expiry is checked with zero leeway. An expired token yields
        ``EXPIRED_TOKEN``; every other failure yields ``INVALID_TOKEN``.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub", "name"]},
            )
        except jwt.ExpiredSignatureError:
            return TokenValidation(error=AuthErrorCode.EXPIRED_TOKEN)
        except jwt.InvalidTokenError as e:
            logger.debug(f"Access token rejected: {e}")
            return TokenValidation(error=AuthErrorCode.INVALID_TOKEN)

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return TokenValidation(error=AuthErrorCode.INVALID_TOKEN)

        user_id = payload["sub"]
        username = payload["name"]
        if not isinstance(user_id, str) or not isinstance(username, str):
            return TokenValidation(error=AuthErrorCode.INVALID_TOKEN)

        return TokenValidation(
            claims=AccessTokenClaims(
                user_id=user_id,
                username=username,
                expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            )
        )

    def require_access_token(self, token: str) -> AccessTokenClaims:
        """
        Validate an access token, raising on failure.

        Raises:
            ExpiredTokenError: If the token has expired
            InvalidTokenError: For any other validation failure
        """
        result = self.validate_access_token(token)
        if result.claims is None:
            raise error_for_code(result.error or AuthErrorCode.INVALID_TOKEN)
        return result.claims
