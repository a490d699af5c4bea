"""Error taxonomy for authentication and configuration failures.

Every authentication failure carries an ``AuthErrorCode`` so callers can
branch on ``err.code`` (or ``match`` on it) instead of inspecting exception
types. Messages never say which collaborator failed or whether a username
exists.
"""

from enum import Enum


class AuthErrorCode(str, Enum):
    """Authentication error codes."""

    USERNAME_TAKEN = "username_taken"
    EMAIL_TAKEN = "email_taken"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"
    EXPIRED_TOKEN = "expired_token"
    INVALID_TOKEN = "invalid_token"


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or invalid.

    This is fatal: it should abort startup, not be translated into a
    client-facing response.
    """


class AuthError(Exception):
    """Base class for recoverable authentication errors."""

    code: AuthErrorCode
    default_message: str = "Authentication failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class UsernameTakenError(AuthError):
    code = AuthErrorCode.USERNAME_TAKEN
    default_message = "This username is already taken."


class EmailTakenError(AuthError):
    code = AuthErrorCode.EMAIL_TAKEN
    default_message = "This email is already registered to a different account."


class InvalidCredentialsError(AuthError):
    code = AuthErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid credentials"


class InvalidRefreshTokenError(AuthError):
    code = AuthErrorCode.INVALID_REFRESH_TOKEN
    default_message = "Invalid refresh token"


class ExpiredTokenError(AuthError):
    code = AuthErrorCode.EXPIRED_TOKEN
    default_message = "Token has expired."


class InvalidTokenError(AuthError):
    code = AuthErrorCode.INVALID_TOKEN
    default_message = "Invalid token."


_ERRORS_BY_CODE: dict[AuthErrorCode, type[AuthError]] = {
    cls.code: cls
    for cls in (
        UsernameTakenError,
        EmailTakenError,
        InvalidCredentialsError,
        InvalidRefreshTokenError,
        ExpiredTokenError,
        InvalidTokenError,
    )
}


def error_for_code(code: AuthErrorCode) -> AuthError:
    """Build the exception matching an error code."""
    return _ERRORS_BY_CODE[code]()
