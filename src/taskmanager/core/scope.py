"""Scope-based authorization."""
from dataclasses import dataclass

from taskmanager.core.tokens import AccessTokenClaims


@dataclass(frozen=True)
class Scope:
    """Authorization scope for the authenticated caller.

    Every task operation is filtered by ``user_id``.
    """

    user_id: str
    username: str

    @classmethod
    def from_claims(cls, claims: AccessTokenClaims) -> "Scope":
        """Build a scope from validated access token claims."""
        return cls(user_id=claims.user_id, username=claims.username)
