"""FastAPI dependencies for authentication and stores."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskmanager.core.errors import AuthError
from taskmanager.core.scope import Scope
from taskmanager.core.tokens import TokenIssuer
from taskmanager.services.auth_service import AuthService
from taskmanager.stores.tasks import TaskOwnershipStore

# HTTP Bearer token authentication
bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_task_store(request: Request) -> TaskOwnershipStore:
    return request.app.state.task_store


def get_current_scope(
    token: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> Scope:
    """
    Get the caller's scope from a Bearer access token.

    Args:
        token: Bearer token from Authorization header
        issuer: Token issuer used to validate it

    Returns:
        Scope of the authenticated user

    Raises:
        HTTPException: 401 if the token is missing, expired or invalid
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = issuer.require_access_token(token.credentials)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    return Scope.from_claims(claims)


# Type aliases for cleaner dependency injection
CurrentScope = Annotated[Scope, Depends(get_current_scope)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
TaskStore = Annotated[TaskOwnershipStore, Depends(get_task_store)]
