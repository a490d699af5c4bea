"""Authentication routes.

``AuthError`` raised by the service is turned into a 400/401 response by the
application's exception handler.
"""
from fastapi import APIRouter, status

from taskmanager.api.deps import AuthServiceDep, CurrentScope
from taskmanager.schemas.user import (
    CurrentUserResponse,
    RefreshTokenRequest,
    RegisterResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, auth: AuthServiceDep):
    """
    Register a new user.

    Args:
        user_data: User registration data
        auth: Authentication service

    Returns:
        Username and email of the created user
    """
    return auth.register(user_data.username, user_data.email, user_data.password)


@router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, auth: AuthServiceDep):
    """
    Login and get an access/refresh token pair.

    Args:
        credentials: Login credentials
        auth: Authentication service

    Returns:
        Token pair
    """
    return auth.login(credentials.username, credentials.password)


@router.post("/refresh-token", response_model=TokenResponse)
def refresh_token(body: RefreshTokenRequest, auth: AuthServiceDep):
    """
    Exchange a refresh token for a new token pair.

    The presented refresh token is rotated out and cannot be used again.
    """
    return auth.refresh(body.refresh_token)


@router.get("/me", response_model=CurrentUserResponse)
def get_current_user(scope: CurrentScope, auth: AuthServiceDep):
    """
    Get the current authenticated user.

    Args:
        scope: Current user scope
        auth: Authentication service

    Returns:
        Id, username and email of the caller
    """
    info = auth.get_user_info(scope.user_id)
    return CurrentUserResponse(user_id=scope.user_id, username=info.username, email=info.email)
