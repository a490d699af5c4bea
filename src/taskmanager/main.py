"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from sqlalchemy.orm import sessionmaker

from taskmanager import __version__
from taskmanager.api.routes import auth, tasks
from taskmanager.config import Settings, get_settings
from taskmanager.core.errors import AuthError, AuthErrorCode
from taskmanager.core.logging import setup_logging
from taskmanager.core.tokens import TokenIssuer
from taskmanager.database import create_tables, init_db
from taskmanager.models import Task, User
from taskmanager.services.auth_service import AuthService
from taskmanager.stores.sql import SqlAlchemyCollection
from taskmanager.stores.tasks import TaskOwnershipStore
from taskmanager.stores.users import UserStore
from taskmanager.telemetry import TelemetryManager

logger = logging.getLogger(__name__)

# Registration conflicts are client errors; everything else is an auth failure
_BAD_REQUEST_CODES = {AuthErrorCode.USERNAME_TAKEN, AuthErrorCode.EMAIL_TAKEN}


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker | None = None,
) -> FastAPI:
    """
    Build the application and wire its collaborators.

    Args:
        settings: Settings to use; read from the environment when omitted
        session_factory: Existing session factory (tests pass one bound to SQLite)

    Returns:
        Configured FastAPI application

    Raises:
        ConfigurationError: If required settings are missing or invalid
    """
    settings = settings or get_settings()

    setup_logging(settings)

    telemetry_manager = TelemetryManager(settings)
    telemetry_manager.setup()

    if session_factory is None:
        session_factory = init_db(settings)
        if settings.db_create_tables:
            create_tables()
        logger.info("Database initialized")

    token_issuer = TokenIssuer(settings.jwt)
    user_store = UserStore(SqlAlchemyCollection(session_factory, User))
    task_store = TaskOwnershipStore(SqlAlchemyCollection(session_factory, Task))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name}")
        yield
        telemetry_manager.shutdown()
        logger.info(f"Shutting down {settings.app_name}")

    app = FastAPI(
        title=settings.app_name,
        description="Task list API with JWT authentication and per-user task ownership",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_issuer = token_issuer
    app.state.auth_service = AuthService(user_store, token_issuer)
    app.state.task_store = task_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.otel_enabled:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumented with OpenTelemetry")

    app.include_router(auth.router, prefix="/api")
    app.include_router(tasks.router, prefix="/api")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        if exc.code in _BAD_REQUEST_CODES:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"detail": str(exc), "code": exc.code.value},
            )
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc), "code": exc.code.value},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "taskmanager.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )
