"""Database setup and session management."""

from typing import Any

from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from taskmanager.config import Settings


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


# Global engine and session factory
engine: Any = None
SessionLocal: Any = None


def create_db_engine(settings: Settings) -> Engine:
    """Create an engine for the configured database URL."""
    url = str(settings.database_url)
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=settings.db_echo,
        )

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        echo=settings.db_echo,
    )


def init_db(settings: Settings) -> sessionmaker:
    """Initialize database engine and session factory."""
    global engine, SessionLocal

    engine = create_db_engine(settings)

    # Instrument SQLAlchemy with OpenTelemetry
    if settings.otel_enabled:
        SQLAlchemyInstrumentor().instrument(
            engine=engine,
            service=settings.otel_service_name,
        )

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return SessionLocal


def create_tables(bind: Engine | None = None) -> None:
    """Create all tables in the database."""
    # Import models so they register on Base.metadata
    import taskmanager.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
