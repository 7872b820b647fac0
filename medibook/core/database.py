from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
from .config import settings


def _engine_options(url: str) -> dict:
    """Connection options for the configured backend."""
    if url.startswith("sqlite"):
        # SQLite connections are shared with the request threadpool
        return {
            "connect_args": {"check_same_thread": False, "timeout": settings.DB_POOL_TIMEOUT},
        }

    options = {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
        "pool_pre_ping": True,
    }
    if url.startswith("postgresql"):
        options["connect_args"] = {
            "connect_timeout": settings.DB_POOL_TIMEOUT,
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        }
    return options


engine = create_engine(settings.get_database_url, **_engine_options(settings.get_database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Database initialization
def init_db():
    """Initialize database tables."""
    # Register every model on Base.metadata before creating tables
    from ..models import appointment, availability, doctor, patient  # noqa: F401

    Base.metadata.create_all(bind=engine)
