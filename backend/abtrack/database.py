"""Database connection and session management."""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from abtrack.config import settings


def _build_engine(database_url: str):
    """Pick pooling based on the backing database."""
    echo = settings.database_echo

    if database_url.startswith("sqlite"):
        # A single shared connection keeps in-memory databases alive across sessions
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )

    # Poolers (e.g. pgbouncer on 6543) manage connections themselves
    if "pooler" in database_url or database_url.endswith(":6543"):
        return create_engine(database_url, poolclass=NullPool, echo=echo)

    return create_engine(
        database_url,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,
        echo=echo,
    )


engine = _build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db() -> None:
    """Create tables for all registered models."""
    # Import models so they register on Base.metadata
    import abtrack.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
