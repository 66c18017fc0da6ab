"""
Database connection setup.
Synchronous SQLAlchemy engine shared by the API and the migration scripts.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from schoolraise.config import settings


def get_engine(database_url: str, echo: bool = False) -> Engine:
    """Creates an engine for the given URL (used by the CLI scripts)."""
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


# Fails fast with ConfigurationError when no database URL is configured
engine = get_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a database session and closes it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
