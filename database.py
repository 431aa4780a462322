from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

import config

Base = declarative_base()


def create_db_engine(url=None, **kwargs):
    """Build an engine; nothing connects until the first session is opened."""
    if config.DB_ISOLATION_LEVEL and "isolation_level" not in kwargs:
        kwargs["isolation_level"] = config.DB_ISOLATION_LEVEL
    return create_engine(url or config.DATABASE_URL, echo=config.DB_ECHO, **kwargs)


def create_session_factory(engine):
    # Reservations are handed back to callers after commit, keep their state loaded.
    return sessionmaker(bind=engine, expire_on_commit=False)