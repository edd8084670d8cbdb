"""Database helpers for the Inventory API.

Utilities provided:
- create the SQLAlchemy engine for a database URL
- create the tables
- open sessions

SQLite URLs get their parent directory created before the engine is built
so the database file can be created on first use. The default local file is
``database/database.db`` (see ``utils.settings``).

Copyright (c) Bryn Gwalad 2025
"""

from pathlib import Path

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Imported for its side effect: registers the tables on SQLModel.metadata.
from api import models  # noqa: F401


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine shared by every request handler."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if url.database in (None, "", ":memory:"):
        # one connection for the whole process so every session sees the same data
        return create_engine(database_url, echo=echo, connect_args=connect_args, poolclass=StaticPool)

    Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, echo=echo, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create database tables from SQLModel metadata."""
    SQLModel.metadata.create_all(engine)


def get_session(engine: Engine) -> Session:
    return Session(engine)
