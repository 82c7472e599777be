"""Engine construction and schema management"""

import logging

from sqlmodel import SQLModel, create_engine

import mdpost.crud.models  # noqa: F401  (registers tables on SQLModel.metadata)


logger = logging.getLogger(__name__)


def make_engine(db_url: str):
    """Create an engine; SQLite URLs get check_same_thread disabled."""
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, echo=False, connect_args=connect_args)


def init_db(engine) -> None:
    """Create all tables that do not exist yet."""
    SQLModel.metadata.create_all(engine)
    logger.debug("schema ready on %s", engine.url)


def reset_db(engine) -> None:
    """Drop and recreate all tables."""
    SQLModel.metadata.drop_all(engine)
    init_db(engine)
