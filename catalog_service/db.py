# catalog_service/db.py

"""
Database handle and session management for the FastAPI app.

The handle is constructed explicitly and owned by whoever runs the process:
the application lifespan opens and closes it, request handlers only borrow
sessions from it through the `get_db` dependency.
"""
import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Base class for the ORM models
Base = declarative_base()


class Database:
    """
    Owns the SQLAlchemy engine and session factory for one database URL.

    Extra keyword arguments are passed straight to `create_engine`, which lets
    tests plug in an in-memory SQLite engine with a static pool.
    """

    def __init__(self, url: str, **engine_options):
        self.url = url
        self.engine_options = engine_options
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open.")
        return self._engine

    def open(self) -> None:
        if self._engine is not None:
            return
        options = dict(self.engine_options)
        # pool_pre_ping=True helps maintain healthy connections in a pool
        if not self.url.startswith("sqlite"):
            options.setdefault("pool_pre_ping", True)
        self._engine = create_engine(self.url, **options)
        # autocommit=False ensures transactions must be committed explicitly.
        # autoflush=False means changes aren't flushed until commit or explicit flush.
        self._sessionmaker = sessionmaker(
            autocommit=False, autoflush=False, bind=self._engine
        )
        logger.info(f"Database engine created for dialect '{self._engine.dialect.name}'.")

    def create_tables(self) -> None:
        """Creates the tables for every model registered on `Base` (if not exist)."""
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not open.")
        return self._sessionmaker()

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("Database engine disposed.")


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency to provide a new database session for FastAPI endpoints.
    A session is created for each request and automatically closed after use.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
