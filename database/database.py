import contextlib
import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from database.models import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the engine and session factory for one hosting process.

    Constructed explicitly by the entry point and passed to whatever needs
    sessions; there is no module-level engine.
    """

    def __init__(self, url: str, **engine_kwargs):
        engine_kwargs.setdefault('pool_pre_ping', True)
        self.url = url
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session, closed afterwards.
        """
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()

    @contextlib.contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Provide a transactional scope around a series of operations."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create the mapped tables (local development and tests)."""
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
