import logging
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from meeting_scheduler.core.errors import PersistenceError
from meeting_scheduler.models.user import Base

logger = logging.getLogger(__name__)

DUPLICATE_KEY_MARKERS = ("unique constraint", "duplicate key", "duplicate entry")


class Database:
    """Process-wide connection handle: engine plus session factory.

    Created once at startup and disposed at shutdown; tests build their own.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs = {"pool_pre_ping": True, "echo": echo}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(url, **engine_kwargs)

        if url.startswith("sqlite"):
            @event.listens_for(self.engine, "connect")
            def _enable_foreign_keys(dbapi_connection, _record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    def create_all(self):
        # models register themselves on Base when imported
        from meeting_scheduler.models import booking, event as event_model, meeting  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def close(self):
        self.engine.dispose()


# Dependency for FastAPI routes
def get_db(request: Request):
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()


def is_duplicate_key(exc: SQLAlchemyError) -> bool:
    if not isinstance(exc, IntegrityError):
        return False
    text = str(exc.orig).lower()
    return any(marker in text for marker in DUPLICATE_KEY_MARKERS)


@contextmanager
def write_guard(db: Session, entity: str):
    """Commit the enclosed writes, re-signaling store faults as PersistenceError."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        duplicate = is_duplicate_key(exc)
        logger.error(f"❌ Failed to save {entity}: {exc.__class__.__name__}")
        raise PersistenceError(f"Failed to save {entity}", duplicate_key=duplicate) from exc
