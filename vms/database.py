# vms/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite for local runs and tests).
All models are auto-imported here so create_tables() creates every table in one call.
"""

from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from vms.config import settings
from vms.exceptions import StorageError
from vms.utils.logger import get_logger

logger = get_logger(__name__)


def build_engine(url: str, lock_timeout: int = settings.DB_LOCK_TIMEOUT_SECONDS):
    """
    Create an engine whose connections give up on lock contention after
    `lock_timeout` seconds instead of blocking forever.
    """
    if url.startswith("sqlite"):
        sqlite_engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": lock_timeout},
            echo=False,
        )

        # SQLite ignores FOREIGN KEY clauses unless asked per connection
        @event.listens_for(sqlite_engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    timeout_ms = lock_timeout * 1000
    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        connect_args={"options": f"-c lock_timeout={timeout_ms} -c statement_timeout={timeout_ms * 2}"},
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def storage_errors(db: Session, action: str):
    """
    Run a unit of work against the store. Any failure rolls the session back;
    SQLAlchemy errors are re-raised as StorageError, service errors pass through.
    """
    try:
        yield
    except OperationalError as e:
        db.rollback()
        logger.error(f"[DB] {action} failed (operational): {e}", exc_info=True)
        raise StorageError(f"{action} failed: database busy or unavailable, retry later") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[DB] {action} failed: {e}", exc_info=True)
        raise StorageError(f"{action} failed: {e.__class__.__name__}", retryable=False) from e
    except Exception:
        db.rollback()
        raise


def create_tables(bind=None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from vms.models.visitor import Visitor      # noqa
    from vms.models.approval import Approval    # noqa

    Base.metadata.create_all(bind=bind or engine)
