import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from shiftbook.core.config import settings
from shiftbook.core.errors import SchedulingError, TransientStoreError

logger = logging.getLogger(__name__)


def _configure_sqlite(engine: Engine) -> None:
    """
    SQLite is used locally and in tests. Foreign keys are off by default and
    the default deferred transactions let two writers both read before either
    writes, so every transaction starts with BEGIN IMMEDIATE instead.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.db_pool_timeout_seconds,
            },
        )
        _configure_sqlite(engine)
        return engine

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=settings.db_pool_timeout_seconds,
        connect_args={"options": f"-c statement_timeout={settings.db_statement_timeout_ms}"},
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)

class Base(DeclarativeBase):
    pass

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_guard(db: Session, action: str):
    """
    Wrap one unit of work. Any failure rolls the session back; an unreachable
    or too slow store surfaces as TransientStoreError, the one retryable error.
    """
    try:
        yield
    except (OperationalError, PoolTimeoutError) as e:
        db.rollback()
        logger.warning("[store] %s failed: %s", action, e)
        raise TransientStoreError(f"Store unavailable while trying to {action}") from e
    except DBAPIError as e:
        db.rollback()
        if not e.connection_invalidated:
            raise
        logger.warning("[store] %s lost its connection: %s", action, e)
        raise TransientStoreError(f"Store connection lost while trying to {action}") from e
    except SchedulingError:
        db.rollback()
        raise
