from contextlib import contextmanager

from peewee import Database, DatabaseProxy, Model
from playhouse.db_url import connect, parse
from playhouse.pool import PooledPostgresqlDatabase

from core.logging import get_logger
from core.settings import settings

log = get_logger("database")

# Bound to a concrete database by init_db(); tests bind a temporary SQLite file
db = DatabaseProxy()


class BaseModel(Model):
    class Meta:
        database = db


def create_database(database_url: str) -> Database:
    """
    Build a peewee database for a URL.

    PostgreSQL URLs get a connection pool; anything else (SQLite for local
    runs and tests) is handed to playhouse.db_url.
    """
    if database_url.startswith(("postgres://", "postgresql://")):
        parsed_url = parse(database_url)
        db_name = parsed_url.pop("database")
        return PooledPostgresqlDatabase(
            db_name,
            max_connections=settings.db_max_connections,
            stale_timeout=settings.db_stale_timeout,
            **parsed_url,
        )
    return connect(database_url)


def create_tables() -> None:
    """Create tables if they don't exist (safe=True is idempotent)."""
    from .models import MODELS

    # Order matters for foreign key dependencies:
    # config and roster first, tournament structure, then matches and stats
    db.create_tables(MODELS, safe=True)


def init_db(database_url: str) -> None:
    """Bind the proxy to the configured database and create tables."""
    db.initialize(create_database(database_url))
    db.connect(reuse_if_open=True)
    create_tables()
    log.info("database_initialized", backend=type(db.obj).__name__)


def close_db() -> None:
    """Close database connection."""
    if db.obj is not None and not db.is_closed():
        db.close()
        log.info("database_closed")


@contextmanager
def thread_connection():
    """
    Make sure the calling thread has a connection.

    Peewee connections are thread-local: one opened here is closed here,
    one the caller already held is left open.
    """
    opened = db.is_closed()
    if opened:
        db.connect()
    try:
        yield
    finally:
        if opened and not db.is_closed():
            db.close()
