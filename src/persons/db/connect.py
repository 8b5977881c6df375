# persons/db/connect.py

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, ContextManager, Iterator

from fastapi import Request
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from persons.config import Settings
from persons.db.models import StorageInitError, initialize_db, sqlite_engine
from persons.logging import get_logger
from persons.vocabulary import Vocabulary

logger = get_logger(__file__)

SessionFactory = Callable[[], ContextManager[Session]]


def get_db_uri(file: str | Path) -> str:
    """Return a SQLite URI for ``file``.

    Values that already look like a URL (``sqlite:///...``) are returned
    unchanged; plain paths are expanded and prefixed.
    """

    raw = str(file).strip()
    if "://" in raw:
        return raw
    return "sqlite:///" + str(Path(raw).expanduser())


def get_db_file(db_uri: str) -> Path | None:
    """Return the filesystem path behind ``db_uri`` (``None`` for in-memory)."""

    database = make_url(db_uri).database
    if not database or database == ":memory:":
        return None
    return Path(database)


def require_db_file(db_uri: str) -> None:
    """Fail unless the SQLite file for ``db_uri`` already exists.

    The service creates the table but never the database file; SQLite would
    otherwise silently create an empty file at a mistyped path.
    """

    db_file = get_db_file(db_uri)
    if db_file is None:
        # each pooled connection would see its own empty database
        raise StorageInitError(f"in-memory databases are not supported: {db_uri}")
    if not db_file.is_file():
        raise StorageInitError(f"database file does not exist: {db_file}")


def make_session_factory(engine: Engine) -> SessionFactory:
    SessionLocal = sessionmaker(bind=engine)

    @contextmanager
    def get_session():
        session = SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            # returns the connection to the pool
            session.close()

    return get_session


def connect(settings: Settings) -> Engine:
    """Open the pooled engine for ``settings`` and make the table ready.

    Raises :class:`StorageInitError` when the database file is missing or the
    table cannot be created; callers must treat this as fatal.
    """

    db_uri = get_db_uri(settings.db_path)
    require_db_file(db_uri)
    engine = sqlite_engine(
        db_uri,
        pool_size=settings.pool_size,
        pool_timeout=settings.pool_timeout,
        sql_trace=settings.sql_trace,
    )
    try:
        initialize_db(engine, settings.vocabulary)
    except StorageInitError:
        engine.dispose()
        raise
    logger.info(
        "connected to %s (table %s, pool size %d)",
        db_uri,
        settings.vocabulary.table,
        settings.pool_size,
    )
    return engine


# Session Context Manager
@contextmanager
def get_session(
    file_path: str | Path | None = None,
    vocabulary: Vocabulary | str | None = None,
) -> Iterator[Session]:
    """Provide a transactional scope for CLI and script use.

    Parameters
    ----------
    file_path:
        Optional path or URI to the SQLite database. When omitted the
        ``PERSONS_DB_PATH`` environment variable or the vocabulary's default
        file name is used.
    vocabulary:
        Vocabulary (or its code) selecting the person table.
    """

    settings = Settings.from_env(
        vocabulary=vocabulary,
        db_path=None if file_path is None else str(file_path),
    )
    engine = connect(settings)
    try:
        with make_session_factory(engine)() as session:
            yield session
    finally:
        engine.dispose()


def get_session_dep(request: Request) -> Iterator[Session]:
    """FastAPI dependency that yields a request-scoped session.

    The session factory is created once by the app factory and stored on
    ``app.state``; each request borrows one pooled connection and gives it
    back when the response is done, whatever the outcome.
    """

    session_factory: SessionFactory = request.app.state.session_factory
    with session_factory() as session:
        yield session
