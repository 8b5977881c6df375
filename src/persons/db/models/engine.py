from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool

from persons.logging import get_logger
from persons.vocabulary import Vocabulary

from .person import make_person_model

logger = get_logger(__file__)


class StorageInitError(RuntimeError):
    """Raised when the person table cannot be made ready for serving."""


def sqlite_engine(
    db_path: str = "sqlite:///./persons.db",
    *,
    pool_size: int = 5,
    pool_timeout: float = 30.0,
    sql_trace: bool = False,
) -> Engine:
    """Create an engine backed by a bounded connection pool.

    ``max_overflow`` is zero so at most ``pool_size`` connections are ever
    open; a request that cannot get one within ``pool_timeout`` seconds fails
    with :class:`sqlalchemy.exc.TimeoutError`.
    """

    engine = create_engine(
        db_path,
        connect_args={"check_same_thread": False},
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        echo=False,
    )

    if sql_trace:

        @event.listens_for(engine, "connect")
        def set_trace_callback(dbapi_connection, connection_record):
            dbapi_connection.set_trace_callback(lambda x: logger.info(x))

    return engine


def initialize_db(engine: Engine, vocabulary: Vocabulary):
    """Create the person table if needed and check an existing one is usable.

    Running against an initialized database is a no-op. Any failure is
    raised as :class:`StorageInitError`.
    """

    model = make_person_model(vocabulary)
    try:
        model.__table__.create(bind=engine, checkfirst=True)
        columns = {col["name"] for col in inspect(engine).get_columns(vocabulary.table)}
    except SQLAlchemyError as exc:
        raise StorageInitError(
            f"could not initialize table {vocabulary.table!r}: {exc}"
        ) from exc

    missing = [name for name in ("id", *vocabulary.columns) if name not in columns]
    if missing:
        raise StorageInitError(
            f"table {vocabulary.table!r} exists but lacks columns: {', '.join(missing)}"
        )
    logger.debug("table %s ready", vocabulary.table)
    return model
