from contextlib import contextmanager
from functools import partial
from typing import Any, Iterator

import pandas as pd
from sqlalchemy import func, inspect, select, text
from sqlalchemy.engine import Engine

from persons.config import Settings
from persons.db.connect import get_db_uri, get_session, require_db_file
from persons.db.crud import PersonCRUD
from persons.db.init import initialize_db
from persons.db.models import sqlite_engine
from persons.logging import get_logger
from persons.vocabulary import get_vocabulary

logger = get_logger(__file__)


@contextmanager
def _inspect_engine(file_path: str | None = None) -> Iterator[Engine]:
    """Open an existing database without creating any table in it."""
    db_uri = get_db_uri(file_path or Settings.from_env().db_path)
    require_db_file(db_uri)
    engine = sqlite_engine(db_uri, pool_size=1)
    try:
        yield engine
    finally:
        engine.dispose()


def check_status(file_path: str | None = None):
    """Query the database for its SQLite version and log/return it."""
    logger.info("checking db status...")
    with _inspect_engine(file_path) as engine, engine.connect() as conn:
        result = conn.execute(text("SELECT sqlite_version();")).fetchone()
        if result:
            version = result[0]
            logger.info("sqlite version: %s", version)
            return version
        logger.warning("sqlite version query returned no result")
        return None


def show_tables(file_path: str | None = None) -> dict[str, list[dict[str, Any]]]:
    """Return table and column metadata for the SQLite database.

    Returns
    -------
    dict
        Mapping of table names to a list of column definitions. Each column
        definition contains ``name``, ``type``, ``nullable`` and ``default``
        keys.
    """

    logger.info("showing tables..")
    with _inspect_engine(file_path) as engine:
        inspector = inspect(engine)
        table_definitions: dict[str, list[dict[str, Any]]] = {}
        for table_name in sorted(inspector.get_table_names()):
            table_definitions[table_name] = [
                {
                    "name": column.get("name", ""),
                    "type": str(column.get("type", "")),
                    "nullable": bool(column.get("nullable", True)),
                    "default": column.get("default"),
                }
                for column in inspector.get_columns(table_name)
            ]
        return table_definitions


def initialize(file_path=None, vocabulary=None):
    """
    file_path can be gathered from environment variable or a sensible default if not provided
    """
    return initialize_db(file_path=file_path, vocabulary=vocabulary)


def get_reader(file: str):
    if file.endswith(".tsv"):
        return partial(pd.read_table, dtype=str)
    if file.endswith(".csv"):
        return partial(pd.read_csv, dtype=str)
    if file.endswith(".json"):
        return partial(pd.read_json, dtype=False)
    raise ValueError(f"do not know how to read file: {file}")


def get_writer(file: str):
    if file.endswith(".tsv"):
        return lambda df: df.to_csv(file, sep="\t", index=False)
    if file.endswith(".csv"):
        return lambda df: df.to_csv(file, index=False)
    if file.endswith(".json"):
        return lambda df: df.to_json(file, orient="records", indent=2)
    raise ValueError(f"do not know how to write file: {file}")


def export_table(file_path: str, vocabulary=None, db_file_path: str | None = None) -> int:
    """Write every person row to ``file_path`` using the vocabulary's JSON keys.

    Supported extensions are ``.csv``, ``.tsv`` and ``.json``. Returns the
    number of rows written.
    """

    vocabulary = get_vocabulary(vocabulary)
    writer = get_writer(file_path)
    crud = PersonCRUD(vocabulary)
    logger.info("exporting table %s to %s", vocabulary.table, file_path)
    with get_session(file_path=db_file_path, vocabulary=vocabulary) as session:
        rows = [crud.to_dict(obj) for obj in crud.get_all(session)]
    columns = ["id", *(f.json_key for f in vocabulary.fields)]
    writer(pd.DataFrame(rows, columns=columns))
    return len(rows)


def import_file(file_path: str, vocabulary=None, db_file_path: str | None = None) -> int:
    """Bulk-insert rows from a CSV/TSV/JSON file in one transaction.

    Columns may use either JSON keys or column names; an ``id`` column is
    ignored so storage assigns fresh ids. A duplicate national id aborts the
    whole import.
    """

    vocabulary = get_vocabulary(vocabulary)
    reader = get_reader(file_path)
    logger.info("preparing to import file.. %s", file_path)
    df = reader(file_path)
    df = df.drop(columns=["id"], errors="ignore")
    df = df.astype(object).where(pd.notna(df), None)
    records = df.to_dict(orient="records")

    crud = PersonCRUD(vocabulary)
    with get_session(file_path=db_file_path, vocabulary=vocabulary) as session:
        count = crud.bulk_create(session, records)
        total = session.scalar(select(func.count()).select_from(crud.model))
    logger.info("imported %d rows into %s (%s total)", count, vocabulary.table, total)
    return count
