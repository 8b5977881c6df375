from pathlib import Path
from typing import Union

from persons.config import Settings
from persons.db.connect import connect, get_db_file, get_db_uri
from persons.logging import get_logger
from persons.vocabulary import Vocabulary

logger = get_logger(__file__)


def initialize_db(
    file_path: Union[str, Path, None] = None,
    vocabulary: Union[Vocabulary, str, None] = None,
):
    """Create the database file (if missing) and the person table.

    This is the operator-side counterpart of the server start-up, which
    refuses to run against a missing file.

    Parameters
    ----------
    file_path:
        Optional path or URI of the SQLite database. When ``None`` the
        ``PERSONS_DB_PATH`` environment variable or the vocabulary default is
        used.
    vocabulary:
        Vocabulary (or its code) selecting the table to create.

    Returns
    -------
    Engine
        The SQLAlchemy engine connected to the initialized database.
    """

    settings = Settings.from_env(
        vocabulary=vocabulary,
        db_path=None if file_path is None else str(file_path),
    )
    db_file = get_db_file(get_db_uri(settings.db_path))
    if db_file is not None and not db_file.exists():
        db_file.parent.mkdir(parents=True, exist_ok=True)
        db_file.touch()
        logger.info("created database file %s", db_file)
    return connect(settings)
