import pytest
from sqlalchemy import text
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from persons.config import Settings
from persons.db import connect
from persons.db.models import StorageInitError, sqlite_engine
from persons.vocabulary import ENGLISH


def test_get_db_uri_from_path(tmp_path):
    custom = tmp_path / "custom.db"
    assert connect.get_db_uri(custom) == "sqlite:///" + str(custom)


def test_get_db_uri_keeps_urls():
    assert connect.get_db_uri("sqlite:///already.db") == "sqlite:///already.db"


def test_get_db_file_in_memory_is_none():
    assert connect.get_db_file("sqlite://") is None
    assert connect.get_db_file("sqlite:///:memory:") is None


def test_require_db_file_missing(tmp_path):
    with pytest.raises(StorageInitError, match="does not exist"):
        connect.require_db_file(connect.get_db_uri(tmp_path / "missing.db"))


@pytest.mark.parametrize("db_path", ["sqlite://", "sqlite:///:memory:"])
def test_connect_refuses_in_memory_database(db_path):
    with pytest.raises(StorageInitError, match="in-memory"):
        connect.connect(Settings(vocabulary=ENGLISH, db_path=db_path))


def test_connect_does_not_create_the_file(tmp_path):
    missing = tmp_path / "missing.db"
    settings = Settings(vocabulary=ENGLISH, db_path=str(missing))
    with pytest.raises(StorageInitError):
        connect.connect(settings)
    assert not missing.exists()


def test_connect_uses_configured_pool_size(db_file):
    settings = Settings(vocabulary=ENGLISH, db_path=str(db_file), pool_size=3)
    engine = connect.connect(settings)
    try:
        assert engine.pool.size() == 3
    finally:
        engine.dispose()


def test_pool_is_bounded(db_file):
    engine = sqlite_engine(f"sqlite:///{db_file}", pool_size=1, pool_timeout=0.1)
    try:
        with engine.connect() as first:
            first.execute(text("SELECT 1"))
            with pytest.raises(PoolTimeoutError):
                engine.connect()
        # released connections are reused
        with engine.connect() as again:
            assert again.execute(text("SELECT 1")).scalar() == 1
    finally:
        engine.dispose()


def test_session_factory_rolls_back_on_error(db_file):
    engine = connect.connect(Settings(vocabulary=ENGLISH, db_path=str(db_file)))
    factory = connect.make_session_factory(engine)
    try:
        with pytest.raises(RuntimeError):
            with factory() as session:
                session.execute(
                    text(
                        'INSERT INTO person ("firstName", "lastName", "nationalId", address) '
                        "VALUES ('a', 'b', 'c', 'd')"
                    )
                )
                raise RuntimeError("boom")
        with factory() as session:
            assert session.execute(text("SELECT count(*) FROM person")).scalar() == 0
        assert engine.pool.checkedout() == 0
    finally:
        engine.dispose()


def test_get_session_uses_env_path(db_file, monkeypatch):
    monkeypatch.setenv("PERSONS_DB_PATH", str(db_file))
    with connect.get_session() as session:
        assert session.execute(text("SELECT 1")).scalar() == 1
