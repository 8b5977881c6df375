import pytest

from persons.db.connect import make_session_factory
from persons.db.models import initialize_db, sqlite_engine
from persons.vocabulary import ENGLISH


@pytest.fixture(scope="function")
def engine(db_file):
    engine = sqlite_engine(f"sqlite:///{db_file}")
    initialize_db(engine, ENGLISH)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    with session_factory() as session:
        yield session
