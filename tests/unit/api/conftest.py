import pytest
from fastapi.testclient import TestClient

from persons.api.main import create_app
from persons.config import Settings
from persons.vocabulary import ENGLISH, SPANISH


def _client(db_file, vocabulary):
    app = create_app(Settings(vocabulary=vocabulary, db_path=str(db_file)))
    return TestClient(app)


@pytest.fixture
def client(db_file):
    with _client(db_file, ENGLISH) as client:
        yield client


@pytest.fixture
def spanish_client(db_file):
    with _client(db_file, SPANISH) as client:
        yield client
