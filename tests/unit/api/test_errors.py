import sqlite3

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError

from persons.api.errors import ErrorKind, ServiceError, storage_errors, storage_message

ANA = {"firstName": "Ana", "lastName": "Diaz", "dni": "111", "address": "Calle 1"}


def test_error_kind_status_codes():
    assert ErrorKind.CLIENT_ERROR.status_code == 400
    assert ErrorKind.NOT_FOUND.status_code == 404
    assert ErrorKind.BACKEND_FAILURE.status_code == 500


def test_storage_message_prefers_driver_text():
    exc = IntegrityError(
        "INSERT INTO person ...", {}, sqlite3.IntegrityError("UNIQUE constraint failed: person.nationalId")
    )
    assert storage_message(exc) == "UNIQUE constraint failed: person.nationalId"


def test_storage_errors_maps_kind():
    exc = OperationalError("SELECT 1", {}, sqlite3.OperationalError("disk I/O error"))
    with pytest.raises(ServiceError) as info:
        with storage_errors(ErrorKind.BACKEND_FAILURE):
            raise exc
    assert info.value.kind is ErrorKind.BACKEND_FAILURE
    assert info.value.message == "disk I/O error"


def test_storage_errors_treats_value_errors_as_client_errors():
    with pytest.raises(ServiceError) as info:
        with storage_errors(ErrorKind.BACKEND_FAILURE):
            raise ValueError("address not in input record")
    assert info.value.kind is ErrorKind.CLIENT_ERROR


def test_backend_failures_become_500_on_reads_and_deletes(client):
    with client.app.state.engine.begin() as conn:
        conn.execute(text("DROP TABLE person"))

    for resp in (client.get("/persons"), client.get("/persons/1"), client.delete("/persons/1")):
        assert resp.status_code == 500
        assert "no such table" in resp.json()["error"]


def test_write_failures_are_reported_as_client_errors(client):
    with client.app.state.engine.begin() as conn:
        conn.execute(text("DROP TABLE person"))

    for resp in (client.post("/persons", json=ANA), client.put("/persons/1", json=ANA)):
        assert resp.status_code == 400
        assert "no such table" in resp.json()["error"]


def test_server_keeps_serving_after_failure(client):
    assert client.get("/persons/abc").status_code == 400
    assert client.get("/persons").status_code == 200
