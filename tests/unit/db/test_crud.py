# test_crud.py
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from persons.db.crud import PersonCRUD


def _record(dni="111", **overrides):
    record = {
        "firstName": "Ana",
        "lastName": "Diaz",
        "nationalId": dni,
        "address": "Calle 1",
    }
    record.update(overrides)
    return record


def _count(session, crud):
    return session.scalar(select(func.count()).select_from(crud.model))


def test_insert_and_get(db_session):
    crud = PersonCRUD()
    new_id = crud.create(db_session, _record())
    fetched = crud.get(db_session, new_id)
    assert fetched.id == new_id
    assert fetched.firstName == "Ana"
    assert fetched.nationalId == "111"


def test_insert_accepts_json_keys(db_session):
    crud = PersonCRUD()
    record = _record()
    record["dni"] = record.pop("nationalId")
    new_id = crud.create(db_session, record)
    assert crud.get(db_session, new_id).nationalId == "111"


def test_ids_increase_and_are_not_reused(db_session):
    crud = PersonCRUD()
    first = crud.create(db_session, _record("1"))
    second = crud.create(db_session, _record("2"))
    assert second > first

    assert crud.delete(db_session, second)
    third = crud.create(db_session, _record("3"))
    assert third > second


def test_duplicate_national_id_rejected_without_change(db_session):
    crud = PersonCRUD()
    crud.create(db_session, _record())
    with pytest.raises(IntegrityError):
        crud.create(db_session, _record(firstName="Other"))
    db_session.rollback()
    assert _count(db_session, crud) == 1


def test_insert_missing_required_column(db_session):
    crud = PersonCRUD()
    record = _record()
    del record["address"]
    with pytest.raises(ValueError, match="address"):
        crud.create(db_session, record)


def test_insert_none_is_rejected(db_session):
    crud = PersonCRUD()
    with pytest.raises(ValueError):
        crud.create(db_session, _record(lastName=None))


def test_unknown_keys_are_dropped(db_session):
    crud = PersonCRUD()
    cleaned = crud.validate_input({**_record(), "age": 30})
    assert "age" not in cleaned
    assert set(cleaned) == {"firstName", "lastName", "nationalId", "address"}


def test_update_replaces_all_fields(db_session):
    crud = PersonCRUD()
    new_id = crud.create(db_session, _record())
    assert crud.update(db_session, new_id, _record("222", address="Calle 2"))
    db_session.expire_all()
    fetched = crud.get(db_session, new_id)
    assert fetched.address == "Calle 2"
    assert fetched.nationalId == "222"
    assert fetched.id == new_id


def test_update_missing_row_returns_false(db_session):
    crud = PersonCRUD()
    assert not crud.update(db_session, 99999, _record())
    assert _count(db_session, crud) == 0


def test_update_to_taken_national_id_fails(db_session):
    crud = PersonCRUD()
    crud.create(db_session, _record("1"))
    second = crud.create(db_session, _record("2"))
    with pytest.raises(IntegrityError):
        crud.update(db_session, second, _record("1"))
    db_session.rollback()
    assert crud.get(db_session, second).nationalId == "2"


def test_delete_by_id(db_session):
    crud = PersonCRUD()
    new_id = crud.create(db_session, _record())
    assert crud.delete(db_session, new_id)
    assert crud.get(db_session, new_id) is None
    assert not crud.delete(db_session, new_id)


def test_delete_nonexistent_id(db_session):
    assert not PersonCRUD().delete(db_session, 99999)


def test_get_all_after_delete(db_session):
    crud = PersonCRUD()
    a = crud.create(db_session, _record("A"))
    b = crud.create(db_session, _record("B"))
    c = crud.create(db_session, _record("C"))
    crud.delete(db_session, b)
    assert {row.id for row in crud.get_all(db_session)} == {a, c}


def test_to_dict_uses_json_keys(db_session):
    crud = PersonCRUD()
    new_id = crud.create(db_session, _record())
    payload = crud.to_dict(crud.get(db_session, new_id))
    assert payload == {
        "id": new_id,
        "firstName": "Ana",
        "lastName": "Diaz",
        "dni": "111",
        "address": "Calle 1",
    }


def test_bulk_create(db_session):
    crud = PersonCRUD()
    assert crud.bulk_create(db_session, [_record("1"), _record("2")]) == 2
    assert crud.bulk_create(db_session, []) == 0
    assert _count(db_session, crud) == 2


def test_concurrent_creates_with_same_national_id(session_factory):
    crud = PersonCRUD()

    def create():
        try:
            with session_factory() as session:
                return crud.create(session, _record("same"))
        except IntegrityError:
            return None

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: create(), range(2)))

    assert sum(r is not None for r in results) == 1
    with session_factory() as session:
        assert _count(session, crud) == 1
