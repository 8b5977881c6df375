# persons/api/routes/persons.py
from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from persons.api.errors import ErrorKind, ServiceError, storage_errors
from persons.api.models.modelmaker import get_models
from persons.db.connect import get_session_dep
from persons.db.crud import PersonCRUD
from persons.vocabulary import ENGLISH, Vocabulary

# SQLite INTEGER is a signed 64-bit value
ItemId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1)]


def generate_person_router(vocabulary: Vocabulary = ENGLISH) -> APIRouter:
    """Build the five person routes for ``vocabulary``.

    Handlers run one statement each on a request-scoped session. Storage
    errors on writes (create, update) are reported as client errors; on
    reads and deletes as backend failures.
    """

    crud = PersonCRUD(vocabulary)
    models = get_models(vocabulary)
    PersonWrite = models["PersonWrite"]
    PersonRead = models["PersonRead"]
    tag = vocabulary.entity
    router = APIRouter(prefix=vocabulary.route, tags=[tag])

    def not_found() -> ServiceError:
        return ServiceError(ErrorKind.NOT_FOUND, vocabulary.not_found)

    @router.post("", status_code=201, summary=f"Create {tag}")
    def create_person(payload: PersonWrite, db: Session = Depends(get_session_dep)):
        with storage_errors(ErrorKind.CLIENT_ERROR):
            new_id = crud.create(db, payload.model_dump())
        return {"id": new_id}

    @router.get("", response_model=list[PersonRead], summary=f"List {tag}")
    def list_persons(db: Session = Depends(get_session_dep)):
        with storage_errors(ErrorKind.BACKEND_FAILURE):
            rows = crud.get_all(db)
        return [PersonRead.model_validate(row) for row in rows]

    @router.get("/{item_id}", response_model=PersonRead, summary=f"Get {tag}")
    def get_person(item_id: ItemId, db: Session = Depends(get_session_dep)):
        with storage_errors(ErrorKind.BACKEND_FAILURE):
            row = crud.get(db, item_id)
        if row is None:
            raise not_found()
        return PersonRead.model_validate(row)

    @router.put("/{item_id}", summary=f"Replace {tag}")
    def update_person(item_id: ItemId, payload: PersonWrite, db: Session = Depends(get_session_dep)):
        with storage_errors(ErrorKind.CLIENT_ERROR):
            updated = crud.update(db, item_id, payload.model_dump())
        if not updated:
            raise not_found()
        return {"message": vocabulary.updated}

    @router.delete("/{item_id}", summary=f"Delete {tag}")
    def delete_person(item_id: ItemId, db: Session = Depends(get_session_dep)):
        with storage_errors(ErrorKind.BACKEND_FAILURE):
            deleted = crud.delete(db, item_id)
        if not deleted:
            raise not_found()
        return {"message": vocabulary.deleted}

    return router
