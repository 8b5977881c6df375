# crud.py
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from persons.db.models import make_person_model
from persons.logging import get_logger
from persons.vocabulary import ENGLISH, Vocabulary

logger = get_logger(__file__)


class PersonCRUD:
    """Single-statement operations on the person table.

    Each write commits on its own; storage errors
    (:class:`sqlalchemy.exc.SQLAlchemyError`) propagate to the caller, which
    decides how to report them.
    """

    def __init__(self, vocabulary: Vocabulary = ENGLISH):
        self.vocabulary = vocabulary
        self.model = make_person_model(vocabulary)
        self.req_cols = list(vocabulary.columns)

    def get_columns(self) -> List[str]:
        return [col.name for col in self.model.__table__.columns]

    def validate_input(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Return ``record`` reduced to writable columns.

        JSON keys (``dni``) are accepted in place of column names
        (``nationalId``). Unknown keys are dropped with a warning.

        Raises
        ------
        ValueError
            If a required column is missing or ``None``.
        """

        aliases = self.vocabulary.aliases()
        cleaned: Dict[str, Any] = {}
        for key, value in record.items():
            column = key if key in self.req_cols else aliases.get(key)
            if column is None:
                logger.warning("Key '%s' not in %s columns, removing from record.", key, self.model.__tablename__)
                continue
            cleaned[column] = value

        for col in self.req_cols:
            if cleaned.get(col) is None:
                raise ValueError(f"{col} not in input record")
        return cleaned

    def create(self, session: Session, record: dict) -> int:
        """Insert one row and return the id storage assigned to it."""

        values = self.validate_input(record)
        result = session.execute(insert(self.model.__table__).values(**values))
        new_id = result.inserted_primary_key[0]
        session.commit()
        logger.info("Inserted into %s: id=%s", self.model.__tablename__, new_id)
        return new_id

    def bulk_create(self, session: Session, records: List[dict]) -> int:
        if not records:
            return 0
        cleaned = [self.validate_input(r) for r in records]
        session.execute(insert(self.model), cleaned)
        session.commit()
        logger.info("Inserted %d rows into %s", len(cleaned), self.model.__tablename__)
        return len(cleaned)

    def get_all(self, session: Session):
        return session.scalars(select(self.model)).all()

    def get(self, session: Session, id: int) -> Optional[Any]:
        return session.scalars(select(self.model).where(self.model.id == id)).first()

    def update(self, session: Session, id: int, record: dict) -> bool:
        """Replace every field of row ``id``; ``False`` when no row matched."""

        values = self.validate_input(record)
        result = session.execute(
            update(self.model).where(self.model.id == id).values(**values)
        )
        session.commit()
        if result.rowcount == 0:
            return False
        logger.info("Updated %s id=%s", self.model.__tablename__, id)
        return True

    def delete(self, session: Session, id: int) -> bool:
        result = session.execute(delete(self.model).where(self.model.id == id))
        session.commit()
        if result.rowcount == 0:
            return False
        logger.info("Deleted %s id=%s", self.model.__tablename__, id)
        return True

    def to_dict(self, obj) -> Dict[str, Any]:
        """Serialize a row using the vocabulary's JSON keys."""

        payload = {"id": obj.id}
        for field in self.vocabulary.fields:
            payload[field.json_key] = getattr(obj, field.column)
        return payload
