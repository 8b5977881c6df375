from functools import lru_cache

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from persons.vocabulary import Vocabulary

from .base import Base


@lru_cache(maxsize=None)
def make_person_model(vocabulary: Vocabulary) -> type[Base]:
    """Build (once per vocabulary) the mapped class for the person table.

    All four text columns are ``NOT NULL``; the national id column also
    carries a ``UNIQUE`` constraint so duplicates are rejected by SQLite
    itself, atomically, even under concurrent inserts.
    """

    annotations = {"id": Mapped[int]}
    fields = {"id": mapped_column(Integer, primary_key=True)}
    for field in vocabulary.fields:
        annotations[field.column] = Mapped[str]
        fields[field.column] = mapped_column(
            Text,
            nullable=False,
            unique=field == vocabulary.national_id,
        )

    attrs = {
        "__tablename__": vocabulary.table,
        "__annotations__": annotations,
        **fields,
    }
    return type(vocabulary.entity, (Base,), attrs)
