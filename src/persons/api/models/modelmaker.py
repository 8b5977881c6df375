# persons/api/models/modelmaker.py
from functools import lru_cache
from typing import Any, Dict, Type

from pydantic import BaseModel, ConfigDict, Field, create_model
from sqlalchemy.orm import ColumnProperty, DeclarativeBase, Mapper, class_mapper
from sqlalchemy.sql.schema import Column


def make_pydantic_model_from_sqlalchemy(
    model_cls: Type[DeclarativeBase],
    *,
    name_suffix: str = "Write",
    exclude_fields: frozenset[str] = frozenset({"id"}),
    aliases: Dict[str, str] | None = None,
) -> Type[BaseModel]:
    """Build a pydantic model mirroring the columns of ``model_cls``.

    ``aliases`` maps column names to the keys used on the wire; both spellings
    are accepted on input and the alias is used on output. Non-nullable
    columns without a default become required fields.
    """

    aliases = aliases or {}
    mapper: Mapper = class_mapper(model_cls)
    fields: Dict[str, Any] = {}

    for prop in mapper.iterate_properties:
        if not isinstance(prop, ColumnProperty):
            continue
        col: Column = prop.columns[0]
        if prop.key in exclude_fields:
            continue

        try:
            python_type = col.type.python_type
        except NotImplementedError:
            python_type = Any

        alias = aliases.get(prop.key, prop.key)
        if col.nullable or col.default is not None or col.server_default is not None:
            fields[prop.key] = (python_type | None, Field(default=None, alias=alias))
        else:
            fields[prop.key] = (python_type, Field(..., alias=alias))

    return create_model(
        f"{model_cls.__name__}{name_suffix}",
        __config__=ConfigDict(populate_by_name=True, from_attributes=True),
        **fields,
    )


@lru_cache(maxsize=None)
def get_models(vocabulary) -> Dict[str, Type[BaseModel]]:
    from persons.db.models import make_person_model

    model = make_person_model(vocabulary)
    aliases = {f.column: f.json_key for f in vocabulary.fields}

    PersonWrite = make_pydantic_model_from_sqlalchemy(
        model, name_suffix="Write", aliases=aliases
    )
    PersonRead = make_pydantic_model_from_sqlalchemy(
        model, name_suffix="Read", exclude_fields=frozenset(), aliases=aliases
    )
    return {"PersonWrite": PersonWrite, "PersonRead": PersonRead}
