"""Naming for the person entity.

The service was deployed with two vocabularies: English (``/persons`` with
camelCase JSON keys) and Spanish (``/personas``). Both share one table layout
and one set of handlers; only names and response messages differ.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldName:
    column: str
    json_key: str


@dataclass(frozen=True)
class Vocabulary:
    code: str
    entity: str
    table: str
    route: str
    first_name: FieldName
    last_name: FieldName
    national_id: FieldName
    address: FieldName
    not_found: str
    updated: str
    deleted: str
    default_db_file: str

    @property
    def fields(self) -> tuple[FieldName, ...]:
        return (self.first_name, self.last_name, self.national_id, self.address)

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(f.column for f in self.fields)

    def aliases(self) -> dict[str, str]:
        """Map JSON keys to column names."""
        return {f.json_key: f.column for f in self.fields}


ENGLISH = Vocabulary(
    code="en",
    entity="Person",
    table="person",
    route="/persons",
    first_name=FieldName("firstName", "firstName"),
    last_name=FieldName("lastName", "lastName"),
    national_id=FieldName("nationalId", "dni"),
    address=FieldName("address", "address"),
    not_found="Person not found",
    updated="Person updated",
    deleted="Person deleted",
    default_db_file="persons.db",
)

SPANISH = Vocabulary(
    code="es",
    entity="Persona",
    table="persona",
    route="/personas",
    first_name=FieldName("nombres", "nombres"),
    last_name=FieldName("apellidos", "apellidos"),
    national_id=FieldName("dni", "dni"),
    address=FieldName("direccion", "direccion"),
    not_found="Persona no encontrada",
    updated="Persona actualizada",
    deleted="Persona eliminada",
    default_db_file="personas.db",
)

VOCABULARIES = {v.code: v for v in (ENGLISH, SPANISH)}


def get_vocabulary(code: str | Vocabulary | None = None) -> Vocabulary:
    """Resolve a vocabulary by its code (``"en"`` or ``"es"``)."""

    if isinstance(code, Vocabulary):
        return code
    key = (code or ENGLISH.code).strip().lower()
    try:
        return VOCABULARIES[key]
    except KeyError as exc:
        raise ValueError(
            f"Unknown vocabulary {code!r}; expected one of {sorted(VOCABULARIES)}"
        ) from exc
