"""
Transaction schema registry - field layouts for every transaction kind the service accepts.
Kind ids are the ledger's own message ids; the registry is built once at import and never mutated.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import List, Mapping, Tuple


class UnknownKind(KeyError):
    """Raised when a kind id has no registered schema."""

    def __init__(self, kind_id):
        super().__init__(kind_id)
        self.kind_id = kind_id

    def __str__(self):
        return f"Unknown transaction kind: {self.kind_id!r}"


class FieldType(Enum):
    U32 = "u32"
    U64 = "u64"
    PUBLIC_KEY = "public_key"
    HASH = "hash"
    STRING = "string"
    SYSTEM_TIME = "system_time"


class KindId(IntEnum):
    CREATE_USER = 0
    MAKE_OWL = 1
    ISSUE = 2
    CREATE_ORDER = 3
    ACCEPT_ORDER = 4


@dataclass(frozen=True)
class Field:
    name: str
    type: FieldType


@dataclass(frozen=True)
class TransactionSchema:
    kind_id: int
    name: str
    fields: Tuple[Field, ...]

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def fields_of_type(self, field_type: FieldType) -> List[Field]:
        return [f for f in self.fields if f.type is field_type]


def _schema(kind_id: KindId, *fields: Tuple[str, FieldType]) -> TransactionSchema:
    return TransactionSchema(
        kind_id=int(kind_id),
        name=kind_id.name.lower(),
        fields=tuple(Field(name, field_type) for name, field_type in fields)
    )


_SCHEMAS = (
    _schema(
        KindId.CREATE_USER,
        ("public_key", FieldType.PUBLIC_KEY),
        ("name", FieldType.STRING),
    ),
    _schema(
        KindId.MAKE_OWL,
        ("public_key", FieldType.PUBLIC_KEY),
        ("name", FieldType.STRING),
        ("father_id", FieldType.HASH),
        ("mother_id", FieldType.HASH),
    ),
    _schema(
        KindId.ISSUE,
        ("public_key", FieldType.PUBLIC_KEY),
        ("current_time", FieldType.SYSTEM_TIME),
    ),
    _schema(
        KindId.CREATE_ORDER,
        ("public_key", FieldType.PUBLIC_KEY),
        ("owl_id", FieldType.HASH),
        ("price", FieldType.U64),
        ("current_time", FieldType.SYSTEM_TIME),
    ),
    _schema(
        KindId.ACCEPT_ORDER,
        ("public_key", FieldType.PUBLIC_KEY),
        ("order_id", FieldType.HASH),
    ),
)

REGISTRY: Mapping[int, TransactionSchema] = MappingProxyType({s.kind_id: s for s in _SCHEMAS})
_BY_NAME: Mapping[str, TransactionSchema] = MappingProxyType({s.name: s for s in _SCHEMAS})


def schema_for(kind_id: int) -> TransactionSchema:
    """Look up the schema for a kind id, raising UnknownKind if it is not registered."""
    # bool is an int subclass; True must not resolve to MAKE_OWL
    if isinstance(kind_id, bool) or not isinstance(kind_id, int):
        raise UnknownKind(kind_id)
    try:
        return REGISTRY[int(kind_id)]
    except KeyError:
        raise UnknownKind(kind_id) from None


def schema_by_name(name: str) -> TransactionSchema:
    """Look up a schema by its snake_case kind name (e.g. "create_user")."""
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownKind(name) from None


def list_schemas() -> List[TransactionSchema]:
    """Return all registered schemas ordered by kind id."""
    return [REGISTRY[k] for k in sorted(REGISTRY)]
