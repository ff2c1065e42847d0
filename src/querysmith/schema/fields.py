"""Field schema for Typesense collections.

A schema is an ordered, immutable mapping from field name to ``Field``. It is
the single source of truth for which fields exist, their primitive type and
their capabilities. The derived capability sets (searchable, facetable,
sortable, vector) are computed once when the schema is built, so callers can
validate field names at runtime the same way a type checker would narrow them.

Example:

    schema = Schema({
        "id": {"type": "string"},
        "name": {"type": "string", "facet": True, "sort": True},
        "description": {"type": "string"},
        "price": {"type": "float", "facet": True, "sort": True},
    })
    schema.searchable_fields  # ("name", "description")
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields as dataclass_fields
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union


# Scalar field types accepted by the engine; each also has an array variant
BASE_FIELD_TYPES = (
    "string",
    "int32",
    "int64",
    "float",
    "bool",
    "geopoint",
    "object",
)

FIELD_TYPES = frozenset(
    list(BASE_FIELD_TYPES)
    + [f"{t}[]" for t in BASE_FIELD_TYPES]
    + ["string*", "auto", "image", "geopolygon"]
)

ID_FIELD = "id"
WILDCARD_FIELD = ".*"

# Field names that are never part of free-text matching
UNSEARCHABLE_NAMES = frozenset([ID_FIELD, WILDCARD_FIELD])


class SchemaError(ValueError):
    """Raised when a schema violates its invariants."""


@dataclass(frozen=True)
class Field:
    """Descriptor for a single collection field.

    Flags left as ``None`` are unset: they take the engine default and are
    not emitted in the field declaration.
    """

    type: str
    index: Optional[bool] = None
    optional: Optional[bool] = None
    facet: Optional[bool] = None
    sort: Optional[bool] = None
    locale: Optional[str] = None
    infix: Optional[bool] = None
    num_dim: Optional[int] = None
    embed: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.type not in FIELD_TYPES:
            raise SchemaError(
                f"Unknown field type: {self.type!r}. "
                f"Available: {sorted(FIELD_TYPES)}"
            )

    @classmethod
    def from_dict(cls, data: Mapping) -> "Field":
        """Build a Field from a descriptor mapping such as ``{"type": "string", "facet": True}``."""
        known = {f.name for f in dataclass_fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise SchemaError(f"Unknown field descriptor keys: {sorted(unknown)}")
        if "type" not in data:
            raise SchemaError("Field descriptor is missing 'type'")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Descriptor keys that were explicitly set, in declaration order."""
        result = {}
        for f in dataclass_fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        return result

    @property
    def is_string_like(self) -> bool:
        return self.type.startswith("string")

    @property
    def is_facetable(self) -> bool:
        return self.facet is True

    @property
    def is_sortable(self) -> bool:
        return self.sort is True

    @property
    def is_vector(self) -> bool:
        return self.type == "float[]"


def is_searchable(name: str, field: Field) -> bool:
    """A field is searchable when it is indexed, string-like and not ``id`` or the wildcard."""
    return (
        field.index is not False
        and field.is_string_like
        and name not in UNSEARCHABLE_NAMES
    )


class Schema(Mapping):
    """Ordered, immutable mapping of field name to ``Field``.

    Raises:
        SchemaError: If ``id`` is missing, is not a string, or is optional or unindexed
    """

    def __init__(self, fields: Mapping[str, Union[Field, Mapping]]):
        parsed: Dict[str, Field] = {}
        for name, descriptor in fields.items():
            if isinstance(descriptor, Field):
                parsed[name] = descriptor
            elif isinstance(descriptor, Mapping):
                parsed[name] = Field.from_dict(descriptor)
            else:
                raise SchemaError(
                    f"Field {name!r} must be a Field or a mapping, "
                    f"got {type(descriptor).__name__}"
                )

        id_field = parsed.get(ID_FIELD)
        if id_field is None:
            raise SchemaError("Schema must declare an 'id' field")
        if id_field.type != "string":
            raise SchemaError(f"'id' field must be of type string, got {id_field.type!r}")
        if id_field.optional:
            raise SchemaError("'id' field cannot be optional")
        # Unindexed fields are declared optional
        if id_field.index is False:
            raise SchemaError("'id' field cannot be unindexed")

        self._fields = parsed

        # Runtime narrowing pass: derived capability sets, in declaration order
        self.searchable_fields: Tuple[str, ...] = tuple(
            name for name, f in parsed.items() if is_searchable(name, f)
        )
        self.facetable_fields: Tuple[str, ...] = tuple(
            name for name, f in parsed.items() if f.is_facetable
        )
        self.sortable_fields: Tuple[str, ...] = tuple(
            name for name, f in parsed.items() if f.is_sortable
        )
        self.vector_fields: Tuple[str, ...] = tuple(
            name for name, f in parsed.items() if f.is_vector
        )

    @classmethod
    def coerce(cls, fields: Union["Schema", Mapping]) -> "Schema":
        """Return ``fields`` unchanged if it is already a Schema, otherwise build one."""
        if isinstance(fields, Schema):
            return fields
        return cls(fields)

    def __getitem__(self, name: str) -> Field:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Schema({list(self._fields)!r})"

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: f.to_dict() for name, f in self._fields.items()}


def to_fields_array(fields: Union[Schema, Mapping]) -> List[Dict[str, Any]]:
    """Convert a schema to the engine's list of field declarations.

    The first entry is always the wildcard declaration, which lets the engine
    auto-detect the type of any field that is not declared explicitly.

    Args:
        fields: Schema or mapping of field name to descriptor

    Returns:
        List of field declaration dicts
    """
    schema = Schema.coerce(fields)

    declarations = [{
        "name": WILDCARD_FIELD,
        "type": "auto",
        "sort": False,
        "facet": False,
        "index": True,
    }]

    for name, field in schema.items():
        declaration = {"name": name}
        declaration.update(field.to_dict())
        declaration["optional"] = field.index is False or field.optional is True
        declarations.append(declaration)

    return declarations
