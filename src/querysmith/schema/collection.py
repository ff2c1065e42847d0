"""Collection schema and its engine declaration."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .fields import Schema, SchemaError, to_fields_array


DEFAULT_TOKEN_SEPARATORS: List[str] = [
    "@", "-", ".", ",", ";", ":", "_", "/", "|", "(", ")",
]


@dataclass(frozen=True)
class CollectionSchema:
    """A named collection with its field schema.

    Attributes:
        name: Collection name on the engine
        fields: Field schema
        token_separators: Characters that split tokens (defaults to DEFAULT_TOKEN_SEPARATORS)
        default_sorting_field: Field used for ranking when no sort is given
    """
    name: str
    fields: Schema
    token_separators: Optional[List[str]] = None
    default_sorting_field: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise SchemaError("Collection name cannot be empty")
        if not isinstance(self.fields, Schema):
            object.__setattr__(self, "fields", Schema.coerce(self.fields))
        if (
            self.default_sorting_field is not None
            and self.default_sorting_field not in self.fields
        ):
            raise SchemaError(
                f"default_sorting_field {self.default_sorting_field!r} "
                f"is not a field of collection {self.name!r}"
            )

    @classmethod
    def from_dict(cls, data: Mapping) -> "CollectionSchema":
        return cls(
            name=data["name"],
            fields=Schema.coerce(data["fields"]),
            token_separators=data.get("token_separators"),
            default_sorting_field=data.get("default_sorting_field"),
        )


def to_collection_declaration(collection: CollectionSchema) -> Dict[str, Any]:
    """Build the payload used to create the collection on the engine."""
    declaration: Dict[str, Any] = {
        "name": collection.name,
        "fields": to_fields_array(collection.fields),
        "token_separators": list(collection.token_separators or DEFAULT_TOKEN_SEPARATORS),
    }
    if collection.default_sorting_field:
        declaration["default_sorting_field"] = collection.default_sorting_field
    return declaration
