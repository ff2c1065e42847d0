"""Collection and field schema model."""

from .fields import (
    FIELD_TYPES,
    Field,
    Schema,
    SchemaError,
    is_searchable,
    to_fields_array,
)
from .collection import (
    DEFAULT_TOKEN_SEPARATORS,
    CollectionSchema,
    to_collection_declaration,
)

__all__ = [
    "FIELD_TYPES",
    "Field",
    "Schema",
    "SchemaError",
    "is_searchable",
    "to_fields_array",
    "DEFAULT_TOKEN_SEPARATORS",
    "CollectionSchema",
    "to_collection_declaration",
]
