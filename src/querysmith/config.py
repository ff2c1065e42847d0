"""Configuration management for Querysmith."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from querysmith.schema import CollectionSchema


logger = logging.getLogger(__name__)

DEFAULT_TYPESENSE_URL = "http://localhost:8108"


class TypesenseConfig(BaseModel):
    """Typesense server configuration."""
    url: str = DEFAULT_TYPESENSE_URL
    api_key: Optional[str] = None
    connection_timeout_seconds: float = 2


class CollectionConfig(BaseModel):
    """Declared collection: field descriptors plus collection options."""
    model_config = ConfigDict(populate_by_name=True)

    field_descriptors: Dict[str, Dict[str, Any]] = Field(alias="fields")
    token_separators: Optional[List[str]] = None
    default_sorting_field: Optional[str] = None

    def to_collection_schema(self, name: str) -> CollectionSchema:
        """Build the validated CollectionSchema for this declaration.

        Raises:
            SchemaError: If the field descriptors are invalid
        """
        return CollectionSchema.from_dict({
            "name": name,
            "fields": self.field_descriptors,
            "token_separators": self.token_separators,
            "default_sorting_field": self.default_sorting_field,
        })


class QuerysmithConfig(BaseModel):
    """Root configuration."""
    typesense: TypesenseConfig = Field(default_factory=TypesenseConfig)
    collections: Dict[str, CollectionConfig] = Field(default_factory=dict)

    def get_collection(self, name: str) -> CollectionSchema:
        """Look up a declared collection by name.

        Raises:
            KeyError: If the collection is not declared
        """
        if name not in self.collections:
            raise KeyError(
                f"Collection '{name}' is not declared in config. "
                f"Available: {sorted(self.collections)}"
            )
        return self.collections[name].to_collection_schema(name)


def load_config(config_path: Path) -> QuerysmithConfig:
    """Load and validate configuration file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated QuerysmithConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return QuerysmithConfig(**data)


def save_config(config: QuerysmithConfig, config_path: Path):
    """Save configuration to file.

    Args:
        config: Configuration to save
        config_path: Path to save YAML file
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w') as f:
        yaml.dump(
            config.model_dump(mode='json', by_alias=True, exclude_none=True),
            f,
            default_flow_style=False,
            sort_keys=False,
        )


def resolve_typesense_config(
    config: Optional[QuerysmithConfig] = None,
    url: Optional[str] = None,
    api_key: Optional[str] = None,
) -> TypesenseConfig:
    """Resolve connection settings.

    Priority for each value: argument > environment > config file > default.

    Environment Variables:
        QSM_TYPESENSE_URL: Override server URL
        QSM_TYPESENSE_API_KEY: Override API key
    """
    base = config.typesense if config else TypesenseConfig()

    final_url = url or os.environ.get("QSM_TYPESENSE_URL") or base.url
    final_api_key = api_key or os.environ.get("QSM_TYPESENSE_API_KEY") or base.api_key

    logger.debug(f"Resolved Typesense URL: {final_url}")

    return TypesenseConfig(
        url=final_url,
        api_key=final_api_key,
        connection_timeout_seconds=base.connection_timeout_seconds,
    )
