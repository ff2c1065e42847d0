"""Shared helpers for CLI commands."""

import json
import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import typesense
import yaml

from querysmith.config import QuerysmithConfig, load_config, resolve_typesense_config
from querysmith.paths import get_config_path
from querysmith.schema import CollectionSchema, SchemaError
from querysmith.cli.errors import CollectionNotFoundError, InvalidArgumentError, ResourceNotFoundError


logger = logging.getLogger(__name__)

DEFAULT_PORT = 443


def load_cli_config(config_path: Optional[Path] = None, required: bool = False) -> QuerysmithConfig:
    """Load the config file, falling back to defaults when it is absent.

    Args:
        config_path: Explicit path (defaults to QSM_CONFIG or the XDG location)
        required: Raise if the file does not exist

    Raises:
        ResourceNotFoundError: If required and the file does not exist
        InvalidArgumentError: If the file exists but is invalid
    """
    path = Path(config_path) if config_path else get_config_path()

    if not path.exists():
        if required:
            raise ResourceNotFoundError(f"Config file not found: {path}")
        logger.debug(f"No config file at {path}, using defaults")
        return QuerysmithConfig()

    try:
        return load_config(path)
    except (ValueError, yaml.YAMLError) as e:
        raise InvalidArgumentError(f"Invalid config file {path}: {e}")


def get_collection_schema(config: QuerysmithConfig, name: str) -> CollectionSchema:
    """Resolve a declared collection, converting lookup errors to CLI errors."""
    try:
        return config.get_collection(name)
    except KeyError as e:
        raise CollectionNotFoundError(e.args[0])
    except SchemaError as e:
        raise InvalidArgumentError(f"Invalid schema for collection '{name}': {e}")


def parse_json_argument(value: Optional[str], what: str) -> Any:
    """Parse a JSON command line argument.

    Raises:
        InvalidArgumentError: If the value is not valid JSON
    """
    if not value:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(f"Invalid JSON {what}: {e}")


def create_typesense_client(
    url: Optional[str] = None,
    api_key: Optional[str] = None,
    config: Optional[QuerysmithConfig] = None,
) -> typesense.Client:
    """Create a Typesense client.

    Priority for url/api_key: argument > environment > config > default.
    The port defaults to 443 when the URL does not specify one.

    Raises:
        InvalidArgumentError: If the URL cannot be parsed or no API key is set
    """
    settings = resolve_typesense_config(config, url=url, api_key=api_key)

    parsed = urlparse(settings.url)
    try:
        port = parsed.port or DEFAULT_PORT
    except ValueError:
        raise InvalidArgumentError(f"Invalid Typesense URL: {settings.url}")
    if not parsed.scheme or not parsed.hostname:
        raise InvalidArgumentError(f"Invalid Typesense URL: {settings.url}")

    if not settings.api_key:
        raise InvalidArgumentError(
            "Typesense API key not set. Use --api-key, QSM_TYPESENSE_API_KEY or the config file."
        )

    logger.debug(f"Creating Typesense client: {parsed.scheme}://{parsed.hostname}:{port}")

    return typesense.Client({
        "api_key": settings.api_key,
        "nodes": [{
            "host": parsed.hostname,
            "port": port,
            "protocol": parsed.scheme,
        }],
        "connection_timeout_seconds": settings.connection_timeout_seconds,
    })
