"""Collection management CLI commands."""

import json
import logging
from pathlib import Path
from typing import Optional

import click

from ..fulltext.client import TypesenseCollection
from .errors import InvalidArgumentError
from .logging_config import setup_logging
from .output import print_error, print_info, print_success
from .utils import create_typesense_client, get_collection_schema, load_cli_config

logger = logging.getLogger(__name__)


def _open_collection(collection: str, config_path: Optional[Path], url: Optional[str], api_key: Optional[str]):
    config = load_cli_config(config_path)
    schema = get_collection_schema(config, collection)
    client = create_typesense_client(url=url, api_key=api_key, config=config)
    return TypesenseCollection(client, schema)


def ensure_collection_command(
    collection: str,
    config_path: Optional[Path],
    url: Optional[str],
    api_key: Optional[str],
    output_json: bool,
    verbose: bool = False,
):
    """Create a declared collection on the server if it does not exist."""
    setup_logging(verbose=verbose)
    repo = _open_collection(collection, config_path, url, api_key)

    existed = repo.exists()
    repo.ensure_collection()

    message = (
        f"Collection '{collection}' already exists" if existed
        else f"Created collection '{collection}'"
    )
    print_success(message, json_output=output_json, data={"collection": collection, "created": not existed})


def delete_collection_command(
    collection: str,
    confirm: bool,
    config_path: Optional[Path],
    url: Optional[str],
    api_key: Optional[str],
    output_json: bool,
):
    """Delete a declared collection from the server."""
    if not confirm and not output_json:
        click.confirm(f"Delete collection '{collection}' and all its documents?", abort=True)

    repo = _open_collection(collection, config_path, url, api_key)
    deleted = repo.delete_collection()

    if deleted:
        print_success(f"Deleted collection '{collection}'", json_output=output_json,
                      data={"collection": collection, "deleted": True})
    elif output_json:
        print_success(f"Collection '{collection}' does not exist", json_output=True,
                      data={"collection": collection, "deleted": False})
    else:
        print_info(f"Collection '{collection}' does not exist")


def import_documents_command(
    path: Path,
    collection: str,
    config_path: Optional[Path],
    url: Optional[str],
    api_key: Optional[str],
    output_json: bool,
    verbose: bool = False,
):
    """Upsert documents from a JSON Lines file (one document per line)."""
    setup_logging(verbose=verbose)

    documents = []
    with open(path) as f:
        for line_number, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                documents.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise InvalidArgumentError(f"{path}:{line_number}: invalid JSON: {e}")

    repo = _open_collection(collection, config_path, url, api_key)
    results = repo.import_documents(documents)

    failed = [r for r in results if not r.get("success", True)]
    if not output_json:
        for result in failed:
            print_error(f"Document {result.get('id', '?')}: {result.get('error')}")

    print_success(
        f"Imported {len(documents) - len(failed)} of {len(documents)} documents into '{collection}'",
        json_output=output_json,
        data={"collection": collection, "imported": len(documents) - len(failed), "failed": len(failed)},
    )
