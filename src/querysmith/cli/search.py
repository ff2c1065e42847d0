"""CLI commands for compiling filters and search parameters, and running searches."""

import json
import logging
import time
from pathlib import Path
from typing import Optional, Tuple

from rich.console import Console
from rich.table import Table

from ..fulltext.client import TypesenseCollection
from ..schema import to_fields_array
from ..search import SearchCriteria, compile_filter, to_search_params
from .errors import InvalidArgumentError
from .logging_config import setup_logging
from .output import print_json, print_success
from .utils import (
    create_typesense_client,
    get_collection_schema,
    load_cli_config,
    parse_json_argument,
)

console = Console()
logger = logging.getLogger(__name__)


def parse_filter_argument(filter_arg: Optional[str]):
    """Parse a --filter value.

    A value starting with '{' is a JSON predicate; anything else is passed
    through as a raw filter_by string.
    """
    if not filter_arg:
        return None
    if filter_arg.lstrip().startswith('{'):
        predicate = parse_json_argument(filter_arg, "filter")
        if not isinstance(predicate, dict):
            raise InvalidArgumentError("JSON filter must be an object")
        return predicate
    return filter_arg


def filter_command(
    predicate_json: str,
    collection: Optional[str],
    config_path: Optional[Path],
    output_json: bool,
):
    """Compile a JSON predicate into a filter_by string.

    Args:
        predicate_json: Predicate as a JSON object
        collection: Optional declared collection, used to report unknown fields
        config_path: Optional config file path
        output_json: If True, output JSON format
    """
    predicate = parse_json_argument(predicate_json, "predicate")
    if not isinstance(predicate, dict):
        raise InvalidArgumentError("Predicate must be a JSON object")

    schema = None
    if collection:
        config = load_cli_config(config_path)
        schema = get_collection_schema(config, collection).fields

    try:
        filter_by = compile_filter(predicate, schema)
    except ValueError as e:
        raise InvalidArgumentError(str(e))

    if output_json:
        print_json("success", "Compiled filter", data={"filter_by": filter_by})
    else:
        print(filter_by)


def params_command(
    criteria_json: Optional[str],
    collection: str,
    config_path: Optional[Path],
    output_json: bool,
):
    """Compile JSON search criteria into search parameters for a declared collection."""
    raw = parse_json_argument(criteria_json, "criteria") or {}
    if not isinstance(raw, dict):
        raise InvalidArgumentError("Criteria must be a JSON object")

    config = load_cli_config(config_path)
    schema = get_collection_schema(config, collection)

    try:
        params = to_search_params(SearchCriteria.from_dict(raw), schema.fields)
    except ValueError as e:
        raise InvalidArgumentError(str(e))

    if output_json:
        print_json("success", f"Search params for '{collection}'", data={"params": params})
    else:
        print(json.dumps(params, indent=2))


def fields_command(collection: str, config_path: Optional[Path], output_json: bool):
    """Show the field declarations sent to the engine for a declared collection."""
    config = load_cli_config(config_path)
    schema = get_collection_schema(config, collection)
    declarations = to_fields_array(schema.fields)

    if output_json:
        print_json("success", f"Fields for '{collection}'", data={"fields": declarations})
        return

    table = Table(title=f"Fields: {collection}")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Optional")
    table.add_column("Facet")
    table.add_column("Sort")
    table.add_column("Searchable")

    searchable = set(schema.fields.searchable_fields)
    for declaration in declarations:
        table.add_row(
            declaration["name"],
            declaration["type"],
            _flag(declaration.get("optional")),
            _flag(declaration.get("facet")),
            _flag(declaration.get("sort")),
            _flag(declaration["name"] in searchable),
        )
    console.print(table)


def _flag(value) -> str:
    return "yes" if value else ""


def search_command(
    query: str,
    collection: str,
    filter_arg: Optional[str],
    sort: Tuple[str, ...],
    facets: Tuple[str, ...],
    page: Optional[int],
    per_page: Optional[int],
    config_path: Optional[Path],
    url: Optional[str],
    api_key: Optional[str],
    output_json: bool,
    verbose: bool,
    debug: bool = False,
):
    """Search a declared collection.

    Args:
        query: Free-text query ("*" matches everything)
        collection: Declared collection name
        filter_arg: JSON predicate or raw filter_by string
        sort: Sort expressions such as "price:desc"
        facets: Fields to facet on
        page: Page number
        per_page: Results per page
        config_path: Optional config file path
        url: Typesense URL override
        api_key: Typesense API key override
        output_json: If True, output JSON format
        verbose: If True, show detailed output and logging
        debug: If True, show debug logging
    """
    setup_logging(verbose=verbose, debug=debug)

    config = load_cli_config(config_path)
    schema = get_collection_schema(config, collection)

    criteria = SearchCriteria(
        q=query,
        sort=list(sort) or None,
        facets=list(facets) or None,
        filter=parse_filter_argument(filter_arg),
        page=page,
        per_page=per_page,
    )

    client = create_typesense_client(url=url, api_key=api_key, config=config)
    repo = TypesenseCollection(client, schema)

    if verbose:
        logger.info(f"Searching collection '{collection}' for: \"{query}\"")

    start_time = time.time()
    try:
        results = repo.search(criteria)
    except ValueError as e:
        raise InvalidArgumentError(str(e))
    execution_time_ms = (time.time() - start_time) * 1000

    if verbose:
        logger.info(f"Search completed in {execution_time_ms:.1f}ms")

    hits = results.get("hits", [])
    found = results.get("found", len(hits))

    if output_json:
        print_success(
            f"Found {found} results",
            json_output=True,
            data={
                "query": query,
                "collection": collection,
                "found": found,
                "hits": [hit.get("document", hit) for hit in hits],
                "facets": results.get("facets", {}),
                "search_time_ms": results.get("search_time_ms", 0),
            },
        )
        return

    console.print(f"\n[bold]Search Results[/bold] ({results.get('search_time_ms', 0)}ms)")
    console.print(f"Found {found} matches in '{collection}'\n")

    if not hits:
        console.print("[dim]No results found[/dim]")
    for i, hit in enumerate(hits, 1):
        document = hit.get("document", {})
        console.print(f"[cyan]{i}. {document.get('id', '?')}[/cyan]")
        for highlight in hit.get("highlights", []):
            snippet = highlight.get("snippet")
            if snippet:
                snippet = snippet.replace("<mark>", "[yellow]").replace("</mark>", "[/yellow]")
                console.print(f"   {highlight.get('field')}: {snippet}")

    for field_name, counts in results.get("facets", {}).items():
        console.print(f"\n[bold]{field_name}[/bold]")
        for entry in counts:
            console.print(f"   {entry.get('value')} ({entry.get('count')})")
