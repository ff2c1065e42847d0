"""Main CLI entry point for Querysmith."""

import sys

import click

from querysmith import __version__
from querysmith.cli.errors import (
    EXIT_SUCCESS,
    EXIT_ERROR,
    EXIT_INVALID_ARGS,
    EXIT_NOT_FOUND,
    HelpfulGroup,
    QuerysmithError,
    InvalidArgumentError,
    ResourceNotFoundError,
)


config_option = click.option(
    '--config', 'config_path', type=click.Path(dir_okay=False),
    default=None, help='Config file (default: $QSM_CONFIG or ~/.config/querysmith/config.yaml)'
)
url_option = click.option('--url', default=None, help='Typesense URL (overrides config and QSM_TYPESENSE_URL)')
api_key_option = click.option('--api-key', default=None, help='Typesense API key (overrides config and QSM_TYPESENSE_API_KEY)')
json_option = click.option('--json', 'output_json', is_flag=True, help='Output JSON format')


@click.group()
@click.version_option(version=__version__)
def cli():
    """Querysmith: typed filter and search parameter compilation for Typesense"""
    pass


@cli.command('filter')
@click.argument('predicate')
@click.option('--collection', default=None, help='Declared collection (reports unknown fields)')
@config_option
@json_option
def filter_cmd(predicate, collection, config_path, output_json):
    """Compile a JSON predicate into a filter_by string.

    Example: qsm filter '{"price": {"gte": 100, "lt": 500}}'
    """
    from querysmith.cli.search import filter_command
    filter_command(predicate, collection, config_path, output_json)


@cli.command('params')
@click.argument('criteria', required=False)
@click.option('--collection', required=True, help='Declared collection name')
@config_option
@json_option
def params_cmd(criteria, collection, config_path, output_json):
    """Compile JSON search criteria into search parameters"""
    from querysmith.cli.search import params_command
    params_command(criteria, collection, config_path, output_json)


@cli.command('fields')
@click.option('--collection', required=True, help='Declared collection name')
@config_option
@json_option
def fields_cmd(collection, config_path, output_json):
    """Show the field declarations for a collection"""
    from querysmith.cli.search import fields_command
    fields_command(collection, config_path, output_json)


@cli.command('search')
@click.argument('query', default='*')
@click.option('--collection', required=True, help='Declared collection name')
@click.option('--filter', 'filter_arg', default=None, help='JSON predicate or raw filter_by string')
@click.option('--sort', multiple=True, help='Sort expression, e.g. price:desc (repeatable)')
@click.option('--facet', 'facets', multiple=True, help='Facet field (repeatable)')
@click.option('--page', type=int, default=None, help='Page number')
@click.option('--per-page', type=int, default=None, help='Results per page (max 250)')
@config_option
@url_option
@api_key_option
@json_option
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--debug', is_flag=True, help='Debug mode (show compiled parameters and HTTP logs)')
def search_cmd(query, collection, filter_arg, sort, facets, page, per_page, config_path, url, api_key, output_json, verbose, debug):
    """Search a collection"""
    from querysmith.cli.search import search_command
    search_command(query, collection, filter_arg, sort, facets, page, per_page,
                   config_path, url, api_key, output_json, verbose, debug)


@cli.group(cls=HelpfulGroup, usage_examples=[
    'qsm collection ensure --collection products',
    'qsm collection delete --collection products --confirm',
    'qsm collection import docs.jsonl --collection products',
])
def collection():
    """Manage collections on the Typesense server"""
    pass


@collection.command('ensure')
@click.option('--collection', 'name', required=True, help='Declared collection name')
@config_option
@url_option
@api_key_option
@json_option
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def ensure_collection(name, config_path, url, api_key, output_json, verbose):
    """Create the collection if it does not exist"""
    from querysmith.cli.collections import ensure_collection_command
    ensure_collection_command(name, config_path, url, api_key, output_json, verbose)


@collection.command('delete')
@click.option('--collection', 'name', required=True, help='Declared collection name')
@click.option('--confirm', is_flag=True, help='Skip confirmation prompt')
@config_option
@url_option
@api_key_option
@json_option
def delete_collection(name, confirm, config_path, url, api_key, output_json):
    """Delete the collection"""
    from querysmith.cli.collections import delete_collection_command
    delete_collection_command(name, confirm, config_path, url, api_key, output_json)


@collection.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--collection', 'name', required=True, help='Declared collection name')
@config_option
@url_option
@api_key_option
@json_option
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def import_documents(path, name, config_path, url, api_key, output_json, verbose):
    """Upsert documents from a JSON Lines file"""
    from querysmith.cli.collections import import_documents_command
    import_documents_command(path, name, config_path, url, api_key, output_json, verbose)


def main():
    """Main CLI entry point with structured error handling."""
    try:
        cli(standalone_mode=False)
        return EXIT_SUCCESS
    except click.exceptions.Abort:
        print("\n[INFO] Operation cancelled by user", file=sys.stderr)
        return EXIT_ERROR
    except click.ClickException as e:
        e.show()
        return EXIT_INVALID_ARGS
    except InvalidArgumentError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_INVALID_ARGS
    except ResourceNotFoundError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except KeyboardInterrupt:
        print("\n[INFO] Operation cancelled by user", file=sys.stderr)
        return EXIT_ERROR
    except QuerysmithError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        print(f"[ERROR] Unexpected error: {e}", file=sys.stderr)
        if '--verbose' in sys.argv or '-v' in sys.argv:
            import traceback
            traceback.print_exc()
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
