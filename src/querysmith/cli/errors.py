"""Custom exception classes for CLI error handling.

Exit Codes:
- 0: Success
- 1: General error
- 2: Invalid arguments
- 3: Resource not found
"""

import click


EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_INVALID_ARGS = 2
EXIT_NOT_FOUND = 3


class QuerysmithError(Exception):
    """Base exception for Querysmith CLI errors.

    Default exit code is EXIT_ERROR (1).
    """
    exit_code = EXIT_ERROR


class InvalidArgumentError(QuerysmithError):
    """Invalid command line arguments or configuration.

    Examples:
    - Malformed JSON predicate or criteria
    - Unknown filter operator
    - Invalid Typesense URL

    Exit code: 2
    """
    exit_code = EXIT_INVALID_ARGS


class ResourceNotFoundError(QuerysmithError):
    """Resource not found (collection, config file, etc.).

    Exit code: 3
    """
    exit_code = EXIT_NOT_FOUND


class CollectionNotFoundError(ResourceNotFoundError):
    """Specific case: collection not declared in config or missing on the server."""
    pass


class HelpfulGroup(click.Group):
    """Click group that lists valid subcommands when an unknown one is used."""

    def __init__(self, *args, usage_examples: list[str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.usage_examples = usage_examples or []

    def resolve_command(self, ctx, args):
        if not args or self.get_command(ctx, args[0]) is not None:
            return super().resolve_command(ctx, args)

        cmd_name = args[0]
        group_name = ctx.info_name or self.name
        valid_commands = list(self.commands.keys())

        error_lines = [
            f"[ERROR] '{cmd_name}' is not a valid subcommand for '{group_name}'.",
            "",
            f"Available subcommands: {', '.join(valid_commands)}",
        ]
        if self.usage_examples:
            error_lines.append("")
            error_lines.append("Correct syntax:")
            error_lines.extend(f"  {example}" for example in self.usage_examples)

        raise click.UsageError("\n".join(error_lines))
