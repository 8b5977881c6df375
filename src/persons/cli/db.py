"""Command-line helpers for interacting with the persons database.

This module provides utilities to register database-related subcommands with an
``argparse`` parser and to dispatch parsed arguments to the appropriate
database operations.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from rich.console import Console
from rich.table import Table

from persons.db import operations
from persons.logging import get_logger
from persons.vocabulary import VOCABULARIES


def _add_vocabulary(parser):
    parser.add_argument(
        "--vocabulary", choices=sorted(VOCABULARIES), default=None, help="Table naming to use"
    )


def register_subcommands(subparsers):
    """Attach database subcommands to an ``argparse`` parser.

    Examples
    --------
    >>> import argparse
    >>> parser = argparse.ArgumentParser(prog="persons db")
    >>> subparsers = parser.add_subparsers(dest="subcommand", required=True)
    >>> register_subcommands(subparsers)
    >>> parser.parse_args(["init", "--file", "test.db"])
    Namespace(subcommand='init', vocabulary=None, file='test.db')
    """

    init_parser = subparsers.add_parser("init", help="create the database file and table")
    _add_vocabulary(init_parser)
    init_parser.add_argument("--file", required=False, help="SQLite database file")

    status_parser = subparsers.add_parser("status", help="Check DB status")
    status_parser.add_argument("--file", required=False, help="SQLite database file")
    show_parser = subparsers.add_parser("show", help="Show tables")
    show_parser.add_argument("--file", required=False, help="SQLite database file")

    import_parser = subparsers.add_parser("import", help="Import persons from CSV, TSV or JSON")
    _add_vocabulary(import_parser)
    import_parser.add_argument("--file", required=True, help="Input file")
    import_parser.add_argument("--database", default=None, help="SQLite database file")

    export_parser = subparsers.add_parser("export", help="Export persons to CSV, TSV or JSON")
    _add_vocabulary(export_parser)
    export_parser.add_argument("--file", required=True, help="Output file")
    export_parser.add_argument("--database", default=None, help="SQLite database file")


def dispatch(args):
    """Run the database operation associated with ``args.subcommand``.

    Examples
    --------
    >>> import types
    >>> args = types.SimpleNamespace(subcommand="status", file=None)
    >>> dispatch(args)  # doctest: +SKIP
    """

    logger = get_logger(__file__)

    if args.subcommand == "status":
        operations.check_status(file_path=args.file)
    elif args.subcommand == "show":
        table_definitions = operations.show_tables(file_path=args.file)
        _render_table_overview(table_definitions)
    elif args.subcommand == "import":
        count = operations.import_file(
            args.file, vocabulary=args.vocabulary, db_file_path=args.database
        )
        logger.info("imported %d rows", count)
    elif args.subcommand == "export":
        count = operations.export_table(
            args.file, vocabulary=args.vocabulary, db_file_path=args.database
        )
        logger.info("exported %d rows", count)
    elif args.subcommand == "init":
        operations.initialize(file_path=args.file, vocabulary=args.vocabulary)
    else:
        logger.info("no dispatched function provided for %s", args.subcommand)


def _render_table_overview(
    table_definitions: Mapping[str, Sequence[Mapping[str, Any]]],
    console: Console | None = None,
) -> None:
    """Pretty-print table metadata using ``rich``."""

    if console is None:
        console = Console()

    table = Table(title="Persons Database Schema", show_lines=True)
    table.add_column("Table", style="bold cyan")
    table.add_column("Column", style="magenta")
    table.add_column("Type", style="green")
    table.add_column("Nullable", justify="center", style="yellow")
    table.add_column("Default", style="bright_black")

    table_names = sorted(table_definitions)
    if not table_names:
        table.add_row("[dim]No tables found[/dim]", "", "", "", "")
        console.print(table)
        return

    for table_index, table_name in enumerate(table_names):
        columns = table_definitions[table_name]
        if not columns:
            table.add_row(table_name, "[dim]-[/dim]", "[dim]-[/dim]", "", "")
        for column_index, column in enumerate(columns):
            default = column.get("default")
            table.add_row(
                table_name if column_index == 0 else "",
                str(column.get("name", "")),
                str(column.get("type", "")),
                "Yes" if column.get("nullable", True) else "No",
                "" if default in (None, "") else str(default),
            )
        if table_index < len(table_names) - 1:
            table.add_section()

    console.print(table)
