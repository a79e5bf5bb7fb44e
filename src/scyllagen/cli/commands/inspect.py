from __future__ import annotations

import typer

from scyllagen.cli.common.context import catalog_session
from scyllagen.cli.common.exits import check_regex_or_exit, exit_from_exc
from scyllagen.cli.common.options import KeyspaceOpt, NameOpt
from scyllagen.cli.common.output import out
from scyllagen.core.catalog import fetch_table_schemas, filter_tables
from scyllagen.core.ddl import render_create_table
from scyllagen.core.schema import EmptyResultError


def inspect(
    tables: list[str] | None = typer.Argument(
        None, help="Tables to show. Leave empty for every table.", show_default=False
    ),
    keyspace: str | None = KeyspaceOpt,
    name: str | None = NameOpt,
    summary: bool = typer.Option(
        False, "--summary", help="Show a key summary table instead of DDL"
    ),
):
    """Print the CREATE TABLE statements recovered from the catalog."""
    check_regex_or_exit(name, option_name="--name")
    with catalog_session(keyspace) as appctx:
        with out.status(f"Reading schema of keyspace {appctx.keyspace}..."):
            fetched = fetch_table_schemas(appctx.adapter, appctx.keyspace, tables)

    if not fetched.ok:
        exit_from_exc(fetched.error)

    schemas = filter_tables(fetched.tables, name)
    if not schemas:
        exit_from_exc(
            EmptyResultError(f"No tables in keyspace {fetched.keyspace} match '{name}'.")
        )

    if summary:
        out.tables_table(schemas, title=f"Tables in {fetched.keyspace}")
        return

    for schema in schemas:
        out.code(render_create_table(schema, fetched.keyspace), "sql")
