"""Common CLI options for the CLI."""

from pathlib import Path

import typer

DEFAULT_MODELS_DIR = Path("models")

TablesArg = typer.Argument(
    None,
    help="Tables to generate. Leave empty for every table in the keyspace.",
    show_default=False,
)

KeyspaceOpt = typer.Option(
    None,
    "--keyspace",
    "-k",
    help="Keyspace to read (defaults to DB_DEFAULT_KEYSPACE)",
)

NameOpt = typer.Option(
    None,
    "--name",
    help="Regex on table name",
)

PickOpt = typer.Option(
    False,
    "--pick",
    help="Choose tables interactively from the keyspace",
)

PrintOpt = typer.Option(
    False,
    "--print",
    help="Print generated models instead of writing files",
)

OverwriteOpt = typer.Option(
    False,
    "--overwrite",
    help="Replace existing files without asking",
)

FormatOpt = typer.Option(
    False,
    "--format",
    help="Run the formatter (SCYLLAGEN_FORMATTER, default black) on written files",
)

OutDirOpt = typer.Option(
    DEFAULT_MODELS_DIR,
    "--out-dir",
    "-o",
    envvar="SCYLLAGEN_MODELS_DIR",
    help="Directory the models are written to",
)
