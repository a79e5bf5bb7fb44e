"""CLI application for generating typed Cassandra/ScyllaDB models."""

import typer
from dotenv import find_dotenv, load_dotenv

from scyllagen.cli.commands.generate import generate
from scyllagen.cli.commands.init import init
from scyllagen.cli.commands.inspect import inspect

app = typer.Typer(
    help="scyllagen - typed models from Cassandra/ScyllaDB table schemas",
    no_args_is_help=True,
)


@app.callback()
def _main():
    """Load settings from a .env file in the working directory, if any."""
    load_dotenv(find_dotenv(usecwd=True))


app.command("generate", help="Generate typed model modules for tables.")(generate)
app.command("inspect", help="Print CREATE TABLE statements for tables.")(inspect)
app.command("init", help="Create the models package and its db client.")(init)


if __name__ == "__main__":
    app()
