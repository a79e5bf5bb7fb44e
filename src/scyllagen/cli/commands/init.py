from __future__ import annotations

from pathlib import Path

import typer

from scyllagen.cli.common.exits import die
from scyllagen.cli.common.options import OutDirOpt
from scyllagen.cli.common.output import out
from scyllagen.core.scaffold import DB_CLIENT_FILE, scaffold_client
from scyllagen.core.writer import FileWriteError


def init(
    out_dir: Path = OutDirOpt,
    overwrite: bool = typer.Option(
        False, "--overwrite", help="Replace an existing db_client.py without asking"
    ),
):
    """Create the models package with the shared database client."""
    client = out_dir / DB_CLIENT_FILE
    if client.exists() and not overwrite:
        overwrite = out.confirm(f"{client} already exists. Overwrite?", default=False)

    try:
        results = scaffold_client(out_dir, overwrite=overwrite)
    except FileWriteError as exc:
        die(str(exc))

    out.models_table(results, title="Files")
    out.kv({"models": out_dir, "client": client})
    out.success(f"Initialized {out_dir}.")
