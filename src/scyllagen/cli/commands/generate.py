from __future__ import annotations

from pathlib import Path

from scyllagen.cli.common.context import catalog_session
from scyllagen.cli.common.exits import (
    check_regex_or_exit,
    die,
    exit_from_exc,
    ok_exit,
    warn_exit,
)
from scyllagen.cli.common.options import (
    FormatOpt,
    KeyspaceOpt,
    NameOpt,
    OutDirOpt,
    OverwriteOpt,
    PickOpt,
    PrintOpt,
    TablesArg,
)
from scyllagen.cli.common.output import out
from scyllagen.cli.tui import select_tables
from scyllagen.core.catalog import CatalogError, list_table_names
from scyllagen.core.formatter import FormatError, format_files
from scyllagen.core.generate import GenerationResult, generate_models
from scyllagen.core.scaffold import DB_CLIENT_FILE
from scyllagen.core.schema import EmptyResultError
from scyllagen.core.writer import existing_targets, write_models


def _confirm_overwrites(result: GenerationResult, out_dir: Path) -> list[Path]:
    """Ask once per existing target file; return the paths the user approved."""
    approved: list[Path] = []
    for path in existing_targets(result.models, out_dir):
        if out.confirm(f"{path} already exists. Overwrite?", default=False):
            approved.append(path)
    return approved


def generate(
    tables: list[str] | None = TablesArg,
    keyspace: str | None = KeyspaceOpt,
    name: str | None = NameOpt,
    pick: bool = PickOpt,
    print_only: bool = PrintOpt,
    overwrite: bool = OverwriteOpt,
    fmt: bool = FormatOpt,
    out_dir: Path = OutDirOpt,
):
    """Generate typed model modules from table schemas."""
    check_regex_or_exit(name, option_name="--name")
    wanted = list(tables or [])

    with catalog_session(keyspace) as appctx:
        if pick and not wanted:
            try:
                with out.status(f"Loading tables of {appctx.keyspace}..."):
                    names = list_table_names(appctx.adapter, appctx.keyspace)
            except CatalogError as exc:
                exit_from_exc(exc)
            if not names:
                warn_exit(f"No tables found in keyspace {appctx.keyspace}.", code=1)
            wanted = select_tables(names, keyspace=appctx.keyspace)
            if not wanted:
                ok_exit("Nothing selected.")

        try:
            with out.status(f"Reading schema of keyspace {appctx.keyspace}..."):
                result = generate_models(
                    appctx.adapter, appctx.keyspace, wanted, name_regex=name
                )
        except (CatalogError, EmptyResultError) as exc:
            exit_from_exc(exc)

    for warning in result.warnings:
        out.warn(warning)

    if print_only:
        for model in result.models:
            out.code(model.text, "python", title=f"# {model.file_name}")
        return

    confirmed = [] if overwrite else _confirm_overwrites(result, out_dir)
    results = write_models(
        result.models, out_dir, overwrite=overwrite, confirmed=confirmed
    )

    out.header(f"Keyspace {result.keyspace}")
    out.models_table(results, title="Models")

    written = [r.path for r in results if r.written]
    if fmt and written:
        try:
            with out.status("Formatting generated files..."):
                format_files(written)
        except FormatError as exc:
            out.warn(str(exc))

    if not (out_dir / DB_CLIENT_FILE).exists():
        out.warn(
            f"{out_dir / DB_CLIENT_FILE} is missing; run `scyllagen init` "
            "so the models can connect."
        )

    failed = [r for r in results if r.error]
    if failed:
        die(f"{len(failed)} of {len(results)} model(s) could not be written.")

    out.success(f"Wrote {len(written)} of {len(results)} model(s) to {out_dir}.")
