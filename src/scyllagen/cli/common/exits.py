"""Exit handling utilities for the CLI."""

import re
from typing import NoReturn

import typer

from scyllagen.cli.common.output import out


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str | None = None, code: int = 1) -> NoReturn:
    """
    Print an error message and exit with a given code, chaining `exc`.

    Uses `str(exc)` when no message is given, so domain errors surface
    their own text without a stack trace.
    """
    out.error(message or str(exc))
    raise typer.Exit(code) from exc


def check_regex_or_exit(pattern: str | None, *, option_name: str) -> None:
    """Validate a regex pattern and convert invalid syntax into CLI input errors."""
    if not pattern:
        return
    try:
        re.compile(pattern)
    except re.error as exc:
        out.error(f"Invalid regex for {option_name}: {exc}")
        raise typer.Exit(2) from exc
