"""Run an external source formatter over generated files."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Iterable

ENV_FORMATTER = "SCYLLAGEN_FORMATTER"
DEFAULT_FORMATTER = "black --quiet"


class FormatError(RuntimeError):
    """Raised when the formatter is missing or exits with an error."""


def formatter_command(command: str | None = None) -> list[str]:
    """Return the formatter argv: explicit command > env override > black."""
    return shlex.split(command or os.getenv(ENV_FORMATTER) or DEFAULT_FORMATTER)


def format_files(paths: Iterable[Path], command: str | None = None) -> None:
    """
    Format `paths` in place.

    Raises:
        FormatError: If the formatter is not installed or fails.
    """
    files = [str(p) for p in paths]
    if not files:
        return
    argv = formatter_command(command)
    if not argv or shutil.which(argv[0]) is None:
        raise FormatError(f"Formatter '{' '.join(argv)}' was not found on PATH.")
    proc = subprocess.run([*argv, *files], capture_output=True, text=True, check=False)
    if proc.returncode != 0:
        detail = proc.stderr.strip() or proc.stdout.strip() or f"exit code {proc.returncode}"
        raise FormatError(f"Formatting failed: {detail}")
