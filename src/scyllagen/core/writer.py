"""Write rendered models to disk.

Existing files are never replaced unless the caller says so, either for the
whole run (`overwrite=True`) or per file (`confirmed`). Asking the user is
the caller's job; this module does not prompt.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Collection, Iterable

from scyllagen.core.render import RenderedModel


class FileWriteError(RuntimeError):
    """Raised when a generated file cannot be written."""


@dataclass(frozen=True)
class WriteResult:
    """Result of writing one generated file."""

    name: str
    path: Path
    written: bool
    skipped: bool = False
    error: str | None = None


def write_text(path: Path, content: str, *, overwrite: bool = False) -> bool:
    """
    Write `content` to `path`, creating parent directories.

    Returns:
        True if the file was written, False if it exists and `overwrite`
        is False (the file is left untouched).

    Raises:
        FileWriteError: If the file system rejects the write.
    """
    if path.exists() and not overwrite:
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FileWriteError(f"Error occurred while writing {path}: {exc}") from exc
    return True


def model_path(directory: Path, model: RenderedModel) -> Path:
    return directory / model.file_name


def existing_targets(models: Iterable[RenderedModel], directory: Path) -> list[Path]:
    """Return the target paths of `models` that already exist."""
    return [p for p in (model_path(directory, m) for m in models) if p.exists()]


def write_models(
    models: Iterable[RenderedModel],
    directory: Path,
    *,
    overwrite: bool = False,
    confirmed: Collection[Path] = (),
) -> list[WriteResult]:
    """
    Write each model to `directory / model.file_name`.

    A failure for one table is recorded on its result and does not stop the
    remaining tables.

    Args:
        models: Rendered models, written in the given order.
        directory: Output directory.
        overwrite: Replace existing files.
        confirmed: Existing paths the caller approved replacing individually.
    """
    results: list[WriteResult] = []
    for model in models:
        path = model_path(directory, model)
        try:
            written = write_text(
                path, model.text, overwrite=overwrite or path in confirmed
            )
        except FileWriteError as exc:
            results.append(
                WriteResult(name=model.table_name, path=path, written=False, error=str(exc))
            )
            continue
        results.append(
            WriteResult(name=model.table_name, path=path, written=written, skipped=not written)
        )
    return results
