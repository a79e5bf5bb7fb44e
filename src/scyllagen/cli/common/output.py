"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.theme import Theme

from scyllagen.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

SYNTAX_THEME = "monokai"

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages, code and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be SCYLLAGEN consistent."""
        return f"[SCYLLAGEN] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message on stderr."""
        err_console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def code(self, source: str, lexer: str = "python", title: str | None = None) -> None:
        """Print syntax-highlighted source, optionally under a title."""
        if title:
            self.header(title)
        console.print(Syntax(source, lexer, theme=SYNTAX_THEME, word_wrap=False))
        console.print()

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        # Questionary renders `instruction=...` inline next to the echoed answer.
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
            pointer="❯",
        )
        return bool(prompt.ask())

    def models_table(self, results: Iterable[Any], title: str = "Models") -> None:
        """
        Render write results.

        Expects objects with `.name`, `.path`, `.written`, `.skipped` and an
        optional `.error` (like scyllagen.core.writer.WriteResult).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("File", style="meta")
        t.add_column("Result")

        for r in results:
            err = getattr(r, "error", None)
            if err:
                result = f"[err]FAIL[/] {err}"
            elif getattr(r, "skipped", False):
                result = "[warn]SKIPPED[/] (exists)"
            else:
                result = "[ok]WRITTEN[/]"
            t.add_row(str(r.name), str(r.path), result)

        console.print(t)

    def tables_table(self, tables: Iterable[Any], title: str = "Tables") -> None:
        """
        Render a summary of table schemas.

        Expects objects with `.table_name`, `.partition_keys`,
        `.clustering_keys` and `.columns` (like scyllagen.core.schema.TableSchema).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Table", style="ok", no_wrap=True)
        t.add_column("Partition key")
        t.add_column("Clustering key", style="meta")
        t.add_column("Columns", justify="right")

        for s in tables:
            t.add_row(
                s.table_name,
                ", ".join(c.column_name for c in s.partition_keys),
                ", ".join(c.column_name for c in s.clustering_keys),
                str(len(s.columns)),
            )

        console.print(t)


out = Out()
