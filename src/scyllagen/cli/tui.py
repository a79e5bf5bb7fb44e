"""Terminal UI utilities for picking tables."""

from __future__ import annotations

import questionary

from scyllagen.cli.common.tui_style import QUESTIONARY_STYLE_SELECT


def select_tables(tables: list[str], *, keyspace: str | None = None) -> list[str]:
    """Display a checkbox prompt to select tables from a list.

    Args:
        tables: Table names to choose from.
        keyspace: Shown in the prompt when given.

    Returns:
        The selected table names in list order, or an empty list if none selected.
    """
    where = f" in {keyspace}" if keyspace else ""
    choices = [questionary.Choice(title=name, value=name) for name in tables]

    picked = (
        questionary.checkbox(
            f"Select tables{where}:",
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
        ).ask()
        or []
    )
    return [name for name in tables if name in picked]
