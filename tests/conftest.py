from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))


def column_row(
    table: str,
    name: str,
    kind: str,
    position: int,
    type_: str,
    order: str = "none",
) -> dict:
    """One `system_schema.columns` row as the catalog adapter returns it."""
    return {
        "table_name": table,
        "column_name": name,
        "clustering_order": order,
        "kind": kind,
        "position": position,
        "type": type_,
    }


@pytest.fixture
def messages_rows() -> list[dict]:
    return [
        column_row("messages", "id", "partition_key", 0, "uuid"),
        column_row("messages", "created_at", "clustering", 0, "timestamp", "desc"),
        column_row("messages", "status", "clustering", 1, "text", "asc"),
        column_row("messages", "payload", "regular", -1, "blob"),
    ]


@pytest.fixture
def users_rows() -> list[dict]:
    return [
        column_row("users", "user_id", "partition_key", 0, "uuid"),
        column_row("users", "email", "regular", -1, "text"),
        column_row("users", "tags", "regular", -1, "frozen<set<text>>"),
    ]
