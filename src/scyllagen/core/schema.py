"""Table schema models built from `system_schema.columns` rows.

The catalog returns one row per column, for every requested table at once.
`normalize` fans those rows out into one immutable `TableSchema` per table.
Rows are kept in catalog order; key order is recovered from `position` by the
consumers that need it (see `scyllagen.core.keys`).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping


class EmptyResultError(RuntimeError):
    """Raised when the catalog returns no columns for the keyspace."""


class SchemaEmptyError(EmptyResultError):
    """Raised when explicitly requested tables yield no catalog rows."""

    def __init__(self, missing: Iterable[str]):
        self.missing = tuple(missing)
        names = ", ".join(self.missing)
        super().__init__(f"Table(s) not found in catalog: {names}")


class ColumnKind(str, Enum):
    """
    Role of a column in its table.

    Values:
        PARTITION_KEY: Part of the partition key.
        CLUSTERING: Part of the clustering key.
        REGULAR: Plain column.
        STATIC: Column shared by all rows of a partition.
    """

    PARTITION_KEY = "partition_key"
    CLUSTERING = "clustering"
    REGULAR = "regular"
    STATIC = "static"


class ClusteringOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


def _parse_order(value: Any) -> ClusteringOrder | None:
    if value is None:
        return None
    text = str(value).strip().upper()
    if text in ("", "NONE"):
        return None
    return ClusteringOrder(text)


def _field(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


@dataclass(frozen=True)
class ColumnDefinition:
    """
    One column of a table as described by the catalog.

    Attributes:
        table_name: Table the column belongs to.
        column_name: CQL column name (snake_case by convention).
        kind: Key role of the column.
        position: Rank within its kind; -1 for regular columns in the catalog.
        type: Raw CQL type string, e.g. `frozen<list<text>>`.
        clustering_order: Sort direction, only meaningful for clustering keys.
    """

    table_name: str
    column_name: str
    kind: ColumnKind
    position: int
    type: str
    clustering_order: ClusteringOrder | None = None

    @classmethod
    def from_row(cls, row: Any) -> "ColumnDefinition":
        """Build a column from a catalog row (mapping or attribute object)."""
        kind = ColumnKind(str(_field(row, "kind")))
        order = (
            _parse_order(_field(row, "clustering_order"))
            if kind is ColumnKind.CLUSTERING
            else None
        )
        return cls(
            table_name=str(_field(row, "table_name")),
            column_name=str(_field(row, "column_name")),
            kind=kind,
            position=int(_field(row, "position") or 0),
            type=str(_field(row, "type") or ""),
            clustering_order=order,
        )


@dataclass(frozen=True)
class TableSchema:
    """All columns of one table, in catalog order."""

    table_name: str
    columns: tuple[ColumnDefinition, ...]
    keyspace: str | None = None

    def __post_init__(self) -> None:
        stray = [c.column_name for c in self.columns if c.table_name != self.table_name]
        if stray:
            raise ValueError(
                f"Columns {stray} do not belong to table '{self.table_name}'."
            )

    def columns_of(self, kind: ColumnKind) -> list[ColumnDefinition]:
        """Return columns of `kind` sorted by position (stable for ties)."""
        return sorted(
            (c for c in self.columns if c.kind is kind), key=lambda c: c.position
        )

    @property
    def partition_keys(self) -> list[ColumnDefinition]:
        return self.columns_of(ColumnKind.PARTITION_KEY)

    @property
    def clustering_keys(self) -> list[ColumnDefinition]:
        return self.columns_of(ColumnKind.CLUSTERING)


def normalize(
    rows: Iterable[Any],
    requested: Iterable[str] | None = None,
    *,
    keyspace: str | None = None,
) -> dict[str, TableSchema]:
    """
    Group catalog rows into one `TableSchema` per table.

    Tables appear in first-seen order and columns keep their catalog order.

    Args:
        rows: Raw `system_schema.columns` rows.
        requested: Table names the caller asked for explicitly, if any.
        keyspace: Keyspace the rows were read from, recorded on each schema.

    Returns:
        Mapping of table name to schema. Empty when `rows` is empty and no
        tables were requested.

    Raises:
        SchemaEmptyError: If any requested table has no rows.
    """
    grouped: dict[str, list[ColumnDefinition]] = {}
    for row in rows:
        column = ColumnDefinition.from_row(row)
        grouped.setdefault(column.table_name, []).append(column)

    if requested:
        missing = [name for name in dict.fromkeys(requested) if name not in grouped]
        if missing:
            raise SchemaEmptyError(missing)

    return {
        name: TableSchema(table_name=name, columns=tuple(columns), keyspace=keyspace)
        for name, columns in grouped.items()
    }
