"""Key model derivation: partition key record and clustering prefix union.

The storage engine accepts a query that names every partition key column plus
an ordered *prefix* of the clustering columns. The key model spells that rule
out as data: one entry per legal prefix, each a strict extension of the one
before it. Naming a later clustering column while skipping an earlier one is
therefore not representable in anything rendered from it.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from scyllagen.core.names import snake_to_camel
from scyllagen.core.schema import ColumnDefinition, ColumnKind, TableSchema
from scyllagen.core.types import TargetType, TypeMapper, default_mapper


@dataclass(frozen=True)
class KeyField:
    """A key column as it appears in generated code."""

    field_name: str
    column_name: str
    target: TargetType


@dataclass(frozen=True)
class KeyModel:
    """
    Derived key structure of one table.

    Attributes:
        partition_key_fields: Partition key fields in declaration order.
            May be empty.
        clustering_prefixes: Entry `i` holds the first `i + 1` clustering
            fields. Empty when the table has no clustering columns.
    """

    partition_key_fields: tuple[KeyField, ...]
    clustering_prefixes: tuple[tuple[KeyField, ...], ...] = ()

    @property
    def has_clustering(self) -> bool:
        return bool(self.clustering_prefixes)

    @property
    def clustering_fields(self) -> tuple[KeyField, ...]:
        """All clustering fields in order (the longest prefix)."""
        return self.clustering_prefixes[-1] if self.clustering_prefixes else ()


def _key_field(column: ColumnDefinition, mapper: TypeMapper) -> KeyField:
    return KeyField(
        field_name=snake_to_camel(column.column_name),
        column_name=column.column_name,
        target=mapper.resolve(column.type),
    )


def derive_key_model(schema: TableSchema, mapper: TypeMapper | None = None) -> KeyModel:
    """
    Derive the partition key fields and clustering prefixes of a table.

    Args:
        schema: Table to derive keys for.
        mapper: Type mapper; defaults to the shared mapper.

    Returns:
        The `KeyModel` for `schema`.
    """
    mapper = mapper or default_mapper
    partition = tuple(_key_field(c, mapper) for c in schema.partition_keys)
    clustering = tuple(_key_field(c, mapper) for c in schema.clustering_keys)
    prefixes = tuple(clustering[:i] for i in range(1, len(clustering) + 1))
    return KeyModel(partition_key_fields=partition, clustering_prefixes=prefixes)


def find_duplicate_positions(schema: TableSchema) -> list[tuple[ColumnKind, int]]:
    """Return `(kind, position)` pairs shared by more than one key column."""
    counts = Counter(
        (c.kind, c.position)
        for c in schema.columns
        if c.kind in (ColumnKind.PARTITION_KEY, ColumnKind.CLUSTERING)
    )
    return sorted(
        (pair for pair, n in counts.items() if n > 1),
        key=lambda pair: (pair[0].value, pair[1]),
    )
