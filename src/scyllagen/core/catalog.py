"""Catalog lookups returning explicit success/failure results.

`fetch_table_schemas` never raises for catalog problems: connection errors,
empty keyspaces and missing tables all come back as a `CatalogFetch` with
`error` set, so the caller decides how to report them (the CLI exits).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, Sequence

from scyllagen.core.schema import (
    EmptyResultError,
    SchemaEmptyError,
    TableSchema,
    normalize,
)


class CatalogError(RuntimeError):
    """Raised when the catalog cannot be queried (connection, auth, timeout)."""


class CatalogAdapter(Protocol):
    """Interface for reading `system_schema` used by the core."""

    def fetch_columns(
        self, keyspace: str, tables: Sequence[str] | None = None
    ) -> list[Any]:
        """Return column rows for `tables` (or every table) of `keyspace`."""
        ...

    def list_tables(self, keyspace: str) -> list[str]:
        """Return the table names of `keyspace`."""
        ...


@dataclass(frozen=True)
class CatalogFetch:
    """
    Outcome of reading table schemas from the catalog.

    Attributes:
        keyspace: Keyspace that was queried.
        tables: Schemas in catalog order; empty on failure.
        error: `CatalogError` for infrastructure failures, `EmptyResultError`
            (or its `SchemaEmptyError` subclass) when nothing matched.
    """

    keyspace: str
    tables: tuple[TableSchema, ...] = ()
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> tuple[TableSchema, ...]:
        """Return the tables or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.tables


def fetch_table_schemas(
    adapter: CatalogAdapter,
    keyspace: str,
    tables: Iterable[str] | None = None,
) -> CatalogFetch:
    """
    Fetch and normalize the schemas of `tables` in one catalog round trip.

    Args:
        adapter: Catalog adapter used to query `system_schema.columns`.
        keyspace: Keyspace to read.
        tables: Table names to restrict to; None or empty means all tables.

    Returns:
        A `CatalogFetch` holding either the schemas or the error.
    """
    requested = list(dict.fromkeys(tables or []))
    try:
        rows = adapter.fetch_columns(keyspace, requested or None)
    except Exception as exc:  # noqa: BLE001  driver errors have no common base
        return CatalogFetch(
            keyspace=keyspace,
            error=CatalogError(f"Failed to fetch table schemas: {exc}"),
        )

    try:
        schemas = normalize(rows, requested, keyspace=keyspace)
    except SchemaEmptyError as exc:
        return CatalogFetch(keyspace=keyspace, error=exc)

    if not schemas:
        return CatalogFetch(
            keyspace=keyspace,
            error=EmptyResultError(f"No tables found in keyspace {keyspace}."),
        )
    return CatalogFetch(keyspace=keyspace, tables=tuple(schemas.values()))


def list_table_names(adapter: CatalogAdapter, keyspace: str) -> list[str]:
    """
    Return the table names of `keyspace`, for interactive picking.

    Raises:
        CatalogError: If the catalog cannot be queried.
    """
    try:
        return list(adapter.list_tables(keyspace))
    except Exception as exc:  # noqa: BLE001  driver errors have no common base
        raise CatalogError(f"Failed to list tables: {exc}") from exc


def filter_tables(tables: Iterable[TableSchema], name_regex: str | None) -> list[TableSchema]:
    """Filter schemas by regex on table name (or keep all if regex is None)."""
    tables = list(tables)
    if not name_regex:
        return tables
    rx = re.compile(name_regex)
    return [t for t in tables if rx.search(t.table_name)]
