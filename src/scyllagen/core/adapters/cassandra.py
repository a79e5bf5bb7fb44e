from __future__ import annotations

from typing import Any, Mapping, Sequence

from cassandra.cluster import Session

COLUMN_FIELDS = ("table_name", "column_name", "clustering_order", "kind", "position", "type")

COLUMNS_QUERY = (
    f"SELECT {', '.join(COLUMN_FIELDS)} "
    "FROM system_schema.columns WHERE keyspace_name = ?"
)
TABLES_QUERY = "SELECT table_name FROM system_schema.tables WHERE keyspace_name = ?"


def _value(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


class CassandraCatalogAdapter:
    """Adapter around a driver `Session` for `system_schema` reads."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def fetch_columns(
        self, keyspace: str, tables: Sequence[str] | None = None
    ) -> list[dict[str, Any]]:
        """Return column rows for `tables` (or all tables) in a single query."""
        query = COLUMNS_QUERY
        params: list[Any] = [keyspace]
        if tables:
            query += " AND table_name IN ?"
            params.append(list(tables))
        statement = self.session.prepare(query)
        rows = self.session.execute(statement, params)
        return [{name: _value(row, name) for name in COLUMN_FIELDS} for row in rows]

    def list_tables(self, keyspace: str) -> list[str]:
        """List table names in a keyspace, sorted."""
        statement = self.session.prepare(TABLES_QUERY)
        rows = self.session.execute(statement, [keyspace])
        return sorted(str(_value(row, "table_name")) for row in rows)
