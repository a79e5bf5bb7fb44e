"""Thin object mapper used by generated model modules.

A generated module builds one `TableMapper` per table and exposes it through
a typed `Protocol`, so the key types generated for the table (partition key
record, clustering prefix union) are checked statically while this class does
the CQL work at runtime. Results are plain dicts keyed by camelCase field
names, with the generated converters applied.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Sequence

from scyllagen.core.names import snake_to_camel

Converter = Callable[[Any], Any]


def _row_to_dict(row: Any) -> dict[str, Any]:
    if isinstance(row, Mapping):
        return dict(row)
    if hasattr(row, "_asdict"):
        return dict(row._asdict())
    raise TypeError(f"Unsupported row type: {type(row).__name__}")


class TableMapper:
    """
    Query helper bound to a single table.

    Args:
        session: A driver `Session`, or a zero-argument callable returning
            one. The callable is invoked on first use.
        table: CQL table name.
        columns: Every CQL column of the table, in catalog order.
        partition_keys: Partition key columns in declaration order.
        clustering_keys: Clustering columns in declaration order.
        converters: Per-column converters for values whose driver type
            differs from the generated type. Columns without an entry are
            returned as the driver produced them.
        keyspace: Keyspace to qualify the table with; when None the
            session's keyspace is used.
    """

    def __init__(
        self,
        session: Any,
        *,
        table: str,
        columns: Sequence[str],
        partition_keys: Sequence[str],
        clustering_keys: Sequence[str] = (),
        converters: Mapping[str, Converter] | None = None,
        keyspace: str | None = None,
    ) -> None:
        self._session = session
        self.table = table
        self.keyspace = keyspace
        self.partition_keys = tuple(partition_keys)
        self.clustering_keys = tuple(clustering_keys)
        self.converters = dict(converters or {})
        self.fields = {column: snake_to_camel(column) for column in columns}
        self._columns_by_field = {field: col for col, field in self.fields.items()}
        self._prepared: dict[str, Any] = {}

    @property
    def session(self) -> Any:
        if not hasattr(self._session, "execute") and callable(self._session):
            self._session = self._session()
        return self._session

    @property
    def qualified_name(self) -> str:
        return f"{self.keyspace}.{self.table}" if self.keyspace else self.table

    # --- reads ---------------------------------------------------------------

    def get(
        self,
        keys: Mapping[str, Any],
        clustering: Mapping[str, Any] | None = None,
        *,
        fields: Sequence[str] | None = None,
    ) -> dict[str, Any] | None:
        """Return the row matching the full primary key, or None."""
        doc = {**keys, **(clustering or {})}
        where, params = self._where(doc, full_key=True)
        select = f"SELECT {self._select_list(fields)} FROM {self.qualified_name}"
        query = self._filtered(select, where)
        rows = list(self._execute(query + " LIMIT 1", params))
        return self._to_model(rows[0]) if rows else None

    def find(
        self,
        keys: Mapping[str, Any],
        clustering: Mapping[str, Any] | None = None,
        *,
        fields: Sequence[str] | None = None,
        order_by: Mapping[str, str] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return rows of one partition, optionally narrowed by a clustering prefix."""
        doc = {**keys, **(clustering or {})}
        where, params = self._where(doc, full_key=False)
        select = f"SELECT {self._select_list(fields)} FROM {self.qualified_name}"
        query = self._filtered(select, where)
        query += self._order_clause(order_by)
        query, params = self._limited(query, params, limit)
        return [self._to_model(row) for row in self._execute(query, params)]

    def find_all(
        self,
        *,
        fields: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return every row of the table (full scan)."""
        query = f"SELECT {self._select_list(fields)} FROM {self.qualified_name}"
        query, params = self._limited(query, [], limit)
        return [self._to_model(row) for row in self._execute(query, params)]

    # --- writes --------------------------------------------------------------

    def insert(self, doc: Mapping[str, Any], *, if_not_exists: bool = False) -> None:
        """Insert a row; `doc` must contain the full primary key."""
        self._where(doc, full_key=True)
        columns = [self._column(field) for field in doc]
        placeholders = ", ".join("?" for _ in columns)
        query = (
            f"INSERT INTO {self.qualified_name} ({', '.join(columns)}) "
            f"VALUES ({placeholders})"
        )
        if if_not_exists:
            query += " IF NOT EXISTS"
        self._execute(query, list(doc.values()))

    def update(self, doc: Mapping[str, Any], *, if_exists: bool = False) -> None:
        """Update the non-key fields in `doc` of the row named by its full primary key."""
        where, key_params = self._where(doc, full_key=True)
        key_columns = set(self.partition_keys) | set(self.clustering_keys)
        assignments: list[str] = []
        params: list[Any] = []
        for field, value in doc.items():
            column = self._column(field)
            if column in key_columns:
                continue
            assignments.append(f"{column} = ?")
            params.append(value)
        if not assignments:
            raise ValueError("Nothing to update: no non-key fields given.")
        query = self._filtered(
            f"UPDATE {self.qualified_name} SET {', '.join(assignments)}", where
        )
        if if_exists:
            query += " IF EXISTS"
        self._execute(query, params + key_params)

    def remove(
        self,
        keys: Mapping[str, Any],
        clustering: Mapping[str, Any] | None = None,
        *,
        fields: Sequence[str] | None = None,
    ) -> None:
        """
        Delete rows (or only `fields` of them).

        With only partition keys given, every row of the partition is removed.
        """
        doc = {**keys, **(clustering or {})}
        where, params = self._where(doc, full_key=False)
        targets = ", ".join(self._column(f) for f in fields) + " " if fields else ""
        self._execute(
            self._filtered(f"DELETE {targets}FROM {self.qualified_name}", where), params
        )

    # --- helpers -------------------------------------------------------------

    def _column(self, field: str) -> str:
        try:
            return self._columns_by_field[field]
        except KeyError:
            raise ValueError(f"Unknown field '{field}' for table '{self.table}'.") from None

    def _select_list(self, fields: Iterable[str] | None) -> str:
        if not fields:
            return "*"
        return ", ".join(self._column(f) for f in fields)

    @staticmethod
    def _filtered(query: str, where: str) -> str:
        return f"{query} WHERE {where}" if where else query

    @staticmethod
    def _limited(
        query: str, params: list[Any], limit: int | None
    ) -> tuple[str, list[Any]]:
        # Bound, so one prepared statement serves every limit.
        if limit is None:
            return query, params
        return f"{query} LIMIT ?", [*params, int(limit)]

    def _where(self, doc: Mapping[str, Any], *, full_key: bool) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []
        for column in self.partition_keys:
            field = self.fields[column]
            if field not in doc:
                raise ValueError(f"Missing partition key '{field}'.")
            clauses.append(f"{column} = ?")
            params.append(doc[field])

        skipped: str | None = None
        for column in self.clustering_keys:
            field = self.fields[column]
            if field not in doc:
                skipped = skipped or field
                continue
            if skipped:
                raise ValueError(
                    f"Clustering key '{field}' requires '{skipped}' to be given first."
                )
            clauses.append(f"{column} = ?")
            params.append(doc[field])

        if full_key and skipped:
            raise ValueError(f"Missing clustering key '{skipped}'.")
        return " AND ".join(clauses), params

    def _order_clause(self, order_by: Mapping[str, str] | None) -> str:
        if not order_by:
            return ""
        parts: list[str] = []
        for field, direction in order_by.items():
            column = self._column(field)
            if column not in self.clustering_keys:
                raise ValueError(f"Cannot order by non-clustering field '{field}'.")
            direction = direction.upper()
            if direction not in ("ASC", "DESC"):
                raise ValueError(f"Invalid order direction '{direction}'.")
            parts.append(f"{column} {direction}")
        return " ORDER BY " + ", ".join(parts)

    def _execute(self, query: str, params: Sequence[Any]) -> Any:
        statement = self._prepared.get(query)
        if statement is None:
            statement = self.session.prepare(query)
            self._prepared[query] = statement
        return self.session.execute(statement, list(params))

    def _to_model(self, row: Any) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for column, value in _row_to_dict(row).items():
            convert = self.converters.get(column)
            out[self.fields.get(column, snake_to_camel(column))] = (
                convert(value) if convert else value
            )
        return out
