"""Read-only `CREATE TABLE` rendering for schema inspection."""

from __future__ import annotations

from scyllagen.core.schema import TableSchema


def primary_key_clause(schema: TableSchema) -> str:
    """
    Return the `PRIMARY KEY (...)` clause for a table.

    A composite partition key is wrapped in its own parentheses; a single
    partition key column is not.
    """
    partition = [c.column_name for c in schema.partition_keys]
    clustering = [c.column_name for c in schema.clustering_keys]
    partition_part = (
        f"({', '.join(partition)})" if len(partition) > 1 else ", ".join(partition)
    )
    parts = [p for p in (partition_part, *clustering) if p]
    return f"PRIMARY KEY ({', '.join(parts)})"


def clustering_order_clause(schema: TableSchema) -> str:
    """Return ` WITH CLUSTERING ORDER BY (...)`, or "" for tables without clustering keys."""
    parts = [
        f"{c.column_name} {c.clustering_order.value if c.clustering_order else 'ASC'}"
        for c in schema.clustering_keys
    ]
    return f" WITH CLUSTERING ORDER BY ({', '.join(parts)})" if parts else ""


def render_create_table(schema: TableSchema, keyspace: str | None = None) -> str:
    """Render the `CREATE TABLE` statement describing `schema`."""
    keyspace = keyspace or schema.keyspace
    name = f"{keyspace}.{schema.table_name}" if keyspace else schema.table_name
    lines = [f"CREATE TABLE {name} ("]
    lines.extend(f"  {c.column_name} {c.type}," for c in schema.columns)
    lines.append(f"  {primary_key_clause(schema)}")
    lines.append(f"){clustering_order_clause(schema)};")
    return "\n".join(lines)
