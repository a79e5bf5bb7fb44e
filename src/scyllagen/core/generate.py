"""Model generation pipeline.

fetch (one catalog query) -> normalize -> derive key model -> render, one
table at a time in catalog order. Writing or printing the result is left to
the caller so the same pipeline serves `--print` and file output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from scyllagen.core.catalog import CatalogAdapter, fetch_table_schemas, filter_tables
from scyllagen.core.connection import ConfigError
from scyllagen.core.keys import derive_key_model, find_duplicate_positions
from scyllagen.core.render import ModelRenderer, RenderedModel
from scyllagen.core.schema import EmptyResultError, TableSchema
from scyllagen.core.types import TypeMapper


@dataclass(frozen=True)
class GenerationResult:
    """Rendered models of one run plus the non-fatal warnings collected."""

    keyspace: str
    models: tuple[RenderedModel, ...]
    warnings: tuple[str, ...] = ()


def resolve_keyspace(override: str | None, default: str | None) -> str:
    """
    Pick the keyspace for a run: explicit override, then configured default.

    Raises:
        ConfigError: If neither is set.
    """
    keyspace = (override or "").strip() or (default or "").strip()
    if not keyspace:
        raise ConfigError(
            "No keyspace provided. Pass --keyspace or set DB_DEFAULT_KEYSPACE."
        )
    return keyspace


def build_models(
    schemas: Iterable[TableSchema], mapper: TypeMapper | None = None
) -> list[RenderedModel]:
    """Derive and render every schema, sequentially and in the given order."""
    renderer = ModelRenderer(mapper)
    return [
        renderer.render(schema, derive_key_model(schema, renderer.mapper))
        for schema in schemas
    ]


def collect_warnings(
    schemas: Iterable[TableSchema], models: Iterable[RenderedModel]
) -> list[str]:
    """Return human-readable warnings for unknown types and key position clashes."""
    messages: list[str] = []
    for schema in schemas:
        for kind, position in find_duplicate_positions(schema):
            messages.append(
                f"Table '{schema.table_name}' has several {kind.value} columns "
                f"at position {position}; their order is undefined."
            )
    for model in models:
        messages.extend(w.message for w in model.warnings)
    return messages


def generate_models(
    adapter: CatalogAdapter,
    keyspace: str,
    tables: Iterable[str] | None = None,
    *,
    name_regex: str | None = None,
    mapper: TypeMapper | None = None,
) -> GenerationResult:
    """
    Run the full pipeline for `tables` of `keyspace`.

    Args:
        adapter: Catalog adapter; queried exactly once.
        keyspace: Keyspace to read.
        tables: Tables to generate; None or empty means every table.
        name_regex: Optional regex applied to table names after fetching.
        mapper: Type mapper; defaults to the shared mapper.

    Raises:
        CatalogError: If the catalog query fails.
        EmptyResultError: If nothing matched (`SchemaEmptyError` when named
            tables are missing).
    """
    schemas = filter_tables(
        fetch_table_schemas(adapter, keyspace, tables).unwrap(), name_regex
    )
    if not schemas:
        raise EmptyResultError(f"No tables in keyspace {keyspace} match '{name_regex}'.")
    models = build_models(schemas, mapper)
    return GenerationResult(
        keyspace=keyspace,
        models=tuple(models),
        warnings=tuple(collect_warnings(schemas, models)),
    )
