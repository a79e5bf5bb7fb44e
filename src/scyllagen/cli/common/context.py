"""Application context management for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from cassandra.cluster import NoHostAvailable

from scyllagen.cli.common.exits import die, exit_from_exc
from scyllagen.core.adapters.cassandra import CassandraCatalogAdapter
from scyllagen.core.catalog import CatalogAdapter
from scyllagen.core.connection import ConfigError, ConnectionSettings, connect
from scyllagen.core.generate import resolve_keyspace


@dataclass
class CatalogAppContext:
    """Application context holding connection settings and the catalog adapter."""

    settings: ConnectionSettings
    keyspace: str
    adapter: CatalogAdapter


def load_settings() -> ConnectionSettings:
    """Read connection settings from the environment or exit with the reason."""
    try:
        return ConnectionSettings.from_env()
    except ConfigError as exc:
        die(str(exc), code=1)


@contextmanager
def catalog_session(keyspace: str | None) -> Iterator[CatalogAppContext]:
    """Connect to the cluster for the duration of a command.

    Args:
        keyspace: Keyspace passed on the command line; falls back to
            DB_DEFAULT_KEYSPACE.

    Yields:
        CatalogAppContext: Settings, resolved keyspace and catalog adapter.
    """
    settings = load_settings()
    try:
        resolved = resolve_keyspace(keyspace, settings.default_keyspace)
    except ConfigError as exc:
        die(str(exc), code=1)

    hosts = ", ".join(settings.contact_points)
    try:
        cluster, session = connect(settings)
    except NoHostAvailable as exc:
        exit_from_exc(exc, message=f"Could not connect to {hosts}: {exc}", code=1)

    try:
        yield CatalogAppContext(
            settings=settings,
            keyspace=resolved,
            adapter=CassandraCatalogAdapter(session),
        )
    finally:
        cluster.shutdown()
