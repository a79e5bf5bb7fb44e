"""Connection settings and session creation for Cassandra / ScyllaDB.

Settings come from environment variables (a `.env` file is loaded by the CLI
before this module is used). Validation happens up front so a missing
contact point or data center is reported before any network call.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, Session
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy

ENV_CONTACT_POINTS = "DB_CONTACT_POINTS"
ENV_DEFAULT_KEYSPACE = "DB_DEFAULT_KEYSPACE"
ENV_LOCAL_DATA_CENTER = "DB_LOCAL_DATA_CENTER"
ENV_USERNAME = "DB_USERNAME"
ENV_PASSWORD = "DB_PASSWORD"
ENV_PORT = "DB_PORT"

DEFAULT_PORT = 9042


class ConfigError(RuntimeError):
    """Raised when required connection settings are missing or invalid."""


def _split_contact_points(raw: str | None) -> tuple[str, ...]:
    """
    Parse a comma separated contact point list.

    - Strips whitespace around each entry
    - Drops empty entries (e.g. a trailing comma)
    """
    if not raw:
        return ()
    return tuple(p.strip() for p in raw.split(",") if p.strip())


@dataclass(frozen=True)
class ConnectionSettings:
    """
    Everything needed to open a catalog session.

    Attributes:
        contact_points: Hosts used to discover the cluster.
        local_data_center: Data center for the DC-aware load balancing policy.
        default_keyspace: Keyspace used when a command does not name one.
        username: Optional user for plain-text authentication.
        password: Password for `username`.
        port: Native protocol port.
    """

    contact_points: tuple[str, ...]
    local_data_center: str
    default_keyspace: str | None = None
    username: str | None = None
    password: str | None = None
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ConnectionSettings":
        """
        Build settings from environment variables.

        Raises:
            ConfigError: If contact points or the data center are missing, only
                one of username/password is set, or the port is not an integer.
        """
        env = os.environ if environ is None else environ

        contact_points = _split_contact_points(env.get(ENV_CONTACT_POINTS))
        if not contact_points:
            raise ConfigError(f"{ENV_CONTACT_POINTS} env variable is not set.")

        local_dc = (env.get(ENV_LOCAL_DATA_CENTER) or "").strip()
        if not local_dc:
            raise ConfigError(f"{ENV_LOCAL_DATA_CENTER} env variable is not set.")

        username = env.get(ENV_USERNAME) or None
        password = env.get(ENV_PASSWORD) or None
        if bool(username) != bool(password):
            raise ConfigError(
                f"Set both {ENV_USERNAME} and {ENV_PASSWORD}, or neither."
            )

        raw_port = env.get(ENV_PORT)
        try:
            port = int(raw_port) if raw_port else DEFAULT_PORT
        except ValueError as exc:
            raise ConfigError(f"{ENV_PORT} must be an integer, got '{raw_port}'.") from exc

        return cls(
            contact_points=contact_points,
            local_data_center=local_dc,
            default_keyspace=(env.get(ENV_DEFAULT_KEYSPACE) or "").strip() or None,
            username=username,
            password=password,
            port=port,
        )


def build_cluster(settings: ConnectionSettings) -> Cluster:
    """Create a (not yet connected) driver `Cluster` for `settings`."""
    auth_provider = None
    if settings.username and settings.password:
        auth_provider = PlainTextAuthProvider(settings.username, settings.password)
    return Cluster(
        list(settings.contact_points),
        port=settings.port,
        auth_provider=auth_provider,
        load_balancing_policy=TokenAwarePolicy(
            DCAwareRoundRobinPolicy(local_dc=settings.local_data_center)
        ),
    )


def connect(settings: ConnectionSettings) -> tuple[Cluster, Session]:
    """Connect to the cluster and return `(cluster, session)`."""
    cluster = build_cluster(settings)
    return cluster, cluster.connect()
