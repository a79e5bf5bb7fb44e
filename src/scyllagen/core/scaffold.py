"""Scaffolding for the models package that generated modules live in.

`scyllagen init` writes a `db_client.py` exposing `get_session()`, which every
generated model imports, plus an `__init__.py` so the directory is a package.
"""

from __future__ import annotations

from pathlib import Path

from scyllagen.core.writer import WriteResult, write_text

DB_CLIENT_FILE = "db_client.py"
PACKAGE_FILE = "__init__.py"

DB_CLIENT_CONTENT = '''"""Cassandra session shared by the generated models.

Created by ``scyllagen init``. Connection settings are read from the DB_*
environment variables (DB_CONTACT_POINTS, DB_LOCAL_DATA_CENTER,
DB_DEFAULT_KEYSPACE, DB_USERNAME, DB_PASSWORD, DB_PORT).
"""

from __future__ import annotations

import atexit
from functools import lru_cache

from cassandra.cluster import Session

from scyllagen.core.connection import ConnectionSettings, connect


@lru_cache(maxsize=None)
def get_session() -> Session:
    """Connect on first use and reuse the session afterwards."""
    settings = ConnectionSettings.from_env()
    cluster, session = connect(settings)
    atexit.register(cluster.shutdown)
    if settings.default_keyspace:
        session.set_keyspace(settings.default_keyspace)
    return session
'''

PACKAGE_CONTENT = '"""Models generated by scyllagen."""\n'


def scaffold_client(directory: Path, *, overwrite: bool = False) -> list[WriteResult]:
    """
    Write `db_client.py` (and `__init__.py` if missing) into `directory`.

    An existing `db_client.py` is only replaced when `overwrite` is True; an
    existing `__init__.py` is never replaced.
    """
    results: list[WriteResult] = []
    client = directory / DB_CLIENT_FILE
    written = write_text(client, DB_CLIENT_CONTENT, overwrite=overwrite)
    results.append(
        WriteResult(name=DB_CLIENT_FILE, path=client, written=written, skipped=not written)
    )

    package = directory / PACKAGE_FILE
    written = write_text(package, PACKAGE_CONTENT, overwrite=False)
    results.append(
        WriteResult(name=PACKAGE_FILE, path=package, written=written, skipped=not written)
    )
    return results
