from pathlib import Path

import pytest

from conftest import column_row
from scyllagen.core.catalog import CatalogError
from scyllagen.core.connection import ConfigError
from scyllagen.core.generate import generate_models, resolve_keyspace
from scyllagen.core.schema import EmptyResultError, SchemaEmptyError
from scyllagen.core.writer import existing_targets, write_models, write_text


class _Adapter:
    def __init__(self, rows=None, error: Exception | None = None):
        self.rows = rows or []
        self.error = error
        self.calls = 0

    def fetch_columns(self, keyspace, tables=None):
        self.calls += 1
        if self.error:
            raise self.error
        return [r for r in self.rows if not tables or r["table_name"] in tables]

    def list_tables(self, keyspace):
        return sorted({r["table_name"] for r in self.rows})


def test_resolve_keyspace_precedence():
    assert resolve_keyspace("override", "default") == "override"
    assert resolve_keyspace(None, "default") == "default"
    assert resolve_keyspace("  ", "default") == "default"
    with pytest.raises(ConfigError, match="No keyspace"):
        resolve_keyspace(None, None)


def test_generate_models_renders_in_catalog_order(messages_rows, users_rows):
    adapter = _Adapter(users_rows + messages_rows)

    result = generate_models(adapter, "chat")

    assert adapter.calls == 1
    assert result.keyspace == "chat"
    assert [m.table_name for m in result.models] == ["users", "messages"]
    assert [m.file_name for m in result.models] == ["user.py", "message.py"]
    assert result.warnings == ()


def test_generate_models_applies_name_filter(messages_rows, users_rows):
    result = generate_models(_Adapter(messages_rows + users_rows), "chat", name_regex="^us")

    assert [m.table_name for m in result.models] == ["users"]
    with pytest.raises(EmptyResultError, match="match"):
        generate_models(_Adapter(messages_rows), "chat", name_regex="^nothing")


def test_generate_models_raises_catalog_failures(messages_rows):
    with pytest.raises(CatalogError):
        generate_models(_Adapter(error=RuntimeError("boom")), "chat")
    with pytest.raises(SchemaEmptyError):
        generate_models(_Adapter(messages_rows), "chat", ["ghosts"])


def test_generate_models_collects_warnings():
    rows = [
        column_row("events", "a", "partition_key", 0, "uuid"),
        column_row("events", "b", "partition_key", 0, "uuid"),
        column_row("events", "shape", "regular", -1, "mystery"),
    ]

    result = generate_models(_Adapter(rows), "chat")

    assert len(result.warnings) == 2
    assert "position 0" in result.warnings[0]
    assert "mystery" in result.warnings[1]


def test_write_models_writes_every_file(tmp_path: Path, messages_rows, users_rows):
    result = generate_models(_Adapter(messages_rows + users_rows), "chat")

    results = write_models(result.models, tmp_path / "models")

    assert [r.written for r in results] == [True, True]
    assert (tmp_path / "models" / "message.py").read_text() == result.models[0].text


def test_existing_file_is_left_untouched_without_overwrite(tmp_path: Path, messages_rows):
    target = tmp_path / "message.py"
    target.write_text("# hand edited\n")
    models = generate_models(_Adapter(messages_rows), "chat").models

    assert existing_targets(models, tmp_path) == [target]
    results = write_models(models, tmp_path, overwrite=False)

    assert results[0].skipped
    assert not results[0].written
    assert target.read_text() == "# hand edited\n"


def test_existing_file_is_replaced_when_confirmed_or_forced(tmp_path: Path, messages_rows):
    target = tmp_path / "message.py"
    models = generate_models(_Adapter(messages_rows), "chat").models

    target.write_text("old\n")
    write_models(models, tmp_path, confirmed=[target])
    assert target.read_text() == models[0].text

    target.write_text("old\n")
    write_models(models, tmp_path, overwrite=True)
    assert target.read_text() == models[0].text


def test_write_failure_is_recorded_per_table(tmp_path: Path, messages_rows, users_rows):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    models = generate_models(_Adapter(messages_rows + users_rows), "chat").models

    results = write_models(models, blocker)

    assert len(results) == 2
    assert all(r.error and "Error occurred while writing" in r.error for r in results)
    assert not any(r.written for r in results)


def test_write_text_refuses_to_overwrite(tmp_path: Path):
    path = tmp_path / "a.py"

    assert write_text(path, "one") is True
    assert write_text(path, "two") is False
    assert path.read_text() == "one"
    assert write_text(path, "two", overwrite=True) is True
    assert path.read_text() == "two"
