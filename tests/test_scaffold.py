from pathlib import Path

from scyllagen.core.scaffold import DB_CLIENT_CONTENT, scaffold_client


def test_scaffold_creates_client_and_package(tmp_path: Path):
    results = scaffold_client(tmp_path / "models")

    assert [r.name for r in results] == ["db_client.py", "__init__.py"]
    assert all(r.written for r in results)
    client = (tmp_path / "models" / "db_client.py").read_text()
    assert "def get_session()" in client
    compile(client, "db_client.py", "exec")


def test_scaffold_keeps_existing_files_unless_overwrite(tmp_path: Path):
    client = tmp_path / "db_client.py"
    package = tmp_path / "__init__.py"
    client.write_text("# custom\n")
    package.write_text("# mine\n")

    results = scaffold_client(tmp_path)
    assert [r.skipped for r in results] == [True, True]
    assert client.read_text() == "# custom\n"

    scaffold_client(tmp_path, overwrite=True)
    assert client.read_text() == DB_CLIENT_CONTENT
    assert package.read_text() == "# mine\n"
