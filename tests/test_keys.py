from conftest import column_row
from scyllagen.core.keys import derive_key_model, find_duplicate_positions
from scyllagen.core.schema import ColumnKind, normalize
from scyllagen.core.types import TypeFamily


def test_messages_key_model(messages_rows):
    schema = normalize(messages_rows)["messages"]

    model = derive_key_model(schema)

    assert [f.field_name for f in model.partition_key_fields] == ["id"]
    assert model.partition_key_fields[0].target.annotation == "uuid.UUID"
    assert [[f.field_name for f in p] for p in model.clustering_prefixes] == [
        ["createdAt"],
        ["createdAt", "status"],
    ]
    assert model.has_clustering
    assert [f.column_name for f in model.clustering_fields] == ["created_at", "status"]


def test_each_prefix_extends_the_previous_one():
    rows = [column_row("t", "p", "partition_key", 0, "int")] + [
        column_row("t", name, "clustering", i, "text")
        for i, name in enumerate(["a_1", "b", "c"])
    ]
    model = derive_key_model(normalize(rows)["t"])

    prefixes = model.clustering_prefixes
    assert len(prefixes) == 3
    for shorter, longer in zip(prefixes, prefixes[1:]):
        assert longer[: len(shorter)] == shorter
        assert len(longer) == len(shorter) + 1


def test_table_without_clustering_columns(users_rows):
    model = derive_key_model(normalize(users_rows)["users"])

    assert model.clustering_prefixes == ()
    assert not model.has_clustering
    assert model.clustering_fields == ()


def test_composite_partition_key_keeps_declaration_order():
    rows = [
        column_row("t", "bucket", "partition_key", 1, "int"),
        column_row("t", "tenant_id", "partition_key", 0, "uuid"),
    ]
    model = derive_key_model(normalize(rows)["t"])

    assert [f.field_name for f in model.partition_key_fields] == ["tenantId", "bucket"]


def test_clustering_prefixes_follow_position_not_row_order():
    rows = [
        column_row("t", "p", "partition_key", 0, "int"),
        column_row("t", "c", "clustering", 2, "text"),
        column_row("t", "a", "clustering", 0, "timestamp", "desc"),
        column_row("t", "b", "clustering", 1, "int"),
    ]
    model = derive_key_model(normalize(rows)["t"])

    assert [[f.field_name for f in p] for p in model.clustering_prefixes] == [
        ["a"],
        ["a", "b"],
        ["a", "b", "c"],
    ]
    assert [f.column_name for f in model.clustering_fields] == ["a", "b", "c"]


def test_unknown_key_type_degrades_to_any():
    rows = [column_row("t", "id", "partition_key", 0, "mystery")]
    model = derive_key_model(normalize(rows)["t"])

    assert model.partition_key_fields[0].target.family is TypeFamily.UNKNOWN


def test_find_duplicate_positions():
    rows = [
        column_row("t", "a", "partition_key", 0, "int"),
        column_row("t", "b", "partition_key", 0, "int"),
        column_row("t", "c", "clustering", 0, "int"),
        column_row("t", "d", "regular", -1, "int"),
        column_row("t", "e", "regular", -1, "int"),
    ]

    assert find_duplicate_positions(normalize(rows)["t"]) == [(ColumnKind.PARTITION_KEY, 0)]
