import pytest

from scyllagen.core.types import (
    NATIVE_TYPES,
    UNKNOWN,
    ParsedType,
    TypeFamily,
    TypeMapper,
    parse_type,
    resolve_type,
)


@pytest.mark.parametrize(
    "raw, annotation, converter",
    [
        ("text", "str", None),
        ("varchar", "str", None),
        ("boolean", "bool", None),
        ("blob", "bytes", None),
        ("int", "int", None),
        ("bigint", "int", "to_int"),
        ("double", "float", None),
        ("decimal", "decimal.Decimal", "to_decimal"),
        ("timestamp", "datetime.datetime", "to_datetime"),
        ("date", "datetime.date", "to_date"),
        ("uuid", "uuid.UUID", "to_uuid"),
        ("timeuuid", "uuid.UUID", "to_uuid"),
        ("inet", "str", "to_inet"),
        ("duration", "Duration", "to_duration"),
    ],
)
def test_native_types(raw: str, annotation: str, converter: str | None):
    target = resolve_type(raw)
    assert target.family is TypeFamily.NATIVE
    assert target.annotation == annotation
    assert target.converter == converter


def test_frozen_wrapper_is_transparent():
    assert resolve_type("frozen<list<uuid>>").annotation == "List[uuid.UUID]"
    assert resolve_type("frozen<list<uuid>>") == resolve_type("list<uuid>")


def test_containers():
    assert resolve_type("set<text>").family is TypeFamily.SEQUENCE
    assert resolve_type("set<text>").annotation == "List[str]"
    assert resolve_type("map<text, frozen<list<int>>>").annotation == "Dict[str, List[int]]"

    pair = resolve_type("tuple<int, text>")
    assert pair.annotation == "Tuple[int, str]"
    assert pair.converter == "to_tuple"

    vector = resolve_type("vector<float, 3>")
    assert vector.annotation == "List[float]"
    assert vector.converter == "to_list"


def test_nesting_deeper_than_two_levels_is_unknown():
    assert resolve_type("list<frozen<map<text, list<int>>>>") is UNKNOWN


def test_family_names_are_matched_exactly():
    # A name merely containing "map" is not a map.
    assert resolve_type("mapper") is UNKNOWN
    assert TypeMapper(lenient=True).resolve("mapper") is UNKNOWN


def test_unknown_inner_type_marks_container_unknown():
    target = resolve_type("map<text, blob2>")
    assert target.annotation == "Dict[str, Any]"
    assert target.is_unknown
    assert ("typing", "Any") in target.requirements()


@pytest.mark.parametrize("raw", ["", "   ", "list<int", "list<>", "map<text,>", None])
def test_unparseable_input_never_raises(raw):
    assert resolve_type(raw) is UNKNOWN


def test_lenient_mapper_falls_back_to_substring_detection():
    assert resolve_type("list<text>;") is UNKNOWN
    assert TypeMapper(lenient=True).resolve("list<text>;").annotation == "List[str]"


def test_requirements_cover_inner_types():
    reqs = resolve_type("map<uuid, timestamp>").requirements()
    assert ("uuid", None) in reqs
    assert ("datetime", None) in reqs
    assert ("typing", "Dict") in reqs
    assert ("cassandra.util", "Duration") in resolve_type("duration").requirements()


def test_native_table_is_immutable():
    with pytest.raises(TypeError):
        NATIVE_TYPES["custom"] = UNKNOWN  # type: ignore[index]


def test_injected_table_is_copied():
    natives = {"text": NATIVE_TYPES["text"]}
    mapper = TypeMapper(natives)
    natives["uuid"] = NATIVE_TYPES["uuid"]

    assert mapper.resolve("text").annotation == "str"
    assert mapper.resolve("uuid") is UNKNOWN


def test_parse_type():
    assert parse_type("map<text, int>") == ParsedType(
        "map", (ParsedType("text"), ParsedType("int"))
    )
    assert parse_type("frozen<list<int>>").unfrozen() == ParsedType(
        "list", (ParsedType("int"),)
    )
    assert parse_type("list<frozen<list<int>>>").depth == 3
    assert parse_type("map<text,") is None
    assert parse_type("list<int>>") is None


def test_container_converters_compose_element_converters():
    assert resolve_type("list<date>").converter_expr() == "converters.list_of(converters.to_date)"
    assert resolve_type("set<timestamp>").converter_expr() == (
        "converters.list_of(converters.to_datetime)"
    )
    assert resolve_type("map<text, uuid>").converter_expr() == (
        "converters.dict_of(None, converters.to_uuid)"
    )
    assert resolve_type("tuple<text, date>").converter_expr() == (
        "converters.tuple_of(None, converters.to_date)"
    )
    assert resolve_type("map<date, frozen<list<decimal>>>").converter_expr() == (
        "converters.dict_of(converters.to_date, converters.list_of(converters.to_decimal))"
    )


def test_containers_of_plain_values():
    assert resolve_type("list<text>").converter_expr() is None
    assert not resolve_type("list<text>").needs_conversion
    assert resolve_type("set<text>").converter_expr() == "converters.to_list"
    assert resolve_type("map<text, int>").converter_expr() == "converters.to_dict"
    assert resolve_type("list<date>").needs_conversion
