"""Render a table schema and its key model as a Python model module.

Generated module layout, in this order:

    1. entity `TypedDict` with every column
    2. `<Entity>PartitionKeys` record
    3. `<Entity>ClusteringKeys` prefix union (only for tables with clustering
       columns)
    4. `TableMapper` binding with converters for the columns that need one
    5. `<Entity>Mapper` protocol typing the binding with the key types

Rendering is pure string assembly (`list[str]` + join) over sorted or
catalog-ordered inputs, so the same schema always renders byte-identical text.
"""

from __future__ import annotations

import json
import keyword
from dataclasses import dataclass
from typing import Iterable

from scyllagen.core.keys import KeyField, KeyModel
from scyllagen.core.names import entity_name, model_file_name, snake_to_camel
from scyllagen.core.schema import TableSchema
from scyllagen.core.types import Import, TypeMapper, default_mapper

INDENT = "    "

# Modules rendered in the standard-library import group.
_STDLIB = {"datetime", "decimal", "typing", "uuid"}

_RUNTIME_IMPORTS: tuple[Import, ...] = (
    ("scyllagen.runtime.mapper", "TableMapper"),
    ("typing", "Any"),
    ("typing", "List"),
    ("typing", "Mapping"),
    ("typing", "Optional"),
    ("typing", "Protocol"),
    ("typing", "Sequence"),
    ("typing", "TypedDict"),
    ("typing", "cast"),
)

SESSION_IMPORT = "from .db_client import get_session"


@dataclass(frozen=True)
class UnknownTypeWarning:
    """A column whose CQL type was rendered as `Any`."""

    table_name: str
    column_name: str
    raw_type: str

    @property
    def message(self) -> str:
        return (
            f"Unknown type '{self.raw_type}' for column "
            f"'{self.table_name}.{self.column_name}', rendered as Any."
        )


@dataclass(frozen=True)
class RenderedModel:
    """Generated source for one table, split into its sections."""

    table_name: str
    entity_name: str
    file_name: str
    header: str
    entity: str
    partition_keys: str
    clustering_keys: str | None
    binding: str
    accessor: str
    warnings: tuple[UnknownTypeWarning, ...] = ()

    @property
    def sections(self) -> list[str]:
        parts = [self.header, self.entity, self.partition_keys]
        if self.clustering_keys is not None:
            parts.append(self.clustering_keys)
        parts.extend([self.binding, self.accessor])
        return parts

    @property
    def text(self) -> str:
        return "\n\n\n".join(self.sections) + "\n"


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _literal(value: str) -> str:
    return json.dumps(value)


def _str_list(values: Iterable[str]) -> str:
    return "[" + ", ".join(_literal(v) for v in values) + "]"


def render_typed_dict(
    name: str,
    fields: Iterable[tuple[str, str]],
    *,
    doc: str | None = None,
) -> str:
    """
    Render a `TypedDict` definition.

    Uses the class syntax unless a field name is not a usable identifier
    (e.g. a column called `from`), in which case the functional syntax is
    emitted instead.
    """
    fields = list(fields)
    if all(_is_identifier(field) for field, _ in fields):
        lines = [f"class {name}(TypedDict):"]
        if doc:
            lines.append(f'{INDENT}"""{doc}"""')
            if fields:
                lines.append("")
        lines.extend(f"{INDENT}{field}: {annotation}" for field, annotation in fields)
        if not fields and not doc:
            lines.append(f"{INDENT}pass")
        return "\n".join(lines)

    lines = [f"{name} = TypedDict(", f"{INDENT}{_literal(name)},", f"{INDENT}{{"]
    lines.extend(
        f"{INDENT * 2}{_literal(field)}: {annotation}," for field, annotation in fields
    )
    lines.extend([f"{INDENT}}},", ")"])
    return "\n".join(lines)


def render_imports(imports: Iterable[Import]) -> str:
    """Render an import block grouped as stdlib / third party, isort style."""
    groups: dict[bool, dict[str, set[str]]] = {True: {}, False: {}}
    for module, name in imports:
        names = groups[module.split(".")[0] in _STDLIB].setdefault(module, set())
        if name:
            names.add(name)

    blocks: list[str] = []
    for stdlib in (True, False):
        modules = groups[stdlib]
        if not modules:
            continue
        plain = [f"import {m}" for m in sorted(modules) if not modules[m]]
        froms = [
            f"from {m} import {', '.join(sorted(modules[m], key=_import_sort_key))}"
            for m in sorted(modules)
            if modules[m]
        ]
        blocks.append("\n".join(plain + froms))
    return "\n\n".join(blocks)


def _import_sort_key(name: str) -> tuple[bool, str]:
    # isort order_by_type: Classes before functions
    return (name[:1].islower(), name)


def _field_lines(fields: Iterable[KeyField]) -> list[tuple[str, str]]:
    return [(f.field_name, f.target.annotation) for f in fields]


# Module-level names every generated model defines besides its classes.
_MODULE_NAMES = frozenset({"get_session", "mapper", "_binding"})


def _free_entity_name(name: str, imports: Iterable[Import]) -> str:
    """
    Return `name`, suffixed with `Row` while it or a class derived from it
    (`<name>Mapper`, `<name>PartitionKeys`, ...) would shadow a name the
    generated module imports or defines.
    """
    taken = set(_MODULE_NAMES)
    for module, imported in imports:
        taken.add(imported or module.split(".")[0])

    def clashes(candidate: str) -> bool:
        derived = (candidate, f"{candidate}Mapper", f"{candidate}PartitionKeys")
        return any(n in taken for n in derived) or any(
            t.startswith(f"{candidate}ClusteringKeys") for t in taken
        )

    while clashes(name):
        name = f"{name}Row"
    return name


class ModelRenderer:
    """Render `RenderedModel`s with a given type mapper."""

    def __init__(self, mapper: TypeMapper | None = None) -> None:
        self.mapper = mapper or default_mapper

    def render(self, schema: TableSchema, key_model: KeyModel) -> RenderedModel:
        targets = [(c, self.mapper.resolve(c.type)) for c in schema.columns]

        imports: set[Import] = set(_RUNTIME_IMPORTS)
        for _, target in targets:
            imports |= target.requirements()
        if key_model.has_clustering:
            imports.add(("typing", "Union"))
        converted = [(c, t) for c, t in targets if t.needs_conversion]
        if converted:
            imports.add(("scyllagen.runtime", "converters"))
        name = _free_entity_name(entity_name(schema.table_name), imports)

        warnings = tuple(
            UnknownTypeWarning(schema.table_name, c.column_name, c.type)
            for c, t in targets
            if t.is_unknown
        )

        return RenderedModel(
            table_name=schema.table_name,
            entity_name=name,
            file_name=model_file_name(schema.table_name),
            header=self._header(schema, imports),
            entity=render_typed_dict(
                name,
                [(snake_to_camel(c.column_name), t.annotation) for c, t in targets],
                doc=f"Row of the ``{self._qualified(schema)}`` table.",
            ),
            partition_keys=render_typed_dict(
                f"{name}PartitionKeys", _field_lines(key_model.partition_key_fields)
            ),
            clustering_keys=self._clustering(name, key_model),
            binding=self._binding(schema, key_model, converted),
            accessor=self._accessor(name, schema, key_model),
            warnings=warnings,
        )

    @staticmethod
    def _qualified(schema: TableSchema) -> str:
        if schema.keyspace:
            return f"{schema.keyspace}.{schema.table_name}"
        return schema.table_name

    def _header(self, schema: TableSchema, imports: set[Import]) -> str:
        return "\n".join(
            [
                f'"""Model for the ``{self._qualified(schema)}`` table.',
                "",
                "Generated by scyllagen from the database catalog. Do not edit by hand.",
                '"""',
                "",
                "from __future__ import annotations",
                "",
                render_imports(imports),
                "",
                SESSION_IMPORT,
            ]
        )

    @staticmethod
    def _clustering(name: str, key_model: KeyModel) -> str | None:
        if not key_model.has_clustering:
            return None
        blocks: list[str] = []
        alternatives: list[str] = []
        for i, prefix in enumerate(key_model.clustering_prefixes, start=1):
            alt = f"{name}ClusteringKeys{i}"
            alternatives.append(alt)
            blocks.append(render_typed_dict(alt, _field_lines(prefix)))
        union = [f"{name}ClusteringKeys = Union["]
        union.extend(f"{INDENT}{alt}," for alt in alternatives)
        union.append("]")
        blocks.append("\n".join(union))
        return "\n\n\n".join(blocks)

    @staticmethod
    def _binding(schema: TableSchema, key_model: KeyModel, converted) -> str:
        lines = ["_binding = TableMapper(", f"{INDENT}get_session,"]
        lines.append(f"{INDENT}table={_literal(schema.table_name)},")
        if schema.keyspace:
            lines.append(f"{INDENT}keyspace={_literal(schema.keyspace)},")
        lines.append(f"{INDENT}columns={_str_list(c.column_name for c in schema.columns)},")
        lines.append(
            f"{INDENT}partition_keys="
            f"{_str_list(f.column_name for f in key_model.partition_key_fields)},"
        )
        lines.append(
            f"{INDENT}clustering_keys="
            f"{_str_list(f.column_name for f in key_model.clustering_fields)},"
        )
        if converted:
            lines.append(f"{INDENT}converters={{")
            lines.extend(
                f"{INDENT * 2}{_literal(c.column_name)}: {t.converter_expr()},"
                for c, t in converted
            )
            lines.append(f"{INDENT}}},")
        else:
            lines.append(f"{INDENT}converters={{}},")
        lines.append(")")
        return "\n".join(lines)

    @staticmethod
    def _accessor(name: str, schema: TableSchema, key_model: KeyModel) -> str:
        keys = f"{name}PartitionKeys"

        def method(signature: list[str], returns: str) -> list[str]:
            head, *params = signature
            return [
                f"{INDENT}def {head}(",
                f"{INDENT * 2}self,",
                *(f"{INDENT * 2}{p}" for p in params),
                f"{INDENT}) -> {returns}: ...",
            ]

        if key_model.has_clustering:
            full = f"{name}ClusteringKeys{len(key_model.clustering_prefixes)}"
            get_params = [f"keys: {keys},", f"clustering: {full},"]
            prefix_params = [
                f"keys: {keys},",
                f"clustering: Optional[{name}ClusteringKeys] = None,",
            ]
            order = ["order_by: Optional[Mapping[str, str]] = None,"]
        else:
            get_params = [f"keys: {keys},"]
            prefix_params = [f"keys: {keys},"]
            order = []
        fields_param = "fields: Optional[Sequence[str]] = None,"

        lines = [
            f"class {name}Mapper(Protocol):",
            f'{INDENT}"""Typed view of the ``{schema.table_name}`` binding."""',
            "",
        ]
        lines += method(["get", *get_params, "*,", fields_param], f"Optional[{name}]")
        lines.append("")
        lines += method(
            ["find", *prefix_params, "*,", fields_param, *order, "limit: Optional[int] = None,"],
            f"List[{name}]",
        )
        lines.append("")
        lines += method(
            ["find_all", "*,", fields_param, "limit: Optional[int] = None,"],
            f"List[{name}]",
        )
        lines.append("")
        lines += method(
            ["insert", f"doc: {name},", "*,", "if_not_exists: bool = False,"], "None"
        )
        lines.append("")
        lines += method(
            ["update", "doc: Mapping[str, Any],", "*,", "if_exists: bool = False,"], "None"
        )
        lines.append("")
        lines += method(["remove", *prefix_params, "*,", fields_param], "None")
        lines.extend(["", "", f"mapper = cast({name}Mapper, _binding)"])
        return "\n".join(lines)


def render(
    schema: TableSchema,
    key_model: KeyModel,
    mapper: TypeMapper | None = None,
) -> RenderedModel:
    """Render one table's model module. See `ModelRenderer`."""
    return ModelRenderer(mapper).render(schema, key_model)
