"""Mapping of CQL column types to Python target types.

A catalog type string such as `text`, `frozen<list<uuid>>` or
`map<text, tuple<int, timestamp>>` is parsed with a small anchored grammar
(`identifier '<' args '>'`) and resolved against an immutable table of native
types. Resolution never raises: anything the mapper does not understand
becomes the `Any` target so generation can continue, and callers can detect
that case with `TargetType.is_unknown`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

# (module, name) pair; name None means a plain `import module`.
Import = tuple[str, str | None]

MAX_NESTING = 2


class TypeFamily(str, Enum):
    """Shape of a resolved target type."""

    NATIVE = "native"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    TUPLE = "tuple"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TargetType:
    """
    Python type a CQL column is exposed as in generated code.

    Attributes:
        family: Shape of the type (native scalar, container or unknown).
        annotation: Python annotation text, e.g. `datetime.datetime`.
        imports: Imports the annotation itself needs.
        converter: Name of the function in `scyllagen.runtime.converters`
            applied to driver values, or None when the driver value is
            already the target type.
        args: Resolved inner types for containers.
    """

    family: TypeFamily
    annotation: str
    imports: frozenset[Import] = frozenset()
    converter: str | None = None
    args: tuple[TargetType, ...] = ()

    @property
    def is_unknown(self) -> bool:
        """True if this type or any inner type could not be resolved."""
        return self.family is TypeFamily.UNKNOWN or any(a.is_unknown for a in self.args)

    @property
    def needs_conversion(self) -> bool:
        """True if this value or any value nested inside it must be converted."""
        return self.converter is not None or any(a.needs_conversion for a in self.args)

    def converter_expr(self, namespace: str = "converters") -> str | None:
        """
        Return the converter expression rendered into a generated binding.

        Containers whose elements need conversion compose the element
        converters, e.g. `converters.list_of(converters.to_date)` for
        `list<date>`. Returns None when the driver value is used as is.
        """
        if not self.args or not any(a.needs_conversion for a in self.args):
            return f"{namespace}.{self.converter}" if self.converter else None

        inner = ", ".join(a.converter_expr(namespace) or "None" for a in self.args)
        if self.family is TypeFamily.SEQUENCE:
            return f"{namespace}.list_of({inner})"
        if self.family is TypeFamily.MAPPING:
            return f"{namespace}.dict_of({inner})"
        return f"{namespace}.tuple_of({inner})"

    def requirements(self) -> frozenset[Import]:
        """Return every import needed to spell this annotation, inner types included."""
        found = set(self.imports)
        for arg in self.args:
            found |= arg.requirements()
        return frozenset(found)


def _native(
    annotation: str,
    *,
    module: str | None = None,
    name: str | None = None,
    converter: str | None = None,
) -> TargetType:
    imports: frozenset[Import] = frozenset({(module, name)}) if module else frozenset()
    return TargetType(
        family=TypeFamily.NATIVE,
        annotation=annotation,
        imports=imports,
        converter=converter,
    )


UNKNOWN = TargetType(
    family=TypeFamily.UNKNOWN,
    annotation="Any",
    imports=frozenset({("typing", "Any")}),
)

_STR = _native("str")
_INT = _native("int")
_FLOAT = _native("float")
_BIG_INT = _native("int", converter="to_int")
_UUID = _native("uuid.UUID", module="uuid", converter="to_uuid")

NATIVE_TYPES: Mapping[str, TargetType] = MappingProxyType(
    {
        "ascii": _STR,
        "text": _STR,
        "varchar": _STR,
        "boolean": _native("bool"),
        "blob": _native("bytes"),
        "int": _INT,
        "smallint": _INT,
        "tinyint": _INT,
        "bigint": _BIG_INT,
        "counter": _BIG_INT,
        "varint": _BIG_INT,
        "float": _FLOAT,
        "double": _FLOAT,
        "decimal": _native("decimal.Decimal", module="decimal", converter="to_decimal"),
        "timestamp": _native(
            "datetime.datetime", module="datetime", converter="to_datetime"
        ),
        "date": _native("datetime.date", module="datetime", converter="to_date"),
        "time": _native("datetime.time", module="datetime", converter="to_time"),
        "uuid": _UUID,
        "timeuuid": _UUID,
        "inet": _native("str", converter="to_inet"),
        "duration": _native(
            "Duration", module="cassandra.util", name="Duration", converter="to_duration"
        ),
    }
)

FAMILIES = ("list", "set", "map", "tuple", "vector")


def sequence_of(element: TargetType, *, converter: str | None = None) -> TargetType:
    return TargetType(
        family=TypeFamily.SEQUENCE,
        annotation=f"List[{element.annotation}]",
        imports=frozenset({("typing", "List")}),
        converter=converter,
        args=(element,),
    )


def mapping_of(key: TargetType, value: TargetType) -> TargetType:
    return TargetType(
        family=TypeFamily.MAPPING,
        annotation=f"Dict[{key.annotation}, {value.annotation}]",
        imports=frozenset({("typing", "Dict")}),
        converter="to_dict",
        args=(key, value),
    )


def tuple_of(items: tuple[TargetType, ...]) -> TargetType:
    inner = ", ".join(item.annotation for item in items)
    return TargetType(
        family=TypeFamily.TUPLE,
        annotation=f"Tuple[{inner}]",
        imports=frozenset({("typing", "Tuple")}),
        converter="to_tuple",
        args=items,
    )


VECTOR = sequence_of(_FLOAT, converter="to_list")


# --- parsing -----------------------------------------------------------------

_TOKEN_RE = re.compile(r'\s*(?:([A-Za-z_][A-Za-z0-9_.]*|"[^"]+"|\d+)|([<>,]))')


@dataclass(frozen=True)
class ParsedType:
    """Syntax tree node for a CQL type string."""

    name: str
    args: tuple[ParsedType, ...] = ()

    @property
    def depth(self) -> int:
        """Number of nested parameterized levels (`list<int>` is 1)."""
        if not self.args:
            return 0
        return 1 + max(arg.depth for arg in self.args)

    def unfrozen(self) -> ParsedType:
        """Return this tree with every `frozen<...>` wrapper removed."""
        if self.name == "frozen" and len(self.args) == 1:
            return self.args[0].unfrozen()
        return ParsedType(self.name, tuple(arg.unfrozen() for arg in self.args))


def _tokenize(raw: str) -> list[str] | None:
    tokens: list[str] = []
    pos = 0
    text = raw.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            return None
        tokens.append(match.group(1) or match.group(2))
        pos = match.end()
    return tokens


def parse_type(raw: str) -> ParsedType | None:
    """
    Parse a CQL type string into a `ParsedType` tree.

    Returns None when the string is not of the form `name` or
    `name<arg, ...>` with balanced brackets.
    """
    tokens = _tokenize(raw)
    if not tokens:
        return None
    pos = 0

    def node() -> ParsedType | None:
        nonlocal pos
        if pos >= len(tokens) or tokens[pos] in "<>,":
            return None
        name = tokens[pos]
        pos += 1
        if pos >= len(tokens) or tokens[pos] != "<":
            return ParsedType(name)
        pos += 1
        args: list[ParsedType] = []
        while True:
            arg = node()
            if arg is None:
                return None
            args.append(arg)
            if pos >= len(tokens):
                return None
            if tokens[pos] == ",":
                pos += 1
                continue
            if tokens[pos] == ">":
                pos += 1
                return ParsedType(name, tuple(args))
            return None

    tree = node()
    if tree is None or pos != len(tokens):
        return None
    return tree


def _split_top_level(inner: str) -> list[str]:
    """Split `a, map<b, c>` on commas that are not inside angle brackets."""
    parts: list[str] = []
    depth = 0
    current = ""
    for ch in inner:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        current += ch
    parts.append(current.strip())
    return parts


class TypeMapper:
    """
    Resolve CQL type strings to `TargetType` values.

    Args:
        natives: Lookup table for scalar CQL types. Copied into a read-only
            mapping, so a mapper never changes after construction.
        lenient: When True and the anchored parse fails, fall back to
            detecting the container family by substring, the way earlier
            releases did.
    """

    def __init__(
        self,
        natives: Mapping[str, TargetType] = NATIVE_TYPES,
        *,
        lenient: bool = False,
    ) -> None:
        self._natives: Mapping[str, TargetType] = MappingProxyType(dict(natives))
        self.lenient = lenient

    @property
    def natives(self) -> Mapping[str, TargetType]:
        return self._natives

    def resolve(self, raw: str) -> TargetType:
        """Return the target type for `raw`, or `UNKNOWN` if it cannot be mapped."""
        if not isinstance(raw, str) or not raw.strip():
            return UNKNOWN
        key = raw.strip()
        native = self._natives.get(key)
        if native is not None:
            return native

        tree = parse_type(key)
        if tree is None:
            return self._resolve_by_substring(key) if self.lenient else UNKNOWN
        tree = tree.unfrozen()
        if tree.depth > MAX_NESTING:
            return UNKNOWN
        return self._from_tree(tree)

    def _from_tree(self, tree: ParsedType) -> TargetType:
        if not tree.args:
            return self._natives.get(tree.name, UNKNOWN)

        family, args = tree.name, tree.args
        if family in ("list", "set") and len(args) == 1:
            # The driver returns sets as SortedSet.
            converter = "to_list" if family == "set" else None
            return sequence_of(self._from_tree(args[0]), converter=converter)
        if family == "map" and len(args) == 2:
            return mapping_of(self._from_tree(args[0]), self._from_tree(args[1]))
        if family == "tuple":
            return tuple_of(tuple(self._from_tree(arg) for arg in args))
        if family == "vector" and len(args) == 2 and args[1].name.isdigit():
            return VECTOR
        return UNKNOWN

    def _resolve_by_substring(self, raw: str) -> TargetType:
        family = next((f for f in FAMILIES if f in raw), None)
        if family is None:
            return UNKNOWN
        if family == "vector":
            return VECTOR
        start, end = raw.find("<"), raw.rfind(">")
        if start == -1 or end <= start:
            return UNKNOWN
        parts = _split_top_level(raw[start + 1 : end])
        if family in ("list", "set") and len(parts) == 1:
            converter = "to_list" if family == "set" else None
            return sequence_of(self.resolve(parts[0]), converter=converter)
        if family == "map" and len(parts) == 2:
            return mapping_of(self.resolve(parts[0]), self.resolve(parts[1]))
        if family == "tuple" and all(parts):
            return tuple_of(tuple(self.resolve(p) for p in parts))
        return UNKNOWN


default_mapper = TypeMapper()


def resolve_type(raw: str) -> TargetType:
    """Resolve `raw` with the shared default mapper."""
    return default_mapper.resolve(raw)
