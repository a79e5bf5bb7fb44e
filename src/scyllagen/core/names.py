"""Name casing helpers used for generated identifiers and file names.

All functions here are pure string transforms. The camel/pascal rules only
touch `_` followed by a lowercase letter, matching the driver's
underscore-to-camelCase column mapping, so `snake_to_camel` stays stable for
names like `bucket_2` or `_internal`.
"""

from __future__ import annotations

import re

import inflection

_SNAKE_RE = re.compile(r"_([a-z])")
_KEBAB_RE = re.compile(r"([a-z0-9])([A-Z])")

MODEL_FILE_SUFFIX = ".py"


def snake_to_camel(value: str) -> str:
    """Return `value` with every `_x` (x lowercase) replaced by `X`."""
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), value)


def snake_to_pascal(value: str) -> str:
    """Return `snake_to_camel(value)` with the first character uppercased."""
    camel = snake_to_camel(value)
    return camel[:1].upper() + camel[1:]


def kebab_case(value: str) -> str:
    """Convert a camelCase / PascalCase name to kebab-case."""
    return _KEBAB_RE.sub(r"\1-\2", value).lower()


def singularize(value: str) -> str:
    """Return the singular form of an English plural (e.g. `users` -> `user`)."""
    return inflection.singularize(value)


def entity_name(table_name: str) -> str:
    """Return the generated entity type name for a table (`user_events` -> `UserEvent`)."""
    return singularize(snake_to_pascal(table_name))


def model_file_name(table_name: str) -> str:
    """Return the deterministic file name a table's model is written to."""
    return kebab_case(entity_name(table_name)) + MODEL_FILE_SUFFIX
