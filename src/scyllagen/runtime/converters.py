"""Value converters referenced by generated model bindings.

Each converter takes the value the driver returned for a column and returns
the Python type the generated `TypedDict` declares. `None` passes through
unchanged, since any non-key column can be null.
"""

from __future__ import annotations

import datetime
import decimal
import uuid
from typing import Any, Callable

from cassandra.util import Date, Duration, Time


def to_uuid(val: Any) -> uuid.UUID | None:
    if val is None or isinstance(val, uuid.UUID):
        return val
    return uuid.UUID(str(val))


def to_datetime(val: Any) -> datetime.datetime | None:
    if val is None or isinstance(val, datetime.datetime):
        return val
    if isinstance(val, (int, float)):
        # CQL timestamps are milliseconds since the epoch.
        return datetime.datetime.fromtimestamp(val / 1000, tz=datetime.timezone.utc)
    return datetime.datetime.fromisoformat(str(val))


def to_date(val: Any) -> datetime.date | None:
    if val is None:
        return None
    if isinstance(val, Date):
        return val.date()
    if isinstance(val, datetime.datetime):
        return val.date()
    if isinstance(val, datetime.date):
        return val
    return datetime.date.fromisoformat(str(val))


def to_time(val: Any) -> datetime.time | None:
    if val is None:
        return None
    if isinstance(val, Time):
        return val.time()
    if isinstance(val, datetime.time):
        return val
    return datetime.time.fromisoformat(str(val))


def to_int(val: Any) -> int | None:
    return None if val is None else int(val)


def to_decimal(val: Any) -> decimal.Decimal | None:
    if val is None or isinstance(val, decimal.Decimal):
        return val
    return decimal.Decimal(str(val))


def to_inet(val: Any) -> str | None:
    return None if val is None else str(val)


def to_duration(val: Any) -> Duration | None:
    if val is None or isinstance(val, Duration):
        return val
    if isinstance(val, datetime.timedelta):
        nanoseconds = (
            (val.days * 86_400 + val.seconds) * 1_000_000 + val.microseconds
        ) * 1000
        return Duration(months=0, days=0, nanoseconds=nanoseconds)
    raise TypeError(f"Cannot convert {type(val).__name__} to Duration")


def to_tuple(val: Any) -> tuple | None:
    return None if val is None else tuple(val)


def to_list(val: Any) -> list | None:
    return None if val is None else list(val)


def to_dict(val: Any) -> dict | None:
    return None if val is None else dict(val)


Converter = Callable[[Any], Any]


def _apply(convert: Converter | None, val: Any) -> Any:
    return val if convert is None else convert(val)


def list_of(convert: Converter) -> Converter:
    """Build a converter for a list or set whose elements need `convert`."""

    def to_converted_list(val: Any) -> list | None:
        if val is None:
            return None
        return [convert(item) for item in val]

    return to_converted_list


def dict_of(key: Converter | None = None, value: Converter | None = None) -> Converter:
    """Build a converter for a map; either side may be left as is."""

    def to_converted_dict(val: Any) -> dict | None:
        if val is None:
            return None
        return {_apply(key, k): _apply(value, v) for k, v in dict(val).items()}

    return to_converted_dict


def tuple_of(*items: Converter | None) -> Converter:
    """Build a converter for a tuple, one entry per position (None keeps the value)."""

    def to_converted_tuple(val: Any) -> tuple | None:
        if val is None:
            return None
        return tuple(_apply(convert, item) for convert, item in zip(items, val))

    return to_converted_tuple
