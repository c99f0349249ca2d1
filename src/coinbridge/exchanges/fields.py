"""Typed access to fields of decoded JSON response nodes.

Lookups never raise on a missing key. Accessors return ``None`` (or the
given default) for absent or null values, and raise ``MappingError`` when a
required value is absent or a present value cannot be converted.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from .errors import MappingError

_REQUIRED: Any = object()

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class EpochUnit(Enum):
    SECONDS = 1
    MILLISECONDS = 1000


def get_field(node: Any, key: str) -> Any:
    """Return ``node[key]`` or None when node is not a mapping or lacks the key."""
    if isinstance(node, dict):
        return node.get(key)
    return None


def _absent(key: str, default: Any) -> Any:
    if default is _REQUIRED:
        raise MappingError(f"Missing required field {key!r}", field=key)
    return default


def parse_decimal(value: Any, key: str | None = None) -> Decimal:
    """Convert a JSON scalar to Decimal without going through binary floats."""
    if isinstance(value, bool):
        raise MappingError(f"Boolean is not a number: {value!r}", field=key)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise MappingError(f"Not a number: {value!r}", field=key) from exc
    else:
        raise MappingError(f"Not a number: {value!r}", field=key)
    if not result.is_finite():
        raise MappingError(f"Not a finite number: {value!r}", field=key)
    return result


def decimal_field(node: Any, key: str, default: Any = _REQUIRED) -> Decimal | None:
    value = get_field(node, key)
    if value is None or value == "":
        return _absent(key, default)
    return parse_decimal(value, key)


def int_field(node: Any, key: str, default: Any = _REQUIRED) -> int | None:
    value = get_field(node, key)
    if value is None or value == "":
        return _absent(key, default)
    number = parse_decimal(value, key)
    if number != number.to_integral_value():
        raise MappingError(f"Not an integer: {value!r}", field=key)
    return int(number)


def str_field(node: Any, key: str, default: Any = _REQUIRED) -> str | None:
    value = get_field(node, key)
    if value is None:
        return _absent(key, default)
    if isinstance(value, (dict, list)):
        raise MappingError(f"Expected a scalar for {key!r}", field=key)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def from_epoch(value: int, unit: EpochUnit) -> datetime:
    """Convert an epoch timestamp to an aware UTC datetime."""
    try:
        if unit is EpochUnit.MILLISECONDS:
            return EPOCH + timedelta(milliseconds=value)
        return EPOCH + timedelta(seconds=value)
    except OverflowError as exc:
        raise MappingError(f"Timestamp out of range: {value!r}") from exc


def as_utc(moment: datetime) -> datetime:
    """Read naive datetimes as UTC, the zone every exchange timestamp uses."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def to_epoch(moment: datetime, unit: EpochUnit) -> int:
    return int(as_utc(moment).timestamp() * unit.value)


def epoch_field(node: Any, key: str, unit: EpochUnit, default: Any = _REQUIRED) -> datetime | None:
    value = int_field(node, key, None)
    if value is None:
        return _absent(key, default)
    return from_epoch(value, unit)
