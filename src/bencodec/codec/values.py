"""Value model shared by the encoder and decoder.

The wire format can express exactly four shapes. Native Python values are
classified into one of them (plus RECORD, which is written as a dictionary)
by :func:`shape_of`, and both directions dispatch on the resulting
:class:`Shape` rather than inspecting types ad hoc.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping
from typing import Any, Dict, List, Union

from pydantic import BaseModel

# Wire tokens
INT_START = ord("i")
LIST_START = ord("l")
DICT_START = ord("d")
END = ord("e")
LENGTH_SEP = ord(":")
MINUS = ord("-")

DEFAULT_MAX_DEPTH = 64
# Upper bound for CodecConfig.max_depth, under the default recursion limit
MAX_DEPTH_LIMIT = 200

# Digits per int/str conversion step, below sys.get_int_max_str_digits()
_DIGIT_GROUP = 1000
_GROUP_BASE = 10**_DIGIT_GROUP

WireValue = Union[int, bytes, List["WireValue"], Dict[bytes, "WireValue"]]


class Shape(enum.Enum):
    """Encodable shapes."""

    INTEGER = "integer"
    BYTES = "bytes"
    LIST = "list"
    DICT = "dict"
    RECORD = "record"


def is_record_type(tp: Any) -> bool:
    """Return True for pydantic model classes and dataclass types."""
    if not isinstance(tp, type):
        return False
    return issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp)


def shape_of(value: Any) -> Shape | None:
    """Classify a native value, or return None if it has no wire shape.

    ``bool`` is an ``int`` subclass and lands on INTEGER, which is the
    intended ``0``/``1`` mapping. Enum members are classified by their value.
    """
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, int):
        return Shape.INTEGER
    if isinstance(value, (str, bytes, bytearray, memoryview)):
        return Shape.BYTES
    if isinstance(value, (list, tuple)):
        return Shape.LIST
    if isinstance(value, Mapping):
        return Shape.DICT
    if is_record_type(type(value)):
        return Shape.RECORD
    return None


def is_empty(value: Any) -> bool:
    """Return True if value counts as empty for omit-if-empty fields."""
    if value is None:
        return True
    if isinstance(value, enum.Enum):
        return False
    if isinstance(value, int):
        return value == 0
    if isinstance(value, (str, bytes, bytearray, memoryview, list, tuple, Mapping)):
        return len(value) == 0
    return False


def to_bytes(value: Any) -> bytes:
    """Convert a BYTES-shaped native value to raw bytes."""
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def int_to_decimal(value: int) -> bytes:
    """ASCII decimal text of an integer of any magnitude.

    Example:
        >>> int_to_decimal(-42)
        b'-42'
    """
    sign = b"-" if value < 0 else b""
    value = abs(value)
    if value < _GROUP_BASE:
        return sign + str(value).encode("ascii")

    groups: List[bytes] = []
    while value >= _GROUP_BASE:
        value, group = divmod(value, _GROUP_BASE)
        groups.append(str(group).encode("ascii").rjust(_DIGIT_GROUP, b"0"))
    groups.append(str(value).encode("ascii"))
    return sign + b"".join(reversed(groups))


def decimal_to_int(digits: bytes) -> int:
    """Parse validated ASCII decimal digits (optionally ``-``-prefixed) of any length."""
    negative = digits[:1] == b"-"
    if negative:
        digits = digits[1:]
    value = 0
    for start in range(0, len(digits), _DIGIT_GROUP):
        group = digits[start : start + _DIGIT_GROUP]
        value = value * 10 ** len(group) + int(group)
    return -value if negative else value
