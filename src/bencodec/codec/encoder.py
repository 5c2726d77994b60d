"""Bencode encoder.

This module provides the Encoder that converts native values, pydantic models
and dataclasses to bencode. Dispatch is on the :class:`Shape` returned by
:func:`shape_of`; objects outside the mapping table may implement
``__bencode__()`` to return an encodable stand-in.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, List, Tuple

from ..exceptions import (
    EncodeError,
    KeyCollisionError,
    RequiredFieldAbsentError,
    UnsupportedTypeError,
)
from .schema import SchemaCache
from .values import (
    DEFAULT_MAX_DEPTH,
    DICT_START,
    END,
    INT_START,
    LENGTH_SEP,
    LIST_START,
    Shape,
    int_to_decimal,
    is_empty,
    shape_of,
    to_bytes,
)


class Encoder:
    """Serializes values into a byte buffer.

    One Encoder may be shared between threads; each :meth:`encode` call uses
    its own buffer.
    """

    def __init__(self, schemas: SchemaCache, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.schemas = schemas
        self.max_depth = max_depth

    def encode(self, value: Any) -> bytes:
        """Encode a value to bencode.

        Args:
            value: int, bool, str, bytes, list, tuple, mapping, record or
                any combination thereof

        Returns:
            Encoded bytes

        Raises:
            SchemaError: If a record type has an invalid schema
            EncodeError: If a value cannot be encoded

        Examples:
            >>> Encoder(SchemaCache()).encode({"cow": "moo", "spam": "eggs"})
            b'd3:cow3:moo4:spam4:eggse'
        """
        out = bytearray()
        self._encode_value(out, value, "$", 0)

        max_bytes = getattr(type(value), "bencode_max_bytes", None)
        if max_bytes is not None and len(out) > max_bytes:
            raise EncodeError(
                f"Encoded size ({len(out)} bytes) exceeds "
                f"{type(value).__name__}.bencode_max_bytes={max_bytes}"
            )
        return bytes(out)

    def _encode_value(self, out: bytearray, value: Any, path: str, depth: int) -> None:
        if value is None:
            raise RequiredFieldAbsentError("value is None and bencode has no null", path=path)

        hook = getattr(type(value), "__bencode__", None)
        if hook is not None:
            value = hook(value)

        shape = shape_of(value)
        if shape is None:
            raise UnsupportedTypeError(f"unsupported type {type(value).__name__}", path=path)
        if isinstance(value, enum.Enum):
            value = value.value

        if shape is Shape.INTEGER:
            _write_int(out, int(value))
        elif shape is Shape.BYTES:
            _write_bytes(out, _text_bytes(value, path))
        else:
            if depth >= self.max_depth:
                raise EncodeError(f"nesting exceeds max_depth={self.max_depth}", path=path)
            if shape is Shape.LIST:
                self._encode_list(out, value, path, depth + 1)
            elif shape is Shape.DICT:
                self._encode_mapping(out, value, path, depth + 1)
            else:
                self._encode_record(out, value, path, depth + 1)

    def _encode_list(self, out: bytearray, value: Any, path: str, depth: int) -> None:
        out.append(LIST_START)
        for i, item in enumerate(value):
            self._encode_value(out, item, f"{path}[{i}]", depth)
        out.append(END)

    def _encode_mapping(self, out: bytearray, value: Mapping, path: str, depth: int) -> None:  # type: ignore[type-arg]
        items: List[Tuple[bytes, Any, Any]] = []
        for key, item in value.items():
            items.append((_key_bytes(key, path), key, item))

        items.sort(key=lambda kv: kv[0])
        for prev, cur in zip(items, items[1:]):
            if prev[0] == cur[0]:
                raise KeyCollisionError(
                    f"keys {prev[1]!r} and {cur[1]!r} both encode as {cur[0]!r}", path=path
                )

        out.append(DICT_START)
        for raw_key, key, item in items:
            _write_bytes(out, raw_key)
            self._encode_value(out, item, f"{path}[{key!r}]", depth)
        out.append(END)

    def _encode_record(self, out: bytearray, record: Any, path: str, depth: int) -> None:
        schema = self.schemas.get(type(record))

        out.append(DICT_START)
        for field in schema.fields:
            field_value = getattr(record, field.name)
            field_path = f"{path}.{field.name}"
            if field.omitempty and is_empty(field_value):
                continue
            if field_value is None:
                if field.nullable:
                    continue
                raise RequiredFieldAbsentError(
                    f"field {field.name} is required but got None", path=field_path
                )
            _write_bytes(out, field.wire_key)
            self._encode_value(out, field_value, field_path, depth)
        out.append(END)


def _key_bytes(key: Any, path: str) -> bytes:
    """Key text for a mapping key: str as UTF-8, bytes as-is, int in decimal."""
    if isinstance(key, bool):
        raise UnsupportedTypeError("bool is not a valid dictionary key", path=path)
    if isinstance(key, str):
        return _text_bytes(key, path)
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    if isinstance(key, int):
        return int_to_decimal(int(key))
    raise UnsupportedTypeError(
        f"dictionary key must be str, bytes or int, got {type(key).__name__}", path=path
    )


def _text_bytes(value: Any, path: str) -> bytes:
    try:
        return to_bytes(value)
    except UnicodeEncodeError as e:
        raise UnsupportedTypeError(f"text is not encodable as UTF-8: {e.reason}", path=path) from e


def _write_int(out: bytearray, value: int) -> None:
    out.append(INT_START)
    out += int_to_decimal(value)
    out.append(END)


def _write_bytes(out: bytearray, value: bytes) -> None:
    out += str(len(value)).encode("ascii")
    out.append(LENGTH_SEP)
    out += value
