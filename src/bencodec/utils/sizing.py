"""Encoded size utilities.

This module provides functions to report how many bytes a value, or each
field of a record, takes on the wire.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..codec.core import Codec, _default_codec
from ..codec.values import is_empty, is_record_type


def encoded_size(value: Any, codec: Optional[Codec] = None) -> int:
    """Calculate the encoded size of a value in bytes.

    Args:
        value: Any encodable value
        codec: Codec to use (defaults to the shared codec)

    Returns:
        Size in bytes

    Raises:
        EncodeError: If the value cannot be encoded

    Example:
        >>> encoded_size({"cow": "moo"})
        12
    """
    return len((codec or _default_codec).encode(value))


def field_sizes(record: Any, codec: Optional[Codec] = None) -> Dict[str, int]:
    """Calculate the encoded size of each field of a record instance.

    Each entry counts the key and the value. Fields that would be omitted
    (omitempty and empty, or None in an optional field) are reported as 0.
    The two framing bytes ``d``/``e`` are not attributed to any field.

    Args:
        record: pydantic model or dataclass instance
        codec: Codec to use (defaults to the shared codec)

    Returns:
        Dictionary mapping field names to byte counts, in encoding order

    Example:
        >>> sizes = field_sizes(Peer(ip="10.0.0.1", port=6881))
        >>> sizes["port"]
        12
    """
    codec = codec or _default_codec
    if not is_record_type(type(record)):
        raise TypeError(f"expected a record instance, got {type(record).__name__}")

    sizes: Dict[str, int] = {}
    for field in codec.schema_for(type(record)).fields:
        value = getattr(record, field.name)
        if (field.omitempty and is_empty(value)) or (value is None and field.nullable):
            sizes[field.name] = 0
            continue
        sizes[field.name] = len(codec.encode(field.wire_key)) + len(codec.encode(value))
    return sizes
