"""bencodec: Typed Bencode Codec

A Python library for encoding and decoding bencode, the four-shape binary
format (integers, byte strings, lists, dictionaries) used by BitTorrent
metainfo files and the DHT protocol.

Key Features:
- Canonical output: dictionary keys always sorted by raw bytes
- Strict decoding: non-canonical integers, unsorted or duplicate keys,
  truncated input and trailing bytes are rejected with typed errors
- Pydantic-based and dataclass records with ``name``/``-``/``,omitempty`` tags
- Typed reconstruction with ``decode_into``

Quick Start:
    >>> from bencodec import BaseRecord, BencodeField, encode, decode, decode_into
    >>>
    >>> class Peer(BaseRecord):
    ...     ip: str
    ...     peer_id: bytes = BencodeField("peer id", default=b"")
    ...     port: int = BencodeField(",omitempty", default=0)
    >>>
    >>> data = encode(Peer(ip="10.0.0.1", peer_id=b"-XX0001-", port=6881))
    >>> data
    b'd2:ip8:10.0.0.17:peer id8:-XX0001-4:porti6881ee'
    >>> decode(data)[b"port"]
    6881
    >>> decode_into(data, Peer).port
    6881
"""

from __future__ import annotations

from .codec import Codec, CodecConfig, decode, decode_into, encode
from .exceptions import (
    BencodeError,
    DecodeError,
    DuplicateKeyError,
    EncodeError,
    IntegerMalformedError,
    IntegerRangeError,
    InvalidTokenError,
    KeyCollisionError,
    MaxDepthExceededError,
    MissingFieldError,
    RequiredFieldAbsentError,
    SchemaError,
    ShapeMismatchError,
    StrictOrderingError,
    TrailingDataError,
    TruncatedInputError,
    UnsupportedTypeError,
)
from .models import BaseRecord, BencodeField, BoundedInt, FixedInt, Tag
from .utils import encoded_size, field_sizes

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "decode_into",
    "Codec",
    "CodecConfig",
    # Records
    "BaseRecord",
    "BencodeField",
    "BoundedInt",
    "FixedInt",
    "Tag",
    # Exceptions
    "BencodeError",
    "SchemaError",
    "EncodeError",
    "UnsupportedTypeError",
    "KeyCollisionError",
    "RequiredFieldAbsentError",
    "DecodeError",
    "InvalidTokenError",
    "TruncatedInputError",
    "IntegerMalformedError",
    "IntegerRangeError",
    "StrictOrderingError",
    "DuplicateKeyError",
    "TrailingDataError",
    "ShapeMismatchError",
    "MissingFieldError",
    "MaxDepthExceededError",
    # Sizing
    "encoded_size",
    "field_sizes",
    # Version
    "__version__",
]
