"""Bencode codec for bencodec.

This module provides encoding and decoding of bencode, including typed
reconstruction of records via schema introspection.
"""

from __future__ import annotations

from .config import CodecConfig
from .core import Codec, decode, decode_into, encode
from .decoder import Decoder
from .encoder import Encoder
from .projection import Projector
from .schema import FieldDescriptor, RecordSchema, SchemaCache
from .values import Shape, WireValue, shape_of

__all__ = [
    "encode",
    "decode",
    "decode_into",
    "Codec",
    "CodecConfig",
    "Encoder",
    "Decoder",
    "Projector",
    "RecordSchema",
    "FieldDescriptor",
    "SchemaCache",
    "Shape",
    "WireValue",
    "shape_of",
]
