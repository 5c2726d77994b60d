"""Codec facade tying the encoder, decoder and projection together.

Each Codec owns its schema cache; the module-level :func:`encode`,
:func:`decode` and :func:`decode_into` functions use a shared default instance.
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar, overload

from .config import CodecConfig
from .decoder import Decoder
from .encoder import Encoder
from .projection import Projector
from .schema import RecordSchema, SchemaCache
from .values import WireValue

T = TypeVar("T")


class Codec:
    """Bencode encoder/decoder with a private schema cache.

    Example:
        >>> codec = Codec(CodecConfig(missing_fields="error"))
        >>> data = codec.encode(Peer(ip="10.0.0.1", port=6881))
        >>> codec.decode_into(data, Peer)
        Peer(ip='10.0.0.1', port=6881)
    """

    def __init__(self, config: Optional[CodecConfig] = None) -> None:
        self.config = config or CodecConfig()
        self.schemas = SchemaCache()
        self._encoder = Encoder(self.schemas, self.config.max_depth)
        self._decoder = Decoder(self.config.max_depth)
        self._projector = Projector(self.schemas, self.config)

    def encode(self, value: Any) -> bytes:
        """Encode a value to bencode. See :meth:`Encoder.encode`."""
        return self._encoder.encode(value)

    def decode(self, data: bytes) -> WireValue:
        """Decode bencode to a generic value. See :meth:`Decoder.decode`."""
        return self._decoder.decode(data)

    @overload
    def decode_into(self, data: bytes, target: Type[T]) -> T: ...

    @overload
    def decode_into(self, data: bytes, target: Any) -> Any: ...

    def decode_into(self, data: bytes, target: Any) -> Any:
        """Decode bencode and project it onto ``target``.

        Args:
            data: Complete encoded message
            target: Record class, builtin type or generic alias such as
                ``dict[str, list[int]]``

        Returns:
            Instance of ``target``

        Raises:
            DecodeError: If data is malformed or does not fit ``target``
            SchemaError: If ``target`` is not a supported type
        """
        return self._projector.project(self._decoder.decode(data), target)

    def schema_for(self, record_type: type) -> RecordSchema:
        """Field descriptors for a record type (cached)."""
        return self.schemas.get(record_type)

    def zero_value(self, target: Any) -> Any:
        """Value ``decode_into`` fills in for an absent field of type ``target``."""
        return self._projector.zero_value(target)


_default_codec = Codec()


def encode(value: Any) -> bytes:
    """Encode a value to bencode using the default codec.

    Examples:
        >>> encode(42)
        b'i42e'
        >>> encode({"cow": "moo", "spam": "eggs"})
        b'd3:cow3:moo4:spam4:eggse'
    """
    return _default_codec.encode(value)


def decode(data: bytes) -> WireValue:
    """Decode bencode to a generic value using the default codec.

    Examples:
        >>> decode(b"li1ei2ee")
        [1, 2]
    """
    return _default_codec.decode(data)


def decode_into(data: bytes, target: Any) -> Any:
    """Decode bencode onto ``target`` using the default codec.

    Examples:
        >>> decode_into(b"d3:cow3:mooe", dict[str, str])
        {'cow': 'moo'}
    """
    return _default_codec.decode_into(data, target)
