"""Bencode decoder.

This module provides the Decoder that parses bencode into generic values:
``int``, ``bytes``, ``list`` and ``dict`` with ``bytes`` keys. Parsing is a
single pass over the buffer with one byte of lookahead. Only canonical input
is accepted: integers without leading zeros or ``-0``, dictionary keys in
strictly ascending byte order, and exactly one value per buffer.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import (
    DecodeError,
    DuplicateKeyError,
    IntegerMalformedError,
    InvalidTokenError,
    MaxDepthExceededError,
    StrictOrderingError,
    TrailingDataError,
    TruncatedInputError,
)
from .values import (
    DEFAULT_MAX_DEPTH,
    DICT_START,
    END,
    INT_START,
    LENGTH_SEP,
    LIST_START,
    MINUS,
    WireValue,
    decimal_to_int,
)

logger = logging.getLogger(__name__)

_DIGITS = frozenset(b"0123456789")


class Decoder:
    """Parses one bencoded value from a complete buffer.

    Decoder instances hold only configuration and may be shared between threads.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth

    def decode(self, data: bytes) -> WireValue:
        """Decode a buffer holding exactly one bencoded value.

        Args:
            data: Complete encoded message

        Returns:
            Generic value (int, bytes, list or dict with bytes keys)

        Raises:
            DecodeError: If data is malformed, truncated, non-canonical or has
                trailing bytes

        Examples:
            >>> Decoder().decode(b"d3:cow3:mooe")
            {b'cow': b'moo'}
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"expected bytes-like input, got {type(data).__name__}")
        buf = bytes(data)
        try:
            value, offset = _Parser(buf, self.max_depth).parse_value(0, 0)
            if offset != len(buf):
                raise TrailingDataError(
                    f"{len(buf) - offset} unconsumed bytes after value", offset=offset
                )
        except DecodeError as e:
            logger.debug("rejected %d-byte input: %s", len(buf), e)
            raise
        return value


class _Parser:
    def __init__(self, buf: bytes, max_depth: int) -> None:
        self.buf = buf
        self.max_depth = max_depth

    def peek(self, offset: int) -> int:
        if offset >= len(self.buf):
            raise TruncatedInputError("unexpected end of input", offset=offset)
        return self.buf[offset]

    def parse_value(self, offset: int, depth: int) -> Tuple[Any, int]:
        if offset >= len(self.buf):
            raise InvalidTokenError("expected a value, found end of input", offset=offset)

        lead = self.buf[offset]
        if lead == INT_START:
            return self.parse_int(offset)
        if lead in _DIGITS:
            return self.parse_bytes(offset)
        if lead == LIST_START or lead == DICT_START:
            if depth >= self.max_depth:
                raise MaxDepthExceededError(
                    f"nesting exceeds max_depth={self.max_depth}", offset=offset
                )
            if lead == LIST_START:
                return self.parse_list(offset, depth + 1)
            return self.parse_dict(offset, depth + 1)
        raise InvalidTokenError(f"unexpected byte {bytes([lead])!r}", offset=offset)

    def parse_int(self, offset: int) -> Tuple[int, int]:
        start = offset
        end = self.buf.find(END, offset + 1)
        if end < 0:
            raise TruncatedInputError("unterminated integer", offset=start)

        body = self.buf[offset + 1 : end]
        digits = body[1:] if body[:1] == bytes([MINUS]) else body
        if not digits:
            raise IntegerMalformedError("integer has no digits", offset=start)
        if any(b not in _DIGITS for b in digits):
            raise IntegerMalformedError(f"invalid integer {body!r}", offset=start)
        if digits[0] == ord("0") and len(digits) > 1:
            raise IntegerMalformedError(f"leading zero in integer {body!r}", offset=start)
        if body == b"-0":
            raise IntegerMalformedError("negative zero", offset=start)
        return decimal_to_int(body), end + 1

    def parse_length(self, offset: int) -> Tuple[int, int]:
        start = offset
        sep = self.buf.find(LENGTH_SEP, offset)
        if sep < 0:
            raise TruncatedInputError("unterminated byte-string length", offset=start)

        digits = self.buf[offset:sep]
        if any(b not in _DIGITS for b in digits):
            raise InvalidTokenError(f"invalid byte-string length {digits!r}", offset=start)
        if digits[0] == ord("0") and len(digits) > 1:
            raise InvalidTokenError(f"leading zero in length {digits!r}", offset=start)
        if len(digits) > len(str(len(self.buf))):
            raise TruncatedInputError(f"byte-string length {digits!r} exceeds input", offset=start)
        return int(digits), sep + 1

    def parse_bytes(self, offset: int) -> Tuple[bytes, int]:
        length, offset = self.parse_length(offset)
        end = offset + length
        if end > len(self.buf):
            raise TruncatedInputError(
                f"byte-string needs {length} bytes, {len(self.buf) - offset} available",
                offset=offset,
            )
        return self.buf[offset:end], end

    def parse_list(self, offset: int, depth: int) -> Tuple[List[Any], int]:
        items: List[Any] = []
        offset += 1
        while self.peek(offset) != END:
            item, offset = self.parse_value(offset, depth)
            items.append(item)
        return items, offset + 1

    def parse_dict(self, offset: int, depth: int) -> Tuple[Dict[bytes, Any], int]:
        result: Dict[bytes, Any] = {}
        prev: Optional[bytes] = None
        offset += 1
        while self.peek(offset) != END:
            key_offset = offset
            if self.buf[offset] not in _DIGITS:
                raise InvalidTokenError("dictionary key must be a byte-string", offset=offset)
            key, offset = self.parse_bytes(offset)
            if prev is not None:
                if key == prev:
                    raise DuplicateKeyError(f"duplicate key {key!r}", offset=key_offset)
                if key < prev:
                    raise StrictOrderingError(
                        f"key {key!r} sorts before previous key {prev!r}", offset=key_offset
                    )
            value, offset = self.parse_value(offset, depth)
            result[key] = value
            prev = key
        return result, offset + 1
