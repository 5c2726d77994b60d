"""Exception hierarchy for bencodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BencodeError for easy catching of any bencodec-specific error.

Every exception class carries a stable ``code`` string so callers can branch on
the failure kind without matching on message text.
"""

from __future__ import annotations

from typing import Optional


class BencodeError(Exception):
    """Base exception for all bencodec errors."""

    code = "ERR_BENCODE"


class SchemaError(BencodeError):
    """Raised when a record type cannot be mapped onto a dictionary.

    Examples:
        - Two fields resolve to the same wire name
        - A field tag cannot be parsed
        - A field has no type annotation
    """

    code = "ERR_SCHEMA"


class EncodeError(BencodeError):
    """Raised when encoding a value fails.

    Attributes:
        path: Location of the offending value, e.g. ``$.items[2].name``
    """

    code = "ERR_ENCODE"

    def __init__(self, message: str, *, path: str = "$") -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class UnsupportedTypeError(EncodeError):
    """Raised for values that have no wire shape (floats, sets, arbitrary objects)."""

    code = "ERR_UNSUPPORTED_TYPE"


class KeyCollisionError(EncodeError):
    """Raised when two distinct mapping keys produce the same key text (e.g. ``1`` and ``"1"``)."""

    code = "ERR_DUPLICATE_KEY"


class RequiredFieldAbsentError(EncodeError):
    """Raised when ``None`` appears where the format cannot omit it."""

    code = "ERR_REQUIRED_FIELD_ABSENT"


class DecodeError(BencodeError):
    """Raised when decoding binary data fails.

    Attributes:
        offset: Byte offset in the input where the problem was detected, if known
        path: Field path for errors raised while projecting onto a target type
    """

    code = "ERR_DECODE"

    def __init__(
        self, message: str, *, offset: Optional[int] = None, path: Optional[str] = None
    ) -> None:
        location = []
        if offset is not None:
            location.append(f"offset {offset}")
        if path is not None:
            location.append(path)
        prefix = f"{', '.join(location)}: " if location else ""
        super().__init__(f"{prefix}{message}")
        self.offset = offset
        self.path = path


class InvalidTokenError(DecodeError):
    """Raised when a byte cannot start or continue a value."""

    code = "ERR_INVALID_TOKEN"


class TruncatedInputError(DecodeError):
    """Raised when the input ends in the middle of a value."""

    code = "ERR_TRUNCATED_INPUT"


class IntegerMalformedError(DecodeError):
    """Raised for non-canonical integers such as ``i-0e``, ``i01e`` or ``ie``."""

    code = "ERR_INTEGER_MALFORMED"


class IntegerRangeError(DecodeError):
    """Raised when a decoded integer does not fit the target field's bounds."""

    code = "ERR_INTEGER_RANGE"


class StrictOrderingError(DecodeError):
    """Raised when dictionary keys are not in ascending byte order."""

    code = "ERR_KEY_ORDER"


class DuplicateKeyError(DecodeError):
    """Raised when a dictionary repeats a key."""

    code = "ERR_DUPLICATE_KEY"


class TrailingDataError(DecodeError):
    """Raised when bytes remain after the top-level value."""

    code = "ERR_TRAILING_DATA"


class ShapeMismatchError(DecodeError):
    """Raised when a decoded value does not have the shape the target type expects."""

    code = "ERR_SHAPE_MISMATCH"


class MissingFieldError(ShapeMismatchError):
    """Raised when a required record field is absent and the codec rejects missing fields."""

    code = "ERR_MISSING_FIELD"


class MaxDepthExceededError(DecodeError):
    """Raised when containers nest deeper than the configured limit."""

    code = "ERR_MAX_DEPTH"
