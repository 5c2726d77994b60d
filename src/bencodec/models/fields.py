"""Field tag helpers and utilities.

This module provides convenience functions for attaching bencode tags and
numeric bounds to record fields.

Tag vocabulary:
    ``"name"``            wire name override
    ``"-"``               exclude the field entirely
    ``"name,omitempty"``  override and skip empty values on encode
    ``",omitempty"``      keep the declared name, skip empty values on encode
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, cast

from pydantic import Field
from pydantic.fields import FieldInfo

TAG_KEY = "bencode"


class ParsedTag(NamedTuple):
    name: str
    omitempty: bool
    ignore: bool


def parse_tag(tag: str) -> ParsedTag:
    """Split a tag string into its name and options.

    Example:
        >>> parse_tag("otherName,omitempty")
        ParsedTag(name='otherName', omitempty=True, ignore=False)
        >>> parse_tag("-")
        ParsedTag(name='', omitempty=False, ignore=True)
    """
    if tag == "-":
        return ParsedTag("", False, True)
    name, _, options = tag.partition(",")
    opts = {opt.strip() for opt in options.split(",") if opt.strip()}
    return ParsedTag(name.strip(), "omitempty" in opts, False)


@dataclass(frozen=True)
class Tag:
    """Tag marker for use in ``Annotated`` metadata.

    Works for both pydantic models and dataclasses.

    Example:
        >>> class Peer(BaseRecord):
        ...     peer_id: Annotated[bytes, Tag("peer id")]
        ...     port: Annotated[int, Tag(",omitempty")] = 0
    """

    value: str

    def parse(self) -> ParsedTag:
        return parse_tag(self.value)


def BencodeField(tag: str = "", **kwargs: Any) -> FieldInfo:
    """Create a pydantic field carrying a bencode tag.

    Args:
        tag: Tag string (see module docstring)
        **kwargs: Additional Field() arguments (default, description, ge, le, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Torrent(BaseRecord):
        ...     announce: str
        ...     comment: str = BencodeField(",omitempty", default="")
        ...     piece_length: int = BencodeField("piece length")
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[TAG_KEY] = tag
    return cast(FieldInfo, Field(json_schema_extra=extra, **kwargs))


def BoundedInt(*, ge: int | None = None, le: int | None = None, **kwargs: Any) -> FieldInfo:
    """Create a bounded integer field.

    Decoding a value outside ``[ge, le]`` raises IntegerRangeError.

    Args:
        ge: Minimum value (inclusive)
        le: Maximum value (inclusive)
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Message(BaseRecord):
        ...     port: Annotated[int, BoundedInt(ge=0, le=65535)]
    """
    if ge is not None:
        kwargs["ge"] = ge
    if le is not None:
        kwargs["le"] = le
    return cast(FieldInfo, Field(**kwargs))


def FixedInt(*, bits: int, signed: bool = False, **kwargs: Any) -> FieldInfo:
    """Create a fixed-width integer field.

    The wire format has arbitrary-precision integers; the width only bounds
    what the decoder accepts for this field. ``bits`` and ``signed`` are stored
    as extra metadata and turned into a range by schema introspection.

    Args:
        bits: Number of bits (e.g. 8, 16, 32, 64)
        signed: Whether the integer is signed (default False)
        **kwargs: Additional Field() arguments

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Message(BaseRecord):
        ...     temperature: Annotated[int, FixedInt(bits=16, signed=True)]
    """
    if bits <= 0:
        raise ValueError(f"bits must be > 0, got {bits}")
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra.update({"bits": bits, "signed": signed})
    return cast(FieldInfo, Field(json_schema_extra=extra, **kwargs))


def int_range(bits: int, signed: bool) -> tuple[int, int]:
    """Inclusive value range of a ``bits``-wide integer."""
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1
