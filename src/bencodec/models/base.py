"""Base record class and bencodec-specific Pydantic configuration.

This module provides the BaseRecord class that structured records should inherit from.
Plain pydantic models and dataclasses are accepted too; BaseRecord only adds
sensible model configuration and the bencodec class options.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class BaseRecord(BaseModel):
    """Base class for bencodec records.

    Records are encoded as dictionaries whose keys are the field wire names.
    Fields are emitted in declaration order unless ``bencode_sorted_fields``
    is set.

    bencodec-specific options can be configured as ClassVar attributes:

    Example:
        >>> from typing import ClassVar
        >>> class Peer(BaseRecord):
        ...     ip: str
        ...     peer_id: bytes = BencodeField("peer id")
        ...     port: int = BoundedInt(ge=0, le=65535)
        ...
        ...     bencode_sorted_fields: ClassVar[bool] = True
        ...     bencode_max_bytes: ClassVar[Optional[int]] = 128

    Attributes:
        bencode_sorted_fields: Emit fields ordered by wire name, producing
            canonical dictionaries that strict decoders accept
        bencode_max_bytes: Maximum encoded size in bytes (optional, for validation)
    """

    model_config = ConfigDict(
        strict=False,
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra="forbid",
        populate_by_name=True,
    )

    bencode_sorted_fields: ClassVar[bool] = False
    bencode_max_bytes: ClassVar[int | None] = None
