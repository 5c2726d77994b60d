"""Configuration for Codec instances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .values import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT

MissingFieldPolicy = Literal["zero", "error"]
UnknownKeyPolicy = Literal["ignore", "error"]


@dataclass(frozen=True)
class CodecConfig:
    """Codec options.

    Attributes:
        max_depth: Maximum container nesting accepted by the encoder and
            decoder (default 64, at most 200). Bounds stack usage on
            adversarial input.

        missing_fields: What ``decode_into`` does when a required record field
            has no key in the input (default ``"zero"``):
            - ``"zero"``: fill the field with its type's zero value
              (0, "", b"", [], {}, None for optional fields)
            - ``"error"``: raise MissingFieldError

        unknown_keys: What ``decode_into`` does with dictionary keys that match
            no field (default ``"ignore"``):
            - ``"ignore"``: skip them
            - ``"error"``: raise ShapeMismatchError

    Examples:
        ```python
        from bencodec import Codec, CodecConfig

        strict = Codec(CodecConfig(missing_fields="error", unknown_keys="error"))
        shallow = Codec(CodecConfig(max_depth=8))
        ```
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    missing_fields: MissingFieldPolicy = "zero"
    unknown_keys: UnknownKeyPolicy = "ignore"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not 0 < self.max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(
                f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {self.max_depth}"
            )

        if self.missing_fields not in ("zero", "error"):
            raise ValueError(
                f"missing_fields must be 'zero' or 'error', got {self.missing_fields!r}"
            )

        if self.unknown_keys not in ("ignore", "error"):
            raise ValueError(
                f"unknown_keys must be 'ignore' or 'error', got {self.unknown_keys!r}"
            )
