"""Record modeling for bencodec.

This module provides the BaseRecord class and field utilities for defining
structured records that encode as bencode dictionaries.
"""

from __future__ import annotations

from .base import BaseRecord
from .fields import BencodeField, BoundedInt, FixedInt, Tag, parse_tag

__all__ = [
    "BaseRecord",
    "BencodeField",
    "BoundedInt",
    "FixedInt",
    "Tag",
    "parse_tag",
]
