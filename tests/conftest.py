"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from bencodec import Codec, CodecConfig


@pytest.fixture
def codec() -> Codec:
    """Codec with default configuration and a fresh schema cache."""
    return Codec()


@pytest.fixture
def strict_codec() -> Codec:
    """Codec that rejects missing fields and unknown keys."""
    return Codec(CodecConfig(missing_fields="error", unknown_keys="error"))


@pytest.fixture
def sample_dict_bytes() -> bytes:
    """Canonical encoding of {"cow": "moo", "spam": "eggs"}."""
    return b"d3:cow3:moo4:spam4:eggse"
