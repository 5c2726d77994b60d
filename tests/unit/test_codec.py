"""Unit tests for encoding."""

from __future__ import annotations

import enum

import pytest

from bencodec import (
    Codec,
    CodecConfig,
    EncodeError,
    KeyCollisionError,
    RequiredFieldAbsentError,
    UnsupportedTypeError,
    decode,
    encode,
    encoded_size,
)


class Color(enum.IntEnum):
    """Test int enum."""

    RED = 1
    GREEN = 2


class Kind(enum.Enum):
    """Test str-valued enum."""

    ALPHA = "alpha"
    BETA = "beta"


class Point:
    """Object converting itself via the __bencode__ hook."""

    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def __bencode__(self) -> list[int]:
        return [self.x, self.y]


class TestEncodeScalars:
    """Test integer and byte-string encoding."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (42, b"i42e"),
            (0, b"i0e"),
            (-7, b"i-7e"),
            (2**100, b"i1267650600228229401496703205376e"),
            (True, b"i1e"),
            (False, b"i0e"),
        ],
    )
    def test_integers(self, value: int, expected: bytes) -> None:
        """Test integers and booleans."""
        assert encode(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("spam", b"4:spam"),
            ("", b"0:"),
            ("é", b"2:\xc3\xa9"),
            (b"\x00\xff", b"2:\x00\xff"),
            (bytearray(b"123"), b"3:123"),
            (memoryview(b"ab"), b"2:ab"),
            (b"e:e", b"3:e:e"),
        ],
    )
    def test_byte_strings(self, value: object, expected: bytes) -> None:
        """Test str (UTF-8) and bytes-like values."""
        assert encode(value) == expected

    def test_integers_beyond_str_conversion_limit(self) -> None:
        """Test integers longer than the interpreter's int/str digit limit."""
        assert encode(10**5000) == b"i1" + b"0" * 5000 + b"e"
        assert encode(-(10**5000) - 7) == b"i-1" + b"0" * 4999 + b"7e"
        big = 7**6000
        assert decode(encode(big)) == big
        assert decode(encode([big, -big])) == [big, -big]

    def test_int_enum_keys_use_their_value(self) -> None:
        """Test IntEnum keys encode as decimal digits, not the member name."""
        assert encode({Color.RED: "a", 2: "b"}) == b"d1:11:a1:21:be"

    def test_enums_use_their_value(self) -> None:
        """Test enum members encode as their value."""
        assert encode(Color.RED) == b"i1e"
        assert encode(Kind.BETA) == b"4:beta"

    def test_bencode_hook(self) -> None:
        """Test objects providing __bencode__."""
        assert encode(Point(1, 2)) == b"li1ei2ee"
        assert encode({"p": Point(3, 4)}) == b"d1:pli3ei4eee"


class TestEncodeContainers:
    """Test list and dictionary encoding."""

    def test_lists(self) -> None:
        """Test lists and tuples."""
        assert encode([1, 2]) == b"li1ei2ee"
        assert encode([]) == b"le"
        assert encode((1, "a")) == b"li1e1:ae"
        assert encode([[], [[]]]) == b"llelleee"

    def test_dict_vector(self, sample_dict_bytes: bytes) -> None:
        """Test the canonical dictionary vector."""
        assert encode({"cow": "moo", "spam": "eggs"}) == sample_dict_bytes
        assert encode({"spam": "eggs", "cow": "moo"}) == sample_dict_bytes

    def test_empty_dict(self) -> None:
        """Test empty mapping."""
        assert encode({}) == b"de"

    def test_keys_sorted_by_raw_bytes(self) -> None:
        """Test ordering is by byte value, not case-insensitive or by length."""
        assert encode({"b": 1, "a": 2, "B": 3}) == b"d1:Bi3e1:ai2e1:bi1ee"
        assert encode({"aa": 1, "a": 2}) == b"d1:ai2e2:aai1ee"
        assert encode({b"\xff": 1, b"a": 2}) == b"d1:ai2e1:\xffi1ee"

    def test_int_keys_use_decimal_text(self) -> None:
        """Test integer keys are converted to their decimal text and sorted as text."""
        assert encode({2: "b", 10: "a"}) == b"d2:101:a1:21:be"

    def test_nested(self) -> None:
        """Test nested containers."""
        assert encode({"list": [1, {"a": b"x"}]}) == b"d4:listli1ed1:a1:xeee"

    def test_insertion_order_does_not_matter(self) -> None:
        """Test canonical determinism for mappings."""
        forward = {str(i): i for i in range(50)}
        backward = dict(reversed(list(forward.items())))
        assert encode(forward) == encode(backward)


class TestEncodeErrors:
    """Test encoding error handling."""

    def test_float_rejected(self) -> None:
        """Test floats have no wire shape."""
        with pytest.raises(UnsupportedTypeError, match="float") as exc_info:
            encode(1.5)
        assert exc_info.value.path == "$"
        assert exc_info.value.code == "ERR_UNSUPPORTED_TYPE"

    def test_error_path_in_containers(self) -> None:
        """Test the path names the offending element."""
        with pytest.raises(UnsupportedTypeError) as exc_info:
            encode({"a": [1, 2.5]})
        assert exc_info.value.path == "$['a'][1]"

    def test_set_rejected(self) -> None:
        """Test unordered sets are not encoded."""
        with pytest.raises(UnsupportedTypeError):
            encode({1, 2})

    def test_none_rejected(self) -> None:
        """Test None outside a nullable record field."""
        with pytest.raises(RequiredFieldAbsentError):
            encode(None)
        with pytest.raises(RequiredFieldAbsentError):
            encode([1, None])

    def test_unencodable_text(self) -> None:
        """Test strings with lone surrogates fail with a path."""
        with pytest.raises(UnsupportedTypeError, match="UTF-8") as exc_info:
            encode("\ud800")
        assert exc_info.value.path == "$"

        with pytest.raises(UnsupportedTypeError) as exc_info:
            encode({"a": ["ok", "\udfff"]})
        assert exc_info.value.path == "$['a'][1]"

    def test_unencodable_key(self) -> None:
        """Test dictionary keys with lone surrogates fail with a path."""
        with pytest.raises(UnsupportedTypeError, match="UTF-8") as exc_info:
            encode({"\ud800": 1})
        assert exc_info.value.path == "$"

        with pytest.raises(EncodeError) as exc_info2:
            encode({"outer": {"\ud800": 1}})
        assert exc_info2.value.path == "$['outer']"

    def test_key_collision(self) -> None:
        """Test distinct keys producing the same key text."""
        with pytest.raises(KeyCollisionError, match="both encode"):
            encode({1: "a", "1": "b"})

    @pytest.mark.parametrize("key", [True, 1.5, (1, 2)])
    def test_invalid_key_types(self, key: object) -> None:
        """Test keys that are not str, bytes or int."""
        with pytest.raises(UnsupportedTypeError):
            encode({key: 1})

    def test_max_depth(self) -> None:
        """Test nesting limit."""
        codec = Codec(CodecConfig(max_depth=2))
        assert codec.encode([[1]]) == b"lli1eee"
        with pytest.raises(EncodeError, match="max_depth"):
            codec.encode([[[1]]])

    def test_self_reference(self) -> None:
        """Test a self-referencing list fails instead of recursing forever."""
        loop: list[object] = []
        loop.append(loop)
        with pytest.raises(EncodeError, match="max_depth"):
            encode(loop)


class TestRoundTrip:
    """Test generic decode(encode(v))."""

    @pytest.mark.parametrize(
        "value",
        [
            0,
            -100,
            b"",
            b"0123456789a",
            [],
            [1, [2, [3]]],
            {},
            {b"cat": 1, b"dog": [b"x", {b"y": 2}]},
        ],
    )
    def test_wire_values(self, value: object) -> None:
        """Test values already in generic form round-trip exactly."""
        assert decode(encode(value)) == value

    def test_text_comes_back_as_bytes(self) -> None:
        """Test str values decode as their UTF-8 bytes."""
        assert decode(encode({"cow": "moo"})) == {b"cow": b"moo"}


class TestSizes:
    """Test size calculation utilities."""

    def test_encoded_size(self) -> None:
        """Test size of a value."""
        assert encoded_size({"cow": "moo"}) == 12
        assert encoded_size(42) == 4
