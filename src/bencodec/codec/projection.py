"""Typed reconstruction of decoded values.

The decoder produces generic values (int, bytes, list, dict with bytes keys).
This module projects such a value onto a target type annotation, building
records through the same schema introspection the encoder uses.
"""

from __future__ import annotations

import collections.abc
import enum
import types
from typing import Annotated, Any, Dict, List, Optional, Union, get_args, get_origin

from pydantic import ValidationError

from ..exceptions import (
    IntegerRangeError,
    MissingFieldError,
    SchemaError,
    ShapeMismatchError,
)
from .config import CodecConfig
from .schema import SchemaCache, unwrap_optional
from .values import decimal_to_int, is_record_type

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
    collections.abc.Collection,
)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def _describe(value: Any) -> str:
    if isinstance(value, int):
        return "integer"
    if isinstance(value, bytes):
        return "byte-string"
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "dictionary"
    return type(value).__name__


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


class Projector:
    """Projects generic decoded values onto type annotations."""

    def __init__(self, schemas: SchemaCache, config: CodecConfig) -> None:
        self.schemas = schemas
        self.config = config

    def project(
        self,
        value: Any,
        target: Any,
        path: str = "$",
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
    ) -> Any:
        """Convert ``value`` to an instance of ``target``.

        Args:
            value: Generic value from the decoder
            target: Type annotation to project onto
            path: Location used in error messages
            min_value: Lower bound for integer targets
            max_value: Upper bound for integer targets

        Raises:
            ShapeMismatchError: If the value's shape does not fit the target
            IntegerRangeError: If an integer is outside the accepted range
            SchemaError: If the target type is not supported
        """
        if target is Any or target is object:
            return value

        target, _ = unwrap_optional(target)
        if get_origin(target) is Annotated:
            target = get_args(target)[0]

        origin = get_origin(target)
        if origin is Union or origin is types.UnionType:
            return self._project_union(value, target, path, min_value, max_value)

        if target is bool:
            return self._project_bool(value, path)
        if isinstance(target, type) and issubclass(target, enum.Enum):
            return self._project_enum(value, target, path)
        if target is int:
            return self._project_int(value, path, min_value, max_value)
        if target is str:
            return self._project_str(value, path)
        if target is bytes or target is bytearray:
            return target(self._expect(value, bytes, target, path))
        if is_record_type(target):
            return self._project_record(value, target, path)

        container = origin or target
        if container in _SEQUENCE_ORIGINS:
            (item_type,) = get_args(target) or (Any,)
            items = self._expect(value, list, target, path)
            return [self.project(item, item_type, f"{path}[{i}]") for i, item in enumerate(items)]
        if container is tuple:
            return self._project_tuple(value, target, path)
        if container in _MAPPING_ORIGINS:
            key_type, value_type = get_args(target) or (Any, Any)
            entries = self._expect(value, dict, target, path)
            return {
                self._project_key(key, key_type, path): self.project(
                    item, value_type, f"{path}[{key!r}]"
                )
                for key, item in entries.items()
            }

        raise SchemaError(f"{path}: unsupported target type {_type_name(target)}")

    def zero_value(self, target: Any, path: str = "$") -> Any:
        """Zero value of a type, used to fill absent required fields."""
        target, nullable = unwrap_optional(target)
        if nullable or target is Any or target is object:
            return None
        if get_origin(target) is Annotated:
            target = get_args(target)[0]

        origin = get_origin(target)
        if origin is Union or origin is types.UnionType:
            return self.zero_value(get_args(target)[0], path)
        if target is bool:
            return False
        if isinstance(target, type) and issubclass(target, enum.Enum):
            return next(iter(target))
        if target is int:
            return 0
        if target is str:
            return ""
        if target is bytes or target is bytearray:
            return target()
        if is_record_type(target):
            return self._project_record({}, target, path, fill_missing=True)

        container = origin or target
        if container in _SEQUENCE_ORIGINS:
            return []
        if container is tuple:
            args = get_args(target)
            if not args or (len(args) == 2 and args[1] is Ellipsis):
                return ()
            return tuple(self.zero_value(arg, path) for arg in args)
        if container in _MAPPING_ORIGINS:
            return {}

        raise SchemaError(f"{path}: no zero value for {_type_name(target)}")

    def _expect(self, value: Any, shape: type, target: Any, path: str) -> Any:
        if not isinstance(value, shape):
            raise ShapeMismatchError(
                f"expected {_describe(shape())} for {_type_name(target)}, found {_describe(value)}",
                path=path,
            )
        return value

    def _project_union(
        self,
        value: Any,
        target: Any,
        path: str,
        min_value: Optional[int],
        max_value: Optional[int],
    ) -> Any:
        unsupported: Optional[SchemaError] = None
        mismatched = False
        for arm in get_args(target):
            try:
                return self.project(value, arm, path, min_value, max_value)
            except (ShapeMismatchError, IntegerRangeError):
                mismatched = True
            except SchemaError as e:
                unsupported = e
        if unsupported is not None and not mismatched:
            raise unsupported
        raise ShapeMismatchError(
            f"{_describe(value)} matches no member of {target!r}", path=path
        )

    def _project_bool(self, value: Any, path: str) -> bool:
        number = self._expect(value, int, bool, path)
        if number not in (0, 1):
            raise IntegerRangeError(f"boolean must be 0 or 1, got {number}", path=path)
        return bool(number)

    def _project_int(
        self, value: Any, path: str, min_value: Optional[int], max_value: Optional[int]
    ) -> int:
        number: int = self._expect(value, int, int, path)
        if (min_value is not None and number < min_value) or (
            max_value is not None and number > max_value
        ):
            raise IntegerRangeError(
                f"value {number} out of bounds [{min_value}, {max_value}]", path=path
            )
        return number

    def _project_str(self, value: Any, path: str) -> str:
        raw = self._expect(value, bytes, str, path)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ShapeMismatchError(f"invalid UTF-8 in string: {e}", path=path) from e

    def _project_enum(self, value: Any, target: type[enum.Enum], path: str) -> enum.Enum:
        candidates: List[Any] = [value]
        if isinstance(value, bytes):
            try:
                candidates.insert(0, value.decode("utf-8"))
            except UnicodeDecodeError:
                pass
        for candidate in candidates:
            try:
                return target(candidate)
            except ValueError:
                continue
        raise ShapeMismatchError(f"{value!r} is not a valid {target.__name__}", path=path)

    def _project_tuple(self, value: Any, target: Any, path: str) -> tuple:  # type: ignore[type-arg]
        items = self._expect(value, list, target, path)
        args = get_args(target)
        if not args:
            return tuple(items)
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(self.project(item, args[0], f"{path}[{i}]") for i, item in enumerate(items))
        if len(items) != len(args):
            raise ShapeMismatchError(
                f"expected {len(args)} items for {target!r}, found {len(items)}", path=path
            )
        return tuple(
            self.project(item, arg, f"{path}[{i}]") for i, (item, arg) in enumerate(zip(items, args))
        )

    def _project_key(self, key: bytes, key_type: Any, path: str) -> Any:
        if key_type is Any or key_type is bytes:
            return key
        if key_type is str:
            return self._project_str(key, f"{path}[{key!r}]")
        if key_type is int:
            text = key.decode("ascii", errors="replace")
            digits = text[1:] if text.startswith("-") else text
            if not digits.isdigit() or not digits.isascii():
                raise ShapeMismatchError(f"key {key!r} is not a decimal integer", path=path)
            return decimal_to_int(key)
        raise SchemaError(f"{path}: dictionary keys must be str, bytes or int, not {key_type!r}")

    def _project_record(
        self, value: Any, record_type: type, path: str, fill_missing: bool = False
    ) -> Any:
        entries: Dict[bytes, Any] = self._expect(value, dict, record_type, path)
        schema = self.schemas.get(record_type)

        if self.config.unknown_keys == "error":
            unknown = [key for key in entries if key not in schema.by_wire_key]
            if unknown:
                raise ShapeMismatchError(
                    f"unknown keys for {record_type.__name__}: {unknown!r}", path=path
                )

        kwargs: Dict[str, Any] = {}
        for field in schema.fields:
            field_path = f"{path}.{field.name}"
            if field.wire_key in entries:
                kwargs[field.init_key] = self.project(
                    entries[field.wire_key],
                    field.annotation,
                    field_path,
                    field.min_value,
                    field.max_value,
                )
            elif field.required:
                if self.config.missing_fields == "error" and not fill_missing:
                    raise MissingFieldError(
                        f"required field {field.wire_name!r} is absent", path=field_path
                    )
                kwargs[field.init_key] = self._zero_for(field.annotation, field.nullable, field_path)

        for field in schema.ignored:
            if field.required:
                kwargs[field.init_key] = self._zero_for(
                    field.annotation, field.nullable, f"{path}.{field.name}"
                )

        try:
            return record_type(**kwargs)
        except (ValidationError, TypeError, ValueError) as e:
            raise ShapeMismatchError(
                f"failed to construct {record_type.__name__}: {e}", path=path
            ) from e

    def _zero_for(self, annotation: Any, nullable: bool, path: str) -> Any:
        return None if nullable else self.zero_value(annotation, path)
