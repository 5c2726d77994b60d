"""Schema introspection for record types.

This module analyzes pydantic models and dataclasses and extracts the
information needed to map them onto bencode dictionaries: wire names,
omit/ignore tags, type annotations and integer bounds.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from ..models.fields import TAG_KEY, ParsedTag, Tag, int_range, parse_tag
from .values import is_record_type

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)


def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """Strip ``None`` from a Union annotation.

    Returns:
        (remaining annotation, whether None was part of it)
    """
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        non_none = [arg for arg in args if arg is not _NONE_TYPE]
        if len(non_none) == len(args):
            return annotation, False
        if len(non_none) == 1:
            return non_none[0], True
        return Union[tuple(non_none)], True
    return annotation, annotation is _NONE_TYPE


@dataclass(frozen=True)
class FieldDescriptor:
    """Schema information for a single record field.

    Attributes:
        name: Attribute name on the record
        wire_name: Dictionary key used on the wire
        annotation: Type annotation with ``Optional`` stripped
        nullable: Whether the field admits None
        required: Whether the field has no default
        omitempty: Skip the field on encode when its value is empty
        init_key: Keyword used when constructing the record
        min_value: Minimum accepted integer (decode only)
        max_value: Maximum accepted integer (decode only)
    """

    name: str
    wire_name: str
    annotation: Any
    nullable: bool
    required: bool
    omitempty: bool
    init_key: str
    min_value: Optional[int] = None
    max_value: Optional[int] = None

    @property
    def wire_key(self) -> bytes:
        return self.wire_name.encode("utf-8")


class RecordSchema:
    """Schema information for an entire record type.

    Example:
        >>> schema = RecordSchema.from_type(Peer)
        >>> [f.wire_name for f in schema.fields]
        ['ip', 'peer id', 'port']
    """

    def __init__(self, record_type: Type[Any]) -> None:
        if not is_record_type(record_type):
            raise SchemaError(f"{record_type!r} is not a pydantic model or dataclass")
        self.record_type = record_type
        self.fields: List[FieldDescriptor] = []
        self.ignored: List[FieldDescriptor] = []
        self._introspect()
        self.by_wire_key: Dict[bytes, FieldDescriptor] = {f.wire_key: f for f in self.fields}

    @classmethod
    def from_type(cls, record_type: Type[Any]) -> RecordSchema:
        return cls(record_type)

    @property
    def sorted_fields(self) -> bool:
        return bool(getattr(self.record_type, "bencode_sorted_fields", False))

    def _introspect(self) -> None:
        if issubclass(self.record_type, BaseModel):
            self._introspect_model()
        else:
            self._introspect_dataclass()

        seen: Dict[str, str] = {}
        for field in self.fields:
            if field.wire_name in seen:
                raise SchemaError(
                    f"{self.record_type.__name__}: fields {seen[field.wire_name]!r} and "
                    f"{field.name!r} both use wire name {field.wire_name!r}"
                )
            seen[field.wire_name] = field.name

        if self.sorted_fields:
            self.fields.sort(key=lambda f: f.wire_key)

    def _introspect_model(self) -> None:
        for name, field_info in self.record_type.model_fields.items():
            if field_info.annotation is None:
                raise SchemaError(f"Field {name} has no type annotation")
            annotation, nullable = unwrap_optional(field_info.annotation)
            tag = _model_tag(field_info)
            min_value, max_value = _bounds(field_info.metadata, _schema_extra(field_info))
            target = self.ignored if tag.ignore else self.fields
            target.append(
                FieldDescriptor(
                    name=name,
                    wire_name=tag.name or name,
                    annotation=annotation,
                    nullable=nullable,
                    required=field_info.is_required(),
                    omitempty=tag.omitempty,
                    init_key=field_info.alias or name,
                    min_value=min_value,
                    max_value=max_value,
                )
            )

    def _introspect_dataclass(self) -> None:
        try:
            hints = typing.get_type_hints(self.record_type, include_extras=True)
        except (NameError, TypeError) as e:
            raise SchemaError(f"{self.record_type.__name__}: cannot resolve annotations: {e}") from e

        for f in dataclasses.fields(self.record_type):
            if not f.init:
                continue
            hint = hints.get(f.name, f.type)
            metadata: Tuple[Any, ...] = ()
            if get_origin(hint) is typing.Annotated:
                metadata = hint.__metadata__
                hint = get_args(hint)[0]

            constraints: List[Any] = []
            extra: Dict[str, Any] = {}
            for item in metadata:
                if isinstance(item, FieldInfo):
                    constraints.extend(item.metadata)
                    extra.update(_schema_extra(item))
                else:
                    constraints.append(item)
            min_value, max_value = _bounds(constraints, extra)

            annotation, nullable = unwrap_optional(hint)
            required = (
                f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
            )
            tag = _dataclass_tag(f, metadata)
            target = self.ignored if tag.ignore else self.fields
            target.append(
                FieldDescriptor(
                    name=f.name,
                    wire_name=tag.name or f.name,
                    annotation=annotation,
                    nullable=nullable,
                    required=required,
                    omitempty=tag.omitempty,
                    init_key=f.name,
                    min_value=min_value,
                    max_value=max_value,
                )
            )


def _schema_extra(field_info: FieldInfo) -> Dict[str, Any]:
    extra = field_info.json_schema_extra
    return extra if isinstance(extra, dict) else {}


def _model_tag(field_info: FieldInfo) -> ParsedTag:
    raw = _schema_extra(field_info).get(TAG_KEY)
    if raw is not None:
        if not isinstance(raw, str):
            raise SchemaError(f"bencode tag must be a string, got {raw!r}")
        return parse_tag(raw)
    for item in field_info.metadata:
        if isinstance(item, Tag):
            return item.parse()
    return ParsedTag("", False, False)


def _dataclass_tag(f: dataclasses.Field, metadata: Tuple[Any, ...]) -> ParsedTag:  # type: ignore[type-arg]
    raw = f.metadata.get(TAG_KEY)
    if raw is not None:
        if not isinstance(raw, str):
            raise SchemaError(f"bencode tag must be a string, got {raw!r}")
        return parse_tag(raw)
    for item in metadata:
        if isinstance(item, Tag):
            return item.parse()
    return ParsedTag("", False, False)


def _bounds(
    constraints: typing.Iterable[Any], extra: Dict[str, Any]
) -> Tuple[Optional[int], Optional[int]]:
    """Collect integer bounds from pydantic/annotated-types constraints."""
    min_value: Optional[int] = None
    max_value: Optional[int] = None

    if "bits" in extra:
        min_value, max_value = int_range(int(extra["bits"]), bool(extra.get("signed", False)))

    for constraint in constraints:
        ge = getattr(constraint, "ge", None)
        gt = getattr(constraint, "gt", None)
        le = getattr(constraint, "le", None)
        lt = getattr(constraint, "lt", None)
        if isinstance(ge, int):
            min_value = ge if min_value is None else max(min_value, ge)
        if isinstance(gt, int):
            min_value = gt + 1 if min_value is None else max(min_value, gt + 1)
        if isinstance(le, int):
            max_value = le if max_value is None else min(max_value, le)
        if isinstance(lt, int):
            max_value = lt - 1 if max_value is None else min(max_value, lt - 1)

    return min_value, max_value


class SchemaCache:
    """Per-codec cache of record schemas.

    Lookups of an already-built schema are a plain dict read. Building is
    serialized by a lock so each type is introspected once even when several
    threads hit it first at the same time.
    """

    def __init__(self) -> None:
        self._schemas: Dict[type, RecordSchema] = {}
        self._lock = threading.Lock()

    def get(self, record_type: Type[Any]) -> RecordSchema:
        schema = self._schemas.get(record_type)
        if schema is not None:
            return schema

        with self._lock:
            schema = self._schemas.get(record_type)
            if schema is None:
                schema = RecordSchema.from_type(record_type)
                self._schemas[record_type] = schema
                logger.debug(
                    "built schema for %s: %s",
                    record_type.__name__,
                    [f.wire_name for f in schema.fields],
                )
        return schema

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def clear(self) -> None:
        with self._lock:
            self._schemas.clear()
