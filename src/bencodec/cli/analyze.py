"""Record analysis CLI command."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from pathlib import Path
from typing import Any

from ..codec.core import Codec
from ..codec.schema import FieldDescriptor
from ..codec.values import is_record_type
from ..exceptions import BencodeError
from ..models.base import BaseRecord


def analyze_file(file_path: Path) -> None:
    """Analyze all record classes (pydantic models and dataclasses) in a Python file.

    Args:
        file_path: Path to Python file containing record definitions
    """
    spec = importlib.util.spec_from_file_location("user_module", file_path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["user_module"] = module
    spec.loader.exec_module(module)

    record_classes = []
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        # Only include classes defined in this file (not imported)
        if obj is not BaseRecord and is_record_type(obj) and obj.__module__ == "user_module":
            record_classes.append(obj)

    if not record_classes:
        print(f"No record classes found in {file_path}")
        return

    print("|" * 7, "bencodec: Typed Bencode Codec", "|" * 7)
    print(f"{len(record_classes)} record{'s' if len(record_classes) != 1 else ''} loaded.")
    print()

    codec = Codec()
    for record_class in record_classes:
        analyze_record_class(record_class, codec)


def _describe_type(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation).replace("typing.", "")


def _field_line(index: int, field: FieldDescriptor) -> str:
    flags = []
    if field.omitempty:
        flags.append("omitempty")
    if field.nullable:
        flags.append("optional")
    if not field.required:
        flags.append("default")
    if field.min_value is not None or field.max_value is not None:
        flags.append(f"[{field.min_value}..{field.max_value}]")

    left = f"{index}. {field.name}"
    if field.wire_name != field.name:
        left += f" -> {field.wire_name!r}"
    dots = "." * max(1, 40 - len(left))
    suffix = f" ({', '.join(flags)})" if flags else ""
    return f"        {left}{dots}{_describe_type(field.annotation)}{suffix}"


def analyze_record_class(record_class: type, codec: Codec) -> None:
    """Analyze a single record class and print its field descriptors.

    Args:
        record_class: Record class to analyze
        codec: Codec whose schema cache is used
    """
    print(f"{'=' * 19} {record_class.__name__} {'=' * 19}")

    try:
        schema = codec.schema_for(record_class)
    except BencodeError as e:
        print(f"Invalid schema: {e}")
        print()
        return

    order = "sorted by wire name" if schema.sorted_fields else "declaration order"
    print(f"Field order: {order}")
    max_bytes = getattr(record_class, "bencode_max_bytes", None)
    if max_bytes is not None:
        print(f"Allowed maximum size of record: {max_bytes} bytes")

    try:
        empty_size = len(codec.encode(codec.zero_value(record_class)))
        print(f"Encoded size with zero values: {empty_size} bytes")
    except BencodeError:
        pass
    print()

    print(f"{'-' * 27} Fields {'-' * 27}")
    for i, field in enumerate(schema.fields, 1):
        print(_field_line(i, field))
    if schema.ignored:
        print(f"Ignored: {', '.join(field.name for field in schema.ignored)}")
    print()
