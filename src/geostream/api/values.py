# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
Typed attribute values.

``ColumnValue`` is a closed tagged union: a ``ColumnType`` kind paired with a
Python value that has been checked against the kind on construction. Sinks
dispatch on ``kind`` and must cover every member of ``ColumnType``; adding a
kind here means visiting every consumer (see ``GeoJsonWriter``).
"""

import datetime as _dt
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from geostream.core.exceptions import ValidationError, require


class ColumnType(Enum):
    """Kinds an attribute value can take."""

    BYTE = "byte"
    UBYTE = "ubyte"
    BOOL = "bool"
    SHORT = "short"
    USHORT = "ushort"
    INT = "int"
    UINT = "uint"
    LONG = "long"
    ULONG = "ulong"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    JSON = "json"
    BINARY = "binary"
    DATETIME = "datetime"


INTEGER_RANGES: Dict[ColumnType, Tuple[int, int]] = {
    ColumnType.BYTE: (-2**7, 2**7 - 1),
    ColumnType.UBYTE: (0, 2**8 - 1),
    ColumnType.SHORT: (-2**15, 2**15 - 1),
    ColumnType.USHORT: (0, 2**16 - 1),
    ColumnType.INT: (-2**31, 2**31 - 1),
    ColumnType.UINT: (0, 2**32 - 1),
    ColumnType.LONG: (-2**63, 2**63 - 1),
    ColumnType.ULONG: (0, 2**64 - 1),
}

FLOAT_KINDS = frozenset({ColumnType.FLOAT, ColumnType.DOUBLE})
TEXT_KINDS = frozenset({ColumnType.STRING, ColumnType.JSON, ColumnType.DATETIME})


@dataclass(frozen=True)
class ColumnValue:
    """
    One typed attribute value.

    Attributes:
        kind: The value's ColumnType
        value: The Python payload (int, bool, float, str or bytes)

    Raises:
        ValidationError: If ``value`` does not fit ``kind``
    """

    kind: ColumnType
    value: Any

    def __post_init__(self):
        kind, value = self.kind, self.value
        require(isinstance(kind, ColumnType), f"Unknown attribute kind: {kind!r}")
        type_name = type(value).__name__

        if kind in INTEGER_RANGES:
            require(isinstance(value, int) and not isinstance(value, bool),
                    f"{kind.name} value must be an int, got {type_name}")
            low, high = INTEGER_RANGES[kind]
            require(low <= value <= high, f"{kind.name} value {value} outside [{low}, {high}]")
        elif kind is ColumnType.BOOL:
            require(isinstance(value, bool), f"BOOL value must be a bool, got {type_name}")
        elif kind in FLOAT_KINDS:
            require(isinstance(value, (int, float)) and not isinstance(value, bool),
                    f"{kind.name} value must be a number, got {type_name}")
            object.__setattr__(self, 'value', float(value))
        elif kind in TEXT_KINDS:
            require(isinstance(value, str), f"{kind.name} value must be a str, got {type_name}")
        elif kind is ColumnType.BINARY:
            require(isinstance(value, (bytes, bytearray, memoryview)),
                    f"BINARY value must be bytes, got {type_name}")
            object.__setattr__(self, 'value', bytes(value))

    # Named constructors, one per kind

    @classmethod
    def byte(cls, v: int) -> 'ColumnValue':
        return cls(ColumnType.BYTE, v)

    @classmethod
    def ubyte(cls, v: int) -> 'ColumnValue':
        return cls(ColumnType.UBYTE, v)

    @classmethod
    def boolean(cls, v: bool) -> 'ColumnValue':
        return cls(ColumnType.BOOL, v)

    @classmethod
    def short(cls, v: int) -> 'ColumnValue':
        return cls(ColumnType.SHORT, v)

    @classmethod
    def ushort(cls, v: int) -> 'ColumnValue':
        return cls(ColumnType.USHORT, v)

    @classmethod
    def integer(cls, v: int) -> 'ColumnValue':
        return cls(ColumnType.INT, v)

    @classmethod
    def uint(cls, v: int) -> 'ColumnValue':
        return cls(ColumnType.UINT, v)

    @classmethod
    def long(cls, v: int) -> 'ColumnValue':
        return cls(ColumnType.LONG, v)

    @classmethod
    def ulong(cls, v: int) -> 'ColumnValue':
        return cls(ColumnType.ULONG, v)

    @classmethod
    def single(cls, v: float) -> 'ColumnValue':
        return cls(ColumnType.FLOAT, v)

    @classmethod
    def double(cls, v: float) -> 'ColumnValue':
        return cls(ColumnType.DOUBLE, v)

    @classmethod
    def string(cls, v: str) -> 'ColumnValue':
        return cls(ColumnType.STRING, v)

    @classmethod
    def json(cls, v: str) -> 'ColumnValue':
        return cls(ColumnType.JSON, v)

    @classmethod
    def binary(cls, v: bytes) -> 'ColumnValue':
        return cls(ColumnType.BINARY, v)

    @classmethod
    def datetime(cls, v: str) -> 'ColumnValue':
        return cls(ColumnType.DATETIME, v)

    @classmethod
    def from_python(cls, obj: Any) -> 'ColumnValue':
        """
        Infer the kind of a plain Python value.

        bool -> BOOL, int -> LONG (ULONG above the i64 range, DOUBLE outside
        both), float -> DOUBLE, str -> STRING, bytes -> BINARY, dict/list/tuple -> JSON text,
        datetime/date -> DATETIME (ISO 8601).

        Raises:
            ValidationError: If the value has no matching kind (including None)
        """
        if isinstance(obj, bool):
            return cls(ColumnType.BOOL, obj)
        if isinstance(obj, int):
            low, high = INTEGER_RANGES[ColumnType.LONG]
            if low <= obj <= high:
                return cls(ColumnType.LONG, obj)
            if high < obj <= INTEGER_RANGES[ColumnType.ULONG][1]:
                return cls(ColumnType.ULONG, obj)
            try:
                return cls(ColumnType.DOUBLE, float(obj))
            except OverflowError as e:
                raise ValidationError(f"Integer {obj} is too large for any attribute kind") from e
        if isinstance(obj, float):
            return cls(ColumnType.DOUBLE, obj)
        if isinstance(obj, str):
            return cls(ColumnType.STRING, obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls(ColumnType.BINARY, obj)
        if isinstance(obj, (dict, list, tuple)):
            return cls(ColumnType.JSON, json.dumps(obj))
        if isinstance(obj, (_dt.datetime, _dt.date)):
            return cls(ColumnType.DATETIME, obj.isoformat())
        raise ValidationError(f"Cannot infer attribute kind for {type(obj).__name__}")
