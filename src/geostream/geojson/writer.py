# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
GeoJSON writer.

Renders geometry, property and feature events straight to a byte stream.
Nothing is buffered beyond what the output stream itself keeps, so working
memory grows with nesting depth, not with geometry size.

Known limitations, kept on purpose:
    - Only ``"`` is escaped in names and string values; backslashes and
      control characters are written as-is.
    - JSON and binary attribute values are not rendered; the property is
      dropped from the output.
    - M, T and TM coordinate channels are never rendered.
    - NaN and infinite numbers are written as `nan`, `inf` and `-inf`,
      which is not valid JSON.
"""

import io
import math
from typing import BinaryIO, Callable, Dict, Optional

import numpy as np

from geostream.api.dimensions import CoordDimensions
from geostream.api.processor import FeatureProcessor
from geostream.api.values import ColumnType, ColumnValue
from geostream.core.exceptions import WriteError
from geostream.core.mixins import LoggingMixin

# Integral floats below this magnitude are written without a fraction
_INTEGRAL_LIMIT = 1e16


def format_number(v: float) -> str:
    """Shortest text for a coordinate or floating point value (``10.0`` -> ``10``)."""
    v = float(v)
    if math.isfinite(v) and v.is_integer() and abs(v) < _INTEGRAL_LIMIT:
        return str(int(v))
    return repr(v)


def format_single(v: float) -> str:
    """Like :func:`format_number`, with the shortest text that round-trips as f32."""
    v = float(v)
    if math.isfinite(v) and v.is_integer() and abs(v) < _INTEGRAL_LIMIT:
        return str(int(v))
    return str(np.float32(v))


def escape_quotes(s: str) -> str:
    return s.replace('"', '\\"')


def _render_int(v: ColumnValue) -> Optional[str]:
    return str(v.value)


def _render_bool(v: ColumnValue) -> Optional[str]:
    return "true" if v.value else "false"


def _render_single(v: ColumnValue) -> Optional[str]:
    return format_single(v.value)


def _render_double(v: ColumnValue) -> Optional[str]:
    return format_number(v.value)


def _render_text(v: ColumnValue) -> Optional[str]:
    return f'"{escape_quotes(v.value)}"'


def _render_nothing(v: ColumnValue) -> Optional[str]:
    return None


# One renderer per kind; None means the property is dropped
_RENDERERS: Dict[ColumnType, Callable[[ColumnValue], Optional[str]]] = {
    ColumnType.BYTE: _render_int,
    ColumnType.UBYTE: _render_int,
    ColumnType.BOOL: _render_bool,
    ColumnType.SHORT: _render_int,
    ColumnType.USHORT: _render_int,
    ColumnType.INT: _render_int,
    ColumnType.UINT: _render_int,
    ColumnType.LONG: _render_int,
    ColumnType.ULONG: _render_int,
    ColumnType.FLOAT: _render_single,
    ColumnType.DOUBLE: _render_double,
    ColumnType.STRING: _render_text,
    ColumnType.DATETIME: _render_text,
    ColumnType.JSON: _render_nothing,
    ColumnType.BINARY: _render_nothing,
}

_missing = set(ColumnType) - set(_RENDERERS)
if _missing:
    raise TypeError(f"GeoJsonWriter has no renderer for {sorted(k.name for k in _missing)}")


class GeoJsonWriter(FeatureProcessor, LoggingMixin):
    """
    GeoJSON writer.

    Args:
        out: Binary stream receiving the output. When omitted the writer owns
            an in-memory buffer readable with :meth:`getvalue`.
        dims: Coordinate channels to render (default XY). Only Z is ever
            written.

    Raises:
        WriteError: From any event whose write the stream rejects
    """

    RENDERABLE_KINDS = frozenset(k for k, r in _RENDERERS.items() if r is not _render_nothing)

    def __init__(self, out: Optional[BinaryIO] = None, dims: Optional[CoordDimensions] = None):
        self._owns_buffer = out is None
        self.out = io.BytesIO() if out is None else out
        self.dims = dims if dims is not None else CoordDimensions()
        # Set once a geometry subtree starts inside the current geometry block
        self._geometry_written = True
        # Number of properties actually rendered in the current block
        self._rendered_properties = 0

    def _write(self, text: str) -> None:
        try:
            self.out.write(text.encode('utf-8'))
        except OSError as e:
            raise WriteError(f"Failed to write GeoJSON output: {e}") from e

    def _comma(self, idx: int) -> None:
        if idx > 0:
            self._write(",")

    def _start_geometry(self, idx: int) -> None:
        self._geometry_written = True
        self._comma(idx)

    def getvalue(self) -> bytes:
        """Return everything written so far to the owned buffer."""
        if not self._owns_buffer:
            raise WriteError("getvalue() is only available when the writer owns its buffer")
        return self.out.getvalue()

    def getvalue_str(self) -> str:
        return self.getvalue().decode('utf-8')

    # FeatureProcessor

    def dataset_begin(self, name: Optional[str]) -> None:
        self.logger.debug("Writing FeatureCollection %r", name)
        self._write('{\n"type": "FeatureCollection"')
        if name is not None:
            self._write(f',\n"name": "{escape_quotes(name)}"')
        self._write(',\n"features": [')

    def dataset_end(self) -> None:
        self._write("]}")

    def feature_begin(self, idx: int) -> None:
        if idx > 0:
            self._write(",\n")
        self._write('{"type": "Feature"')

    def feature_end(self, idx: int) -> None:
        self._write("}")

    def properties_begin(self) -> None:
        self._rendered_properties = 0
        self._write(', "properties": {')

    def properties_end(self) -> None:
        self._write("}")

    def geometry_begin(self) -> None:
        self._geometry_written = False
        self._write(', "geometry": ')

    def geometry_end(self) -> None:
        if not self._geometry_written:
            self._write("null")
        self._geometry_written = True

    # PropertyProcessor

    def property(self, idx: int, name: str, value: ColumnValue) -> bool:
        rendered = _RENDERERS[value.kind](value)
        if rendered is None:
            return False
        # Separators follow rendered properties so a dropped blob leaves no stray comma
        if self._rendered_properties > 0:
            self._write(", ")
        self._write(f'"{escape_quotes(name)}": {rendered}')
        self._rendered_properties += 1
        return False

    # GeomProcessor

    def dimensions(self) -> CoordDimensions:
        return self.dims

    def xy(self, x: float, y: float, idx: int) -> None:
        self._comma(idx)
        self._write(f"[{format_number(x)},{format_number(y)}]")

    def coordinate(self, x, y, z, m, t, tm, idx: int) -> None:
        self._comma(idx)
        if z is not None and self.dims.z:
            self._write(f"[{format_number(x)},{format_number(y)},{format_number(z)}]")
        else:
            self._write(f"[{format_number(x)},{format_number(y)}]")

    def empty_point(self, idx: int) -> None:
        self._start_geometry(idx)
        self._write('{"type": "Point", "coordinates": []}')

    def point_begin(self, idx: int) -> None:
        self._start_geometry(idx)
        self._write('{"type": "Point", "coordinates": ')

    def point_end(self, idx: int) -> None:
        self._write("}")

    def multipoint_begin(self, size: int, idx: int) -> None:
        self._start_geometry(idx)
        self._write('{"type": "MultiPoint", "coordinates": [')

    def multipoint_end(self, idx: int) -> None:
        self._write("]}")

    def linestring_begin(self, tagged: bool, size: int, idx: int) -> None:
        self._start_geometry(idx)
        if tagged:
            self._write('{"type": "LineString", "coordinates": [')
        else:
            self._write("[")

    def linestring_end(self, tagged: bool, idx: int) -> None:
        self._write("]}" if tagged else "]")

    def multilinestring_begin(self, size: int, idx: int) -> None:
        self._start_geometry(idx)
        self._write('{"type": "MultiLineString", "coordinates": [')

    def multilinestring_end(self, idx: int) -> None:
        self._write("]}")

    def polygon_begin(self, tagged: bool, size: int, idx: int) -> None:
        self._start_geometry(idx)
        if tagged:
            self._write('{"type": "Polygon", "coordinates": [')
        else:
            self._write("[")

    def polygon_end(self, tagged: bool, idx: int) -> None:
        self._write("]}" if tagged else "]")

    def multipolygon_begin(self, size: int, idx: int) -> None:
        self._start_geometry(idx)
        self._write('{"type": "MultiPolygon", "coordinates": [')

    def multipolygon_end(self, idx: int) -> None:
        self._write("]}")

    def geometrycollection_begin(self, size: int, idx: int) -> None:
        self._start_geometry(idx)
        self._write('{"type": "GeometryCollection", "geometries": [')

    def geometrycollection_end(self, idx: int) -> None:
        self._write("]}")
