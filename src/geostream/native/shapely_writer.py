# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
Shapely geometry builder.

``ShapelyWriter`` is a geometry sink whose only job is to assemble the
shapely object described by the events it receives. Partially built
structures live on an explicit frame stack, one frame per open begin call,
so nesting depth is limited only by memory.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

import shapely
from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from shapely.geometry.base import BaseGeometry

from geostream.api.dimensions import CoordDimensions
from geostream.api.processor import GeomProcessor
from geostream.core.exceptions import ConversionError, geostream_error_handler
from geostream.core.mixins import LoggingMixin


@dataclass
class _Frame:
    kind: str
    items: List[Any] = field(default_factory=list)


def _build(kind: str, items: List[Any], as_ring: bool) -> Any:
    """Build the shapely object (or ring coordinate list) for a closed frame."""
    if kind == 'point':
        return Point(items[0]) if items else Point()
    if kind == 'multipoint':
        return MultiPoint(items) if items else MultiPoint()
    if kind == 'linestring':
        if as_ring:
            return items
        return LineString(items) if items else LineString()
    if kind == 'multilinestring':
        return MultiLineString(items) if items else MultiLineString()
    if kind == 'polygon':
        return Polygon(items[0], items[1:]) if items else Polygon()
    if kind == 'multipolygon':
        return MultiPolygon(items) if items else MultiPolygon()
    return GeometryCollection(items) if items else GeometryCollection()


class ShapelyWriter(GeomProcessor, LoggingMixin):
    """
    Geometry sink producing shapely geometries.

    Args:
        dims: Coordinate channels to keep. Shapely stores Z only, so M/T/TM
            values are always dropped.

    Raises:
        ConversionError: When shapely rejects the coordinates of a structure
            or a coordinate arrives outside any structure
    """

    def __init__(self, dims: Optional[CoordDimensions] = None):
        self.dims = dims if dims is not None else CoordDimensions()
        self._stack: List[_Frame] = []
        self._srid: Optional[int] = None
        self.geometries: List[BaseGeometry] = []

    @property
    def geometry(self) -> BaseGeometry:
        """The last completed top-level geometry."""
        if not self.geometries:
            raise ConversionError("No geometry was produced")
        return self.geometries[-1]

    def _open(self, kind: str) -> None:
        self._stack.append(_Frame(kind))

    def _close(self, kind: str) -> None:
        if not self._stack or self._stack[-1].kind != kind:
            raise ConversionError(f"{kind}_end without a matching {kind}_begin")
        frame = self._stack.pop()
        as_ring = bool(self._stack) and self._stack[-1].kind == 'polygon'
        with geostream_error_handler(f"building shapely {kind}", error_type=ConversionError):
            built = _build(kind, frame.items, as_ring)
        self._emit(built)

    def _emit(self, built: Any) -> None:
        if self._stack:
            self._stack[-1].items.append(built)
            return
        if self._srid is not None:
            built = shapely.set_srid(built, self._srid)
        self.geometries.append(built)

    def _add_coord(self, coord: tuple) -> None:
        if not self._stack:
            raise ConversionError("Coordinate outside of any geometry")
        self._stack[-1].items.append(coord)

    # GeomProcessor

    def dimensions(self) -> CoordDimensions:
        return self.dims

    def srid(self, srid: Optional[int]) -> None:
        self._srid = srid

    def xy(self, x: float, y: float, idx: int) -> None:
        self._add_coord((x, y))

    def coordinate(self, x, y, z, m, t, tm, idx: int) -> None:
        if z is not None and self.dims.z:
            self._add_coord((x, y, z))
        else:
            self._add_coord((x, y))

    def empty_point(self, idx: int) -> None:
        self._emit(Point())

    def point_begin(self, idx: int) -> None:
        self._open('point')

    def point_end(self, idx: int) -> None:
        self._close('point')

    def multipoint_begin(self, size: int, idx: int) -> None:
        self._open('multipoint')

    def multipoint_end(self, idx: int) -> None:
        self._close('multipoint')

    def linestring_begin(self, tagged: bool, size: int, idx: int) -> None:
        self._open('linestring')

    def linestring_end(self, tagged: bool, idx: int) -> None:
        self._close('linestring')

    def multilinestring_begin(self, size: int, idx: int) -> None:
        self._open('multilinestring')

    def multilinestring_end(self, idx: int) -> None:
        self._close('multilinestring')

    def polygon_begin(self, tagged: bool, size: int, idx: int) -> None:
        self._open('polygon')

    def polygon_end(self, tagged: bool, idx: int) -> None:
        self._close('polygon')

    def multipolygon_begin(self, size: int, idx: int) -> None:
        self._open('multipolygon')

    def multipolygon_end(self, idx: int) -> None:
        self._close('multipolygon')

    def geometrycollection_begin(self, size: int, idx: int) -> None:
        self._open('geometrycollection')

    def geometrycollection_end(self, idx: int) -> None:
        self._close('geometrycollection')
