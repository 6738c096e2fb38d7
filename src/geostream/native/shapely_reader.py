# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
Shapely geometry driver.

Describes shapely geometries as geometry events. Coordinates are pulled out
per line or ring with ``shapely.get_coordinates`` and streamed row by row.
"""

from typing import Optional

import numpy as np
import shapely
from shapely.geometry.base import BaseGeometry

from geostream.api.processor import GeomProcessor
from geostream.core.exceptions import GeometryError
from geostream.geojson.conversion import ToJson


def _coordinates(geom: BaseGeometry, multi_dim: bool) -> np.ndarray:
    return shapely.get_coordinates(geom, include_z=multi_dim and geom.has_z)


def _emit_coordinate(row: np.ndarray, processor: GeomProcessor, idx: int, multi_dim: bool) -> None:
    if multi_dim:
        z = float(row[2]) if row.shape[0] > 2 else None
        processor.coordinate(float(row[0]), float(row[1]), z, None, None, None, idx)
    else:
        processor.xy(float(row[0]), float(row[1]), idx)


def _line(geom: BaseGeometry, processor: GeomProcessor, tagged: bool, idx: int, multi_dim: bool) -> None:
    coords = _coordinates(geom, multi_dim)
    processor.linestring_begin(tagged, len(coords), idx)
    for i, row in enumerate(coords):
        _emit_coordinate(row, processor, i, multi_dim)
    processor.linestring_end(tagged, idx)


def _polygon(geom: BaseGeometry, processor: GeomProcessor, tagged: bool, idx: int, multi_dim: bool) -> None:
    if geom.is_empty:
        processor.polygon_begin(tagged, 0, idx)
        processor.polygon_end(tagged, idx)
        return
    rings = [geom.exterior, *geom.interiors]
    processor.polygon_begin(tagged, len(rings), idx)
    for i, ring in enumerate(rings):
        _line(ring, processor, False, i, multi_dim)
    processor.polygon_end(tagged, idx)


def process_shapely_geom(geom: BaseGeometry, processor: GeomProcessor, idx: int = 0) -> None:
    """
    Drive one shapely geometry.

    Raises:
        GeometryError: For geometry types without an event mapping
    """
    multi_dim = processor.dimensions().is_multi_dim()
    gtype = geom.geom_type

    if gtype == 'Point':
        if geom.is_empty:
            processor.empty_point(idx)
            return
        processor.point_begin(idx)
        _emit_coordinate(_coordinates(geom, multi_dim)[0], processor, 0, multi_dim)
        processor.point_end(idx)
    elif gtype == 'MultiPoint':
        coords = _coordinates(geom, multi_dim)
        processor.multipoint_begin(len(coords), idx)
        for i, row in enumerate(coords):
            _emit_coordinate(row, processor, i, multi_dim)
        processor.multipoint_end(idx)
    elif gtype in ('LineString', 'LinearRing'):
        _line(geom, processor, True, idx, multi_dim)
    elif gtype == 'MultiLineString':
        processor.multilinestring_begin(len(geom.geoms), idx)
        for i, line in enumerate(geom.geoms):
            _line(line, processor, False, i, multi_dim)
        processor.multilinestring_end(idx)
    elif gtype == 'Polygon':
        _polygon(geom, processor, True, idx, multi_dim)
    elif gtype == 'MultiPolygon':
        processor.multipolygon_begin(len(geom.geoms), idx)
        for i, polygon in enumerate(geom.geoms):
            _polygon(polygon, processor, False, i, multi_dim)
        processor.multipolygon_end(idx)
    elif gtype == 'GeometryCollection':
        processor.geometrycollection_begin(len(geom.geoms), idx)
        for i, child in enumerate(geom.geoms):
            process_shapely_geom(child, processor, i)
        processor.geometrycollection_end(idx)
    else:
        raise GeometryError(f"Unsupported shapely geometry type: {gtype!r}")


class ShapelyGeometry(ToJson):
    """
    Shapely geometry acting as a geometry source.

    Example:
        >>> from shapely.geometry import Point
        >>> ShapelyGeometry(Point(10, 20)).to_json()
        '{"type": "Point", "coordinates": [10,20]}'
    """

    def __init__(self, geom: BaseGeometry):
        self.geom = geom

    @property
    def srid(self) -> Optional[int]:
        srid = int(shapely.get_srid(self.geom))
        return srid or None

    def process_geom(self, processor: GeomProcessor) -> None:
        srid = self.srid
        if srid is not None:
            processor.srid(srid)
        process_shapely_geom(self.geom, processor, 0)
