# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
GeoJSON driver.

Walks parsed GeoJSON (``json`` module output) and emits the matching event
sequence to any processor. Nothing is built on the way; the parsed mapping is
the only representation held in memory.
"""

import json
import logging
from typing import Any, Mapping, Optional, Sequence, Union

from geostream.api.processor import FeatureProcessor, GeomProcessor
from geostream.api.values import ColumnValue
from geostream.core.exceptions import GeometryError, require
from geostream.geojson.conversion import ToJson
from geostream.native.conversion import ToShapely

logger = logging.getLogger(__name__)

GeoJsonInput = Union[str, bytes, bytearray, Mapping[str, Any], Any]


def load_geojson(source: GeoJsonInput) -> Mapping[str, Any]:
    """
    Parse GeoJSON input into a mapping.

    Args:
        source: JSON text, bytes, a text/binary stream, or an already parsed mapping

    Returns:
        The top-level GeoJSON object

    Raises:
        GeometryError: If the input is not valid JSON or not a JSON object
    """
    if isinstance(source, Mapping):
        return source
    try:
        if isinstance(source, (str, bytes, bytearray)):
            obj = json.loads(source)
        elif hasattr(source, 'read'):
            obj = json.load(source)
        else:
            raise GeometryError(f"Unsupported GeoJSON input: {type(source).__name__}")
    except json.JSONDecodeError as e:
        raise GeometryError(f"Invalid GeoJSON text: {e}") from e
    if not isinstance(obj, Mapping):
        raise GeometryError(f"GeoJSON must be an object, got {type(obj).__name__}")
    return obj


def _members(obj: Mapping[str, Any], key: str) -> Sequence[Any]:
    value = obj.get(key)
    if not isinstance(value, (list, tuple)):
        raise GeometryError(f"{obj.get('type')} member {key!r} must be an array")
    return value


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _coordinate(pos: Any, processor: GeomProcessor, idx: int, multi_dim: bool) -> None:
    require(isinstance(pos, (list, tuple)) and len(pos) >= 2,
            f"Position must have at least two numbers, got {pos!r}", GeometryError)
    require(all(_is_number(v) for v in pos),
            f"Position members must be numbers, got {pos!r}", GeometryError)
    if multi_dim:
        z = pos[2] if len(pos) > 2 else None
        m = pos[3] if len(pos) > 3 else None
        processor.coordinate(pos[0], pos[1], z, m, None, None, idx)
    else:
        processor.xy(pos[0], pos[1], idx)


def _line(coords: Any, processor: GeomProcessor, tagged: bool, idx: int, multi_dim: bool) -> None:
    if not isinstance(coords, (list, tuple)):
        raise GeometryError(f"Line coordinates must be an array, got {coords!r}")
    processor.linestring_begin(tagged, len(coords), idx)
    for i, pos in enumerate(coords):
        _coordinate(pos, processor, i, multi_dim)
    processor.linestring_end(tagged, idx)


def _polygon(rings: Any, processor: GeomProcessor, tagged: bool, idx: int, multi_dim: bool) -> None:
    if not isinstance(rings, (list, tuple)):
        raise GeometryError(f"Polygon rings must be an array, got {rings!r}")
    processor.polygon_begin(tagged, len(rings), idx)
    for i, ring in enumerate(rings):
        _line(ring, processor, False, i, multi_dim)
    processor.polygon_end(tagged, idx)


def process_geojson_geom(geometry: Mapping[str, Any], processor: GeomProcessor, idx: int = 0) -> None:
    """
    Drive one GeoJSON geometry object.

    Coordinates go through ``xy`` when the processor is XY only and through
    ``coordinate`` otherwise, with the third and fourth position members
    offered as Z and M.

    Raises:
        GeometryError: For unknown types or malformed members
    """
    if not isinstance(geometry, Mapping):
        raise GeometryError(f"Geometry must be an object, got {type(geometry).__name__}")
    multi_dim = processor.dimensions().is_multi_dim()
    gtype = geometry.get('type')

    if gtype == 'Point':
        coords = geometry.get('coordinates')
        if not coords:
            processor.empty_point(idx)
            return
        processor.point_begin(idx)
        _coordinate(coords, processor, 0, multi_dim)
        processor.point_end(idx)
    elif gtype == 'MultiPoint':
        coords = _members(geometry, 'coordinates')
        processor.multipoint_begin(len(coords), idx)
        for i, pos in enumerate(coords):
            _coordinate(pos, processor, i, multi_dim)
        processor.multipoint_end(idx)
    elif gtype == 'LineString':
        _line(_members(geometry, 'coordinates'), processor, True, idx, multi_dim)
    elif gtype == 'MultiLineString':
        lines = _members(geometry, 'coordinates')
        processor.multilinestring_begin(len(lines), idx)
        for i, line in enumerate(lines):
            _line(line, processor, False, i, multi_dim)
        processor.multilinestring_end(idx)
    elif gtype == 'Polygon':
        _polygon(_members(geometry, 'coordinates'), processor, True, idx, multi_dim)
    elif gtype == 'MultiPolygon':
        polygons = _members(geometry, 'coordinates')
        processor.multipolygon_begin(len(polygons), idx)
        for i, rings in enumerate(polygons):
            _polygon(rings, processor, False, i, multi_dim)
        processor.multipolygon_end(idx)
    elif gtype == 'GeometryCollection':
        geometries = _members(geometry, 'geometries')
        processor.geometrycollection_begin(len(geometries), idx)
        for i, child in enumerate(geometries):
            process_geojson_geom(child, processor, i)
        processor.geometrycollection_end(idx)
    else:
        raise GeometryError(f"Unknown GeoJSON geometry type: {gtype!r}")


def process_properties(properties: Mapping[str, Any], processor: FeatureProcessor) -> int:
    """
    Emit one feature's properties. ``null`` values are skipped.

    Returns:
        Number of properties offered to the processor
    """
    i = 0
    for name, value in properties.items():
        if value is None:
            continue
        stop = processor.property(i, name, ColumnValue.from_python(value))
        i += 1
        if stop:
            break
    return i


def process_geojson_feature(feature: Mapping[str, Any], processor: FeatureProcessor, idx: int) -> None:
    """Drive one GeoJSON Feature inside an open dataset."""
    if not isinstance(feature, Mapping) or feature.get('type') != 'Feature':
        raise GeometryError(f"Expected a Feature at index {idx}")
    processor.feature_begin(idx)
    properties = feature.get('properties')
    if properties is not None:
        if not isinstance(properties, Mapping):
            raise GeometryError(f"Feature {idx} properties must be an object")
        processor.properties_begin()
        process_properties(properties, processor)
        processor.properties_end()
    processor.geometry_begin()
    geometry = feature.get('geometry')
    if geometry is not None:
        process_geojson_geom(geometry, processor, 0)
    processor.geometry_end()
    processor.feature_end(idx)


def process_geojson_features(collection: Mapping[str, Any], processor: FeatureProcessor) -> None:
    """Drive a FeatureCollection as one dataset."""
    features = _members(collection, 'features')
    name = collection.get('name')
    processor.dataset_begin(name if isinstance(name, str) else None)
    for idx, feature in enumerate(features):
        process_geojson_feature(feature, processor, idx)
    processor.dataset_end()
    logger.debug("Processed FeatureCollection %r with %d features", name, len(features))


def read_geojson(source: GeoJsonInput, processor: GeomProcessor) -> None:
    """
    Read GeoJSON and drive ``processor`` with it.

    A FeatureCollection becomes a dataset, a single Feature a one-feature
    dataset, and a bare geometry plain geometry events.

    Raises:
        GeometryError: If the input is malformed
    """
    obj = load_geojson(source)
    gtype = obj.get('type')
    if gtype == 'FeatureCollection':
        process_geojson_features(obj, processor)
    elif gtype == 'Feature':
        processor.dataset_begin(None)
        process_geojson_feature(obj, processor, 0)
        processor.dataset_end()
    else:
        process_geojson_geom(obj, processor, 0)


class GeoJson(ToJson, ToShapely):
    """
    GeoJSON text or mapping acting as a geometry and feature source.

    Example:
        >>> GeoJson('{"type": "Point", "coordinates": [10, 20]}').to_json()
        '{"type": "Point", "coordinates": [10,20]}'
    """

    def __init__(self, source: GeoJsonInput):
        self._obj = load_geojson(source)

    def process_geom(self, processor: GeomProcessor) -> None:
        obj = self._obj
        gtype = obj.get('type')
        if gtype == 'FeatureCollection':
            raise GeometryError("A FeatureCollection is not a single geometry; use process()")
        if gtype == 'Feature':
            obj = obj.get('geometry')
            if obj is None:
                raise GeometryError("Feature has no geometry")
        process_geojson_geom(obj, processor, 0)

    def process(self, processor: FeatureProcessor) -> None:
        gtype = self._obj.get('type')
        if gtype == 'FeatureCollection':
            process_geojson_features(self._obj, processor)
            return
        feature = self._obj if gtype == 'Feature' else {'type': 'Feature', 'geometry': self._obj}
        processor.dataset_begin(None)
        process_geojson_feature(feature, processor, 0)
        processor.dataset_end()
