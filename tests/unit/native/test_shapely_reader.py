"""Tests for the shapely driver."""

import json
from types import SimpleNamespace

import pytest
import shapely
from shapely.geometry import LinearRing, LineString, Point, Polygon, shape

from fixtures.geometry_fixtures import (
    RecordingProcessor,
    sample_nested_collection,
    sample_nzl_multipolygon,
    sample_polygon_with_hole,
)
from geostream.api.dimensions import CoordDimensions
from geostream.core.exceptions import GeometryError
from geostream.native import ShapelyGeometry, process_shapely_geom, to_shapely


class TestEvents:

    def test_polygon(self, recorder):
        process_shapely_geom(Polygon([(0, 0), (1, 0), (1, 1)]), recorder)
        assert recorder.events == [
            ('polygon_begin', True, 1, 0),
            ('linestring_begin', False, 4, 0),
            ('xy', 0.0, 0.0, 0),
            ('xy', 1.0, 0.0, 1),
            ('xy', 1.0, 1.0, 2),
            ('xy', 0.0, 0.0, 3),
            ('linestring_end', False, 0),
            ('polygon_end', True, 0),
        ]

    def test_multi_dim_uses_coordinate(self):
        recorder = RecordingProcessor(dims=CoordDimensions.xyz())
        process_shapely_geom(Point(1, 2, 3), recorder)
        assert recorder.events[1] == ('coordinate', 1.0, 2.0, 3.0, None, None, None, 0)

    def test_2d_geometry_with_z_dims(self):
        recorder = RecordingProcessor(dims=CoordDimensions.xyz())
        process_shapely_geom(Point(1, 2), recorder)
        assert recorder.events[1] == ('coordinate', 1.0, 2.0, None, None, None, None, 0)

    def test_empty_geometries(self, recorder):
        process_shapely_geom(Point(), recorder)
        process_shapely_geom(Polygon(), recorder, 1)
        assert recorder.events == [
            ('empty_point', 0),
            ('polygon_begin', True, 0, 1),
            ('polygon_end', True, 1),
        ]

    def test_srid_announced(self, recorder):
        ShapelyGeometry(shapely.set_srid(Point(1, 2), 4326)).process_geom(recorder)
        assert recorder.events[0] == ('srid', 4326)

    def test_no_srid_no_event(self, recorder):
        ShapelyGeometry(Point(1, 2)).process_geom(recorder)
        assert 'srid' not in recorder.names()

    def test_unsupported_type(self, recorder):
        with pytest.raises(GeometryError, match="Unsupported shapely geometry type"):
            process_shapely_geom(SimpleNamespace(geom_type="CircularString"), recorder)


class TestConversions:

    def test_point_to_json(self):
        assert ShapelyGeometry(Point(10, 20)).to_json() == '{"type": "Point", "coordinates": [10,20]}'

    def test_linestring_z(self):
        geom = ShapelyGeometry(LineString([(1, 1, 10), (2, 2, 20)]))
        assert geom.to_json_ndim(CoordDimensions.xyz()) == (
            '{"type": "LineString", "coordinates": [[1,1,10],[2,2,20]]}'
        )
        assert geom.to_json() == '{"type": "LineString", "coordinates": [[1,1],[2,2]]}'

    def test_linear_ring_is_a_linestring(self):
        ring = LinearRing([(0, 0), (1, 0), (1, 1)])
        assert json.loads(ShapelyGeometry(ring).to_json()) == {
            "type": "LineString",
            "coordinates": [[0, 0], [1, 0], [1, 1], [0, 0]],
        }

    @pytest.mark.parametrize("geometry", [
        sample_polygon_with_hole(),
        sample_nzl_multipolygon(),
        sample_nested_collection(),
    ], ids=["polygon", "nzl", "collection"])
    def test_geojson_roundtrip(self, geometry):
        assert json.loads(ShapelyGeometry(shape(geometry)).to_json()) == geometry

    @pytest.mark.parametrize("geometry", [
        sample_polygon_with_hole(),
        sample_nzl_multipolygon(),
        sample_nested_collection(),
    ], ids=["polygon", "nzl", "collection"])
    def test_shapely_roundtrip(self, geometry):
        geom = shape(geometry)
        assert to_shapely(ShapelyGeometry(geom)) == geom

    def test_srid_roundtrip(self):
        geom = shapely.set_srid(Point(1, 2), 3857)
        assert shapely.get_srid(to_shapely(ShapelyGeometry(geom))) == 3857
        assert ShapelyGeometry(geom).srid == 3857
        assert ShapelyGeometry(Point(1, 2)).srid is None
