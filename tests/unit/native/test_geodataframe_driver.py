"""Tests for the GeoDataFrame feature driver."""

import datetime
import json
import logging
from decimal import Decimal

import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import Point, Polygon

from fixtures.geometry_fixtures import RecordingProcessor
from geostream.api.values import ColumnType, ColumnValue
from geostream.geojson import features_to_json
from geostream.native import GeoDataFrameSource, process_geodataframe
from geostream.native.geodataframe import column_kind, to_column_value


@pytest.fixture
def stations():
    return gpd.GeoDataFrame(
        {
            "name": ["Wellington", "Cape Town"],
            "count": np.array([1, 2], dtype="int32"),
            "ratio": np.array([0.5, np.nan]),
            "flag": [True, False],
        },
        geometry=[Point(174.8, -41.3), None],
    )


class TestColumnKinds:

    @pytest.mark.parametrize("dtype, kind", [
        ("int8", ColumnType.BYTE),
        ("uint8", ColumnType.UBYTE),
        ("bool", ColumnType.BOOL),
        ("int16", ColumnType.SHORT),
        ("uint16", ColumnType.USHORT),
        ("int32", ColumnType.INT),
        ("uint32", ColumnType.UINT),
        ("int64", ColumnType.LONG),
        ("uint64", ColumnType.ULONG),
        ("float32", ColumnType.FLOAT),
        ("float64", ColumnType.DOUBLE),
        ("Int64", ColumnType.LONG),
        ("boolean", ColumnType.BOOL),
    ])
    def test_numeric_dtypes(self, dtype, kind):
        assert column_kind(pd.Series([1], dtype=dtype)) is kind

    def test_datetime(self):
        assert column_kind(pd.Series(pd.to_datetime(["2024-01-01"]))) is ColumnType.DATETIME

    def test_object_inspected_per_value(self):
        assert column_kind(pd.Series([{"a": 1}], dtype=object)) is None


class TestCellValues:

    def test_missing_cells_skipped(self):
        assert to_column_value(ColumnType.DOUBLE, np.nan) is None
        assert to_column_value(ColumnType.LONG, pd.NA) is None
        assert to_column_value(None, None) is None

    def test_typed_cells(self):
        assert to_column_value(ColumnType.INT, np.int32(3)) == ColumnValue.integer(3)
        assert to_column_value(ColumnType.FLOAT, np.float32(1.5)) == ColumnValue.single(1.5)
        assert to_column_value(ColumnType.BOOL, np.bool_(True)) == ColumnValue.boolean(True)
        assert to_column_value(ColumnType.DATETIME, pd.Timestamp("2024-01-02")) == (
            ColumnValue.datetime("2024-01-02T00:00:00")
        )

    def test_untyped_cells(self):
        assert to_column_value(None, "x") == ColumnValue.string("x")
        assert to_column_value(None, np.int64(4)) == ColumnValue.long(4)

    def test_durations_as_iso_text(self):
        assert to_column_value(None, pd.Timedelta(seconds=1)) == ColumnValue.string("P0DT0H0M1S")
        assert to_column_value(None, datetime.timedelta(days=2)) == ColumnValue.string("P2DT0H0M0S")
        assert to_column_value(None, np.timedelta64(90, "s")) == ColumnValue.string("P0DT0H1M30S")

    def test_geometry_cells_as_wkt(self):
        assert to_column_value(None, Point(1, 2)) == ColumnValue.string("POINT (1 2)")

    def test_unsupported_cells_skipped(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="geostream.native.geodataframe"):
            assert to_column_value(None, Decimal("1.5")) is None
        assert "Skipping cell of type Decimal" in caplog.text


class TestDriver:

    def test_events(self, stations):
        recorder = RecordingProcessor()
        process_geodataframe(stations, recorder, name="stations")
        properties = [e for e in recorder.events if e[0] == 'property']
        assert properties == [
            ('property', 0, 'name', ColumnValue.string("Wellington")),
            ('property', 1, 'count', ColumnValue.integer(1)),
            ('property', 2, 'ratio', ColumnValue.double(0.5)),
            ('property', 3, 'flag', ColumnValue.boolean(True)),
            ('property', 0, 'name', ColumnValue.string("Cape Town")),
            ('property', 1, 'count', ColumnValue.integer(2)),
            ('property', 2, 'flag', ColumnValue.boolean(False)),
        ]
        assert recorder.events[0] == ('dataset_begin', 'stations')
        assert recorder.events[-1] == ('dataset_end',)

    def test_mixed_object_columns(self):
        gdf = gpd.GeoDataFrame(
            {
                "wait": pd.to_timedelta([1], unit="s"),
                "price": [Decimal("9.99")],
                "centroid": gpd.GeoSeries([Point(0.5, 0.5)]),
                "code": ["A"],
            },
            geometry=[Polygon([(0, 0), (1, 0), (1, 1)])],
        )
        recorder = RecordingProcessor()
        process_geodataframe(gdf, recorder)
        assert [e for e in recorder.events if e[0] == 'property'] == [
            ('property', 0, 'wait', ColumnValue.string("P0DT0H0M1S")),
            ('property', 1, 'centroid', ColumnValue.string("POINT (0.5 0.5)")),
            ('property', 2, 'code', ColumnValue.string("A")),
        ]

    def test_missing_geometry_gives_empty_block(self, stations):
        recorder = RecordingProcessor()
        process_geodataframe(stations, recorder)
        names = recorder.names()
        last_begin = len(names) - 1 - names[::-1].index('geometry_begin')
        assert names[last_begin + 1] == 'geometry_end'

    def test_stop_signal(self, stations):
        recorder = RecordingProcessor(stop_after=2)
        process_geodataframe(stations, recorder)
        assert len([e for e in recorder.events if e[0] == 'property']) == 4

    def test_to_geojson(self, stations):
        parsed = json.loads(features_to_json(GeoDataFrameSource(stations, name="stations")))
        assert parsed == {
            "type": "FeatureCollection",
            "name": "stations",
            "features": [
                {
                    "type": "Feature",
                    "properties": {"name": "Wellington", "count": 1, "ratio": 0.5, "flag": True},
                    "geometry": {"type": "Point", "coordinates": [174.8, -41.3]},
                },
                {
                    "type": "Feature",
                    "properties": {"name": "Cape Town", "count": 2, "flag": False},
                    "geometry": None,
                },
            ],
        }

    def test_geometry_only_frame(self):
        gdf = gpd.GeoDataFrame(geometry=[Polygon([(0, 0), (1, 0), (1, 1)])])
        parsed = json.loads(features_to_json(GeoDataFrameSource(gdf)))
        assert parsed["features"][0] == {
            "type": "Feature",
            "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
        }
