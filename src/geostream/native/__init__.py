"""
Bridges to native geometry libraries.

- ShapelyWriter / to_shapely: build shapely geometries from events
- process_shapely_geom / ShapelyGeometry: describe shapely geometries as events
- process_geodataframe / GeoDataFrameSource: stream a GeoDataFrame as features
"""

from geostream.native.shapely_writer import ShapelyWriter
from geostream.native.conversion import ToShapely, to_shapely, to_shapely_ndim
from geostream.native.shapely_reader import ShapelyGeometry, process_shapely_geom
from geostream.native.geodataframe import GeoDataFrameSource, process_geodataframe

__all__ = [
    'ShapelyWriter',
    'ToShapely',
    'to_shapely',
    'to_shapely_ndim',
    'ShapelyGeometry',
    'process_shapely_geom',
    'GeoDataFrameSource',
    'process_geodataframe',
]
