"""GeoJSON sink, driver and text conversion."""

from geostream.geojson.writer import GeoJsonWriter
from geostream.geojson.conversion import ToJson, features_to_json, to_json
from geostream.geojson.reader import (
    GeoJson,
    process_geojson_feature,
    process_geojson_features,
    process_geojson_geom,
    read_geojson,
)

__all__ = [
    'GeoJsonWriter',
    'GeoJson',
    'ToJson',
    'to_json',
    'features_to_json',
    'read_geojson',
    'process_geojson_geom',
    'process_geojson_feature',
    'process_geojson_features',
]
