"""
Streaming geometry event protocol.

Value types (coordinate dimensionality, typed attribute values), the three
event interfaces drivers call and sinks implement, and the grammar-checking
wrapper used while debugging drivers.
"""

from geostream.api.dimensions import CoordDimensions
from geostream.api.values import ColumnType, ColumnValue
from geostream.api.processor import (
    FeatureProcessor,
    FeatureSource,
    GeometrySource,
    GeomProcessor,
    PropertyProcessor,
)
from geostream.api.grammar import GrammarChecker

__all__ = [
    'CoordDimensions',
    'ColumnType',
    'ColumnValue',
    'GeomProcessor',
    'PropertyProcessor',
    'FeatureProcessor',
    'GeometrySource',
    'FeatureSource',
    'GrammarChecker',
]
