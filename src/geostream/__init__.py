# src/geostream/__init__.py
from .geostream_version import __version__

from .core import ConversionConfig, GeoStreamError, R
from .api import (
    ColumnType,
    ColumnValue,
    CoordDimensions,
    FeatureProcessor,
    GeomProcessor,
    GrammarChecker,
    PropertyProcessor,
)
from .conversion import convert_features, convert_geometry, create_writer

__all__ = [
    "__version__",
    "ConversionConfig",
    "GeoStreamError",
    "R",
    "ColumnType",
    "ColumnValue",
    "CoordDimensions",
    "GeomProcessor",
    "PropertyProcessor",
    "FeatureProcessor",
    "GrammarChecker",
    "convert_features",
    "convert_geometry",
    "create_writer",
]
