"""Core infrastructure: exceptions, registries, configuration and logging helpers."""

from .exceptions import (
    ConfigurationError,
    ConversionError,
    GeometryError,
    GeoStreamError,
    GrammarError,
    ValidationError,
    WriteError,
    geostream_error_handler,
    require,
)
from .mixins import LoggingMixin
from .registry import Registry
from .config import ConversionConfig
from .registries import R, Registries

__all__ = [
    'GeoStreamError',
    'ConfigurationError',
    'ConversionError',
    'GeometryError',
    'GrammarError',
    'ValidationError',
    'WriteError',
    'geostream_error_handler',
    'require',
    'LoggingMixin',
    'Registry',
    'ConversionConfig',
    'R',
    'Registries',
]
