# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
Conversion passes.

Ties a source, a registered sink and a :class:`ConversionConfig` together:
the sink is looked up by format name in ``R.writers``, built with the
configured coordinate channels, optionally wrapped in a
:class:`GrammarChecker`, and driven once by the source. Each pass first sets
the level of the ``geostream`` logger to ``config.log_level``.
"""

import logging
from typing import Any, BinaryIO, Optional

from geostream.api.dimensions import CoordDimensions
from geostream.api.grammar import GrammarChecker
from geostream.api.processor import FeatureProcessor, FeatureSource, GeometrySource, GeomProcessor
from geostream.core.config import ConversionConfig
from geostream.core.exceptions import ConfigurationError
from geostream.core.registries import R

logger = logging.getLogger(__name__)


def create_writer(
    fmt: str,
    out: Optional[BinaryIO] = None,
    dims: Optional[CoordDimensions] = None,
) -> GeomProcessor:
    """
    Instantiate the sink registered for ``fmt``.

    Args:
        fmt: Registered format name (``"geojson"``, ``"shapely"``, ...)
        out: Output stream for stream-based sinks
        dims: Coordinate channels for the pass

    Raises:
        ConfigurationError: If no sink is registered under ``fmt``, or an
            output stream is given to a sink that does not write to one
    """
    if fmt not in R.writers:
        raise ConfigurationError(
            f"Unknown output format {fmt!r}. Available: {R.writers.keys()}"
        )
    writer_cls = R.writers[fmt]
    if R.writers.meta(fmt).get('stream'):
        return writer_cls(out, dims=dims)
    if out is not None:
        raise ConfigurationError(f"Output format {fmt!r} does not write to a stream")
    return writer_cls(dims=dims)


def _apply_log_level(config: ConversionConfig) -> None:
    logging.getLogger('geostream').setLevel(config.log_level)


def _wrap(writer: GeomProcessor, config: ConversionConfig) -> GeomProcessor:
    return GrammarChecker(writer) if config.check_grammar else writer


def convert_features(
    source: FeatureSource,
    fmt: str = 'geojson',
    out: Optional[BinaryIO] = None,
    config: Optional[ConversionConfig] = None,
) -> FeatureProcessor:
    """
    Run one dataset pass from ``source`` into a feature sink.

    Returns:
        The sink, so that callers can read its buffer or result

    Raises:
        ConfigurationError: If ``fmt`` names a geometry-only sink
        GrammarError: If grammar checking is on and the source misbehaves
    """
    config = config or ConversionConfig()
    _apply_log_level(config)
    if not R.writers.meta(fmt).get('features'):
        raise ConfigurationError(
            f"Output format {fmt!r} does not accept features. Available: {R.feature_formats()}"
        )
    writer = create_writer(fmt, out, config.dimensions())
    processor = _wrap(writer, config)
    source.process(processor)
    if isinstance(processor, GrammarChecker):
        processor.finish()
    logger.debug("Converted features to %s with dims %s", fmt, config.dimensions())
    return writer


def convert_geometry(
    source: GeometrySource,
    fmt: str = 'geojson',
    config: Optional[ConversionConfig] = None,
) -> Any:
    """
    Run one geometry pass from ``source`` and return the sink's result.

    Returns:
        GeoJSON text for ``"geojson"``, a shapely geometry for ``"shapely"``,
        otherwise the sink itself
    """
    config = config or ConversionConfig()
    _apply_log_level(config)
    writer = create_writer(fmt, dims=config.dimensions())
    processor = _wrap(writer, config)
    source.process_geom(processor)
    if isinstance(processor, GrammarChecker):
        processor.finish()
    logger.debug("Converted geometry to %s with dims %s", fmt, config.dimensions())
    result = R.writers.meta(fmt).get('result')
    if not result:
        return writer
    value = getattr(writer, result)
    return value() if callable(value) else value
