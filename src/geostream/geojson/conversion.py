# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
GeoJSON text conversion.

``ToJson`` gives any class with a ``process_geom`` method ``to_json()``; the
free functions do the same for arbitrary geometry and feature sources.
"""

from typing import Optional

from geostream.api.dimensions import CoordDimensions
from geostream.api.processor import FeatureSource, GeometrySource
from geostream.geojson.writer import GeoJsonWriter


def to_json(source: GeometrySource, dims: Optional[CoordDimensions] = None) -> str:
    """Render one geometry source as GeoJSON text."""
    writer = GeoJsonWriter(dims=dims)
    source.process_geom(writer)
    return writer.getvalue_str()


def features_to_json(source: FeatureSource, dims: Optional[CoordDimensions] = None) -> str:
    """Render a feature source as a GeoJSON FeatureCollection."""
    writer = GeoJsonWriter(dims=dims)
    source.process(writer)
    return writer.getvalue_str()


class ToJson:
    """Mixin converting a geometry source to GeoJSON text."""

    def to_json(self) -> str:
        """Convert to 2D GeoJSON."""
        return to_json(self)

    def to_json_ndim(self, dims: CoordDimensions) -> str:
        """Convert to GeoJSON with the given coordinate channels."""
        return to_json(self, dims)
