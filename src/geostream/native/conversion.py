# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
Conversion to shapely geometries.

Any object that can describe itself with ``process_geom`` converts to a
shapely geometry by driving a :class:`ShapelyWriter`; the first error raised
on the way propagates to the caller.
"""

from shapely.geometry.base import BaseGeometry

from geostream.api.dimensions import CoordDimensions
from geostream.api.processor import GeometrySource
from geostream.native.shapely_writer import ShapelyWriter


def to_shapely(source: GeometrySource) -> BaseGeometry:
    """Convert to a 2D shapely geometry."""
    return to_shapely_ndim(source, CoordDimensions())


def to_shapely_ndim(source: GeometrySource, dims: CoordDimensions) -> BaseGeometry:
    """
    Convert to a shapely geometry keeping the coordinate channels in ``dims``.

    Raises:
        ConversionError: If shapely rejects the geometry or none was produced
    """
    writer = ShapelyWriter(dims)
    source.process_geom(writer)
    return writer.geometry


class ToShapely:
    """Mixin converting a geometry source to shapely."""

    def to_shapely(self) -> BaseGeometry:
        """Convert to a 2D shapely geometry."""
        return to_shapely(self)

    def to_shapely_ndim(self, dims: CoordDimensions) -> BaseGeometry:
        """Convert to a shapely geometry with the given coordinate channels."""
        return to_shapely_ndim(self, dims)
