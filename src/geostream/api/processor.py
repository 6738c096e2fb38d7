# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
Streaming geometry event interfaces.

A *driver* that holds a geometry or a feature set in its own representation
describes it to a *sink* as a sequence of method calls on these interfaces.
No intermediate geometry tree is ever built by the protocol itself.

Geometry grammar
----------------
Every ``*_begin`` call that opens a structure is matched by exactly one
``*_end`` call for the same structure, and calls nest like parentheses::

    geometry    := point | multipoint | linestring | multilinestring
                 | polygon | multipolygon | collection | empty_point
    point       := point_begin(idx) coord point_end(idx)
    multipoint  := multipoint_begin(size, idx) coord* multipoint_end(idx)
    linestring  := linestring_begin(tagged, size, idx) coord* linestring_end(tagged, idx)
    multilinestring := multilinestring_begin(size, idx)
                       linestring[tagged=False]* multilinestring_end(idx)
    polygon     := polygon_begin(tagged, size, idx)
                   linestring[tagged=False]* polygon_end(tagged, idx)
    multipolygon := multipolygon_begin(size, idx)
                    polygon[tagged=False]* multipolygon_end(idx)
    collection  := geometrycollection_begin(size, idx)
                   geometry* geometrycollection_end(idx)
    coord       := xy(x, y, idx) | coordinate(x, y, z, m, t, tm, idx)

``idx`` is the zero-based position of the element among its siblings in the
enclosing scope; sinks emit a separator before every element whose index is
not zero. ``size`` is an advisory child count (0 when unknown) that sinks
must not rely on. ``tagged`` is False for lines and rings that are direct
children of a polygon or multilinestring and for polygons inside a
multipolygon, True for standalone geometries.

Nesting depth is unbounded; no sink may assume a maximum. Pathologically
deep input is the caller's concern.

Feature grammar
---------------
::

    dataset := dataset_begin(name)
               ( feature_begin(idx)
                 [ properties_begin() property(i, name, value)* properties_end() ]
                 geometry_begin() geometry geometry_end()
                 feature_end(idx) )*
               dataset_end()

Sinks do not validate ordering; wrap a sink in
:class:`geostream.api.grammar.GrammarChecker` to check it while debugging.

Every method may raise. An exception aborts the rest of the pass and
propagates to the driver; output already written is not rolled back.
"""

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from geostream.api.dimensions import CoordDimensions

if TYPE_CHECKING:
    from geostream.api.values import ColumnValue


class GeomProcessor:
    """
    Receiver of geometry events.

    All methods are no-ops by default so that a sink only overrides the
    events it consumes.
    """

    def dimensions(self) -> CoordDimensions:
        """Coordinate channels in effect for this pass. Not changed mid-pass."""
        return CoordDimensions()

    def srid(self, srid: Optional[int]) -> None:
        """Spatial reference id of the following geometry, if the driver knows it."""

    def xy(self, x: float, y: float, idx: int) -> None:
        """2D coordinate."""

    def coordinate(
        self,
        x: float,
        y: float,
        z: Optional[float],
        m: Optional[float],
        t: Optional[float],
        tm: Optional[int],
        idx: int,
    ) -> None:
        """
        Fully qualified coordinate.

        Optional channels are None unless the driver supplied them. A sink
        ignores values for channels that are not active in ``dimensions()``
        and never invents values for active channels left as None.
        """

    def empty_point(self, idx: int) -> None:
        """Point without coordinates."""

    def point_begin(self, idx: int) -> None:
        pass

    def point_end(self, idx: int) -> None:
        pass

    def multipoint_begin(self, size: int, idx: int) -> None:
        pass

    def multipoint_end(self, idx: int) -> None:
        pass

    def linestring_begin(self, tagged: bool, size: int, idx: int) -> None:
        pass

    def linestring_end(self, tagged: bool, idx: int) -> None:
        pass

    def multilinestring_begin(self, size: int, idx: int) -> None:
        pass

    def multilinestring_end(self, idx: int) -> None:
        pass

    def polygon_begin(self, tagged: bool, size: int, idx: int) -> None:
        pass

    def polygon_end(self, tagged: bool, idx: int) -> None:
        pass

    def multipolygon_begin(self, size: int, idx: int) -> None:
        pass

    def multipolygon_end(self, idx: int) -> None:
        pass

    def geometrycollection_begin(self, size: int, idx: int) -> None:
        pass

    def geometrycollection_end(self, idx: int) -> None:
        pass


class PropertyProcessor:
    """Receiver of typed attribute values, one call per property."""

    def property(self, idx: int, name: str, value: 'ColumnValue') -> bool:
        """
        Receive one property of the current feature.

        Args:
            idx: Zero-based position within the feature's property block
            name: Property name; duplicates are not rejected
            value: Typed value

        Returns:
            True to ask the driver to stop offering properties for this feature
        """
        return False


class FeatureProcessor(GeomProcessor, PropertyProcessor):
    """Receiver of dataset and feature framing plus geometry and property events."""

    def dataset_begin(self, name: Optional[str]) -> None:
        pass

    def dataset_end(self) -> None:
        pass

    def feature_begin(self, idx: int) -> None:
        pass

    def feature_end(self, idx: int) -> None:
        pass

    def properties_begin(self) -> None:
        pass

    def properties_end(self) -> None:
        pass

    def geometry_begin(self) -> None:
        pass

    def geometry_end(self) -> None:
        pass


@runtime_checkable
class GeometrySource(Protocol):
    """Anything that can describe itself as a stream of geometry events."""

    def process_geom(self, processor: GeomProcessor) -> None:
        ...


@runtime_checkable
class FeatureSource(Protocol):
    """Anything that can describe itself as a dataset of feature events."""

    def process(self, processor: FeatureProcessor) -> None:
        ...
