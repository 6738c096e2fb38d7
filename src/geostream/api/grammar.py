# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
Event grammar checking.

``GrammarChecker`` sits between a driver and a sink, validates every event
against the grammar documented in :mod:`geostream.api.processor` and
forwards it unchanged. It is a debugging aid for driver authors; sinks never
validate ordering themselves.
"""

from dataclasses import dataclass
from typing import List, Optional

from geostream.api.dimensions import CoordDimensions
from geostream.api.processor import FeatureProcessor, GeomProcessor
from geostream.core.exceptions import GrammarError
from geostream.core.mixins import LoggingMixin

GEOMETRY_KINDS = frozenset({
    'point', 'empty_point', 'multipoint', 'linestring', 'multilinestring',
    'polygon', 'multipolygon', 'geometrycollection',
})

# Child kinds admitted by each open structure
ALLOWED_CHILDREN = {
    'root': GEOMETRY_KINDS,
    'geometrycollection': GEOMETRY_KINDS,
    'point': frozenset({'coordinate'}),
    'multipoint': frozenset({'coordinate'}),
    'linestring': frozenset({'coordinate'}),
    'multilinestring': frozenset({'linestring'}),
    'polygon': frozenset({'linestring'}),
    'multipolygon': frozenset({'polygon'}),
}

# Parents whose line/polygon children are untagged
UNTAGGED_PARENTS = frozenset({'multilinestring', 'polygon', 'multipolygon'})


@dataclass
class _Frame:
    kind: str
    idx: int
    tagged: Optional[bool] = None
    children: int = 0


class GrammarChecker(FeatureProcessor, LoggingMixin):
    """
    Validating pass-through processor.

    Args:
        inner: Sink receiving the forwarded events. A plain GeomProcessor is
            accepted when only geometry events will be driven.

    Raises:
        GrammarError: On the first event that violates the grammar. The
            offending event is not forwarded.
    """

    def __init__(self, inner: GeomProcessor):
        self.inner = inner
        self._stack: List[_Frame] = []
        # initial -> dataset -> feature -> properties -> feature -> geometry -> feature -> dataset ... -> done
        # or initial -> geometry_only for a bare geometry stream
        self._state = 'initial'
        self._next_feature = 0
        self._feature_idx: Optional[int] = None
        self._next_property = 0
        self._properties_stopped = False
        self._properties_seen = False
        self._geometry_seen = False
        self.events = 0

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fail(self, message: str) -> None:
        raise GrammarError(f"event #{self.events}: {message}")

    def _enter_geometry_context(self, event: str) -> None:
        self.events += 1
        if self._state == 'initial':
            self._state = 'geometry_only'
            self._stack.append(_Frame('root', 0))
        elif self._state not in ('geometry', 'geometry_only'):
            self._fail(f"{event} outside a geometry block (state {self._state!r})")

    def _admit(self, kind: str, idx: int, tagged: Optional[bool] = None) -> None:
        parent = self._stack[-1]
        if kind not in ALLOWED_CHILDREN[parent.kind]:
            self._fail(f"{kind} is not allowed inside {parent.kind}")
        if parent.kind == 'root' and self._state == 'geometry' and parent.children >= 1:
            self._fail("a geometry block holds a single geometry")
        if idx != parent.children:
            self._fail(f"{kind} index {idx} in {parent.kind}, expected {parent.children}")
        if tagged is not None:
            expected = parent.kind not in UNTAGGED_PARENTS
            if tagged != expected:
                self._fail(f"{kind} inside {parent.kind} must have tagged={expected}")
        if parent.kind == 'point' and parent.children >= 1:
            self._fail("a point holds exactly one coordinate")
        parent.children += 1

    def _open(self, kind: str, idx: int, tagged: Optional[bool] = None) -> None:
        self._enter_geometry_context(f"{kind}_begin")
        self._admit(kind, idx, tagged)
        self._stack.append(_Frame(kind, idx, tagged))

    def _close(self, kind: str, idx: int, tagged: Optional[bool] = None) -> None:
        self._enter_geometry_context(f"{kind}_end")
        frame = self._stack[-1]
        if frame.kind != kind:
            self._fail(f"{kind}_end while {frame.kind} is open")
        if frame.idx != idx:
            self._fail(f"{kind}_end index {idx} does not match begin index {frame.idx}")
        if tagged is not None and frame.tagged != tagged:
            self._fail(f"{kind}_end tagged={tagged} does not match begin tagged={frame.tagged}")
        if kind == 'point' and frame.children != 1:
            self._fail(f"point closed with {frame.children} coordinates")
        self._stack.pop()

    def _coordinate(self, idx: int) -> None:
        self._enter_geometry_context("coordinate")
        self._admit('coordinate', idx)

    def _framing(self, event: str, expected_state: str, new_state: str) -> None:
        self.events += 1
        if not isinstance(self.inner, FeatureProcessor):
            self._fail(f"{event} sent to {type(self.inner).__name__}, which only accepts geometry events")
        if self._state != expected_state:
            self._fail(f"{event} in state {self._state!r}, expected {expected_state!r}")
        self._state = new_state

    def finish(self) -> None:
        """
        Assert that the stream is complete.

        Raises:
            GrammarError: If a structure, feature or dataset is still open
        """
        if self._state == 'geometry_only':
            if len(self._stack) != 1:
                self._fail(f"{self._stack[-1].kind} still open at end of stream")
        elif self._state not in ('initial', 'done'):
            self._fail(f"stream ended in state {self._state!r}")
        self.logger.debug("Grammar check passed after %d events", self.events)

    # ------------------------------------------------------------------
    # GeomProcessor
    # ------------------------------------------------------------------

    def dimensions(self) -> CoordDimensions:
        return self.inner.dimensions()

    def srid(self, srid: Optional[int]) -> None:
        self._enter_geometry_context("srid")
        self.inner.srid(srid)

    def xy(self, x: float, y: float, idx: int) -> None:
        self._coordinate(idx)
        self.inner.xy(x, y, idx)

    def coordinate(self, x, y, z, m, t, tm, idx: int) -> None:
        self._coordinate(idx)
        self.inner.coordinate(x, y, z, m, t, tm, idx)

    def empty_point(self, idx: int) -> None:
        self._enter_geometry_context("empty_point")
        self._admit('empty_point', idx)
        self.inner.empty_point(idx)

    def point_begin(self, idx: int) -> None:
        self._open('point', idx)
        self.inner.point_begin(idx)

    def point_end(self, idx: int) -> None:
        self._close('point', idx)
        self.inner.point_end(idx)

    def multipoint_begin(self, size: int, idx: int) -> None:
        self._open('multipoint', idx)
        self.inner.multipoint_begin(size, idx)

    def multipoint_end(self, idx: int) -> None:
        self._close('multipoint', idx)
        self.inner.multipoint_end(idx)

    def linestring_begin(self, tagged: bool, size: int, idx: int) -> None:
        self._open('linestring', idx, tagged)
        self.inner.linestring_begin(tagged, size, idx)

    def linestring_end(self, tagged: bool, idx: int) -> None:
        self._close('linestring', idx, tagged)
        self.inner.linestring_end(tagged, idx)

    def multilinestring_begin(self, size: int, idx: int) -> None:
        self._open('multilinestring', idx)
        self.inner.multilinestring_begin(size, idx)

    def multilinestring_end(self, idx: int) -> None:
        self._close('multilinestring', idx)
        self.inner.multilinestring_end(idx)

    def polygon_begin(self, tagged: bool, size: int, idx: int) -> None:
        self._open('polygon', idx, tagged)
        self.inner.polygon_begin(tagged, size, idx)

    def polygon_end(self, tagged: bool, idx: int) -> None:
        self._close('polygon', idx, tagged)
        self.inner.polygon_end(tagged, idx)

    def multipolygon_begin(self, size: int, idx: int) -> None:
        self._open('multipolygon', idx)
        self.inner.multipolygon_begin(size, idx)

    def multipolygon_end(self, idx: int) -> None:
        self._close('multipolygon', idx)
        self.inner.multipolygon_end(idx)

    def geometrycollection_begin(self, size: int, idx: int) -> None:
        self._open('geometrycollection', idx)
        self.inner.geometrycollection_begin(size, idx)

    def geometrycollection_end(self, idx: int) -> None:
        self._close('geometrycollection', idx)
        self.inner.geometrycollection_end(idx)

    # ------------------------------------------------------------------
    # PropertyProcessor
    # ------------------------------------------------------------------

    def property(self, idx: int, name: str, value) -> bool:
        self.events += 1
        if self._state != 'properties':
            self._fail(f"property {name!r} outside a properties block")
        if self._properties_stopped:
            self._fail(f"property {name!r} offered after the sink asked to stop")
        if idx != self._next_property:
            self._fail(f"property index {idx}, expected {self._next_property}")
        self._next_property += 1
        stop = self.inner.property(idx, name, value)
        self._properties_stopped = bool(stop)
        return stop

    # ------------------------------------------------------------------
    # FeatureProcessor
    # ------------------------------------------------------------------

    def dataset_begin(self, name: Optional[str]) -> None:
        self._framing("dataset_begin", 'initial', 'dataset')
        self.inner.dataset_begin(name)

    def dataset_end(self) -> None:
        self._framing("dataset_end", 'dataset', 'done')
        self.inner.dataset_end()

    def feature_begin(self, idx: int) -> None:
        self._framing("feature_begin", 'dataset', 'feature')
        if idx != self._next_feature:
            self._fail(f"feature index {idx}, expected {self._next_feature}")
        self._feature_idx = idx
        self._properties_seen = False
        self._geometry_seen = False
        self.inner.feature_begin(idx)

    def feature_end(self, idx: int) -> None:
        self._framing("feature_end", 'feature', 'dataset')
        if idx != self._feature_idx:
            self._fail(f"feature_end index {idx} does not match feature_begin index {self._feature_idx}")
        if not self._geometry_seen:
            self._fail(f"feature {idx} closed without a geometry block")
        self._next_feature += 1
        self.inner.feature_end(idx)

    def properties_begin(self) -> None:
        self._framing("properties_begin", 'feature', 'properties')
        if self._properties_seen or self._geometry_seen:
            self._fail("properties block must come once, before the geometry block")
        self._properties_seen = True
        self._next_property = 0
        self._properties_stopped = False
        self.inner.properties_begin()

    def properties_end(self) -> None:
        self._framing("properties_end", 'properties', 'feature')
        self.inner.properties_end()

    def geometry_begin(self) -> None:
        self._framing("geometry_begin", 'feature', 'geometry')
        if self._geometry_seen:
            self._fail("a feature holds a single geometry block")
        self._geometry_seen = True
        self._stack.append(_Frame('root', 0))
        self.inner.geometry_begin()

    def geometry_end(self) -> None:
        if self._state == 'geometry' and len(self._stack) > 1:
            self.events += 1
            self._fail(f"geometry_end while {self._stack[-1].kind} is open")
        self._framing("geometry_end", 'geometry', 'feature')
        self._stack.clear()
        self.inner.geometry_end()
