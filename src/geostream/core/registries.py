"""Registries facade for GeoStream.

Domain registries live as class-level :class:`Registry` instances on the
:class:`Registries` class.  Import the convenience alias ``R`` for terse
usage::

    from geostream.core.registries import R

    writer_cls = R.writers["geojson"]
    writer = writer_cls(out, dims=CoordDimensions.xyz())

Built-in sinks are registered lazily so that importing this module never
imports a sink implementation (or its third-party dependencies).
"""

from __future__ import annotations

from typing import Dict, List

from geostream.api.processor import GeomProcessor
from geostream.core.registry import Registry


class Registries:
    """Single entry-point for every GeoStream component registry."""

    # ==================================================================
    # Sinks
    # ==================================================================
    writers: Registry = Registry("writers", protocol=GeomProcessor)

    @classmethod
    def all_registries(cls) -> Dict[str, Registry]:
        """Return ``{name: Registry}`` for every registry on this class."""
        return {
            attr: getattr(cls, attr)
            for attr in sorted(dir(cls))
            if isinstance(getattr(cls, attr, None), Registry)
        }

    @classmethod
    def feature_formats(cls) -> List[str]:
        """Return the writer keys whose sinks accept dataset/feature framing."""
        return [key for key in cls.writers.keys() if cls.writers.meta(key).get("features")]


R = Registries

R.writers.add_lazy(
    "geojson", "geostream.geojson.writer.GeoJsonWriter",
    features=True, stream=True, result="getvalue_str",
)
R.writers.add_lazy(
    "shapely", "geostream.native.shapely_writer.ShapelyWriter",
    features=False, result="geometry",
)
R.writers.alias("json", "geojson")
