"""Tests for the generic Registry[T] class."""

from __future__ import annotations

import warnings

import pytest

from geostream.api.processor import GeomProcessor
from geostream.core.registry import Registry, _LazyEntry

# ======================================================================
# Fixtures
# ======================================================================


class _DummySink(GeomProcessor):
    pass


class _NotASink:
    def write(self, data):
        return None


@pytest.fixture()
def reg():
    """Fresh registry with lowercase normalization (default)."""
    return Registry("test")


@pytest.fixture()
def upper_reg():
    """Fresh registry with UPPERCASE normalization."""
    return Registry("test_upper", normalize=str.upper)


# ======================================================================
# add / __getitem__ / __contains__
# ======================================================================


class TestAddAndLookup:
    def test_add_direct(self, reg):
        reg.add("GeoJSON", _DummySink)
        assert reg["geojson"] is _DummySink
        assert reg["GEOJSON"] is _DummySink
        assert "geojson" in reg

    def test_add_returns_value(self, reg):
        assert reg.add("x", _DummySink) is _DummySink

    def test_getitem_missing_raises_keyerror(self, reg):
        reg.add("geojson", _DummySink)
        with pytest.raises(KeyError, match="unknown key 'nope'"):
            reg["nope"]

    def test_custom_normalization(self, upper_reg):
        upper_reg.add("geojson", _DummySink)
        assert upper_reg.keys() == ["GEOJSON"]
        assert "GeoJson" in upper_reg


class TestLazy:
    def test_lazy_entry_resolves_on_lookup(self, reg):
        reg.add_lazy("ordered", "collections.OrderedDict")
        assert isinstance(reg._entries["ordered"], _LazyEntry)

        from collections import OrderedDict
        assert reg["ordered"] is OrderedDict
        # cached after first access
        assert reg._entries["ordered"] is OrderedDict

    def test_lazy_entry_counts_as_present(self, reg):
        reg.add_lazy("ordered", "collections.OrderedDict")
        assert "ordered" in reg
        assert len(reg) == 1

    def test_lazy_meta(self, reg):
        reg.add_lazy("ordered", "collections.OrderedDict", stream=True)
        assert reg.meta("ordered") == {"stream": True}


class TestAliases:
    def test_alias_lookup(self, reg):
        reg.add("geojson", _DummySink, features=True)
        reg.alias("json", "geojson")
        assert reg["json"] is _DummySink
        assert reg.meta("JSON") == {"features": True}
        assert "json" in reg

    def test_aliases_are_not_keys(self, reg):
        reg.add("geojson", _DummySink)
        reg.alias("json", "geojson")
        assert reg.keys() == ["geojson"]


class TestDiscovery:
    def test_keys_sorted(self, reg):
        reg.add("shapely", _DummySink)
        reg.add("geojson", _DummySink)
        assert reg.keys() == ["geojson", "shapely"]

    def test_meta_default_empty(self, reg):
        reg.add("geojson", _DummySink)
        assert reg.meta("geojson") == {}

    def test_repr(self, reg):
        reg.add("geojson", _DummySink)
        assert repr(reg) == "<Registry 'test' (1 entries)>"


class TestProtocolValidation:
    def test_warns_for_incomplete_class(self):
        reg = Registry("writers", protocol=GeomProcessor)
        with pytest.warns(UserWarning, match="may not satisfy GeomProcessor"):
            reg.add("bogus", _NotASink)

    def test_silent_for_subclass(self):
        reg = Registry("writers", protocol=GeomProcessor)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            reg.add("dummy", _DummySink)
        assert reg["dummy"] is _DummySink

    def test_registration_never_blocked(self):
        reg = Registry("writers", protocol=GeomProcessor)
        with pytest.warns(UserWarning):
            reg.add("bogus", _NotASink)
        assert reg["bogus"] is _NotASink
