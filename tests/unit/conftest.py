"""
Unit test fixtures and configuration.

Fixtures specific to unit tests (fast, isolated tests).
"""

from unittest.mock import MagicMock

import pytest

from geostream.api.dimensions import CoordDimensions
from geostream.geojson.writer import GeoJsonWriter


@pytest.fixture
def writer():
    """GeoJSON writer with an owned buffer and XY dimensions."""
    return GeoJsonWriter()


@pytest.fixture
def xyz_writer():
    """GeoJSON writer rendering the Z channel."""
    return GeoJsonWriter(dims=CoordDimensions.xyz())


@pytest.fixture
def mock_logger():
    """Create a mock logger for unit tests."""
    return MagicMock()
