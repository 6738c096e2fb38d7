"""Tests for ConversionConfig."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from geostream.api.dimensions import CoordDimensions
from geostream.core.config import ConversionConfig
from geostream.core.exceptions import ConfigurationError


class TestDefaults:

    def test_defaults(self):
        config = ConversionConfig()
        assert config.dimensions() == CoordDimensions()
        assert config.check_grammar is False
        assert config.log_level == 'INFO'

    def test_frozen(self):
        config = ConversionConfig()
        with pytest.raises(PydanticValidationError):
            config.dims_z = True


class TestFromDict:

    def test_aliases(self):
        config = ConversionConfig.from_dict({'COORD_Z': True, 'COORD_M': True, 'CHECK_GRAMMAR': True})
        assert config.dimensions() == CoordDimensions.xyzm()
        assert config.check_grammar is True

    def test_field_names(self):
        config = ConversionConfig.from_dict({'dims_z': True})
        assert config.dimensions() == CoordDimensions.xyz()

    def test_log_level_case_insensitive(self):
        assert ConversionConfig.from_dict({'LOG_LEVEL': 'debug'}).log_level == 'DEBUG'

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError, match="Invalid conversion configuration"):
            ConversionConfig.from_dict({'LOG_LEVEL': 'chatty'})

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError):
            ConversionConfig.from_dict({'COORD_W': True})


class TestFromEnv:

    def test_reads_prefixed_aliases_only(self):
        environ = {
            'GEOSTREAM_COORD_Z': '1',
            'GEOSTREAM_LOG_LEVEL': 'warning',
            'GEOSTREAM_UNRELATED': 'x',
            'PATH': '/usr/bin',
        }
        config = ConversionConfig.from_env(environ=environ)
        assert config.dims_z is True
        assert config.log_level == 'WARNING'

    def test_custom_prefix(self):
        config = ConversionConfig.from_env(prefix='GS_', environ={'GS_CHECK_GRAMMAR': 'true'})
        assert config.check_grammar is True

    def test_invalid_value(self):
        with pytest.raises(ConfigurationError):
            ConversionConfig.from_env(environ={'GEOSTREAM_COORD_Z': 'perhaps'})
