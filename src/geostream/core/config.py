# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
Conversion configuration model.

Contains ConversionConfig for pass-level settings: coordinate channels,
grammar checking and log level. Keys may be given either by
field name (``dims_z``) or by their upper-case alias (``COORD_Z``), which is
the form used in flat config files and environment variables.
"""

import os
from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from geostream.api.dimensions import CoordDimensions
from geostream.core.exceptions import ConfigurationError

# Standard ConfigDict for config models
FROZEN_CONFIG = ConfigDict(extra='forbid', populate_by_name=True, frozen=True)


class ConversionConfig(BaseModel):
    """Settings for one conversion pass"""
    model_config = FROZEN_CONFIG

    # Coordinate channels
    dims_z: bool = Field(default=False, alias='COORD_Z')
    dims_m: bool = Field(default=False, alias='COORD_M')
    dims_t: bool = Field(default=False, alias='COORD_T')
    dims_tm: bool = Field(default=False, alias='COORD_TM')

    # Pass settings
    check_grammar: bool = Field(default=False, alias='CHECK_GRAMMAR')
    log_level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'] = Field(
        default='INFO', alias='LOG_LEVEL'
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        """Accept log levels in any case"""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def dimensions(self) -> CoordDimensions:
        """Return the coordinate dimensionality declared by this config."""
        return CoordDimensions(z=self.dims_z, m=self.dims_m, t=self.dims_t, tm=self.dims_tm)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> 'ConversionConfig':
        """
        Build a config from a flat mapping.

        Args:
            values: Mapping keyed by field names or upper-case aliases

        Returns:
            Validated ConversionConfig

        Raises:
            ConfigurationError: If any value fails validation or a key is unknown
        """
        try:
            return cls.model_validate(dict(values))
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid conversion configuration: {e}") from e

    @classmethod
    def from_env(cls, prefix: str = 'GEOSTREAM_', environ: Optional[Mapping[str, str]] = None) -> 'ConversionConfig':
        """
        Build a config from environment variables such as ``GEOSTREAM_COORD_Z=1``.

        Only variables whose name (after the prefix) matches a field alias are
        read; everything else in the environment is ignored.
        """
        environ = os.environ if environ is None else environ
        aliases = {field.alias for field in cls.model_fields.values() if field.alias}
        values: Dict[str, Any] = {}
        for key, raw in environ.items():
            if not key.startswith(prefix):
                continue
            name = key[len(prefix):]
            if name in aliases:
                values[name] = raw
        return cls.from_dict(values)
