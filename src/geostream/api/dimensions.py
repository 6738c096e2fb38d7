# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
Coordinate dimensionality.

A conversion pass declares once which optional coordinate channels it
carries. Sinks consult it to decide which channels to render and drop any
value offered for a channel that is not active.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CoordDimensions:
    """
    Active optional coordinate channels for a pass.

    X and Y are always present. The default instance is XY only.

    Attributes:
        z: Elevation
        m: Linear measure
        t: Time
        tm: Time-measure identifier
    """

    z: bool = False
    m: bool = False
    t: bool = False
    tm: bool = False

    @classmethod
    def xy(cls) -> 'CoordDimensions':
        return cls()

    @classmethod
    def xyz(cls) -> 'CoordDimensions':
        return cls(z=True)

    @classmethod
    def xyzm(cls) -> 'CoordDimensions':
        return cls(z=True, m=True)

    def is_multi_dim(self) -> bool:
        """True when any channel beyond X/Y is active."""
        return self.z or self.m or self.t or self.tm

    def __str__(self) -> str:
        return "XY" + "".join(
            label for label, active in (("Z", self.z), ("M", self.m), ("T", self.t), ("TM", self.tm))
            if active
        )
