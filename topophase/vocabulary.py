# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for topographic phase removal.

Single source of truth for polarization channels, destination band roles
and per-tile outcomes, so acquisition pairing and band lookup never rely
on free-form strings.

Author
------
geoint.org

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-18

Modified
--------
2026-10-18
"""

from enum import Enum


class Polarization(Enum):
    """Transmit/receive polarization of a single-channel acquisition.

    ``NONE`` marks products that carry no polarization tag; band names
    then omit the polarization component.
    """

    HH = "HH"
    HV = "HV"
    VH = "VH"
    VV = "VV"
    NONE = ""

    @classmethod
    def parse(cls, value: str) -> 'Polarization':
        """Look up a polarization from a case-insensitive tag.

        Parameters
        ----------
        value : str
            Tag such as ``'vv'`` or ``''``.

        Returns
        -------
        Polarization
        """
        return cls(value.strip().upper())


class BandRole(Enum):
    """Role of a destination raster written for one image pair."""

    REAL = "real"
    IMAGINARY = "imaginary"
    PHASE = "phase"
    ELEVATION = "elevation"


class TileStatus(Enum):
    """Outcome of one tile computation."""

    CORRECTED = "corrected"
    PASSED_THROUGH = "passed_through"
