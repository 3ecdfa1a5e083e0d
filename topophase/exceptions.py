# -*- coding: utf-8 -*-
"""
Topophase Exception Hierarchy - Domain-specific exceptions.

Lets callers (a host tiling framework, a batch driver) tell configuration
problems, geocoding failures and phase-synthesis failures apart from
Python built-in exceptions. Every exception subclasses both
``TopoPhaseError`` and the matching built-in exception.

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

from typing import Any, Optional


class TopoPhaseError(Exception):
    """Base exception for all topophase errors."""


class ValidationError(TopoPhaseError, ValueError):
    """Invalid input data or parameters.

    Raised for inverted windows, shape mismatches, and out-of-range
    numeric arguments.
    """


class ConfigurationError(ValidationError):
    """Invalid or unsupported processing configuration.

    Raised before any tile is processed: unknown or uninstalled DEM,
    unparsable tile extension percentage, orbit degree out of range.
    """


class DependencyError(TopoPhaseError, ImportError):
    """Missing optional dependency required for a specific module.

    Raised when an elevation backend requires a package (rasterio,
    pyproj) that is not installed.
    """


class GeolocationError(TopoPhaseError, RuntimeError):
    """Coordinate transformation or geocoding failure.

    Raised when a range-Doppler solution does not converge or a
    footprint projects to non-finite elevation indices.
    """


class SynthesisError(TopoPhaseError, RuntimeError):
    """Radar coding or grid resampling failure for one tile."""


class TileComputationError(SynthesisError):
    """Fatal failure while computing one output tile.

    Parameters
    ----------
    message : str
        Description of the failure.
    window : Window, optional
        Radar tile that was being computed.
    pair_name : str, optional
        Name of the image pair being corrected.
    """

    def __init__(
        self,
        message: str,
        window: Optional[Any] = None,
        pair_name: Optional[str] = None,
    ) -> None:
        context = []
        if pair_name is not None:
            context.append(f"pair={pair_name}")
        if window is not None:
            context.append(f"window={window}")
        if context:
            message = f"{message} [{', '.join(context)}]"
        super().__init__(message)
        self.window = window
        self.pair_name = pair_name
