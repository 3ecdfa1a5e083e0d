# -*- coding: utf-8 -*-
"""
WGS-84 Ellipsoid - Geodetic <-> ECF conversions in radians.

Thin wrappers around ``sarpy.geometry.geocoords`` that accept and return
latitude/longitude in radians, the unit used throughout the radar
geometry code.

Dependencies
------------
sarpy

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

# Standard library
from typing import Tuple, Union

# Third-party
import numpy as np
from sarpy.geometry.geocoords import ecf_to_geodetic, geodetic_to_ecf

# WGS-84 semi-major and semi-minor axes (meters)
WGS84_A = 6378137.0
WGS84_B = 6356752.314245179

# Speed of light (m/s)
SOL = 299792458.0


def ell2xyz(
    lat: Union[float, np.ndarray],
    lon: Union[float, np.ndarray],
    height: Union[float, np.ndarray] = 0.0,
) -> np.ndarray:
    """Convert geodetic coordinates to Earth-centred fixed coordinates.

    Parameters
    ----------
    lat : float or np.ndarray
        Geodetic latitude(s) in radians.
    lon : float or np.ndarray
        Longitude(s) in radians.
    height : float or np.ndarray
        Height(s) above the WGS-84 ellipsoid in meters.

    Returns
    -------
    np.ndarray
        ECF coordinates, shape ``(N, 3)``.
    """
    lat, lon, height = np.broadcast_arrays(
        np.atleast_1d(np.asarray(lat, dtype=np.float64)),
        np.atleast_1d(np.asarray(lon, dtype=np.float64)),
        np.atleast_1d(np.asarray(height, dtype=np.float64)),
    )
    llh = np.column_stack([
        np.degrees(lat.ravel()), np.degrees(lon.ravel()), height.ravel(),
    ])
    return np.asarray(geodetic_to_ecf(llh), dtype=np.float64)


def xyz2ell(xyz: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Convert ECF coordinates to geodetic latitude, longitude and height.

    Parameters
    ----------
    xyz : np.ndarray
        ECF coordinates, shape ``(N, 3)`` or ``(3,)``.

    Returns
    -------
    lat, lon, height : np.ndarray
        Latitude and longitude in radians, height in meters. Each of
        shape ``(N,)``.
    """
    pts = np.atleast_2d(np.asarray(xyz, dtype=np.float64))
    llh = np.asarray(ecf_to_geodetic(pts), dtype=np.float64)
    return np.radians(llh[:, 0]), np.radians(llh[:, 1]), llh[:, 2]
