# -*- coding: utf-8 -*-
"""
Geometry Module - Radar acquisition geometry and orbit models.

Provides the acquisition metadata, polynomial orbit model and
range-Doppler geocoding used to map between radar ``(line, pixel)``
coordinates and the WGS-84 ellipsoid.

Key Classes
-----------
- SLCImage: Timing/sensor metadata of one radar image
- StateVector: Single orbit state vector
- Orbit: Polynomial orbit with forward/inverse geocoding
- GeoPoint: Latitude/longitude pair in radians

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

from topophase.geometry.ellipsoid import SOL, ell2xyz, xyz2ell
from topophase.geometry.slc import SLCImage, StateVector
from topophase.geometry.orbit import Orbit
from topophase.geometry.utils import (
    GeoPoint,
    compute_corners,
    define_extra_phi_lam,
    distribute_points,
    extend_corners,
)

__all__ = [
    'SOL',
    'ell2xyz',
    'xyz2ell',
    'SLCImage',
    'StateVector',
    'Orbit',
    'GeoPoint',
    'compute_corners',
    'define_extra_phi_lam',
    'distribute_points',
    'extend_corners',
]
