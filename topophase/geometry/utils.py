# -*- coding: utf-8 -*-
"""
Geometry Utilities - Tile footprints and sample distribution.

Helper functions shared by the DEM tile builder: geographic corners of a
radar window, the extra latitude/longitude margin implied by terrain
height, outward corner extension, and pseudo-uniform point sampling of a
window.

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
from dataclasses import dataclass
from typing import Tuple

# Third-party
import numpy as np

# topophase internal
from topophase.geometry.orbit import Orbit
from topophase.geometry.slc import SLCImage
from topophase.window import Window


@dataclass(frozen=True)
class GeoPoint:
    """Geographic point or latitude/longitude extent.

    Parameters
    ----------
    lat : float
        Latitude in radians.
    lon : float
        Longitude in radians.
    """

    lat: float
    lon: float


def _corner_lat_lon(
    metadata: SLCImage,
    orbit: Orbit,
    window: Window,
    height: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """Geocode the four corners of ``window`` at a constant height."""
    lines = np.array(
        [window.line_lo, window.line_lo, window.line_hi, window.line_hi],
        dtype=np.float64,
    )
    pixels = np.array(
        [window.pixel_lo, window.pixel_hi, window.pixel_lo, window.pixel_hi],
        dtype=np.float64,
    )
    lats, lons, _ = orbit.lp2ell(lines, pixels, metadata, height)
    return lats, lons


def compute_corners(
    metadata: SLCImage,
    orbit: Orbit,
    window: Window,
    height: float = 0.0,
) -> Tuple[GeoPoint, GeoPoint]:
    """Geographic bounding corners of a radar window.

    Parameters
    ----------
    metadata : SLCImage
        Acquisition geometry.
    orbit : Orbit
        Orbit of the acquisition.
    window : Window
        Radar tile.
    height : float, optional
        Height above the ellipsoid at which corners are geocoded.

    Returns
    -------
    Tuple[GeoPoint, GeoPoint]
        ``(upper_left, lower_right)``: ``(max_lat, min_lon)`` and
        ``(min_lat, max_lon)`` in radians.
    """
    lats, lons = _corner_lat_lon(metadata, orbit, window, height)
    upper_left = GeoPoint(float(np.max(lats)), float(np.min(lons)))
    lower_right = GeoPoint(float(np.min(lats)), float(np.max(lons)))
    return upper_left, lower_right


def define_extra_phi_lam(
    height_min: float,
    height_max: float,
    window: Window,
    metadata: SLCImage,
    orbit: Orbit,
) -> GeoPoint:
    """Latitude/longitude margin covering terrain displacement.

    Geocodes the window corners at ``height_min`` and ``height_max`` and
    returns the largest absolute shift of any corner relative to its
    position on the ellipsoid.

    Returns
    -------
    GeoPoint
        ``(dlat, dlon)`` margin in radians; zero when both heights are 0.
    """
    if height_min == 0.0 and height_max == 0.0:
        return GeoPoint(0.0, 0.0)

    lat0, lon0 = _corner_lat_lon(metadata, orbit, window, 0.0)
    dlat = 0.0
    dlon = 0.0
    for height in (height_min, height_max):
        if height == 0.0:
            continue
        lats, lons = _corner_lat_lon(metadata, orbit, window, height)
        dlat = max(dlat, float(np.max(np.abs(lats - lat0))))
        dlon = max(dlon, float(np.max(np.abs(lons - lon0))))
    return GeoPoint(dlat, dlon)


def extend_corners(
    extent: GeoPoint,
    corners: Tuple[GeoPoint, GeoPoint],
) -> Tuple[GeoPoint, GeoPoint]:
    """Grow an ``(upper_left, lower_right)`` pair outward by ``extent``."""
    upper_left, lower_right = corners
    return (
        GeoPoint(upper_left.lat + extent.lat, upper_left.lon - extent.lon),
        GeoPoint(lower_right.lat - extent.lat, lower_right.lon + extent.lon),
    )


def distribute_points(n_points: int, window: Window) -> np.ndarray:
    """Spread integer sample positions pseudo-uniformly over a window.

    Points sit on a regular grid whose aspect ratio follows the window,
    filled row by row until ``n_points`` positions are placed.

    Parameters
    ----------
    n_points : int
        Number of points to generate.
    window : Window
        Window to cover.

    Returns
    -------
    np.ndarray
        ``(n_points, 2)`` int64 array of ``(line, pixel)`` positions.
    """
    if n_points <= 0:
        return np.empty((0, 2), dtype=np.int64)

    aspect = window.lines / window.pixels
    n_pix = max(1, int(round(np.sqrt(n_points / aspect))))
    n_pix = min(n_pix, n_points)
    n_lin = int(np.ceil(n_points / n_pix))

    line_pos = np.linspace(window.line_lo, window.line_hi, n_lin)
    pixel_pos = np.linspace(window.pixel_lo, window.pixel_hi, n_pix)
    ll, pp = np.meshgrid(line_pos, pixel_pos, indexing='ij')
    points = np.column_stack([ll.ravel(), pp.ravel()])[:n_points]
    return np.round(points).astype(np.int64)
