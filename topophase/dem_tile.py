# -*- coding: utf-8 -*-
"""
DEM Tile Builder - Local elevation rasters covering a radar window.

Turns a radar window into a geographic footprint, grows it so terrain
displacement cannot push any needed DEM sample outside, and reads the
covered elevation samples into a dense ``DemTile``:

1. Geocode the window corners onto the ellipsoid with the reference
   acquisition geometry.
2. Estimate the terrain height range over the corresponding DEM area
   (``estimate_height_range``).
3. Extend the footprint by the corner displacement at the extreme
   heights (``extend_footprint``).
4. Sample the extended footprint in one masked query, keeping the
   geodetic position of every sample.

"No DEM coverage" is reported by returning ``None``, never by raising.

Dependencies
------------
numpy

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
import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

# Third-party
import numpy as np

# topophase internal
from topophase.acquisition import Acquisition
from topophase.elevation.base import ElevationModel
from topophase.exceptions import GeolocationError
from topophase.geometry import (
    GeoPoint,
    Orbit,
    SLCImage,
    compute_corners,
    define_extra_phi_lam,
    distribute_points,
    extend_corners,
)
from topophase.window import Window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeightRange:
    """Terrain height bounds used to size the footprint margin (meters)."""

    min_height: float
    max_height: float


@dataclass(frozen=True)
class PixelFootprint:
    """Inclusive DEM pixel rectangle ``(x0, y0)``-``(x1, y1)``."""

    x0: int
    y0: int
    x1: int
    y1: int


@dataclass
class DemTile:
    """Dense elevation raster anchored at its upper-left sample.

    Parameters
    ----------
    data : np.ndarray
        Heights ``(n_lat, n_lon)`` in meters, float64. Rows run south
        from the anchor, columns east.
    lat0 : float
        Latitude of the first row (radians).
    lon0 : float
        Longitude of the first column (radians).
    lat_spacing : float
        Absolute latitude step per row (radians).
    lon_spacing : float
        Absolute longitude step per column (radians).
    no_data_value : float
        Sentinel stored in cells without elevation.
    sample_lats, sample_lons : np.ndarray, optional
        Geodetic position (radians) of every cell, same shape as
        ``data``. Needed when the source grid is not aligned with
        parallels and meridians (projected CRS); NaN entries fall back to
        the regular grid.
    """

    data: np.ndarray
    lat0: float
    lon0: float
    lat_spacing: float
    lon_spacing: float
    no_data_value: float
    sample_lats: Optional[np.ndarray] = None
    sample_lons: Optional[np.ndarray] = None

    @property
    def n_lat(self) -> int:
        return self.data.shape[0]

    @property
    def n_lon(self) -> int:
        return self.data.shape[1]

    @property
    def latitudes(self) -> np.ndarray:
        """Row latitudes (radians)."""
        return self.lat0 - np.arange(self.n_lat) * self.lat_spacing

    @property
    def longitudes(self) -> np.ndarray:
        """Column longitudes (radians)."""
        return self.lon0 + np.arange(self.n_lon) * self.lon_spacing

    def positions(self) -> Tuple[np.ndarray, np.ndarray]:
        """Per-cell ``(lats, lons)`` in radians, shape ``(n_lat, n_lon)``."""
        lats, lons = np.meshgrid(self.latitudes, self.longitudes,
                                 indexing='ij')
        if self.sample_lats is not None:
            known = np.isfinite(self.sample_lats) \
                & np.isfinite(self.sample_lons)
            lats = np.where(known, self.sample_lats, lats)
            lons = np.where(known, self.sample_lons, lons)
        return lats, lons

    @property
    def valid_mask(self) -> np.ndarray:
        """True where the cell carries a real elevation."""
        return np.isfinite(self.data) & (self.data != self.no_data_value)


def _corner_indices(
    elevation: ElevationModel,
    upper_left: GeoPoint,
    lower_right: GeoPoint,
) -> Tuple[np.ndarray, np.ndarray]:
    """DEM indices ``(xs, ys)`` of all four corners of a lat/lon box.

    All four are needed when the DEM grid is rotated against the
    graticule, as in a projected CRS.
    """
    lats = np.degrees([upper_left.lat, upper_left.lat,
                       lower_right.lat, lower_right.lat])
    lons = np.degrees([upper_left.lon, lower_right.lon,
                       upper_left.lon, lower_right.lon])
    return elevation.geodetic_to_index(lats, lons)


def extension_factor(extension_percent: float) -> float:
    """Multiplicative factor ``1 + pct / 100`` of a tile extension."""
    return 1.0 + float(extension_percent) / 100.0


def estimate_height_range(
    window: Window,
    elevation: ElevationModel,
    no_data_value: float,
    extension_factor: float,
) -> HeightRange:
    """Sample terrain heights around a DEM pixel window.

    The window is enlarged by ``int(extension_factor * size)`` on each
    side and covered with ``int(10 * sqrt(sqrt(width * height)))``
    pseudo-uniform samples. Unavailable and no-data samples are
    discarded.

    Parameters
    ----------
    window : Window
        DEM pixel window; lines are rows (y), pixels are columns (x).
    elevation : ElevationModel
        Elevation source.
    no_data_value : float
        Sentinel to discard in addition to the source's own.
    extension_factor : float
        Enlargement factor, ``1 + percent / 100``.

    Returns
    -------
    HeightRange
        ``(min, max * extension_factor)``, or ``(0, 0)`` when fewer than
        three valid samples were found.
    """
    width = window.pixels
    height = window.lines
    n_points = int(10 * math.sqrt(math.sqrt(width * height)))
    grow_x = int(extension_factor * width)
    grow_y = int(extension_factor * height)
    enlarged = Window(
        window.line_lo - grow_y, window.line_hi + grow_y,
        window.pixel_lo - grow_x, window.pixel_hi + grow_x,
    )

    points = distribute_points(n_points, enlarged)
    samples = elevation.sample_masked(points[:, 1], points[:, 0])
    heights = samples.compressed()
    heights = heights[heights != no_data_value]

    if heights.size < 3:
        logger.debug("Only %d valid height samples in %s; using (0, 0)",
                     heights.size, enlarged)
        return HeightRange(0.0, 0.0)
    return HeightRange(
        float(np.min(heights)), float(np.max(heights)) * extension_factor
    )


def extend_footprint(
    window: Window,
    orbit: Orbit,
    metadata: SLCImage,
    height_range: HeightRange,
    elevation: ElevationModel,
    corners: Optional[Tuple[GeoPoint, GeoPoint]] = None,
) -> PixelFootprint:
    """DEM pixel rectangle covering a radar window at any terrain height.

    Parameters
    ----------
    window : Window
        Radar window.
    orbit : Orbit
        Orbit of the acquisition defining the window.
    metadata : SLCImage
        Geometry of that acquisition.
    height_range : HeightRange
        Terrain height bounds.
    elevation : ElevationModel
        Source whose pixel grid the footprint is expressed in.
    corners : Tuple[GeoPoint, GeoPoint], optional
        Precomputed ellipsoid corners of ``window``.

    Returns
    -------
    PixelFootprint
        Upper-left index floored, lower-right ceiled.

    Raises
    ------
    GeolocationError
        If geocoding fails or a corner has no finite DEM index.
    """
    if corners is None:
        corners = compute_corners(metadata, orbit, window)
    extra = define_extra_phi_lam(
        height_range.min_height, height_range.max_height,
        window, metadata, orbit,
    )
    upper_left, lower_right = extend_corners(extra, corners)

    xs, ys = _corner_indices(elevation, upper_left, lower_right)
    if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ys))):
        raise GeolocationError(
            f"Footprint of {window} has no finite DEM index"
        )
    return PixelFootprint(
        int(np.floor(np.min(xs))), int(np.floor(np.min(ys))),
        int(np.ceil(np.max(xs))), int(np.ceil(np.max(ys))),
    )


def build_dem_tile(
    window: Window,
    reference: Acquisition,
    elevation: ElevationModel,
    no_data_value: Optional[float] = None,
    lat_spacing: Optional[float] = None,
    lon_spacing: Optional[float] = None,
    extension_percent: float = 100,
) -> Optional[DemTile]:
    """Read the elevation raster needed to radar-code one window.

    Only the reference acquisition's geometry bounds the footprint.

    Parameters
    ----------
    window : Window
        Radar window of the reference image.
    reference : Acquisition
        Reference acquisition.
    elevation : ElevationModel
        Elevation source.
    no_data_value : float, optional
        Sentinel for empty cells. Defaults to the source's.
    lat_spacing, lon_spacing : float, optional
        DEM sample spacing in degrees. Default to the source's.
    extension_percent : float, optional
        Height range and search extension, percent. Default 100.

    Returns
    -------
    DemTile or None
        ``None`` when the window has no DEM coverage.
    """
    if no_data_value is None:
        no_data_value = elevation.no_data_value
    if lat_spacing is None or lon_spacing is None:
        lat_spacing, lon_spacing = elevation.pixel_spacing
    factor = extension_factor(extension_percent)
    metadata = reference.metadata
    orbit = reference.orbit

    try:
        corners = compute_corners(metadata, orbit, window)
        upper_left, lower_right = corners
        xs, ys = _corner_indices(elevation, upper_left, lower_right)
        if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ys))):
            raise GeolocationError(f"Corners of {window} outside DEM grid")
        xs = np.round(xs).astype(int)
        ys = np.round(ys).astype(int)
        dem_window = Window(
            int(ys.min()), int(ys.max()), int(xs.min()), int(xs.max())
        )
        height_range = estimate_height_range(
            dem_window, elevation, no_data_value, factor
        )
        footprint = extend_footprint(
            window, orbit, metadata, height_range, elevation, corners
        )
    except GeolocationError as e:
        logger.debug("No DEM footprint for %s: %s", window, e)
        return None

    lat0, lon0 = elevation.index_to_geodetic(footprint.x0, footprint.y0)
    if not (np.isfinite(lat0) and np.isfinite(lon0)):
        logger.debug("DEM anchor of %s outside coverage", window)
        return None

    n_lat = footprint.y1 - footprint.y0 + 1
    n_lon = footprint.x1 - footprint.x0 + 1
    rows, cols = np.mgrid[
        footprint.y0:footprint.y1 + 1, footprint.x0:footprint.x1 + 1
    ]
    samples = elevation.sample_masked(cols.ravel(), rows.ravel())
    data = samples.filled(no_data_value).reshape(n_lat, n_lon)
    sample_lats, sample_lons = elevation.index_to_geodetic(
        cols.ravel(), rows.ravel()
    )

    logger.debug(
        "DEM tile for %s: %d x %d samples, heights [%.1f, %.1f]",
        window, n_lat, n_lon,
        height_range.min_height, height_range.max_height,
    )
    return DemTile(
        data=data,
        lat0=math.radians(lat0),
        lon0=math.radians(lon0),
        lat_spacing=math.radians(abs(lat_spacing)),
        lon_spacing=math.radians(abs(lon_spacing)),
        no_data_value=float(no_data_value),
        sample_lats=np.radians(sample_lats).reshape(n_lat, n_lon),
        sample_lons=np.radians(sample_lons).reshape(n_lat, n_lon),
    )
