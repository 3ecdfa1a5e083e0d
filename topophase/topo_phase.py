# -*- coding: utf-8 -*-
"""
Topographic Phase Synthesis - Radar-code a DEM tile and grid the result.

For every DEM sample the ground point is located in the reference
image by zero-Doppler geocoding, giving an irregular cloud of radar
``(line, pixel)`` positions. Each point carries the interferometric
phase its height induces,

    phase = 4 * pi / wavelength * (R_comparison - R_reference),

with both slant ranges taken at each orbit's own zero-Doppler time and
the wavelength of the reference acquisition. The cloud is then
resampled onto the regular pixel grid of the radar window with
Delaunay-based linear interpolation (``LinearNDInterpolator``), as done
for annotation-grid geolocation. Grid cells outside the cloud's convex
hull receive the DEM no-data value and are flagged invalid.

DEM cells without elevation are radar-coded at height 0.

Dependencies
------------
numpy
scipy

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
from dataclasses import dataclass
from typing import Optional

# Third-party
import numpy as np
from scipy.interpolate import LinearNDInterpolator
from scipy.spatial import QhullError

# topophase internal
from topophase.acquisition import Acquisition, ImagePair
from topophase.dem_tile import DemTile
from topophase.exceptions import GeolocationError, SynthesisError
from topophase.geometry import SOL, ell2xyz
from topophase.window import Window

logger = logging.getLogger(__name__)


@dataclass
class TopoPhaseResult:
    """Synthesized rasters for one radar window.

    Parameters
    ----------
    phase : np.ndarray
        Topographic phase (radians, unwrapped), window shape.
    valid : np.ndarray
        Boolean mask of cells covered by radar-coded DEM samples.
    elevation : np.ndarray, optional
        Terrain height (meters) resampled onto the same grid.
    """

    phase: np.ndarray
    valid: np.ndarray
    elevation: Optional[np.ndarray] = None


class TopoPhase:
    """Radar coder for one DEM tile under one reference/comparison pair.

    Parameters
    ----------
    reference : Acquisition
        Acquisition whose geometry defines the output grid.
    comparison : Acquisition
        Second acquisition of the interferometric pair.
    window : Window
        Output radar window.
    dem_tile : DemTile
        Elevation raster covering the window's footprint.

    Examples
    --------
    >>> topo = TopoPhase(reference, comparison, window, dem_tile)
    >>> topo.radar_code()
    >>> result = topo.grid_data(include_elevation=True)
    """

    def __init__(
        self,
        reference: Acquisition,
        comparison: Acquisition,
        window: Window,
        dem_tile: DemTile,
    ) -> None:
        self.reference = reference
        self.comparison = comparison
        self.window = window
        self.dem_tile = dem_tile

        self.lines: Optional[np.ndarray] = None
        self.pixels: Optional[np.ndarray] = None
        self.phase: Optional[np.ndarray] = None
        self.heights: Optional[np.ndarray] = None

    def radar_code(self) -> None:
        """Compute radar position and phase of every DEM sample.

        Raises
        ------
        SynthesisError
            If the tile is empty or geocoding fails.
        """
        tile = self.dem_tile
        if tile.n_lat == 0 or tile.n_lon == 0:
            raise SynthesisError(f"Empty DEM tile for {self.window}")

        lats, lons = tile.positions()
        heights = np.where(tile.valid_mask, tile.data, 0.0).ravel()
        xyz = ell2xyz(lats.ravel(), lons.ravel(), heights)

        ref_meta = self.reference.metadata
        try:
            t_azi, t_range_ref = self.reference.orbit.xyz2t(xyz, ref_meta)
            _, t_range_cmp = self.comparison.orbit.xyz2t(
                xyz, self.comparison.metadata
            )
        except GeolocationError as e:
            raise SynthesisError(
                f"Radar coding failed for {self.window}: {e}"
            ) from e

        self.lines = ref_meta.t_azi_to_line(t_azi)
        self.pixels = ref_meta.t_range_to_pixel(t_range_ref)
        self.phase = (4.0 * np.pi / ref_meta.wavelength) \
            * (t_range_cmp - t_range_ref) * SOL
        self.heights = heights

    def grid_data(self, include_elevation: bool = False) -> TopoPhaseResult:
        """Resample the radar-coded cloud onto the window's pixel grid.

        Parameters
        ----------
        include_elevation : bool, optional
            Also resample terrain height. Default False.

        Returns
        -------
        TopoPhaseResult

        Raises
        ------
        SynthesisError
            If ``radar_code`` has not run or the cloud cannot be
            triangulated.
        """
        if self.phase is None:
            raise SynthesisError("radar_code() must run before grid_data()")

        points = np.column_stack([self.lines, self.pixels])
        if include_elevation:
            values = np.column_stack([self.phase, self.heights])
        else:
            values = self.phase[:, np.newaxis]

        try:
            interp = LinearNDInterpolator(points, values, fill_value=np.nan)
        except (QhullError, ValueError) as e:
            raise SynthesisError(
                f"Cannot triangulate radar-coded DEM for {self.window}: {e}"
            ) from e

        win = self.window
        grid_lines, grid_pixels = np.mgrid[
            win.line_lo:win.line_hi + 1, win.pixel_lo:win.pixel_hi + 1
        ]
        gridded = interp(grid_lines.astype(np.float64),
                         grid_pixels.astype(np.float64))

        no_data = self.dem_tile.no_data_value
        valid = np.isfinite(gridded[..., 0])
        phase = np.where(valid, gridded[..., 0], no_data)
        elevation = None
        if include_elevation:
            elevation = np.where(valid, gridded[..., 1], no_data)

        if not np.all(valid):
            logger.debug("%d of %d cells of %s outside radar-coded DEM",
                         valid.size - np.count_nonzero(valid), valid.size, win)
        return TopoPhaseResult(phase=phase, valid=valid, elevation=elevation)


def compute_topo_phase(
    pair: ImagePair,
    window: Window,
    dem_tile: DemTile,
    include_elevation: bool = False,
) -> TopoPhaseResult:
    """Synthesize the topographic phase of one pair over one window.

    Parameters
    ----------
    pair : ImagePair
        Reference/comparison pair.
    window : Window
        Radar window of the reference image.
    dem_tile : DemTile
        Elevation raster covering the window.
    include_elevation : bool, optional
        Also return the resampled terrain height.

    Returns
    -------
    TopoPhaseResult

    Raises
    ------
    SynthesisError
        If radar coding or gridding fails.
    """
    topo = TopoPhase(pair.reference, pair.comparison, window, dem_tile)
    topo.radar_code()
    return topo.grid_data(include_elevation)
