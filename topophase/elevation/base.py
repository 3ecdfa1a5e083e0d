# -*- coding: utf-8 -*-
"""
Elevation Model Base Class - Abstract interface for DEM sampling.

Defines the abstract base class for all elevation sources used by the DEM
tile builder. An elevation model exposes its samples on an integer pixel
grid ``(x, y)`` (x = column/eastward, y = row/southward), conversions
between that grid and geodetic coordinates, a no-data sentinel, and its
pixel spacing. Public methods support the scalar/array dispatch pattern
used throughout the package, and apply an optional geoid correction that
turns mean-sea-level heights into heights above the WGS-84 ellipsoid.

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
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple, Union

# Third-party
import numpy as np

ArrayOrScalar = Union[float, list, np.ndarray]


def _is_scalar(val: Any) -> bool:
    """Check if a value is a scalar (not array-like)."""
    if isinstance(val, np.ndarray):
        return val.ndim == 0
    return isinstance(val, (int, float, np.integer, np.floating))


def _to_array(val: Any) -> np.ndarray:
    """Convert scalar, list, or array to 1D numpy array of float64."""
    arr = np.asarray(val, dtype=np.float64)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    return arr


class ElevationModel(ABC):
    """Abstract base class for gridded terrain elevation sources.

    Concrete subclasses implement three vectorized methods operating on
    1D float64 arrays: ``_sample_array``, ``_geodetic_to_index_array`` and
    ``_index_to_geodetic_array``. The public methods handle scalar/array
    dispatch. Sampling never raises for missing data: unavailable samples
    come back as NaN (``sample``) or masked (``sample_masked``).

    Implementations must allow concurrent read-only calls from several
    threads once constructed.

    Parameters
    ----------
    dem_path : str or None, optional
        Path to the DEM data source, for diagnostics.
    no_data_value : float, optional
        Sentinel marking missing samples. Default 0.0.
    geoid_path : str or None, optional
        Path to an EGM96 geoid grid (``.pgm``). When provided, the geoid
        undulation is added to every available sample.

    Coordinate Conventions
    ----------------------
    - **Pixel index:** ``(x, y)``; integer values address sample centres.
    - **Latitude/Longitude:** degrees North/East.
    - **Heights without geoid:** meters, as stored in the DEM.
    - **Heights with geoid:** HAE = stored height + undulation.
    """

    def __init__(
        self,
        dem_path: Optional[str] = None,
        no_data_value: float = 0.0,
        geoid_path: Optional[str] = None,
    ) -> None:
        self.dem_path = dem_path
        self.geoid_path = geoid_path
        self._no_data_value = float(no_data_value)
        self._geoid = None

        if geoid_path is not None:
            from topophase.elevation.geoid import GeoidCorrection
            self._geoid = GeoidCorrection(geoid_path)

    @property
    def no_data_value(self) -> float:
        """Sentinel value marking missing elevation samples."""
        return self._no_data_value

    @property
    def pixel_spacing(self) -> Tuple[float, float]:
        """``(lat_spacing, lon_spacing)`` in degrees per sample.

        Measured between the geodetic positions of neighbouring samples
        at the grid origin. Subclasses with a fixed grid override this.
        """
        lats, lons = self._index_to_geodetic_array(
            np.array([0.0, 1.0, 0.0]), np.array([0.0, 0.0, 1.0])
        )
        return (abs(float(lats[2] - lats[0])), abs(float(lons[1] - lons[0])))

    # ------------------------------------------------------------------
    # Subclass contract
    # ------------------------------------------------------------------

    @abstractmethod
    def _sample_array(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Read samples at integer pixel indices.

        Parameters
        ----------
        xs : np.ndarray
            Column indices, shape ``(N,)``, integral float64 values.
        ys : np.ndarray
            Row indices, shape ``(N,)``, integral float64 values.

        Returns
        -------
        np.ndarray
            Heights in meters, shape ``(N,)``. NaN where the sample is
            unavailable (outside coverage, unreadable, or no-data).
        """
        ...

    @abstractmethod
    def _geodetic_to_index_array(
        self, lats: np.ndarray, lons: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Fractional pixel indices ``(xs, ys)`` of geodetic points."""
        ...

    @abstractmethod
    def _index_to_geodetic_array(
        self, xs: np.ndarray, ys: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Geodetic ``(lats, lons)`` of pixel indices; NaN outside coverage."""
        ...

    def _read(
        self, xs: np.ndarray, ys: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Geoid-corrected samples and their no-data mask.

        The mask is decided on the stored values, so a correction never
        turns a no-data sentinel into a valid height or the reverse.
        """
        xs = np.round(xs)
        ys = np.round(ys)
        heights = self._sample_array(xs, ys)
        missing = ~np.isfinite(heights) | (heights == self._no_data_value)
        if self._geoid is not None and not np.all(missing):
            lats, lons = self._index_to_geodetic_array(xs[~missing],
                                                       ys[~missing])
            heights = heights.copy()
            heights[~missing] += self._geoid.get_undulation(lats, lons)
        return heights, missing

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def sample(
        self, x: ArrayOrScalar, y: ArrayOrScalar
    ) -> Union[float, np.ndarray]:
        """Elevation at pixel index ``(x, y)``; NaN when unavailable.

        Fractional indices are rounded to the nearest sample.

        Parameters
        ----------
        x : float, list, or np.ndarray
            Column index(es).
        y : float, list, or np.ndarray
            Row index(es).

        Returns
        -------
        float or np.ndarray
            A float for scalar inputs, otherwise an array.
        """
        heights, _ = self._read(_to_array(x), _to_array(y))
        if _is_scalar(x) and _is_scalar(y):
            return float(heights[0])
        return heights

    def sample_masked(
        self, x: ArrayOrScalar, y: ArrayOrScalar
    ) -> np.ma.MaskedArray:
        """Elevation at pixel indices, tagged with a no-data mask.

        Samples that are unavailable, NaN, or equal to the no-data
        sentinel are masked; the underlying data of masked entries is
        undefined.

        Returns
        -------
        np.ma.MaskedArray
            Shape ``(N,)``.
        """
        heights, missing = self._read(_to_array(x), _to_array(y))
        return np.ma.MaskedArray(heights, mask=missing)

    def geodetic_to_index(
        self, lat: ArrayOrScalar, lon: ArrayOrScalar
    ) -> Union[Tuple[float, float], Tuple[np.ndarray, np.ndarray]]:
        """Fractional pixel index ``(x, y)`` of a geodetic position.

        Parameters
        ----------
        lat : float, list, or np.ndarray
            Latitude(s) in degrees.
        lon : float, list, or np.ndarray
            Longitude(s) in degrees.

        Returns
        -------
        Tuple
            ``(x, y)`` floats for scalar inputs, arrays otherwise.
        """
        xs, ys = self._geodetic_to_index_array(_to_array(lat), _to_array(lon))
        if _is_scalar(lat) and _is_scalar(lon):
            return (float(xs[0]), float(ys[0]))
        return xs, ys

    def index_to_geodetic(
        self, x: ArrayOrScalar, y: ArrayOrScalar
    ) -> Union[Tuple[float, float], Tuple[np.ndarray, np.ndarray]]:
        """Geodetic ``(lat, lon)`` in degrees of a pixel index.

        Returns NaN for indices outside the model's coverage, which the
        DEM tile builder treats as an invalid position.
        """
        lats, lons = self._index_to_geodetic_array(_to_array(x), _to_array(y))
        if _is_scalar(x) and _is_scalar(y):
            return (float(lats[0]), float(lons[0]))
        return lats, lons

    def get_elevation(
        self, lat: ArrayOrScalar, lon: ArrayOrScalar
    ) -> Union[float, np.ndarray]:
        """Nearest-sample elevation at geodetic position(s).

        Parameters
        ----------
        lat : float, list, or np.ndarray
            Latitude(s) in degrees.
        lon : float, list, or np.ndarray
            Longitude(s) in degrees.

        Returns
        -------
        float or np.ndarray
            Heights in meters; NaN where unavailable or no-data.

        Examples
        --------
        >>> height = elev.get_elevation(34.05, -118.25)
        """
        xs, ys = self._geodetic_to_index_array(_to_array(lat), _to_array(lon))
        heights = self.sample_masked(xs, ys).filled(np.nan)
        if _is_scalar(lat) and _is_scalar(lon):
            return float(heights[0])
        return heights
