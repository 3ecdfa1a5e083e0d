# -*- coding: utf-8 -*-
"""
Raster Elevation Model - In-memory north-up elevation grid.

Wraps a 2D elevation array and its affine geotransform. The array is
copied and frozen at construction so concurrent readers never observe a
mutation. Rasters in a projected CRS are supported through pyproj
transformers in both directions.

Pixel-is-area convention: integer index ``(x, y)`` addresses the centre
of column ``x`` and row ``y``, i.e. map position
``transform * (x + 0.5, y + 0.5)``.

Dependencies
------------
pyproj (projected CRS only)

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
from typing import Any, Optional, Tuple

# Third-party
import numpy as np

# topophase internal
from topophase.elevation.base import ElevationModel
from topophase.exceptions import DependencyError, ValidationError


class RasterElevation(ElevationModel):
    """Elevation model over an in-memory north-up raster.

    Parameters
    ----------
    data : np.ndarray
        2D elevation array ``(rows, cols)`` in meters.
    transform : affine.Affine
        Pixel-to-map geotransform (as returned by ``rasterio``). Must be
        north-up: no rotation terms and a negative row step.
    no_data_value : float, optional
        Sentinel marking missing samples. Default 0.0.
    crs : Any, optional
        CRS of the map coordinates, anything ``pyproj.CRS`` accepts
        (including a ``rasterio`` CRS). ``None`` or a geographic CRS means
        map coordinates are longitude/latitude in degrees.
    dem_path : str, optional
        Origin of the data, for diagnostics.
    geoid_path : str, optional
        EGM96 geoid grid; when given, samples are returned as heights
        above the ellipsoid.

    Raises
    ------
    ValidationError
        If ``data`` is not 2D or the transform is not north-up.
    DependencyError
        If a projected CRS is given and pyproj is not installed.

    Examples
    --------
    >>> from rasterio.transform import Affine
    >>> elev = RasterElevation(
    ...     heights, Affine(0.001, 0.0, 10.0, 0.0, -0.001, 46.0))
    >>> elev.get_elevation(45.5, 10.5)
    """

    def __init__(
        self,
        data: np.ndarray,
        transform: Any,
        no_data_value: float = 0.0,
        crs: Optional[Any] = None,
        dem_path: Optional[str] = None,
        geoid_path: Optional[str] = None,
    ) -> None:
        data = np.array(data, dtype=np.float64)
        if data.ndim != 2:
            raise ValidationError(
                f"Elevation raster must be 2D, got shape {data.shape}"
            )
        if transform.b != 0 or transform.d != 0 \
                or transform.a <= 0 or transform.e >= 0:
            raise ValidationError(
                f"Elevation raster must be north-up, got transform {transform}"
            )

        super().__init__(dem_path=dem_path, no_data_value=no_data_value,
                         geoid_path=geoid_path)

        data.setflags(write=False)
        self._data = data
        self._nrows, self._ncols = data.shape
        self._transform = transform
        self._inv_transform = ~transform

        self._to_map = None
        self._from_map = None
        if crs is not None:
            try:
                import pyproj
            except ImportError as e:
                raise DependencyError(
                    "Elevation rasters in a projected CRS require pyproj. "
                    "Install with: pip install pyproj"
                ) from e
            crs = pyproj.CRS.from_user_input(crs)
            if not crs.is_geographic:
                self._to_map = pyproj.Transformer.from_crs(
                    'EPSG:4326', crs, always_xy=True
                )
                self._from_map = pyproj.Transformer.from_crs(
                    crs, 'EPSG:4326', always_xy=True
                )

    @property
    def shape(self) -> Tuple[int, int]:
        """Raster shape ``(rows, cols)``."""
        return (self._nrows, self._ncols)

    @property
    def transform(self) -> Any:
        """Pixel-to-map affine geotransform."""
        return self._transform

    @property
    def pixel_spacing(self) -> Tuple[float, float]:
        if self._to_map is None:
            return (abs(self._transform.e), abs(self._transform.a))
        return super().pixel_spacing

    def _in_bounds(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        return (
            np.isfinite(xs) & np.isfinite(ys)
            & (xs >= -0.5) & (xs <= self._ncols - 0.5)
            & (ys >= -0.5) & (ys <= self._nrows - 0.5)
        )

    def _geodetic_to_index_array(
        self, lats: np.ndarray, lons: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        if self._to_map is not None:
            mx, my = self._to_map.transform(lons, lats)
        else:
            mx, my = lons, lats
        cols, rows = self._inv_transform * (
            np.asarray(mx, dtype=np.float64), np.asarray(my, dtype=np.float64)
        )
        return (
            np.asarray(cols, dtype=np.float64) - 0.5,
            np.asarray(rows, dtype=np.float64) - 0.5,
        )

    def _index_to_geodetic_array(
        self, xs: np.ndarray, ys: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        inside = self._in_bounds(xs, ys)
        mx, my = self._transform * (xs + 0.5, ys + 0.5)
        if self._from_map is not None:
            lons, lats = self._from_map.transform(mx, my)
        else:
            lons, lats = mx, my
        lats = np.array(lats, dtype=np.float64)
        lons = np.array(lons, dtype=np.float64)
        lats[~inside] = np.nan
        lons[~inside] = np.nan
        return lats, lons

    def _sample_array(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        heights = np.full(xs.shape[0], np.nan, dtype=np.float64)
        valid = (
            np.isfinite(xs) & np.isfinite(ys)
            & (xs >= 0) & (xs < self._ncols)
            & (ys >= 0) & (ys < self._nrows)
        )
        if np.any(valid):
            cols = xs[valid].astype(np.intp)
            rows = ys[valid].astype(np.intp)
            heights[valid] = self._data[rows, cols]
        return heights

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(shape={self.shape}, "
            f"no_data_value={self.no_data_value})"
        )
