# -*- coding: utf-8 -*-
"""
Tiled DEM Elevation Model - Global 1x1 degree tile sets (SRTM, DTED).

Serves a built-in global DEM stored as one file per integer-degree cell
on a fixed, grid-registered geographic index: sample ``(x, y)`` sits at
``lon = -180 + x * spacing`` and ``lat = 90 - y * spacing``. Tiles are
discovered under a root directory at construction and read lazily with
rasterio on first use. Loaded tiles are kept in a small LRU cache guarded
by a lock, so one instance can serve concurrent readers.

Two naming layouts are recognized::

    srtm_root/                    dted_root/
        N34W118.hgt                   w118/
        N35W118.tif                       n34.dt1
                                          n35.dt1

Dependencies
------------
rasterio

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
import re
import threading
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

# Third-party
import numpy as np
import rasterio
from rasterio.errors import RasterioIOError

# topophase internal
from topophase.elevation.base import ElevationModel
from topophase.exceptions import ValidationError

logger = logging.getLogger(__name__)

_SRTM_NAME = re.compile(r'^([NS])(\d{1,2})([EW])(\d{1,3})')


@dataclass(frozen=True)
class DemDescriptor:
    """Static description of a built-in tiled DEM.

    Parameters
    ----------
    name : str
        Registry name, e.g. ``'SRTM 3Sec'``.
    samples_per_degree : int
        Posting density; spacing is ``1 / samples_per_degree`` degrees.
    no_data_value : float
        Sentinel stored in the tiles for voids.
    extensions : Tuple[str, ...]
        Accepted tile file extensions, in order of preference.
    min_lat, max_lat : float
        Latitude band covered by the product, in degrees.
    """

    name: str
    samples_per_degree: int
    no_data_value: float
    extensions: Tuple[str, ...]
    min_lat: float = -90.0
    max_lat: float = 90.0

    @property
    def spacing(self) -> float:
        """Sample spacing in degrees."""
        return 1.0 / self.samples_per_degree


def _parse_tile_key(filepath: Path) -> Optional[Tuple[int, int]]:
    """Extract ``(lon_floor, lat_floor)`` from a tile path.

    Accepts SRTM file stems (``N34W118``) and the DTED layout
    (``w118/n34.dt1``). Returns None for anything else.
    """
    match = _SRTM_NAME.match(filepath.stem.upper())
    if match:
        lat = int(match.group(2)) * (1 if match.group(1) == 'N' else -1)
        lon = int(match.group(4)) * (1 if match.group(3) == 'E' else -1)
        return (lon, lat)

    try:
        lat_stem = filepath.stem.lower()
        lon_dir = filepath.parent.name.lower()

        if lat_stem.startswith('n'):
            lat = int(lat_stem[1:])
        elif lat_stem.startswith('s'):
            lat = -int(lat_stem[1:])
        else:
            return None

        if lon_dir.startswith('e'):
            lon = int(lon_dir[1:])
        elif lon_dir.startswith('w'):
            lon = -int(lon_dir[1:])
        else:
            return None

        return (lon, lat)
    except (ValueError, IndexError):
        return None


class TiledDEM(ElevationModel):
    """Elevation model over a directory of 1x1 degree DEM tiles.

    Parameters
    ----------
    dem_path : str or Path
        Root directory containing tiles. Searched recursively.
    descriptor : DemDescriptor
        Grid and naming description of the product.
    max_cached_tiles : int, optional
        Number of decoded tiles kept in memory. Default 16.
    geoid_path : str or Path, optional
        EGM96 geoid grid for MSL-to-HAE correction.

    Raises
    ------
    FileNotFoundError
        If ``dem_path`` or ``geoid_path`` does not exist.
    ValidationError
        If ``dem_path`` is not a directory.

    Examples
    --------
    >>> from topophase.elevation.registry import get_descriptor
    >>> elev = TiledDEM('/data/srtm', get_descriptor('SRTM 3Sec'))
    >>> elev.get_elevation(34.05, -118.25)
    """

    def __init__(
        self,
        dem_path: Union[str, Path],
        descriptor: DemDescriptor,
        max_cached_tiles: int = 16,
        geoid_path: Optional[Union[str, Path]] = None,
    ) -> None:
        dem_path = Path(dem_path)
        if not dem_path.exists():
            raise FileNotFoundError(
                f"DEM tile directory does not exist: {dem_path}"
            )
        if not dem_path.is_dir():
            raise ValidationError(
                f"DEM tile path must be a directory, got file: {dem_path}"
            )

        super().__init__(
            dem_path=str(dem_path),
            no_data_value=descriptor.no_data_value,
            geoid_path=None if geoid_path is None else str(geoid_path),
        )
        self.descriptor = descriptor
        self._max_cached_tiles = max(1, int(max_cached_tiles))
        self._cache: 'OrderedDict[Tuple[int, int], Optional[np.ndarray]]' = \
            OrderedDict()
        self._transforms: Dict[Tuple[int, int], object] = {}
        self._cache_lock = threading.Lock()

        self._tile_index: Dict[Tuple[int, int], Path] = {}
        self._scan_tiles(dem_path)
        logger.debug(
            "Indexed %d %s tiles under %s",
            self.tile_count, descriptor.name, dem_path,
        )

    def _scan_tiles(self, root: Path) -> None:
        """Recursively scan ``root`` and index tiles by integer key.

        When the same cell exists with several extensions the first one
        listed in the descriptor wins.
        """
        tiles_by_key: Dict[Tuple[int, int], Dict[str, Path]] = {}
        for ext in self.descriptor.extensions:
            for filepath in root.rglob('*'):
                if filepath.suffix.lower() != ext:
                    continue
                key = _parse_tile_key(filepath)
                if key is not None:
                    tiles_by_key.setdefault(key, {})[ext] = filepath

        for key, ext_map in tiles_by_key.items():
            for ext in self.descriptor.extensions:
                if ext in ext_map:
                    self._tile_index[key] = ext_map[ext]
                    break

    @property
    def tile_count(self) -> int:
        """Number of tiles indexed."""
        return len(self._tile_index)

    @property
    def coverage_bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """Geographic bounding box of all indexed tiles.

        Returns
        -------
        Tuple[float, float, float, float] or None
            ``(min_lon, min_lat, max_lon, max_lat)`` in degrees, or None
            if no tiles are indexed.
        """
        if not self._tile_index:
            return None
        lons = [k[0] for k in self._tile_index]
        lats = [k[1] for k in self._tile_index]
        return (
            float(min(lons)),
            float(min(lats)),
            float(max(lons)) + 1.0,
            float(max(lats)) + 1.0,
        )

    @property
    def pixel_spacing(self) -> Tuple[float, float]:
        spacing = self.descriptor.spacing
        return (spacing, spacing)

    # ------------------------------------------------------------------
    # Global grid
    # ------------------------------------------------------------------

    def _geodetic_to_index_array(
        self, lats: np.ndarray, lons: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        spacing = self.descriptor.spacing
        return (lons + 180.0) / spacing, (90.0 - lats) / spacing

    def _index_to_geodetic_array(
        self, xs: np.ndarray, ys: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        spacing = self.descriptor.spacing
        lons = -180.0 + xs * spacing
        lats = 90.0 - ys * spacing
        outside = (
            ~np.isfinite(lats) | ~np.isfinite(lons)
            | (lats < self.descriptor.min_lat)
            | (lats > self.descriptor.max_lat)
            | (lons < -180.0) | (lons > 180.0)
        )
        lats = np.where(outside, np.nan, lats)
        lons = np.where(outside, np.nan, lons)
        return lats, lons

    # ------------------------------------------------------------------
    # Tile access
    # ------------------------------------------------------------------

    def _read_tile(self, key: Tuple[int, int]) -> Optional[np.ndarray]:
        """Decode one tile; None when the file cannot be read."""
        path = self._tile_index[key]
        try:
            with rasterio.open(str(path)) as ds:
                data = ds.read(1).astype(np.float64)
                nodata = ds.nodata
                self._transforms[key] = ds.transform
        except (RasterioIOError, OSError) as e:
            logger.warning("Unreadable DEM tile %s: %s", path, e)
            return None
        if nodata is not None:
            data[data == float(nodata)] = np.nan
        return data

    def _get_tile(self, key: Tuple[int, int]) -> Optional[np.ndarray]:
        with self._cache_lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                return self._cache[key]
            data = self._read_tile(key)
            self._cache[key] = data
            while len(self._cache) > self._max_cached_tiles:
                self._cache.popitem(last=False)
            return data

    def _sample_array(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Nearest-post lookup, grouped by tile.

        Points outside the indexed tiles or in unreadable tiles get NaN.
        """
        n = xs.shape[0]
        heights = np.full(n, np.nan, dtype=np.float64)
        lats, lons = self._index_to_geodetic_array(xs, ys)
        finite = np.isfinite(lats) & np.isfinite(lons)
        if not np.any(finite):
            return heights

        point_idx = np.nonzero(finite)[0]
        keys = np.column_stack([
            np.floor(lons[finite]).astype(np.int64),
            np.floor(lats[finite]).astype(np.int64),
        ])
        unique_keys, group = np.unique(keys, axis=0, return_inverse=True)
        group = np.asarray(group).ravel()

        for g, (lon_key, lat_key) in enumerate(unique_keys):
            key = (int(lon_key), int(lat_key))
            if key not in self._tile_index:
                continue
            data = self._get_tile(key)
            if data is None:
                continue
            idx = point_idx[group == g]
            inv_transform = ~self._transforms[key]
            px_cols, px_rows = inv_transform * (lons[idx], lats[idx])
            col_idx = np.floor(np.asarray(px_cols)).astype(np.intp)
            row_idx = np.floor(np.asarray(px_rows)).astype(np.intp)

            nrows, ncols = data.shape
            valid = (
                (row_idx >= 0) & (row_idx < nrows)
                & (col_idx >= 0) & (col_idx < ncols)
            )
            heights[idx[valid]] = data[row_idx[valid], col_idx[valid]]

        return heights

    def __repr__(self) -> str:
        return (
            f"TiledDEM(name={self.descriptor.name!r}, "
            f"tiles={self.tile_count}, path={self.dem_path!r})"
        )
