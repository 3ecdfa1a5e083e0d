# -*- coding: utf-8 -*-
"""
GeoTIFF DEM Elevation Model - External elevation file read via rasterio.

Loads the first band of a single-file DEM (GeoTIFF or any other
GDAL-readable raster) into memory and serves it through
``RasterElevation``. Projected DEMs (e.g. UTM) are handled with pyproj.

Dependencies
------------
rasterio
pyproj (projected DEMs only)

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
from pathlib import Path
from typing import Optional, Union

# Third-party
import numpy as np
import rasterio

# topophase internal
from topophase.elevation.raster import RasterElevation

logger = logging.getLogger(__name__)


class GeoTIFFDEM(RasterElevation):
    """Elevation model that reads a single external DEM file.

    The raster is read once at construction and the dataset closed, so
    instances hold no file handles and are safe to share across threads.

    Parameters
    ----------
    dem_path : str or Path
        Path to the DEM file. Must exist.
    no_data_value : float, optional
        User-declared no-data sentinel. When given it overrides the
        file's own nodata tag: cells carrying the file's tag are
        rewritten to this value. When ``None`` the file's tag is used,
        falling back to 0.0.
    geoid_path : str or Path, optional
        EGM96 geoid grid for MSL-to-HAE correction.

    Raises
    ------
    FileNotFoundError
        If ``dem_path`` or ``geoid_path`` does not exist.
    ValidationError
        If the DEM is not north-up or the geoid grid is malformed.

    Examples
    --------
    >>> elev = GeoTIFFDEM('/data/srtm_34_04.tif', no_data_value=-32768)
    >>> height = elev.get_elevation(34.05, -118.25)
    """

    def __init__(
        self,
        dem_path: Union[str, Path],
        no_data_value: Optional[float] = None,
        geoid_path: Optional[Union[str, Path]] = None,
    ) -> None:
        dem_path = Path(dem_path)
        if not dem_path.exists():
            raise FileNotFoundError(
                f"External DEM file does not exist: {dem_path}"
            )

        with rasterio.open(str(dem_path)) as ds:
            data = ds.read(1).astype(np.float64)
            transform = ds.transform
            crs = ds.crs
            file_nodata = ds.nodata

        if no_data_value is None:
            no_data_value = 0.0 if file_nodata is None else float(file_nodata)
        elif file_nodata is not None and float(file_nodata) != no_data_value:
            data[data == float(file_nodata)] = no_data_value

        super().__init__(
            data,
            transform,
            no_data_value=no_data_value,
            crs=crs,
            dem_path=str(dem_path),
            geoid_path=None if geoid_path is None else str(geoid_path),
        )
        logger.info(
            "Loaded external DEM %s: %d x %d, no-data %s, geoid %s",
            dem_path.name, self.shape[0], self.shape[1], self.no_data_value,
            self.geoid_path,
        )
