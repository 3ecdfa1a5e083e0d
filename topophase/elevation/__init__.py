# -*- coding: utf-8 -*-
"""
Elevation Module - Terrain height sources for DEM tile building.

Provides an abstract ``ElevationModel`` sampled on an integer pixel grid
with masked no-data handling, plus concrete sources: in-memory rasters,
external DEM files, and built-in tiled global DEMs selected by name.

Key Classes
-----------
- ElevationModel: Abstract base class
- RasterElevation: In-memory north-up raster
- GeoTIFFDEM: External single-file DEM (requires rasterio)
- TiledDEM: SRTM/DTED tile directories (requires rasterio)
- DemDescriptor: Grid description of a built-in DEM
- GeoidCorrection: EGM96 undulation for MSL-to-HAE conversion

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

from topophase.elevation.base import ElevationModel
from topophase.elevation.geoid import GeoidCorrection
from topophase.elevation.raster import RasterElevation
from topophase.elevation.geotiff_dem import GeoTIFFDEM
from topophase.elevation.tiled import DemDescriptor, TiledDEM
from topophase.elevation.registry import (
    available_dems,
    create_elevation_model,
    get_descriptor,
)

__all__ = [
    'ElevationModel',
    'RasterElevation',
    'GeoTIFFDEM',
    'DemDescriptor',
    'TiledDEM',
    'GeoidCorrection',
    'available_dems',
    'create_elevation_model',
    'get_descriptor',
]
