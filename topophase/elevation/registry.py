# -*- coding: utf-8 -*-
"""
Elevation Registry - Built-in DEM descriptors and model selection.

Maps user-facing DEM names to ``DemDescriptor`` instances and provides
``create_elevation_model``, the single place where the elevation source
for a processing run is chosen: an external DEM file when one is
configured, otherwise the named built-in tiled DEM. Either can be
geoid-corrected.

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
from typing import Any, List

# topophase internal
from topophase.elevation.base import ElevationModel
from topophase.elevation.geotiff_dem import GeoTIFFDEM
from topophase.elevation.tiled import DemDescriptor, TiledDEM
from topophase.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_SRTM_NO_DATA = -32768.0
_DTED_NO_DATA = -32767.0

_DESCRIPTORS = {
    d.name: d for d in (
        DemDescriptor('SRTM 3Sec', 1200, _SRTM_NO_DATA, ('.hgt', '.tif'),
                      min_lat=-60.0, max_lat=60.0),
        DemDescriptor('SRTM 1Sec HGT', 3600, _SRTM_NO_DATA, ('.hgt',),
                      min_lat=-60.0, max_lat=60.0),
        DemDescriptor('DTED Level 1', 1200, _DTED_NO_DATA, ('.dt1',)),
        DemDescriptor('DTED Level 2', 3600, _DTED_NO_DATA, ('.dt2',)),
    )
}


def available_dems() -> List[str]:
    """Names of the built-in tiled DEMs."""
    return sorted(_DESCRIPTORS)


def get_descriptor(name: str) -> DemDescriptor:
    """Look up a built-in DEM by name.

    Raises
    ------
    ConfigurationError
        If ``name`` is not a registered DEM.
    """
    try:
        return _DESCRIPTORS[name]
    except KeyError:
        raise ConfigurationError(
            f"DEM '{name}' is not supported. "
            f"Available: {', '.join(available_dems())}"
        ) from None


def create_elevation_model(config: Any) -> ElevationModel:
    """Open the elevation source selected by a processing configuration.

    Parameters
    ----------
    config : TopoPhaseRemovalConfig
        Uses ``external_dem_file``, ``external_dem_no_data_value``,
        ``dem_name``, ``dem_directory`` and ``geoid_path``.

    Returns
    -------
    ElevationModel
        ``GeoTIFFDEM`` for an external file, ``TiledDEM`` otherwise.

    Raises
    ------
    ConfigurationError
        If the DEM name is unknown, the external file or the geoid grid
        is missing, or the built-in DEM has no tiles installed.
    """
    geoid_path = config.geoid_path
    if geoid_path and not Path(geoid_path).is_file():
        raise ConfigurationError(f"Geoid file not found: {geoid_path}")
    geoid_path = geoid_path or None

    if config.external_dem_file:
        path = Path(config.external_dem_file)
        if not path.is_file():
            raise ConfigurationError(f"External DEM file not found: {path}")
        model = GeoTIFFDEM(
            path,
            no_data_value=config.external_dem_no_data_value,
            geoid_path=geoid_path,
        )
        logger.info("Using external DEM %s", path)
        return model

    descriptor = get_descriptor(config.dem_name)
    directory = config.dem_directory
    if not directory or not Path(directory).is_dir():
        raise ConfigurationError(
            f"DEM '{descriptor.name}' has not been installed "
            f"(tile directory: {directory})"
        )
    model = TiledDEM(directory, descriptor, geoid_path=geoid_path)
    if model.tile_count == 0:
        raise ConfigurationError(
            f"DEM '{descriptor.name}' has not been installed: "
            f"no tiles found under {directory}"
        )
    logger.info(
        "Using %s with %d tiles from %s",
        descriptor.name, model.tile_count, directory,
    )
    return model
