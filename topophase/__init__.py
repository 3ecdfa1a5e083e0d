# -*- coding: utf-8 -*-
"""
topophase - Topographic phase removal for SAR interferograms.

Synthesizes the interferometric phase induced by terrain relief from a
DEM and the orbits of both acquisitions, and removes it from complex
interferograms tile by tile.

Modules
-------
- elevation: DEM sources (in-memory, external file, SRTM/DTED tiles)
- geometry: Acquisition metadata, orbit model, geocoding
- dem_tile: Footprint extension and DEM tile building
- topo_phase: Radar coding and grid resampling
- correction: Per-tile correction engine
- tiling: Whole-image driver

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

__version__ = '0.1.0'

from topophase.acquisition import (
    Acquisition,
    ImagePair,
    PairBandNames,
    build_image_pairs,
)
from topophase.config import TopoPhaseRemovalConfig
from topophase.correction import TopoPhaseRemoval, correct_interferogram
from topophase.dem_tile import (
    DemTile,
    HeightRange,
    PixelFootprint,
    build_dem_tile,
    estimate_height_range,
    extend_footprint,
)
from topophase.tiling import TileGrid, process_image
from topophase.topo_phase import TopoPhase, TopoPhaseResult, compute_topo_phase
from topophase.vocabulary import Polarization, TileStatus
from topophase.window import Window

__all__ = [
    '__version__',
    'Acquisition',
    'ImagePair',
    'PairBandNames',
    'build_image_pairs',
    'TopoPhaseRemovalConfig',
    'TopoPhaseRemoval',
    'correct_interferogram',
    'DemTile',
    'HeightRange',
    'PixelFootprint',
    'build_dem_tile',
    'estimate_height_range',
    'extend_footprint',
    'TileGrid',
    'process_image',
    'TopoPhase',
    'TopoPhaseResult',
    'compute_topo_phase',
    'Polarization',
    'TileStatus',
    'Window',
]
