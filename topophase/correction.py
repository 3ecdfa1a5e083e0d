# -*- coding: utf-8 -*-
"""
Topographic Phase Removal - Per-tile correction of interferograms.

``TopoPhaseRemoval`` is the tile computation entry point. For each
radar window it builds one DEM tile from the first pair's reference
geometry, synthesizes the topographic phase of every image pair, and
writes the flattened interferogram, the synthesized phase and optionally
the radar-coded elevation into that pair's destination rasters:

    corrected = observed * conj(exp(1j * topo_phase))

Windows without DEM coverage are passed through: destination I/Q get the
observed values, phase and elevation get the no-data value, and
``TileStatus.PASSED_THROUGH`` is returned.

The elevation source is opened once, by ``initialize_elevation``, under a
lock; every tile then shares the same read-only handle.

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
import threading
from typing import Any, Dict, MutableMapping, Optional, Sequence, Tuple

# Third-party
import numpy as np

# topophase internal
from topophase.acquisition import Acquisition, ImagePair, build_image_pairs
from topophase.config import TopoPhaseRemovalConfig
from topophase.dem_tile import build_dem_tile
from topophase.elevation import ElevationModel, create_elevation_model
from topophase.exceptions import (
    SynthesisError,
    TileComputationError,
    ValidationError,
)
from topophase.topo_phase import TopoPhaseResult, compute_topo_phase
from topophase.vocabulary import BandRole, TileStatus
from topophase.window import Window

logger = logging.getLogger(__name__)


def correct_interferogram(
    observed: np.ndarray, result: TopoPhaseResult
) -> np.ndarray:
    """Remove synthesized phase from an observed complex interferogram.

    Parameters
    ----------
    observed : np.ndarray
        Complex interferogram samples, window shape.
    result : TopoPhaseResult
        Synthesized phase and validity mask for the same window.

    Returns
    -------
    np.ndarray
        complex128 array. Cells outside ``result.valid`` keep the
        observed value.
    """
    observed = np.asarray(observed, dtype=np.complex128)
    if observed.shape != result.phase.shape:
        raise ValidationError(
            f"Interferogram shape {observed.shape} does not match phase "
            f"shape {result.phase.shape}"
        )
    corrected = observed.copy()
    valid = result.valid
    corrected[valid] = observed[valid] * np.exp(-1j * result.phase[valid])
    return corrected


def _with_orbit_degree(acquisition: Acquisition, degree: int) -> Acquisition:
    """Return ``acquisition`` with its orbit fitted at ``degree``."""
    if acquisition.orbit.degree == degree:
        return acquisition
    logger.debug("Refitting orbit of %s at degree %d",
                 acquisition.metadata, degree)
    return Acquisition.from_metadata(
        acquisition.metadata, degree, acquisition.real, acquisition.imag
    )


class TopoPhaseRemoval:
    """Removes terrain-induced phase from a stack of interferograms.

    Parameters
    ----------
    pairs : Sequence[ImagePair]
        Pairing table. All pairs should share one reference geometry;
        the first pair's reference bounds the DEM footprint.
    config : TopoPhaseRemovalConfig, optional
        Processing options. Defaults to ``TopoPhaseRemovalConfig()``.
    elevation : ElevationModel, optional
        Pre-opened elevation source. When omitted it is created from
        ``config`` on first use.

    Raises
    ------
    ValidationError
        If ``pairs`` is empty.

    Examples
    --------
    >>> removal = TopoPhaseRemoval.from_acquisitions([ref], [cmp], config)
    >>> targets = removal.allocate_targets((ref.metadata.lines,
    ...                                     ref.metadata.pixels))
    >>> removal.compute_tile_stack(Window(0, 511, 0, 511), targets)
    <TileStatus.CORRECTED: 'corrected'>
    """

    def __init__(
        self,
        pairs: Sequence[ImagePair],
        config: Optional[TopoPhaseRemovalConfig] = None,
        elevation: Optional[ElevationModel] = None,
    ) -> None:
        if not pairs:
            raise ValidationError("At least one image pair is required")
        self.pairs: Tuple[ImagePair, ...] = tuple(pairs)
        self.config = config if config is not None \
            else TopoPhaseRemovalConfig()
        self._elevation = elevation
        self._elevation_ready = elevation is not None
        self._init_lock = threading.Lock()

    @classmethod
    def from_acquisitions(
        cls,
        references: Sequence[Acquisition],
        comparisons: Sequence[Acquisition],
        config: Optional[TopoPhaseRemovalConfig] = None,
        elevation: Optional[ElevationModel] = None,
    ) -> 'TopoPhaseRemoval':
        """Pair acquisitions by polarization and build the remover.

        Orbits fitted with a degree other than ``config.orbit_degree`` are
        refitted from their acquisition's state vectors.
        """
        config = config if config is not None else TopoPhaseRemovalConfig()
        references = [_with_orbit_degree(a, config.orbit_degree)
                      for a in references]
        comparisons = [_with_orbit_degree(a, config.orbit_degree)
                       for a in comparisons]
        pairs = build_image_pairs(
            references, comparisons,
            topo_phase_band_name=config.topo_phase_band_name,
            output_elevation=config.output_elevation,
        )
        return cls(pairs, config, elevation)

    @property
    def reference(self) -> Acquisition:
        """Acquisition whose geometry bounds every DEM tile."""
        return self.pairs[0].reference

    @property
    def target_band_names(self) -> Tuple[str, ...]:
        """Every destination band, pair by pair."""
        return tuple(n for p in self.pairs for n in p.band_names.all())

    def initialize_elevation(self) -> ElevationModel:
        """Open the elevation source once and return the shared handle.

        Safe to call from several threads; only the first caller creates
        the model.

        Raises
        ------
        ConfigurationError
            If the configured DEM is unsupported or not installed.
        """
        if self._elevation_ready:
            return self._elevation
        with self._init_lock:
            if not self._elevation_ready:
                self._elevation = create_elevation_model(self.config)
                self._elevation_ready = True
                logger.info("Elevation source ready: %r", self._elevation)
        return self._elevation

    def allocate_targets(
        self, shape: Tuple[int, int], dtype: Any = np.float32
    ) -> Dict[str, np.ndarray]:
        """Zeroed destination rasters for every band of every pair."""
        return {
            name: np.zeros(shape, dtype=dtype)
            for name in self.target_band_names
        }

    def compute_tile_stack(
        self,
        window: Window,
        targets: MutableMapping[str, Any],
    ) -> TileStatus:
        """Correct one radar window for every image pair.

        Parameters
        ----------
        window : Window
            Radar window of the reference image.
        targets : MutableMapping[str, array-like]
            Full-image destination rasters keyed by band name. Each must
            support numpy slice assignment.

        Returns
        -------
        TileStatus
            ``CORRECTED``, or ``PASSED_THROUGH`` when the window has no
            DEM coverage.

        Raises
        ------
        ValidationError
            If a destination band is missing.
        TileComputationError
            If phase synthesis fails for a pair.
        """
        missing = [n for n in self.target_band_names if n not in targets]
        if missing:
            raise ValidationError(
                f"Missing destination band(s): {', '.join(missing)}"
            )

        elevation = self.initialize_elevation()
        dem_tile = build_dem_tile(
            window,
            self.reference,
            elevation,
            extension_percent=self.config.extension_percent,
        )

        if dem_tile is None:
            logger.warning(
                "No DEM coverage for %s; writing uncorrected interferograms",
                window,
            )
            no_data = np.full(window.shape, elevation.no_data_value)
            for pair in self.pairs:
                self._write(pair, window, targets,
                            pair.read_interferogram(window), no_data, no_data)
            return TileStatus.PASSED_THROUGH

        for pair in self.pairs:
            include_elevation = pair.band_names.elevation is not None
            try:
                result = compute_topo_phase(
                    pair, window, dem_tile, include_elevation
                )
            except SynthesisError as e:
                raise TileComputationError(
                    f"Topographic phase synthesis failed "
                    f"(reference #{pair.reference.acquisition_id}, "
                    f"comparison #{pair.comparison.acquisition_id}): {e}",
                    window=window,
                    pair_name=pair.name,
                ) from e
            corrected = correct_interferogram(
                pair.read_interferogram(window), result
            )
            self._write(pair, window, targets, corrected,
                        result.phase, result.elevation)
        return TileStatus.CORRECTED

    @staticmethod
    def _write(
        pair: ImagePair,
        window: Window,
        targets: MutableMapping[str, Any],
        interferogram: np.ndarray,
        phase: np.ndarray,
        elevation: Optional[np.ndarray],
    ) -> None:
        rows, cols = window.slices
        values = {
            BandRole.REAL: interferogram.real,
            BandRole.IMAGINARY: interferogram.imag,
            BandRole.PHASE: phase,
            BandRole.ELEVATION: elevation,
        }
        for role, name in pair.band_names.by_role().items():
            if values[role] is not None:
                targets[name][rows, cols] = values[role]

    def __repr__(self) -> str:
        return (
            f"TopoPhaseRemoval(pairs={len(self.pairs)}, "
            f"dem={self.config.external_dem_file or self.config.dem_name!r})"
        )
