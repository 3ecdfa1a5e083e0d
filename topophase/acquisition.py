# -*- coding: utf-8 -*-
"""
Acquisitions and Image Pairs - Typed pairing table for phase removal.

An ``Acquisition`` bundles one radar image's metadata with its fitted
orbit and, optionally, the real/imaginary bands holding its complex
interferogram samples. ``build_image_pairs`` crosses reference and
comparison acquisitions of matching polarization into an immutable table
of ``ImagePair`` entries, each carrying the names of its destination
bands. The table is built once per run and shared read-only by all tiles.

Band naming: the pair tag is ``_<POL>`` (omitted for unpolarized data)
followed by ``_<reference date>_<comparison date>``; destination bands
are ``i<tag>``, ``q<tag>``, ``<topo phase name><tag>`` and, when
requested, ``elevation<tag>``.

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
import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

# Third-party
import numpy as np

# topophase internal
from topophase.exceptions import ValidationError
from topophase.geometry import Orbit, SLCImage
from topophase.vocabulary import BandRole, Polarization
from topophase.window import Window

logger = logging.getLogger(__name__)


def _check_bands(real: Any, imag: Any, owner: str) -> None:
    if (real is None) != (imag is None):
        raise ValidationError(
            f"{owner}: real and imaginary bands must be given together"
        )
    if real is not None and tuple(real.shape) != tuple(imag.shape):
        raise ValidationError(
            f"{owner}: real band shape {tuple(real.shape)} does not match "
            f"imaginary band shape {tuple(imag.shape)}"
        )


def _read_complex(real: Any, imag: Any, window: Window) -> np.ndarray:
    rows, cols = window.slices
    return np.asarray(real[rows, cols], dtype=np.float64) \
        + 1j * np.asarray(imag[rows, cols], dtype=np.float64)


@dataclass(frozen=True)
class Acquisition:
    """One radar acquisition: geometry, orbit and optional pixel bands.

    Parameters
    ----------
    metadata : SLCImage
        Acquisition timing and sensor parameters.
    orbit : Orbit
        Orbit model fitted to the acquisition's state vectors.
    real : array-like, optional
        Real part of the complex samples, full image, 2D. Anything that
        supports numpy slicing (arrays, memmaps).
    imag : array-like, optional
        Imaginary part, same shape as ``real``.
    """

    metadata: SLCImage
    orbit: Orbit
    real: Optional[Any] = None
    imag: Optional[Any] = None

    def __post_init__(self) -> None:
        _check_bands(self.real, self.imag, str(self.metadata))

    @classmethod
    def from_metadata(
        cls,
        metadata: SLCImage,
        orbit_degree: int = 3,
        real: Optional[Any] = None,
        imag: Optional[Any] = None,
    ) -> 'Acquisition':
        """Fit the orbit from ``metadata`` and build an acquisition."""
        return cls(metadata, Orbit.from_metadata(metadata, orbit_degree),
                   real, imag)

    @property
    def acquisition_id(self) -> int:
        return self.metadata.acquisition_id

    @property
    def polarization(self) -> Polarization:
        return self.metadata.polarization

    @property
    def date(self) -> str:
        return self.metadata.date

    @property
    def has_bands(self) -> bool:
        """Whether complex sample bands are attached."""
        return self.real is not None

    def read_complex(self, window: Window) -> np.ndarray:
        """Complex samples of ``window`` as a complex128 array.

        Raises
        ------
        ValidationError
            If no bands are attached.
        """
        if not self.has_bands:
            raise ValidationError(f"{self.metadata} has no complex bands")
        return _read_complex(self.real, self.imag, window)


def band_tag(
    polarization: Polarization, reference_date: str, comparison_date: str
) -> str:
    """Suffix identifying a pair in band names, e.g. ``'_VV_d1_d2'``."""
    pol = f"_{polarization.value}" if polarization is not Polarization.NONE \
        else ''
    return f"{pol}_{reference_date}_{comparison_date}"


@dataclass(frozen=True)
class PairBandNames:
    """Destination band names of one image pair."""

    i: str
    q: str
    topo_phase: str
    elevation: Optional[str] = None

    @classmethod
    def for_tag(
        cls,
        tag: str,
        topo_phase_band_name: str = 'topo_phase',
        output_elevation: bool = False,
    ) -> 'PairBandNames':
        return cls(
            i=f"i{tag}",
            q=f"q{tag}",
            topo_phase=f"{topo_phase_band_name}{tag}",
            elevation=f"elevation{tag}" if output_elevation else None,
        )

    def all(self) -> Tuple[str, ...]:
        """All destination names, in I, Q, phase, elevation order."""
        names = (self.i, self.q, self.topo_phase, self.elevation)
        return tuple(n for n in names if n is not None)

    def by_role(self) -> Dict[BandRole, str]:
        """Destination names keyed by band role; elevation only if set."""
        roles = {
            BandRole.REAL: self.i,
            BandRole.IMAGINARY: self.q,
            BandRole.PHASE: self.topo_phase,
        }
        if self.elevation is not None:
            roles[BandRole.ELEVATION] = self.elevation
        return roles


@dataclass(frozen=True)
class ImagePair:
    """Reference/comparison pair and where its results go.

    The observed interferogram is read from the pair's own ``real`` and
    ``imag`` bands when attached, otherwise from the reference
    acquisition's bands.
    """

    reference: Acquisition
    comparison: Acquisition
    band_names: PairBandNames
    real: Optional[Any] = None
    imag: Optional[Any] = None

    def __post_init__(self) -> None:
        _check_bands(self.real, self.imag, self.name)

    @property
    def name(self) -> str:
        return band_tag(
            self.reference.polarization,
            self.reference.date,
            self.comparison.date,
        ).lstrip('_')

    def with_interferogram(self, real: Any, imag: Any) -> 'ImagePair':
        """Copy of this pair reading its interferogram from given bands."""
        return dataclasses.replace(self, real=real, imag=imag)

    def read_interferogram(self, window: Window) -> np.ndarray:
        """Observed complex interferogram over ``window``."""
        if self.real is not None:
            return _read_complex(self.real, self.imag, window)
        return self.reference.read_complex(window)


def build_image_pairs(
    references: Sequence[Acquisition],
    comparisons: Sequence[Acquisition],
    topo_phase_band_name: str = 'topo_phase',
    output_elevation: bool = False,
) -> Tuple[ImagePair, ...]:
    """Pair every reference with every comparison of the same polarization.

    Parameters
    ----------
    references : Sequence[Acquisition]
        Reference acquisitions; their geometry defines the radar grid.
    comparisons : Sequence[Acquisition]
        Comparison acquisitions.
    topo_phase_band_name : str, optional
        Base name of the synthesized phase band.
    output_elevation : bool, optional
        Whether an elevation band is produced per pair.

    Returns
    -------
    Tuple[ImagePair, ...]
        Pairs in reference-major order.

    Raises
    ------
    ValidationError
        If no pair can be formed or two pairs would share band names.
    """
    pairs = []
    seen = set()
    for ref in references:
        for cmp in comparisons:
            if cmp.polarization is not ref.polarization:
                continue
            if cmp.acquisition_id == ref.acquisition_id \
                    and cmp.date == ref.date:
                continue
            tag = band_tag(ref.polarization, ref.date, cmp.date)
            names = PairBandNames.for_tag(
                tag, topo_phase_band_name, output_elevation
            )
            if names.i in seen:
                raise ValidationError(
                    f"Duplicate destination bands for pair tag '{tag}'"
                )
            seen.add(names.i)
            pairs.append(ImagePair(ref, cmp, names))

    if not pairs:
        raise ValidationError(
            "No reference/comparison acquisitions share a polarization"
        )
    logger.info("Built %d image pair(s): %s",
                len(pairs), ', '.join(p.name for p in pairs))
    return tuple(pairs)
