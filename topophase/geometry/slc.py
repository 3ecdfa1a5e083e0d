# -*- coding: utf-8 -*-
"""
SLC Image Metadata - Typed acquisition geometry for one radar image.

Dataclasses describing the timing and sensor parameters needed to map
between radar ``(line, pixel)`` coordinates and azimuth/range time, plus
the orbit state vectors the orbit model is fitted to. All times share one
reference epoch (typically seconds of day, UTC).

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
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

# Third-party
import numpy as np

# topophase internal
from topophase.exceptions import ValidationError
from topophase.vocabulary import Polarization


@dataclass(frozen=True)
class StateVector:
    """Orbit state vector at a single time.

    Parameters
    ----------
    time : float
        Time in seconds, same epoch as ``SLCImage.t_azi1``.
    position : Tuple[float, float, float]
        ECF position in meters.
    velocity : Tuple[float, float, float], optional
        ECF velocity in m/s. Not used by the polynomial fit.
    """

    time: float
    position: Tuple[float, float, float]
    velocity: Optional[Tuple[float, float, float]] = None


@dataclass
class SLCImage:
    """Radar acquisition metadata for one single-look complex image.

    Parameters
    ----------
    acquisition_id : int
        Absolute orbit number identifying the acquisition.
    date : str
        Acquisition date tag used in band names (e.g. ``'12Jan2021'``).
    t_azi1 : float
        Zero-Doppler azimuth time of the first line (seconds).
    prf : float
        Azimuth line frequency (Hz).
    t_range1 : float
        One-way slant range time of the first pixel (seconds).
    rsr2x : float
        Twice the range sampling rate (Hz), so that
        ``pixel = (t_range - t_range1) * rsr2x``.
    wavelength : float
        Radar wavelength (meters).
    lines : int
        Number of lines in the image.
    pixels : int
        Number of pixels per line.
    approx_centre : Tuple[float, float, float]
        Approximate scene centre ``(lat, lon, height)``; degrees and
        meters. Used to seed the geocoding iteration.
    state_vectors : List[StateVector]
        Orbit state vectors covering the acquisition.
    polarization : Polarization
        Polarization channel. Default ``Polarization.NONE``.
    mission : str
        Mission identifier. Default ``''``.
    """

    acquisition_id: int
    date: str
    t_azi1: float
    prf: float
    t_range1: float
    rsr2x: float
    wavelength: float
    lines: int
    pixels: int
    approx_centre: Tuple[float, float, float]
    state_vectors: List[StateVector] = field(default_factory=list)
    polarization: Polarization = Polarization.NONE
    mission: str = ''

    def __post_init__(self) -> None:
        if self.prf <= 0 or self.rsr2x <= 0:
            raise ValidationError(
                f"prf and rsr2x must be positive, got prf={self.prf}, "
                f"rsr2x={self.rsr2x}"
            )
        if self.wavelength <= 0:
            raise ValidationError(
                f"wavelength must be positive, got {self.wavelength}"
            )

    @property
    def t_azi_centre(self) -> float:
        """Azimuth time of the middle line (seconds)."""
        return self.t_azi1 + 0.5 * (self.lines - 1) / self.prf

    def line_to_t_azi(
        self, line: Union[float, np.ndarray]
    ) -> Union[float, np.ndarray]:
        """Azimuth time of a (fractional, 0-based) line."""
        return self.t_azi1 + np.asarray(line, dtype=np.float64) / self.prf

    def t_azi_to_line(
        self, t_azi: Union[float, np.ndarray]
    ) -> Union[float, np.ndarray]:
        """Fractional 0-based line of an azimuth time."""
        return (np.asarray(t_azi, dtype=np.float64) - self.t_azi1) * self.prf

    def pixel_to_t_range(
        self, pixel: Union[float, np.ndarray]
    ) -> Union[float, np.ndarray]:
        """One-way range time of a (fractional, 0-based) pixel."""
        return self.t_range1 + np.asarray(pixel, dtype=np.float64) / self.rsr2x

    def t_range_to_pixel(
        self, t_range: Union[float, np.ndarray]
    ) -> Union[float, np.ndarray]:
        """Fractional 0-based pixel of a one-way range time."""
        return (np.asarray(t_range, dtype=np.float64) - self.t_range1) \
            * self.rsr2x

    def __str__(self) -> str:
        pol = self.polarization.value or '-'
        name = self.mission or 'SLC'
        return f"{name}#{self.acquisition_id}/{pol}/{self.date}"
