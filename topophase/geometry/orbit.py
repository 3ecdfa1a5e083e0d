# -*- coding: utf-8 -*-
"""
Orbit Model - Polynomial satellite trajectory and range-Doppler geocoding.

Fits one ``numpy.polynomial.Polynomial`` per ECF component to the orbit
state vectors of an acquisition and provides the two geocoding
directions used by topographic phase synthesis:

- **Inverse** (``xyz2t`` / ``xyz2lp``): ground point -> zero-Doppler
  azimuth time and slant range -> radar ``(line, pixel)``.
- **Forward** (``lp2xyz`` / ``lp2ell``): radar ``(line, pixel)`` plus a
  geodetic height -> ground point, solving the range, Doppler and
  ellipsoid equations with Newton iterations.

All routines are vectorized over points.

Dependencies
------------
numpy
sarpy

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
from typing import Sequence, Tuple, Union

# Third-party
import numpy as np
from numpy.polynomial import Polynomial

# topophase internal
from topophase.exceptions import GeolocationError, ValidationError
from topophase.geometry.ellipsoid import (
    SOL, WGS84_A, WGS84_B, ell2xyz, xyz2ell,
)
from topophase.geometry.slc import SLCImage, StateVector

logger = logging.getLogger(__name__)

# Newton iteration controls
_XYZ2T_MAX_ITER = 20
_XYZ2T_TOL = 1.0e-9          # seconds
_LP2XYZ_MAX_ITER = 20
_LP2XYZ_TOL = 1.0e-6         # meters
_HEIGHT_MAX_ITER = 8
_HEIGHT_TOL = 1.0e-4         # meters

ArrayLike = Union[float, Sequence[float], np.ndarray]


class Orbit:
    """Polynomial orbit model fitted to ECF state vectors.

    Parameters
    ----------
    state_vectors : Sequence[StateVector]
        State vectors with strictly increasing times. At least
        ``degree + 1`` are required.
    degree : int, optional
        Interpolation polynomial degree, valid range ``(1, 10]``.
        Default 3.

    Raises
    ------
    ValidationError
        If the degree is out of range, there are too few state vectors,
        or times are not strictly increasing.

    Examples
    --------
    >>> orbit = Orbit.from_metadata(slc_meta, degree=3)
    >>> line, pixel = orbit.ell2lp(lat, lon, 120.0, slc_meta)
    """

    def __init__(
        self,
        state_vectors: Sequence[StateVector],
        degree: int = 3,
    ) -> None:
        if not 1 < degree <= 10:
            raise ValidationError(
                f"Orbit interpolation degree must be in (1, 10], got {degree}"
            )
        if len(state_vectors) <= degree:
            raise ValidationError(
                f"Orbit of degree {degree} needs more than {degree} state "
                f"vectors, got {len(state_vectors)}"
            )

        times = np.array([sv.time for sv in state_vectors], dtype=np.float64)
        positions = np.array(
            [sv.position for sv in state_vectors], dtype=np.float64
        )
        if np.any(np.diff(times) <= 0):
            raise ValidationError(
                "State vector times must be strictly increasing"
            )

        self.degree = degree
        self.t_min = float(times[0])
        self.t_max = float(times[-1])

        # Polynomial.fit maps the time span onto [-1, 1]; deriv() keeps the
        # scaling, so velocity/acceleration come out in m/s and m/s^2.
        self._position_polys = tuple(
            Polynomial.fit(times, positions[:, k], degree) for k in range(3)
        )
        self._velocity_polys = tuple(p.deriv(1) for p in self._position_polys)
        self._acceleration_polys = tuple(
            p.deriv(2) for p in self._position_polys
        )
        logger.debug(
            "Fitted orbit of degree %d to %d state vectors [%.3f, %.3f]",
            degree, len(state_vectors), self.t_min, self.t_max,
        )

    @classmethod
    def from_metadata(cls, metadata: SLCImage, degree: int = 3) -> 'Orbit':
        """Fit an orbit to the state vectors carried by ``metadata``."""
        return cls(metadata.state_vectors, degree)

    # ------------------------------------------------------------------
    # Trajectory evaluation
    # ------------------------------------------------------------------

    @staticmethod
    def _evaluate(polys: Tuple[Polynomial, ...], t: ArrayLike) -> np.ndarray:
        t = np.atleast_1d(np.asarray(t, dtype=np.float64))
        return np.stack([p(t) for p in polys], axis=-1)

    def position(self, t: ArrayLike) -> np.ndarray:
        """Satellite ECF position(s), shape ``(N, 3)``."""
        return self._evaluate(self._position_polys, t)

    def velocity(self, t: ArrayLike) -> np.ndarray:
        """Satellite ECF velocity(ies), shape ``(N, 3)``."""
        return self._evaluate(self._velocity_polys, t)

    def acceleration(self, t: ArrayLike) -> np.ndarray:
        """Satellite ECF acceleration(s), shape ``(N, 3)``."""
        return self._evaluate(self._acceleration_polys, t)

    # ------------------------------------------------------------------
    # Inverse geocoding: ground -> radar
    # ------------------------------------------------------------------

    def xyz2t(
        self, xyz: np.ndarray, metadata: SLCImage
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Zero-Doppler azimuth time and one-way range time of ECF points.

        Parameters
        ----------
        xyz : np.ndarray
            Ground points, shape ``(N, 3)`` or ``(3,)``.
        metadata : SLCImage
            Acquisition whose centre time seeds the iteration.

        Returns
        -------
        t_azi, t_range : np.ndarray
            Azimuth times and one-way range times (seconds), shape
            ``(N,)``.

        Raises
        ------
        GeolocationError
            If the Doppler iteration does not converge.
        """
        pts = np.atleast_2d(np.asarray(xyz, dtype=np.float64))
        if not np.all(np.isfinite(pts)):
            raise GeolocationError("Cannot geocode non-finite ECF points")

        t = np.full(pts.shape[0], metadata.t_azi_centre, dtype=np.float64)
        for _ in range(_XYZ2T_MAX_ITER):
            delta = pts - self.position(t)
            vel = self.velocity(t)
            acc = self.acceleration(t)
            doppler = np.einsum('ij,ij->i', delta, vel)
            slope = np.einsum('ij,ij->i', delta, acc) \
                - np.einsum('ij,ij->i', vel, vel)
            dt = -doppler / slope
            t += dt
            if np.max(np.abs(dt)) < _XYZ2T_TOL:
                break
        else:
            raise GeolocationError(
                f"Zero-Doppler iteration did not converge for {metadata}"
            )

        slant = np.linalg.norm(pts - self.position(t), axis=1)
        return t, slant / SOL

    def xyz2lp(
        self, xyz: np.ndarray, metadata: SLCImage
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Radar ``(line, pixel)`` of ECF points."""
        t_azi, t_range = self.xyz2t(xyz, metadata)
        return (metadata.t_azi_to_line(t_azi),
                metadata.t_range_to_pixel(t_range))

    def ell2lp(
        self,
        lat: ArrayLike,
        lon: ArrayLike,
        height: ArrayLike,
        metadata: SLCImage,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Radar ``(line, pixel)`` of geodetic points (radians, meters)."""
        return self.xyz2lp(ell2xyz(lat, lon, height), metadata)

    # ------------------------------------------------------------------
    # Forward geocoding: radar -> ground
    # ------------------------------------------------------------------

    def _solve_range_doppler(
        self,
        xyz: np.ndarray,
        sat: np.ndarray,
        vel: np.ndarray,
        slant: np.ndarray,
        height: np.ndarray,
    ) -> np.ndarray:
        """Newton solve of the range, Doppler and ellipsoid equations.

        The ellipsoid is inflated by ``height`` on both axes, which is
        only approximately a surface of constant geodetic height; the
        caller corrects ``height`` until the geodetic height matches.
        """
        a2 = (WGS84_A + height) ** 2
        b2 = (WGS84_B + height) ** 2
        n = xyz.shape[0]
        jac = np.empty((n, 3, 3), dtype=np.float64)
        for _ in range(_LP2XYZ_MAX_ITER):
            delta = xyz - sat
            residual = np.column_stack([
                np.einsum('ij,ij->i', vel, delta),
                np.einsum('ij,ij->i', delta, delta) - slant ** 2,
                (xyz[:, 0] ** 2 + xyz[:, 1] ** 2) / a2 + xyz[:, 2] ** 2 / b2
                - 1.0,
            ])
            jac[:, 0, :] = vel
            jac[:, 1, :] = 2.0 * delta
            jac[:, 2, 0] = 2.0 * xyz[:, 0] / a2
            jac[:, 2, 1] = 2.0 * xyz[:, 1] / a2
            jac[:, 2, 2] = 2.0 * xyz[:, 2] / b2
            try:
                step = np.linalg.solve(jac, -residual[..., np.newaxis])[..., 0]
            except np.linalg.LinAlgError as e:
                raise GeolocationError(
                    f"Singular range-Doppler system: {e}"
                ) from e
            xyz = xyz + step
            if np.max(np.abs(step)) < _LP2XYZ_TOL:
                return xyz
        raise GeolocationError("Range-Doppler iteration did not converge")

    def lp2xyz(
        self,
        line: ArrayLike,
        pixel: ArrayLike,
        metadata: SLCImage,
        height: ArrayLike = 0.0,
    ) -> np.ndarray:
        """Ground ECF point(s) seen at radar ``(line, pixel)``.

        Parameters
        ----------
        line : float or array-like
            0-based line coordinate(s).
        pixel : float or array-like
            0-based pixel coordinate(s).
        metadata : SLCImage
            Acquisition geometry.
        height : float or array-like, optional
            Geodetic height(s) of the solution above WGS-84 (meters).

        Returns
        -------
        np.ndarray
            ECF coordinates, shape ``(N, 3)``.

        Raises
        ------
        GeolocationError
            If the iteration does not converge.
        """
        line, pixel, height = np.broadcast_arrays(
            np.atleast_1d(np.asarray(line, dtype=np.float64)),
            np.atleast_1d(np.asarray(pixel, dtype=np.float64)),
            np.atleast_1d(np.asarray(height, dtype=np.float64)),
        )
        line, pixel, height = line.ravel(), pixel.ravel(), height.ravel()

        t_azi = metadata.line_to_t_azi(line)
        slant = metadata.pixel_to_t_range(pixel) * SOL
        sat = self.position(t_azi)
        vel = self.velocity(t_azi)

        c_lat, c_lon, c_hgt = metadata.approx_centre
        seed = ell2xyz(np.radians(c_lat), np.radians(c_lon), c_hgt)
        xyz = np.repeat(seed, line.shape[0], axis=0)

        effective = height.copy()
        for _ in range(_HEIGHT_MAX_ITER):
            xyz = self._solve_range_doppler(xyz, sat, vel, slant, effective)
            _, _, geodetic = xyz2ell(xyz)
            mismatch = height - geodetic
            if np.max(np.abs(mismatch)) < _HEIGHT_TOL:
                return xyz
            effective = effective + mismatch
        raise GeolocationError(
            f"Geodetic height iteration did not converge for {metadata}"
        )

    def lp2ell(
        self,
        line: ArrayLike,
        pixel: ArrayLike,
        metadata: SLCImage,
        height: ArrayLike = 0.0,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Geodetic ``(lat, lon, height)`` seen at radar ``(line, pixel)``.

        Latitude and longitude are returned in radians.
        """
        return xyz2ell(self.lp2xyz(line, pixel, metadata, height))

    def __repr__(self) -> str:
        return (
            f"Orbit(degree={self.degree}, "
            f"span=[{self.t_min:.3f}, {self.t_max:.3f}])"
        )
