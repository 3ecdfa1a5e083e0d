# -*- coding: utf-8 -*-
"""
Geoid Correction - EGM96 undulation for mean-sea-level DEM heights.

SRTM and DTED heights are referenced to the EGM96 geoid (mean sea
level), while radar geocoding works on the WGS-84 ellipsoid. The
undulation ``N`` converts between the two::

    height_ellipsoid = height_msl + N

The model is read from the 15 arc-minute EGM96 grid stored as a PGM
image (1440 columns x 721 rows, 90N to 90S, 0E eastward). Two value
conventions are understood:

- GeographicLib files declare ``# Offset`` and ``# Scale`` comments;
  ``N = offset + scale * raw``.
- Files without them store centimeters offset by 32768;
  ``N = (raw - 32768) / 100``.

Dependencies
------------
scipy

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
import re
from pathlib import Path
from typing import Dict, Union

# Third-party
import numpy as np
from scipy.ndimage import map_coordinates

# topophase internal
from topophase.elevation.base import ArrayOrScalar, _is_scalar, _to_array
from topophase.exceptions import ValidationError

EGM96_ROWS = 721
EGM96_COLS = 1440
EGM96_STEP = 0.25            # degrees
_CM_OFFSET = 32768

# Whitespace and comments, then one header token.
_PGM_TOKEN = re.compile(rb'((?:\s|#[^\n]*)*)([^\s#]+)')
_PGM_COMMENT = re.compile(rb'#\s*(\w+)\s+(\S+)')


def _read_pgm(path: Path) -> np.ndarray:
    """Decode an EGM96 PGM grid into undulations in meters."""
    raw = path.read_bytes()
    header = []
    comments: Dict[str, float] = {}
    pos = 0
    while len(header) < 4:
        match = _PGM_TOKEN.match(raw, pos)
        if match is None:
            raise ValidationError(f"Truncated PGM header in {path}")
        for key, value in _PGM_COMMENT.findall(match.group(1)):
            try:
                comments[key.decode('ascii').lower()] = float(value)
            except ValueError:
                continue
        header.append(match.group(2))
        pos = match.end()

    magic = header[0]
    if magic not in (b'P5', b'P2'):
        raise ValidationError(
            f"{path} is not a PGM grid (magic {magic!r}, expected P5 or P2)"
        )
    try:
        ncols, nrows, maxval = (int(t) for t in header[1:])
    except ValueError:
        raise ValidationError(f"Malformed PGM header in {path}") from None
    if (nrows, ncols) != (EGM96_ROWS, EGM96_COLS):
        raise ValidationError(
            f"Expected a {EGM96_COLS}x{EGM96_ROWS} EGM96 grid in {path}, "
            f"got {ncols}x{nrows}"
        )

    count = nrows * ncols
    if magic == b'P5':
        # A single whitespace byte separates the header from the samples.
        dtype = np.dtype('>u2') if maxval > 255 else np.dtype('u1')
        body = raw[pos + 1:]
        if len(body) < count * dtype.itemsize:
            raise ValidationError(f"Truncated PGM samples in {path}")
        values = np.frombuffer(body, dtype=dtype, count=count)
    else:
        tokens = raw[pos:].split()
        if len(tokens) < count:
            raise ValidationError(
                f"Expected {count} PGM samples in {path}, got {len(tokens)}"
            )
        values = np.array([int(t) for t in tokens[:count]])
    values = values.astype(np.float64).reshape(nrows, ncols)

    if 'offset' in comments and 'scale' in comments:
        return comments['offset'] + comments['scale'] * values
    return (values - _CM_OFFSET) / 100.0


class GeoidCorrection:
    """EGM96 geoid undulation lookup with bilinear interpolation.

    Parameters
    ----------
    geoid_path : str or Path
        EGM96 15 arc-minute grid in PGM format (e.g. ``egm96-15.pgm``).

    Raises
    ------
    FileNotFoundError
        If ``geoid_path`` does not exist.
    ValidationError
        If the file is not a 1440 x 721 PGM grid.

    Examples
    --------
    >>> geoid = GeoidCorrection('/data/geoids/egm96-15.pgm')
    >>> geoid.get_undulation(30.2, 3.9)
    """

    def __init__(self, geoid_path: Union[str, Path]) -> None:
        geoid_path = Path(geoid_path)
        if not geoid_path.exists():
            raise FileNotFoundError(f"Geoid file does not exist: {geoid_path}")
        self.geoid_path = geoid_path
        grid = _read_pgm(geoid_path)
        # Repeat 0E as 360E so interpolation wraps across the antimeridian.
        self._grid = np.hstack([grid, grid[:, :1]])

    def get_undulation(
        self, lat: ArrayOrScalar, lon: ArrayOrScalar
    ) -> Union[float, np.ndarray]:
        """Undulation in meters at geodetic position(s) in degrees."""
        values = self._interpolate_array(_to_array(lat), _to_array(lon))
        if _is_scalar(lat) and _is_scalar(lon):
            return float(values[0])
        return values

    def _interpolate_array(
        self, lats: np.ndarray, lons: np.ndarray
    ) -> np.ndarray:
        rows = (90.0 - np.clip(lats, -90.0, 90.0)) / EGM96_STEP
        cols = np.mod(lons, 360.0) / EGM96_STEP
        return map_coordinates(self._grid, [rows, cols], order=1,
                               mode='nearest')

    def __repr__(self) -> str:
        return f"GeoidCorrection({str(self.geoid_path)!r})"
