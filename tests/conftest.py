# -*- coding: utf-8 -*-
"""
Shared test fixtures - Synthetic radar geometry and elevation rasters.

The synthetic sensor flies a circular polar orbit of radius 7071 km
along the zero meridian, northbound through 30 degrees latitude, and
looks right (east). The comparison acquisition repeats the same orbit
shifted 100 m eastward, giving a horizontal baseline. Geoid grids are
written as 15 arc-minute EGM96 PGM files.

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

import numpy as np
import pytest
from pyproj import Transformer
from rasterio.transform import Affine

from topophase.acquisition import Acquisition
from topophase.elevation.raster import RasterElevation
from topophase.geometry import SOL, SLCImage, StateVector
from topophase.vocabulary import Polarization

ORBIT_RADIUS = 7071000.0
ANGULAR_RATE = 1.0e-3          # rad/s
T0 = 1000.0                    # seconds of day at the first line
LAT0 = np.radians(30.0)
DEM_SPACING = 1.0e-4           # degrees
DEM_HALF_SPAN = 0.05           # degrees around the scene centre
UTM_CRS = 'EPSG:32631'
UTM_SPACING = 30.0             # meters
UTM_HALF_CELLS = 150
EGM96_SHAPE = (721, 1440)


def circular_state_vectors(offset=(0.0, 0.0, 0.0), n=21, step=1.0):
    """State vectors of the synthetic orbit, centred on ``T0``."""
    vectors = []
    for k in range(n):
        t = T0 - 10.0 + k * step
        theta = LAT0 + ANGULAR_RATE * (t - T0)
        pos = (
            ORBIT_RADIUS * np.cos(theta) + offset[0],
            offset[1],
            ORBIT_RADIUS * np.sin(theta) + offset[2],
        )
        vel = (
            -ORBIT_RADIUS * ANGULAR_RATE * np.sin(theta),
            0.0,
            ORBIT_RADIUS * ANGULAR_RATE * np.cos(theta),
        )
        vectors.append(StateVector(t, pos, vel))
    return vectors


def make_metadata(
    acquisition_id,
    date,
    offset=(0.0, 0.0, 0.0),
    polarization=Polarization.NONE,
    lines=200,
    pixels=200,
):
    """SLC metadata with 400 Hz PRF and 10 m slant pixels from 800 km."""
    return SLCImage(
        acquisition_id=acquisition_id,
        date=date,
        t_azi1=T0,
        prf=400.0,
        t_range1=800.0e3 / SOL,
        rsr2x=SOL / 10.0,
        wavelength=0.056,
        lines=lines,
        pixels=pixels,
        approx_centre=(30.0, 4.0, 0.0),
        state_vectors=circular_state_vectors(offset),
        polarization=polarization,
        mission='SYNTH',
    )


def make_acquisition(acquisition_id, date, offset=(0.0, 0.0, 0.0),
                     polarization=Polarization.NONE, with_bands=True,
                     lines=200, pixels=200):
    """Acquisition with a deterministic complex interferogram attached."""
    meta = make_metadata(acquisition_id, date, offset, polarization,
                         lines, pixels)
    real = imag = None
    if with_bands:
        rows, cols = np.mgrid[0:lines, 0:pixels]
        phase = 0.01 * rows + 0.02 * cols
        real = (2.0 * np.cos(phase)).astype(np.float32)
        imag = (2.0 * np.sin(phase)).astype(np.float32)
    return Acquisition.from_metadata(meta, 3, real, imag)


@pytest.fixture(scope='session')
def reference():
    """Reference acquisition."""
    return make_acquisition(1001, '20210112')


@pytest.fixture(scope='session')
def comparison():
    """Comparison acquisition, 100 m east of the reference orbit."""
    return make_acquisition(1002, '20210124', offset=(0.0, 100.0, 0.0),
                            with_bands=False)


@pytest.fixture(scope='session')
def scene_centre(reference):
    """``(lat, lon)`` degrees of reference pixel (50, 50) on the ellipsoid."""
    lat, lon, _ = reference.orbit.lp2ell(50.0, 50.0, reference.metadata)
    return float(np.degrees(lat[0])), float(np.degrees(lon[0]))


@pytest.fixture(scope='session')
def make_dem(scene_centre):
    """Factory of north-up rasters around the scene centre.

    ``make_dem(fill, no_data_value=0.0, centre=None, geoid_path=None)``
    returns a ``RasterElevation`` filled with ``fill`` (a float or a 2D
    array).
    """
    def _make(fill, no_data_value=0.0, centre=None, geoid_path=None):
        lat_c, lon_c = centre if centre is not None else scene_centre
        n = int(round(2 * DEM_HALF_SPAN / DEM_SPACING))
        data = np.broadcast_to(np.asarray(fill, dtype=np.float64),
                               (n, n)).copy()
        transform = Affine(
            DEM_SPACING, 0.0, lon_c - DEM_HALF_SPAN,
            0.0, -DEM_SPACING, lat_c + DEM_HALF_SPAN,
        )
        return RasterElevation(data, transform, no_data_value=no_data_value,
                               geoid_path=geoid_path)

    return _make


@pytest.fixture(scope='session')
def make_utm_dem(scene_centre):
    """Factory of UTM zone 31N rasters at 30 m around the scene centre.

    ``make_utm_dem(fill)`` takes a float, a 2D array of
    ``(2 * UTM_HALF_CELLS, 2 * UTM_HALF_CELLS)`` heights, or a callable of
    ``(rows, cols)`` index grids.
    """
    to_utm = Transformer.from_crs('EPSG:4326', UTM_CRS, always_xy=True)

    def _make(fill, no_data_value=0.0):
        n = 2 * UTM_HALF_CELLS
        if callable(fill):
            rows, cols = np.mgrid[0:n, 0:n]
            data = np.asarray(fill(rows, cols), dtype=np.float64)
        else:
            data = np.broadcast_to(np.asarray(fill, dtype=np.float64),
                                   (n, n)).copy()
        x_c, y_c = to_utm.transform(scene_centre[1], scene_centre[0])
        half = UTM_HALF_CELLS * UTM_SPACING
        transform = Affine(
            UTM_SPACING, 0.0, x_c - half,
            0.0, -UTM_SPACING, y_c + half,
        )
        return RasterElevation(data, transform, no_data_value=no_data_value,
                               crs=UTM_CRS)

    return _make


def write_egm96_pgm(path, undulation, offset=None, scale=None, ascii=False):
    """Write an EGM96 grid of ``undulation`` meters as a PGM file.

    Without ``offset``/``scale`` the samples are centimeters offset by
    32768; with them, GeographicLib ``# Offset``/``# Scale`` comments are
    written and ``raw = (undulation - offset) / scale``.
    """
    grid = np.broadcast_to(np.asarray(undulation, dtype=np.float64),
                           EGM96_SHAPE)
    header = b'P2\n' if ascii else b'P5\n'
    if offset is None:
        raw = np.round(grid * 100.0) + 32768
    else:
        header += b'# Offset %g\n# Scale %g\n' % (offset, scale)
        raw = np.round((grid - offset) / scale)
    header += b'%d %d\n65535\n' % (EGM96_SHAPE[1], EGM96_SHAPE[0])
    raw = raw.astype('>u2')
    if ascii:
        body = '\n'.join(' '.join(str(v) for v in row) for row in raw)
        path.write_bytes(header + body.encode('ascii') + b'\n')
    else:
        path.write_bytes(header + raw.tobytes())
    return path


@pytest.fixture(scope='session')
def geoid_30m(tmp_path_factory):
    """Path of a geoid grid with a constant 30 m undulation."""
    path = tmp_path_factory.mktemp('geoid') / 'egm96-15.pgm'
    return str(write_egm96_pgm(path, 30.0))
