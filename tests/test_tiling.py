# -*- coding: utf-8 -*-
"""
Tiling Tests - Window grids and whole-image processing.

Dependencies
------------
pytest

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

import logging

import numpy as np
import pytest

import topophase.correction as correction_module
from conftest import make_acquisition
from topophase.config import TopoPhaseRemovalConfig
from topophase.correction import TopoPhaseRemoval
from topophase.exceptions import (
    ConfigurationError,
    SynthesisError,
    TileComputationError,
    ValidationError,
)
from topophase.tiling import TileGrid, process_image
from topophase.vocabulary import TileStatus
from topophase.window import Window


# ---------------------------------------------------------------------------
# Window
# ---------------------------------------------------------------------------

class TestWindow:
    """Test inclusive window arithmetic."""

    def test_shape(self):
        """Test inclusive bounds give the window shape."""
        win = Window(10, 19, 5, 7)
        assert win.lines == 10
        assert win.pixels == 3
        assert win.shape == (10, 3)

    def test_slices(self):
        """Test slices select exactly the window."""
        data = np.arange(100).reshape(10, 10)
        rows, cols = Window(2, 3, 4, 6).slices
        assert data[rows, cols].shape == (2, 3)
        assert data[rows, cols][0, 0] == 24

    def test_single_cell(self):
        """Test a one-cell window is valid."""
        assert Window(4, 4, 4, 4).shape == (1, 1)

    def test_inverted(self):
        """Test inverted bounds are rejected."""
        with pytest.raises(ValidationError, match="line_hi"):
            Window(5, 4, 0, 0)
        with pytest.raises(ValidationError, match="pixel_hi"):
            Window(0, 0, 5, 4)

    def test_from_rectangle(self):
        """Test conversion from an (x, y, width, height) rectangle."""
        assert Window.from_rectangle(20, 10, 30, 5) == Window(10, 14, 20, 49)

    def test_from_empty_rectangle(self):
        """Test empty rectangles are rejected."""
        with pytest.raises(ValidationError):
            Window.from_rectangle(0, 0, 0, 5)


# ---------------------------------------------------------------------------
# TileGrid
# ---------------------------------------------------------------------------

class TestTileGrid:
    """Test window grid layout."""

    def test_exact_division(self):
        """Test tiles that divide the image evenly."""
        grid = TileGrid((100, 200), tile_size=50)
        assert len(grid) == 8
        assert grid.windows()[0] == Window(0, 49, 0, 49)
        assert grid.windows()[-1] == Window(50, 99, 150, 199)

    def test_clipped_edges(self):
        """Test edge tiles are clipped to the image."""
        grid = TileGrid((1000, 700), tile_size=512)
        windows = grid.windows()
        assert len(grid) == len(windows) == 4
        assert windows[1] == Window(0, 511, 512, 699)
        assert windows[-1] == Window(512, 999, 512, 699)

    def test_rectangular_tiles(self):
        """Test ``(rows, cols)`` tile sizes."""
        grid = TileGrid((10, 10), tile_size=(5, 10))
        assert list(grid) == [Window(0, 4, 0, 9), Window(5, 9, 0, 9)]

    def test_covers_image_once(self):
        """Test windows partition the image."""
        hits = np.zeros((37, 53), dtype=int)
        for win in TileGrid((37, 53), tile_size=(8, 11)):
            rows, cols = win.slices
            hits[rows, cols] += 1
        assert np.all(hits == 1)

    @pytest.mark.parametrize('size', [0, -4, (4, 0), (1, 2, 3), 'x'])
    def test_bad_tile_size(self, size):
        """Test invalid tile sizes are rejected."""
        with pytest.raises(ValidationError, match="tile_size"):
            TileGrid((10, 10), tile_size=size)

    def test_repr(self):
        """Test the representation names the shape."""
        assert 'image_shape=(10, 20)' in repr(TileGrid((10, 20), 5))


# ---------------------------------------------------------------------------
# process_image
# ---------------------------------------------------------------------------

@pytest.fixture(scope='module')
def small_pair():
    """120 x 120 reference and a comparison 100 m east."""
    ref = make_acquisition(2001, '20220301', lines=120, pixels=120)
    cmp = make_acquisition(2002, '20220313', offset=(0.0, 100.0, 0.0),
                           with_bands=False, lines=120, pixels=120)
    return ref, cmp


class TestProcessImage:
    """Test the threaded whole-image driver."""

    def test_matches_serial(self, small_pair, make_dem):
        """Test threaded output equals window-by-window computation."""
        ref, cmp = small_pair
        elev = make_dem(300.0)
        removal = TopoPhaseRemoval.from_acquisitions([ref], [cmp],
                                                     elevation=elev)
        targets, statuses = process_image(removal, tile_size=60,
                                          max_workers=4)

        assert len(statuses) == 4
        assert all(s is TileStatus.CORRECTED for s in statuses.values())

        serial = removal.allocate_targets((120, 120))
        for win in TileGrid((120, 120), 60):
            removal.compute_tile_stack(win, serial)
        for name in removal.target_band_names:
            np.testing.assert_array_equal(targets[name], serial[name])
        assert not np.any(targets[removal.pairs[0].band_names.i] == 0.0)

    def test_given_targets(self, small_pair, make_dem):
        """Test caller-supplied rasters are filled in place."""
        ref, cmp = small_pair
        removal = TopoPhaseRemoval.from_acquisitions(
            [ref], [cmp], elevation=make_dem(300.0)
        )
        mine = removal.allocate_targets((120, 120), dtype=np.float64)
        targets, _ = process_image(removal, mine, tile_size=(40, 120))
        assert targets is mine
        assert mine[removal.pairs[0].band_names.q].dtype == np.float64

    def test_all_passed_through(self, small_pair, make_dem, caplog):
        """Test a DEM elsewhere passes every window through."""
        ref, cmp = small_pair
        elev = make_dem(300.0, centre=(-20.0, 100.0))
        removal = TopoPhaseRemoval.from_acquisitions([ref], [cmp],
                                                     elevation=elev)
        with caplog.at_level(logging.WARNING, logger='topophase'):
            targets, statuses = process_image(removal, tile_size=60)

        assert set(statuses.values()) == {TileStatus.PASSED_THROUGH}
        assert '4 of 4 windows passed through' in caplog.text
        names = removal.pairs[0].band_names
        np.testing.assert_array_equal(targets[names.i], ref.real)
        np.testing.assert_array_equal(targets[names.q], ref.imag)

    def test_configuration_error_first(self, small_pair, tmp_path,
                                       monkeypatch):
        """Test an uninstalled DEM fails before any window runs."""
        calls = []
        monkeypatch.setattr(correction_module, 'build_dem_tile',
                            lambda *a, **k: calls.append(a))
        ref, cmp = small_pair
        config = TopoPhaseRemovalConfig(
            dem_directory=str(tmp_path / 'missing')
        )
        removal = TopoPhaseRemoval.from_acquisitions([ref], [cmp], config)
        with pytest.raises(ConfigurationError, match="not been installed"):
            process_image(removal, tile_size=60)
        assert calls == []

    def test_tile_failure_propagates(self, small_pair, make_dem,
                                     monkeypatch):
        """Test a failing window aborts the run with context."""
        def _fail(*args, **kwargs):
            raise SynthesisError("boom")

        monkeypatch.setattr(correction_module, 'compute_topo_phase', _fail)
        ref, cmp = small_pair
        removal = TopoPhaseRemoval.from_acquisitions(
            [ref], [cmp], elevation=make_dem(300.0)
        )
        with pytest.raises(TileComputationError, match="boom"):
            process_image(removal, tile_size=60)
