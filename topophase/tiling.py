# -*- coding: utf-8 -*-
"""
Tile Grid - Cover a radar image with windows and process them.

``TileGrid`` splits an image of ``(lines, pixels)`` into non-overlapping
row-major windows; edge windows are clipped to the image instead of
padded. ``process_image`` pushes every window through a
``TopoPhaseRemoval`` on a thread pool. Windows are disjoint, so workers
write to separate parts of the destination rasters.

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
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, MutableMapping, Optional, Tuple, Union

# Third-party
import numpy as np

# topophase internal
from topophase.correction import TopoPhaseRemoval
from topophase.exceptions import ValidationError
from topophase.vocabulary import TileStatus
from topophase.window import Window

logger = logging.getLogger(__name__)


def _normalize_pair(
    value: Union[int, Tuple[int, int]], name: str
) -> Tuple[int, int]:
    """Coerce an int or 2-tuple to a positive ``(rows, cols)`` pair."""
    if isinstance(value, (int, np.integer)):
        pair = (int(value), int(value))
    elif isinstance(value, tuple) and len(value) == 2:
        pair = (int(value[0]), int(value[1]))
    else:
        raise ValidationError(
            f"{name} must be an int or Tuple[int, int], got {value!r}"
        )
    if pair[0] <= 0 or pair[1] <= 0:
        raise ValidationError(f"{name} must be positive, got {pair}")
    return pair


class TileGrid:
    """Row-major grid of processing windows over an image.

    Parameters
    ----------
    image_shape : Tuple[int, int]
        ``(lines, pixels)`` of the image.
    tile_size : int or Tuple[int, int]
        ``(tile_lines, tile_pixels)``. If int, square tiles.

    Raises
    ------
    ValidationError
        If sizes are not positive.

    Examples
    --------
    >>> grid = TileGrid((1000, 700), tile_size=512)
    >>> len(grid)
    4
    >>> grid.windows()[-1]
    Window(line_lo=512, line_hi=999, pixel_lo=512, pixel_hi=699)
    """

    def __init__(
        self,
        image_shape: Tuple[int, int],
        tile_size: Union[int, Tuple[int, int]] = 512,
    ) -> None:
        self._image_shape = _normalize_pair(tuple(image_shape), 'image_shape')
        self._tile_size = _normalize_pair(tile_size, 'tile_size')

    @property
    def image_shape(self) -> Tuple[int, int]:
        return self._image_shape

    @property
    def tile_size(self) -> Tuple[int, int]:
        return self._tile_size

    def _compute_grid(self) -> Tuple[np.ndarray, np.ndarray]:
        """Starting line and pixel of each tile row and column."""
        rows, cols = self._image_shape
        tr, tc = self._tile_size
        return np.arange(0, rows, tr), np.arange(0, cols, tc)

    def windows(self) -> List[Window]:
        """All windows, row-major, clipped to the image."""
        rows, cols = self._image_shape
        tr, tc = self._tile_size
        row_starts, col_starts = self._compute_grid()
        return [
            Window(int(rs), int(min(rs + tr, rows)) - 1,
                   int(cs), int(min(cs + tc, cols)) - 1)
            for rs in row_starts
            for cs in col_starts
        ]

    def __len__(self) -> int:
        row_starts, col_starts = self._compute_grid()
        return len(row_starts) * len(col_starts)

    def __iter__(self):
        return iter(self.windows())

    def __repr__(self) -> str:
        return (
            f"TileGrid(image_shape={self._image_shape}, "
            f"tile_size={self._tile_size})"
        )


def process_image(
    removal: TopoPhaseRemoval,
    targets: Optional[MutableMapping[str, Any]] = None,
    tile_size: Union[int, Tuple[int, int]] = 512,
    max_workers: Optional[int] = None,
) -> Tuple[MutableMapping[str, Any], Dict[Window, TileStatus]]:
    """Run topographic phase removal over a whole reference image.

    Parameters
    ----------
    removal : TopoPhaseRemoval
        Configured remover.
    targets : MutableMapping[str, array-like], optional
        Destination rasters; allocated with ``allocate_targets`` when
        omitted.
    tile_size : int or Tuple[int, int], optional
        Window size. Default 512.
    max_workers : int, optional
        Thread pool size, passed to ``ThreadPoolExecutor``.

    Returns
    -------
    targets : MutableMapping[str, array-like]
        The filled destination rasters.
    statuses : Dict[Window, TileStatus]
        Outcome of every window.

    Raises
    ------
    TileComputationError
        The first tile failure, after the pool has drained.
    """
    meta = removal.reference.metadata
    shape = (meta.lines, meta.pixels)
    if targets is None:
        targets = removal.allocate_targets(shape)

    # Opened up front so configuration errors surface before any tile runs.
    removal.initialize_elevation()

    grid = TileGrid(shape, tile_size)
    windows = grid.windows()
    logger.info("Processing %d windows of %s with %r", len(windows), shape,
                removal)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [
            (w, pool.submit(removal.compute_tile_stack, w, targets))
            for w in windows
        ]
        statuses = {w: f.result() for w, f in futures}

    passed = sum(s is TileStatus.PASSED_THROUGH for s in statuses.values())
    if passed:
        logger.warning("%d of %d windows passed through without DEM coverage",
                       passed, len(windows))
    return targets, statuses
