# -*- coding: utf-8 -*-
"""
Window - Inclusive rectangle in (line, pixel) image space.

Used both for radar output tiles and for elevation extraction windows.
Lines run along azimuth (rows), pixels along range (columns).

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
from dataclasses import dataclass
from typing import Tuple

# topophase internal
from topophase.exceptions import ValidationError


@dataclass(frozen=True)
class Window:
    """Axis-aligned inclusive rectangle in image coordinates.

    Parameters
    ----------
    line_lo : int
        First line (row), inclusive.
    line_hi : int
        Last line (row), inclusive.
    pixel_lo : int
        First pixel (column), inclusive.
    pixel_hi : int
        Last pixel (column), inclusive.

    Raises
    ------
    ValidationError
        If ``line_hi < line_lo`` or ``pixel_hi < pixel_lo``.

    Examples
    --------
    >>> win = Window(0, 99, 0, 199)
    >>> win.shape
    (100, 200)
    """

    line_lo: int
    line_hi: int
    pixel_lo: int
    pixel_hi: int

    def __post_init__(self) -> None:
        if self.line_hi < self.line_lo:
            raise ValidationError(
                f"line_hi ({self.line_hi}) must be >= line_lo ({self.line_lo})"
            )
        if self.pixel_hi < self.pixel_lo:
            raise ValidationError(
                f"pixel_hi ({self.pixel_hi}) must be >= "
                f"pixel_lo ({self.pixel_lo})"
            )

    @classmethod
    def from_rectangle(
        cls, x: int, y: int, width: int, height: int
    ) -> 'Window':
        """Build a window from a host ``(x, y, width, height)`` rectangle.

        Parameters
        ----------
        x : int
            First pixel (column).
        y : int
            First line (row).
        width : int
            Number of pixels. Must be positive.
        height : int
            Number of lines. Must be positive.

        Returns
        -------
        Window
        """
        if width <= 0 or height <= 0:
            raise ValidationError(
                f"Rectangle size must be positive, got {width}x{height}"
            )
        return cls(y, y + height - 1, x, x + width - 1)

    @property
    def lines(self) -> int:
        """Number of lines covered."""
        return self.line_hi - self.line_lo + 1

    @property
    def pixels(self) -> int:
        """Number of pixels covered."""
        return self.pixel_hi - self.pixel_lo + 1

    @property
    def shape(self) -> Tuple[int, int]:
        """``(lines, pixels)``, matching numpy array shape conventions."""
        return (self.lines, self.pixels)

    @property
    def slices(self) -> Tuple[slice, slice]:
        """Row/column slices selecting this window from a full image."""
        return (
            slice(self.line_lo, self.line_hi + 1),
            slice(self.pixel_lo, self.pixel_hi + 1),
        )

    def __str__(self) -> str:
        return (
            f"lines [{self.line_lo}, {self.line_hi}], "
            f"pixels [{self.pixel_lo}, {self.pixel_hi}]"
        )
