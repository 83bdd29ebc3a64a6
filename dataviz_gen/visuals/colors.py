"""Piecewise-linear color scale for heatmap cells."""

from __future__ import annotations

import math
from typing import NamedTuple

from ..core.mathutils import clamp, round_half_up


class RGB(NamedTuple):
    r: int
    g: int
    b: int

    def css(self) -> str:
        return f"rgb({self.r}, {self.g}, {self.b})"

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    @property
    def darkness(self) -> float:
        """1 minus relative luminance (Rec. 709 weights), in [0, 1]."""
        return 1.0 - (0.2126 * self.r + 0.7152 * self.g + 0.0722 * self.b) / 255.0


# Light to dark blue
HEATMAP_PALETTE: tuple[RGB, ...] = (
    RGB(239, 246, 255),
    RGB(191, 219, 254),
    RGB(147, 197, 253),
    RGB(96, 165, 250),
    RGB(59, 130, 246),
    RGB(37, 99, 235),
)


class ColorInterpolator:
    def __init__(self, palette: tuple[RGB, ...] = HEATMAP_PALETTE):
        if len(palette) < 2:
            raise ValueError("Palette needs at least two anchor colors")
        self.palette = palette

    def color_for(self, intensity: float) -> RGB:
        """Map an intensity to a color; values outside [0, 1] are clamped first."""
        position = clamp(float(intensity)) * (len(self.palette) - 1)
        lower_index = math.floor(position)
        upper_index = math.ceil(position)

        if lower_index == upper_index:
            return self.palette[lower_index]

        ratio = position - lower_index
        lower = self.palette[lower_index]
        upper = self.palette[upper_index]
        return RGB(
            *(
                round_half_up(lo + (hi - lo) * ratio)
                for lo, hi in zip(lower, upper, strict=True)
            )
        )


_default = ColorInterpolator()


def heatmap_color(intensity: float) -> RGB:
    return _default.color_for(intensity)
