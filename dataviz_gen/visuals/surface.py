"""Raster drawing surfaces addressed in pixels from the top-left corner."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Protocol, runtime_checkable

import matplotlib
import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.colors import to_rgba
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from ..core.logging_config import get_logger

# Use non-interactive backend for server environments
matplotlib.use("Agg")

logger = get_logger(__name__)

_HORIZONTAL = {"left": "left", "center": "center", "right": "right"}
_VERTICAL = {"top": "top", "middle": "center", "bottom": "bottom", "alphabetic": "baseline"}


@runtime_checkable
class DrawingSurface(Protocol):
    """A 2D raster of known size supporting rectangle fill and text draw."""

    width: int
    height: int

    def clear(self) -> None: ...

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None: ...

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        color: str,
        font_size: float = 10,
        align: str = "left",
        baseline: str = "alphabetic",
    ) -> None: ...


class FigureSurface:
    """Drawing surface backed by a matplotlib Figure rendered with Agg.

    Primitive drawing happens on a full-bleed overlay axes whose data
    coordinates equal pixel coordinates (y grows downward). Chart renderers
    may add their own axes to ``figure`` between clears.
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        dpi: int = 100,
        background: str = "#ffffff",
    ):
        if width <= 0 or height <= 0:
            raise ValueError("Surface dimensions must be positive")
        self.width = width
        self.height = height
        self.dpi = dpi
        self.background = background
        self.figure = Figure(figsize=(width / dpi, height / dpi), dpi=dpi, facecolor=background)
        FigureCanvasAgg(self.figure)
        self._overlay = None

    def _pixel_axes(self):
        if self._overlay is None:
            ax = self.figure.add_axes((0.0, 0.0, 1.0, 1.0))
            ax.set_xlim(0, self.width)
            ax.set_ylim(self.height, 0)
            ax.set_axis_off()
            ax.patch.set_alpha(0.0)
            self._overlay = ax
        return self._overlay

    def set_background(self, color: str) -> None:
        self.background = color
        self.figure.set_facecolor(color)

    def clear(self) -> None:
        self.figure.clear()
        self.figure.set_facecolor(self.background)
        self._overlay = None

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        self._pixel_axes().add_patch(
            Rectangle((x, y), width, height, facecolor=color, edgecolor="none", linewidth=0)
        )

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        color: str,
        font_size: float = 10,
        align: str = "left",
        baseline: str = "alphabetic",
    ) -> None:
        self._pixel_axes().text(
            x,
            y,
            text,
            color=color,
            # font_size is in pixels; matplotlib sizes text in points
            fontsize=font_size * 72.0 / self.dpi,
            ha=_HORIZONTAL.get(align, "left"),
            va=_VERTICAL.get(baseline, "baseline"),
        )

    def render_rgba(self) -> np.ndarray:
        """Rasterize the figure and return an (height, width, 4) uint8 array."""
        canvas = self.figure.canvas
        canvas.draw()
        return np.asarray(canvas.buffer_rgba())

    def is_blank(self) -> bool:
        pixels = self.render_rgba()[..., :3].astype(np.int16)
        background = np.array(to_rgba(self.background)[:3]) * 255
        return bool(np.all(np.abs(pixels - background.round().astype(np.int16)) <= 1))

    def to_png_bytes(self) -> bytes:
        buffer = BytesIO()
        try:
            self.figure.savefig(
                buffer, dpi=self.dpi, format="png", facecolor=self.figure.get_facecolor()
            )
            return buffer.getvalue()
        finally:
            buffer.close()

    def save_png(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_png_bytes())
        logger.debug(f"Surface saved to {path}")
        return path
