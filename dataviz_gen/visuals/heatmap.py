"""Day-by-hour heatmap rasterizer.

Draws directly with the surface's rectangle and text primitives rather than
delegating to a charting library: every cell is a filled rectangle colored by
ColorInterpolator, optionally labelled with its value, framed by day labels on
the left and hour labels underneath.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.errors import ConfigurationError, RenderError
from ..core.logging_config import get_logger
from ..core.mathutils import clamp
from ..core.models import HeatmapAxes, HeatmapDataset
from ..core.themes import LIGHT, Theme
from .colors import ColorInterpolator
from .surface import DrawingSurface

logger = get_logger(__name__)

LEFT_MARGIN = 60
TOP_MARGIN = 20
# Horizontal space reserved for labels: left margin plus a right gutter
HORIZONTAL_RESERVE = 80
# Vertical space reserved: top margin plus the hour label band
VERTICAL_RESERVE = 60

# Minimum cell size (exclusive) for drawing values inside cells
MIN_LABEL_CELL_WIDTH = 30
MIN_LABEL_CELL_HEIGHT = 20

VALUE_FONT_SIZE = 10
AXIS_FONT_SIZE = 11
LIGHT_TEXT = "#ffffff"
DARK_TEXT = "#000000"


class HeatmapRenderer:
    def __init__(self, interpolator: ColorInterpolator | None = None, theme: Theme = LIGHT):
        self.interpolator = interpolator or ColorInterpolator()
        self.theme = theme

    def draw(
        self,
        surface: DrawingSurface,
        dataset: HeatmapDataset | Mapping[str, Any],
        theme: Theme | None = None,
    ) -> None:
        """Paint ``dataset`` onto ``surface``, replacing whatever was drawn before.

        Label text uses ``theme`` when given, otherwise the renderer's theme.

        Raises:
            RenderError: If the dataset has no axes or no cells; the surface is
                left cleared.
        """
        surface.clear()
        heatmap = self._coerce(dataset)
        days, hours = heatmap.axes.days, heatmap.axes.hours

        cell_width = (surface.width - HORIZONTAL_RESERVE) / len(hours)
        cell_height = (surface.height - VERTICAL_RESERVE) / len(days)
        show_values = cell_width > MIN_LABEL_CELL_WIDTH and cell_height > MIN_LABEL_CELL_HEIGHT

        for cell in heatmap.cells:
            x = LEFT_MARGIN + cell.col * cell_width
            y = TOP_MARGIN + cell.row * cell_height
            intensity = clamp(cell.intensity)

            surface.fill_rect(
                x, y, cell_width - 1, cell_height - 1, self.interpolator.color_for(intensity).hex
            )
            if show_values:
                surface.fill_text(
                    str(cell.display_value),
                    x + cell_width / 2,
                    y + cell_height / 2,
                    color=LIGHT_TEXT if intensity > 0.5 else DARK_TEXT,
                    font_size=VALUE_FONT_SIZE,
                    align="center",
                    baseline="middle",
                )

        try:
            self._draw_labels(
                surface, heatmap.axes, cell_width, cell_height, (theme or self.theme).text
            )
        except Exception as e:
            # Cells stay painted when labelling fails
            logger.warning(f"Failed to draw heatmap labels: {e}", exc_info=True)

        logger.debug(
            "Heatmap drawn",
            extra={"rows": len(days), "cols": len(hours), "cells": len(heatmap.cells)},
        )

    @staticmethod
    def _coerce(dataset: HeatmapDataset | Mapping[str, Any]) -> HeatmapDataset:
        if isinstance(dataset, Mapping):
            try:
                dataset = HeatmapDataset.from_dict(dataset)
            except ConfigurationError as e:
                raise RenderError(f"Invalid heatmap data structure: {e}") from e

        axes = getattr(dataset, "axes", None)
        cells = getattr(dataset, "cells", None)
        if axes is None or cells is None:
            raise RenderError("Invalid heatmap data structure: missing axes or cells")
        if not axes.days or not axes.hours:
            raise RenderError("Invalid heatmap data structure: empty axes")
        return dataset

    def _draw_labels(
        self,
        surface: DrawingSurface,
        axes: HeatmapAxes,
        cell_width: float,
        cell_height: float,
        color: str,
    ) -> None:
        for index, day in enumerate(axes.days):
            surface.fill_text(
                day[:3],
                LEFT_MARGIN - 10,
                TOP_MARGIN + index * cell_height + cell_height / 2,
                color=color,
                font_size=AXIS_FONT_SIZE,
                align="right",
                baseline="middle",
            )

        # Every other hour once labels would crowd
        every_column = len(axes.hours) <= 12
        label_y = TOP_MARGIN + len(axes.days) * cell_height + 5
        for index, hour in enumerate(axes.hours):
            if every_column or index % 2 == 0:
                surface.fill_text(
                    hour.removesuffix(":00"),
                    LEFT_MARGIN + index * cell_width + cell_width / 2,
                    label_y,
                    color=color,
                    font_size=AXIS_FONT_SIZE,
                    align="center",
                    baseline="top",
                )
