"""Generic chart rendering for bar, line, pie and scatter configurations."""

from __future__ import annotations

from typing import Any

import numpy as np
from matplotlib.axes import Axes

from ..core.enums import ChartKind
from ..core.errors import RenderError
from ..core.logging_config import get_logger
from ..core.models import Series
from .chart_config import RenderConfig
from .surface import FigureSurface

logger = get_logger(__name__)

LEGEND_PLACEMENT: dict[str, dict[str, Any]] = {
    "bottom": {"loc": "upper center", "bbox_to_anchor": (0.5, -0.15), "ncol": 3},
    "right": {"loc": "center left", "bbox_to_anchor": (1.0, 0.5)},
    "top": {"loc": "lower center", "bbox_to_anchor": (0.5, 1.02), "ncol": 3},
    "left": {"loc": "center right", "bbox_to_anchor": (-0.05, 0.5)},
}


def _style(series: Series, key: str, default: Any) -> Any:
    value = series.style.get(key)
    return default if value is None else value


class MatplotlibChart:
    """A chart painted onto a FigureSurface from a RenderConfig.

    Each instance owns the surface until ``destroy()`` clears it. The render
    coordinator guarantees at most one live chart per surface.
    """

    def __init__(self, surface: FigureSurface, config: RenderConfig):
        self.surface = surface
        self.config = config
        self.axes: Axes | None = None
        self._destroyed = False
        self._draw()

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        if self._destroyed:
            return
        self.surface.clear()
        self.axes = None
        self._destroyed = True
        logger.debug("Chart destroyed", extra={"kind": self.config.chart_type})

    def _draw(self) -> None:
        config = self.config
        self.surface.set_background(config.background_color)
        self.surface.clear()
        fig = self.surface.figure
        ax = fig.add_subplot(111)
        ax.set_facecolor(config.background_color)
        self.axes = ax

        if config.kind is ChartKind.BAR:
            self._draw_bar(ax)
        elif config.kind is ChartKind.LINE:
            self._draw_line(ax)
        elif config.kind is ChartKind.PIE:
            self._draw_pie(ax)
        elif config.kind is ChartKind.SCATTER:
            self._draw_scatter(ax)
        else:
            raise RenderError(f"No chart renderer for kind '{config.chart_type}'")

        self._apply_scales(ax)
        ax.set_title(
            config.title.text,
            fontsize=config.title.font_size * 0.75,
            fontweight="bold" if config.title.bold else "normal",
            color=config.title.color,
        )
        if config.legend.display:
            placement = LEGEND_PLACEMENT.get(config.legend.position, LEGEND_PLACEMENT["bottom"])
            handles, labels = ax.get_legend_handles_labels()
            if handles:
                ax.legend(
                    handles, labels, frameon=False, labelcolor=config.legend.text_color, **placement
                )

        fig.tight_layout()

    def _draw_bar(self, ax: Axes) -> None:
        data = self.config.data
        x = np.arange(len(data.labels))
        count = len(data.datasets)
        width = 0.8 / count

        for index, series in enumerate(data.datasets):
            offset = (index - (count - 1) / 2) * width
            bars = ax.bar(
                x + offset,
                series.data,
                width,
                label=series.label,
                color=_style(series, "background_color", self.config.tooltip.border_color),
                edgecolor=_style(series, "border_color", "none"),
                linewidth=_style(series, "border_width", 0),
            )
            # Add value labels on bars
            for bar in bars:
                height = bar.get_height()
                if height > 0:
                    ax.text(
                        bar.get_x() + bar.get_width() / 2.0,
                        height,
                        f"{height:,.0f}",
                        ha="center",
                        va="bottom",
                        fontsize=8,
                        color=self.config.title.color,
                    )

        ax.set_xticks(x)
        rotated = len(data.labels) > 6
        ax.set_xticklabels(
            data.labels, rotation=45 if rotated else 0, ha="right" if rotated else "center"
        )

    def _draw_line(self, ax: Axes) -> None:
        data = self.config.data
        x = np.arange(len(data.labels))
        point = self.config.elements.get("point", {})

        for series in data.datasets:
            color = _style(series, "border_color", self.config.tooltip.border_color)
            ax.plot(
                x,
                series.data,
                color=color,
                marker="o",
                markersize=_style(series, "point_radius", point.get("radius", 4)) * 1.5,
                markerfacecolor=_style(series, "point_background_color", color),
                markeredgecolor=_style(series, "point_border_color", color),
                linewidth=2,
                label=series.label,
            )
            if _style(series, "fill", False):
                ax.fill_between(x, series.data, color=_style(series, "background_color", color))

        ax.set_xticks(x)
        ax.set_xticklabels(data.labels)

    def _draw_pie(self, ax: Axes) -> None:
        data = self.config.data
        series = data.datasets[0]
        total = sum(series.data)
        wedges, _texts = ax.pie(
            series.data,
            colors=_style(series, "background_color", None),
            startangle=90,
            wedgeprops={
                "edgecolor": _style(series, "border_color", "#ffffff"),
                "linewidth": _style(series, "border_width", 2),
            },
        )
        # Legend entries carry the share of the total, like the tooltip
        for wedge, label, value in zip(wedges, data.labels, series.data, strict=True):
            share = value / total * 100 if total else 0.0
            wedge.set_label(f"{label} ({share:.1f}%)")
        ax.set_aspect("equal")

    def _draw_scatter(self, ax: Axes) -> None:
        for series in self.config.data.datasets:
            if not series.data:
                continue
            ax.scatter(
                [p.x for p in series.data],
                [p.y for p in series.data],
                s=[p.radius**2 for p in series.data],
                c=_style(series, "background_color", self.config.tooltip.border_color),
                edgecolors=_style(series, "border_color", "none"),
                linewidths=_style(series, "border_width", 1),
                label=series.label,
            )

    def _apply_scales(self, ax: Axes) -> None:
        scales = self.config.scales
        if not scales:
            ax.set_axis_off()
            return

        x_scale, y_scale = scales.get("x"), scales.get("y")
        if x_scale is not None:
            ax.set_xlabel(x_scale.title, color=x_scale.text_color, fontweight="bold")
            ax.tick_params(axis="x", colors=x_scale.text_color)
            ax.grid(axis="x", color=x_scale.grid_color, alpha=0.6)
        if y_scale is not None:
            ax.set_ylabel(y_scale.title, color=y_scale.text_color, fontweight="bold")
            ax.tick_params(axis="y", colors=y_scale.text_color)
            ax.grid(axis="y", color=y_scale.grid_color, alpha=0.6)
            if y_scale.begin_at_zero:
                ax.set_ylim(bottom=0)
        for spine in ax.spines.values():
            spine.set_color((x_scale or y_scale).border_color)
        ax.set_axisbelow(True)


def create_chart(surface: FigureSurface, config: RenderConfig) -> MatplotlibChart:
    """Default chart factory used by the render coordinator."""
    return MatplotlibChart(surface, config)
