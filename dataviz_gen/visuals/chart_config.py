"""Chart configuration synthesis.

Maps a dataset, a chart kind, the user's display settings and the active
theme to an immutable RenderConfig consumed by the generic chart renderer.
Heatmaps never pass through here: they are rasterized by HeatmapRenderer.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ..core.enums import ChartKind
from ..core.errors import ConfigurationError
from ..core.logging_config import get_logger
from ..core.models import ChartDataset, DisplaySettings, HeatmapDataset, ScatterPoint
from ..core.themes import Theme

logger = get_logger(__name__)

CHART_TITLES: Mapping[str, str] = MappingProxyType(
    {
        ChartKind.BAR.value: "Revenue by Industry Sector",
        ChartKind.LINE.value: "Financial Performance Over Time",
        ChartKind.PIE.value: "Market Share Distribution",
        ChartKind.SCATTER.value: "Performance Correlation Analysis",
        ChartKind.HEATMAP.value: "Activity Heatmap",
    }
)
DEFAULT_TITLE = "Data Visualization"

AXIS_LABELS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        ChartKind.BAR.value: {"x": "Industry Sectors", "y": "Revenue (Millions $)"},
        ChartKind.LINE.value: {"x": "Time Period", "y": "Value"},
        ChartKind.SCATTER.value: {"x": "Input Variable", "y": "Output Variable"},
        ChartKind.HEATMAP.value: {"x": "Hours", "y": "Days"},
    }
)
DEFAULT_AXIS_LABELS: Mapping[str, str] = MappingProxyType({"x": "Categories", "y": "Values"})

EASING = "easeInOutQuart"


def _kind_key(kind: ChartKind | str) -> str:
    return kind.value if isinstance(kind, ChartKind) else str(kind).lower()


def chart_title(kind: ChartKind | str) -> str:
    return CHART_TITLES.get(_kind_key(kind), DEFAULT_TITLE)


def axis_label(kind: ChartKind | str, axis: str) -> str:
    labels = AXIS_LABELS.get(_kind_key(kind), DEFAULT_AXIS_LABELS)
    return labels.get(axis, DEFAULT_AXIS_LABELS.get(axis, ""))


def format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class TitleConfig:
    text: str
    color: str
    font_size: int = 18
    bold: bool = True


@dataclass(frozen=True)
class LegendConfig:
    display: bool
    position: str
    text_color: str
    use_point_style: bool = True
    padding: int = 15


@dataclass(frozen=True)
class AnimationConfig:
    duration_ms: int
    easing: str = EASING


@dataclass(frozen=True)
class AxisScale:
    type: str
    title: str
    text_color: str
    grid_color: str
    border_color: str
    begin_at_zero: bool = False


@dataclass(frozen=True)
class TooltipConfig:
    """Tooltip styling plus the per-kind text formatting rules."""

    kind: ChartKind
    border_color: str
    background_color: str = "rgba(0, 0, 0, 0.8)"
    title_color: str = "#ffffff"
    body_color: str = "#ffffff"
    mode: str = "index"
    intersect: bool = False

    def title_for(self, dataset: ChartDataset, series_index: int, point_index: int) -> str:
        if self.kind is ChartKind.SCATTER:
            point = dataset.datasets[series_index].data[point_index]
            return point.label or f"Point {point_index + 1}"
        return dataset.labels[point_index]

    def label_for(self, dataset: ChartDataset, series_index: int, point_index: int) -> str:
        series = dataset.datasets[series_index]
        raw = series.data[point_index]
        if self.kind is ChartKind.PIE:
            total = sum(series.data)
            percentage = raw / total * 100 if total else 0.0
            return f"{dataset.labels[point_index]}: {format_value(raw)} ({percentage:.1f}%)"
        if self.kind is ChartKind.SCATTER and isinstance(raw, ScatterPoint):
            return f"X: {format_value(raw.x)}, Y: {format_value(raw.y)}"
        return f"{series.label}: {format_value(raw)}"


@dataclass(frozen=True)
class RenderConfig:
    """Renderer-ready description of one chart. Never mutated after build."""

    kind: ChartKind
    data: ChartDataset
    title: TitleConfig
    legend: LegendConfig
    tooltip: TooltipConfig
    animation: AnimationConfig
    scales: Mapping[str, AxisScale]
    elements: Mapping[str, Mapping[str, float]]
    background_color: str = "#ffffff"
    responsive: bool = True
    maintain_aspect_ratio: bool = False

    @property
    def chart_type(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        """Chart.js-style options mapping, used for JSON export and debugging."""
        return {
            "type": self.chart_type,
            "data": self.data.to_dict(),
            "options": {
                "responsive": self.responsive,
                "maintainAspectRatio": self.maintain_aspect_ratio,
                "animation": {
                    "duration": self.animation.duration_ms,
                    "easing": self.animation.easing,
                },
                "plugins": {
                    "title": {
                        "display": True,
                        "text": self.title.text,
                        "color": self.title.color,
                        "font": {"size": self.title.font_size, "weight": "bold"},
                    },
                    "legend": {
                        "display": self.legend.display,
                        "position": self.legend.position,
                        "labels": {
                            "usePointStyle": self.legend.use_point_style,
                            "padding": self.legend.padding,
                            "color": self.legend.text_color,
                        },
                    },
                    "tooltip": {
                        "enabled": True,
                        "mode": self.tooltip.mode,
                        "intersect": self.tooltip.intersect,
                        "backgroundColor": self.tooltip.background_color,
                        "titleColor": self.tooltip.title_color,
                        "bodyColor": self.tooltip.body_color,
                        "borderColor": self.tooltip.border_color,
                    },
                },
                "scales": {
                    axis: {
                        "type": scale.type,
                        "beginAtZero": scale.begin_at_zero,
                        "grid": {"color": scale.grid_color, "borderColor": scale.border_color},
                        "ticks": {"color": scale.text_color},
                        "title": {"display": True, "text": scale.title, "color": scale.text_color},
                    }
                    for axis, scale in self.scales.items()
                },
                "elements": {name: dict(values) for name, values in self.elements.items()},
            },
        }


class ChartConfigBuilder:
    """Build RenderConfig objects for bar, line, pie and scatter charts."""

    def build(
        self,
        dataset: ChartDataset | Mapping[str, Any],
        kind: ChartKind | str,
        settings: DisplaySettings,
        theme: Theme,
    ) -> RenderConfig:
        """Build the configuration for ``dataset`` drawn as ``kind``.

        Args:
            dataset: ChartDataset, or a mapping in the interchange shape
            kind: Chart kind to configure
            settings: Display settings (animation duration is read here)
            theme: Colors for text, grid lines and borders

        Returns:
            Immutable RenderConfig

        Raises:
            ConfigurationError: For heatmap or unknown kinds, or a dataset that
                cannot be plotted as ``kind``
        """
        resolved = ChartKind.parse(kind)
        if resolved is None:
            raise ConfigurationError(f"Unsupported chart kind: {kind}")
        if resolved is ChartKind.HEATMAP:
            raise ConfigurationError(
                "Heatmaps are rasterized directly and have no chart configuration"
            )

        chart_data = self._coerce_dataset(dataset, resolved)
        chart_data.validate(resolved)

        legend_position = "right" if resolved is ChartKind.PIE else "bottom"
        config = RenderConfig(
            kind=resolved,
            data=chart_data,
            title=TitleConfig(text=chart_title(resolved), color=theme.text),
            legend=LegendConfig(display=True, position=legend_position, text_color=theme.text),
            tooltip=TooltipConfig(kind=resolved, border_color=theme.primary),
            animation=AnimationConfig(duration_ms=settings.animation_duration_ms),
            scales=self._scales(resolved, theme),
            elements=self._elements(resolved),
            background_color=theme.background,
        )
        logger.debug(
            "Built chart config",
            extra={"kind": resolved.value, "points": chart_data.point_count()},
        )
        return config

    @staticmethod
    def _coerce_dataset(
        dataset: ChartDataset | Mapping[str, Any], kind: ChartKind
    ) -> ChartDataset:
        if isinstance(dataset, ChartDataset):
            return dataset
        if isinstance(dataset, HeatmapDataset):
            raise ConfigurationError(f"Heatmap data cannot be drawn as a {kind.value} chart")
        if isinstance(dataset, Mapping):
            return ChartDataset.from_dict(dataset, kind)
        raise ConfigurationError(f"Unsupported dataset type: {type(dataset).__name__}")

    @staticmethod
    def _scales(kind: ChartKind, theme: Theme) -> Mapping[str, AxisScale]:
        if kind is ChartKind.PIE:
            return MappingProxyType({})

        x_type = "linear" if kind is ChartKind.SCATTER else "category"
        scales = {
            "x": AxisScale(
                type=x_type,
                title=axis_label(kind, "x"),
                text_color=theme.text,
                grid_color=theme.grid,
                border_color=theme.border,
            ),
            "y": AxisScale(
                type="linear",
                title=axis_label(kind, "y"),
                text_color=theme.text,
                grid_color=theme.grid,
                border_color=theme.border,
                begin_at_zero=True,
            ),
        }
        return MappingProxyType(scales)

    @staticmethod
    def _elements(kind: ChartKind) -> Mapping[str, Mapping[str, float]]:
        if kind is ChartKind.LINE:
            return MappingProxyType(
                {
                    "point": MappingProxyType({"radius": 4, "hover_radius": 8}),
                    "line": MappingProxyType({"tension": 0.4}),
                }
            )
        return MappingProxyType({})


def build_chart_config(
    dataset: ChartDataset | Mapping[str, Any],
    kind: ChartKind | str,
    settings: DisplaySettings,
    theme: Theme,
) -> RenderConfig:
    return ChartConfigBuilder().build(dataset, kind, settings, theme)
