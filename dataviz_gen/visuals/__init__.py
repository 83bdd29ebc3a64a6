"""Visualization package for chart configuration and rasterization.

This package turns datasets into pixels. It is the presentation layer of the
pipeline: chart configuration synthesis for the generic kinds, a bespoke
heatmap rasterizer, the heatmap color scale and the drawing surface both
renderers paint on.

Main Components:
    - ChartConfigBuilder: dataset + kind + settings + theme -> RenderConfig
    - MatplotlibChart: paints bar/line/pie/scatter RenderConfigs
    - HeatmapRenderer: day x hour grid drawn with rectangle/text primitives
    - ColorInterpolator: intensity -> RGB over a six-anchor blue palette
    - FigureSurface: matplotlib Figure addressed in pixels

Usage:
    from dataviz_gen.visuals import FigureSurface, HeatmapRenderer

    surface = FigureSurface(width=800, height=600)
    HeatmapRenderer().draw(surface, heatmap_dataset)
    surface.save_png(Path("heatmap.png"))

Architecture Notes:
    - Surfaces use the non-interactive 'Agg' backend
    - RenderConfig objects are frozen; builders never mutate datasets
"""

from __future__ import annotations

from .chart_config import ChartConfigBuilder, RenderConfig, build_chart_config
from .charts import MatplotlibChart, create_chart
from .colors import RGB, ColorInterpolator, heatmap_color
from .heatmap import HeatmapRenderer
from .surface import DrawingSurface, FigureSurface

__all__ = [
    "ChartConfigBuilder",
    "ColorInterpolator",
    "DrawingSurface",
    "FigureSurface",
    "HeatmapRenderer",
    "MatplotlibChart",
    "RGB",
    "RenderConfig",
    "build_chart_config",
    "create_chart",
    "heatmap_color",
]
