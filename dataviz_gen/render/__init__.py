"""Render coordination and exports for the chart surface."""

from .coordinator import RenderCoordinator, RenderOutcome
from .export import ChartExporter, default_filename
from .slot import ChartSlot, RenderHandle

__all__ = [
    "ChartExporter",
    "ChartSlot",
    "RenderCoordinator",
    "RenderHandle",
    "RenderOutcome",
    "default_filename",
]
