from __future__ import annotations

from enum import Enum


class ChartKind(str, Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    SCATTER = "scatter"
    HEATMAP = "heatmap"

    @classmethod
    def parse(cls, value: ChartKind | str) -> ChartKind | None:
        """Return the matching kind, or None when the value names no kind."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class ScatterCategory(str, Enum):
    A = "A"
    B = "B"
    C = "C"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class ExportFormat(str, Enum):
    PNG = "png"
    SVG = "svg"
    JSON = "json"
