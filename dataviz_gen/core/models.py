from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from .enums import ChartKind, ScatterCategory, TrendDirection
from .errors import ConfigurationError
from .mathutils import round_half_up


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: float
    radius: float
    category: ScatterCategory
    label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "r": self.radius,
            "label": self.label,
            "category": self.category.value,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ScatterPoint:
        try:
            return cls(
                x=float(payload["x"]),
                y=float(payload["y"]),
                radius=float(payload.get("r", payload.get("radius", 5.0))),
                category=ScatterCategory(str(payload.get("category", "A"))),
                label=str(payload.get("label", "")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid scatter point: {payload!r}") from e


@dataclass(frozen=True)
class Series:
    """A named data series plus opaque presentation attributes.

    ``data`` holds numbers for categorical kinds and ScatterPoint entries for
    scatter datasets. ``style`` is carried to the chart renderer (colors,
    fill, tension, border width...) as a read-only mapping with list values
    stored as tuples, so a series can be shared and hashed safely.
    """

    label: str
    data: tuple[Any, ...]
    style: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        frozen = {k: tuple(v) if isinstance(v, list) else v for k, v in self.style.items()}
        object.__setattr__(self, "style", MappingProxyType(frozen))

    @property
    def has_points(self) -> bool:
        return any(isinstance(item, ScatterPoint) for item in self.data)

    def to_dict(self) -> dict[str, Any]:
        data = [item.to_dict() if isinstance(item, ScatterPoint) else item for item in self.data]
        style = {k: list(v) if isinstance(v, tuple) else v for k, v in self.style.items()}
        return {"label": self.label, "data": data, **style}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Series:
        if not isinstance(payload, Mapping):
            raise ConfigurationError("Each series must be a mapping")
        raw = payload.get("data")
        if raw is None:
            raise ConfigurationError("Series is missing 'data'")
        items: list[Any] = []
        for value in raw:
            if isinstance(value, Mapping):
                items.append(ScatterPoint.from_dict(value))
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"Series value is not numeric: {value!r}")
            else:
                items.append(value)
        style = {k: v for k, v in payload.items() if k not in ("label", "data")}
        return cls(label=str(payload.get("label", "")), data=tuple(items), style=style)


@dataclass(frozen=True)
class BarPointMeta:
    label: str
    value: int
    color: str
    trend: TrendDirection
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "value": self.value,
            "color": self.color,
            "trend": self.trend.value,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class PieSliceMeta:
    label: str
    value: int
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "value": self.value, "color": self.color}


@dataclass(frozen=True)
class ChartDataset:
    """Labels plus one or more series, the interchange shape for bar/line/pie/scatter."""

    labels: tuple[str, ...]
    datasets: tuple[Series, ...]
    metadata: tuple[Any, ...] = ()

    @property
    def is_scatter(self) -> bool:
        return any(series.has_points for series in self.datasets)

    def point_count(self) -> int:
        if self.is_scatter:
            return sum(len(series.data) for series in self.datasets)
        return len(self.labels)

    def validate(self, kind: ChartKind) -> None:
        """Check the dataset can be drawn as ``kind``.

        Raises:
            ConfigurationError: If there are no series, or a series length does
                not match the labels for a non-scatter kind.
        """
        if not self.datasets:
            raise ConfigurationError("Dataset has no series to plot")
        if kind is ChartKind.SCATTER:
            for series in self.datasets:
                if not all(isinstance(item, ScatterPoint) for item in series.data):
                    raise ConfigurationError(
                        f"Scatter series '{series.label}' must contain x/y points"
                    )
            return
        if not self.labels:
            raise ConfigurationError("Dataset has no labels")
        for series in self.datasets:
            if len(series.data) != len(self.labels):
                raise ConfigurationError(
                    f"Series '{series.label}' has {len(series.data)} values "
                    f"for {len(self.labels)} labels"
                )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"datasets": [s.to_dict() for s in self.datasets]}
        if not self.is_scatter:
            payload = {"labels": list(self.labels), **payload}
        if self.metadata:
            payload["metadata"] = [
                m.to_dict() if hasattr(m, "to_dict") else m for m in self.metadata
            ]
        return payload

    @classmethod
    def from_dict(
        cls, payload: Mapping[str, Any], kind: ChartKind | None = None
    ) -> ChartDataset:
        """Build a dataset from the interchange mapping.

        Raises:
            ConfigurationError: If required keys are missing or malformed
        """
        if not isinstance(payload, Mapping):
            raise ConfigurationError("Dataset must be a mapping")
        if kind is not ChartKind.SCATTER and "labels" not in payload:
            raise ConfigurationError("Dataset is missing 'labels'")
        if "datasets" not in payload:
            raise ConfigurationError("Dataset is missing 'datasets'")
        labels = tuple(str(label) for label in payload.get("labels") or ())
        datasets = tuple(Series.from_dict(s) for s in payload["datasets"])
        metadata = tuple(payload.get("metadata") or ())
        return cls(labels=labels, datasets=datasets, metadata=metadata)


@dataclass(frozen=True)
class HeatmapAxes:
    days: tuple[str, ...]
    hours: tuple[str, ...]


@dataclass(frozen=True)
class HeatmapCell:
    col: int
    row: int
    intensity: float
    display_value: int
    day: str = ""
    hour: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "col": self.col,
            "row": self.row,
            "intensity": self.intensity,
            "value": self.display_value,
            "day": self.day,
            "hour": self.hour,
        }


@dataclass(frozen=True)
class HeatmapDataset:
    axes: HeatmapAxes
    cells: tuple[HeatmapCell, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "axes": {"days": list(self.axes.days), "hours": list(self.axes.hours)},
            "cells": [cell.to_dict() for cell in self.cells],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> HeatmapDataset:
        if not isinstance(payload, Mapping):
            raise ConfigurationError("Heatmap dataset must be a mapping")
        axes = payload.get("axes")
        cells = payload.get("cells")
        if not isinstance(axes, Mapping) or "days" not in axes or "hours" not in axes:
            raise ConfigurationError("Heatmap dataset is missing 'axes'")
        if cells is None:
            raise ConfigurationError("Heatmap dataset is missing 'cells'")
        try:
            parsed = tuple(
                HeatmapCell(
                    col=int(c["col"]),
                    row=int(c["row"]),
                    intensity=float(c["intensity"]),
                    display_value=int(c.get("value", round_half_up(float(c["intensity"]) * 100))),
                    day=str(c.get("day", "")),
                    hour=str(c.get("hour", "")),
                )
                for c in cells
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid heatmap cell: {e}") from e
        return cls(
            axes=HeatmapAxes(
                days=tuple(str(d) for d in axes["days"]),
                hours=tuple(str(h) for h in axes["hours"]),
            ),
            cells=parsed,
        )


Dataset = Union[ChartDataset, HeatmapDataset]


@dataclass(frozen=True)
class DisplaySettings:
    """User-tunable display options, replaced wholesale when one changes."""

    animation_duration_ms: int = 800
    point_count: int = 20
    refresh_interval_ms: int = 1500

    def __post_init__(self) -> None:
        if self.animation_duration_ms < 0:
            raise ValueError("animation_duration_ms must be >= 0")
        if self.point_count < 1:
            raise ValueError("point_count must be >= 1")
        if self.refresh_interval_ms < 1:
            raise ValueError("refresh_interval_ms must be >= 1")
