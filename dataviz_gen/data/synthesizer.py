"""Synthetic dataset generators.

Each generator produces a fresh, immutable dataset with a recognisable
statistical pattern: seasonal revenue by sector (bar), three monthly
financial series (line), a market-share split (pie), a positively correlated
point cloud (scatter) and a weekly activity grid (heatmap).

All randomness comes from the injected RandomSource so a seeded source gives
reproducible datasets.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Awaitable, Callable
from datetime import date

from ..core.enums import ChartKind, ScatterCategory, TrendDirection
from ..core.errors import SynthesisError
from ..core.logging_config import get_logger
from ..core.mathutils import round_half_up
from ..core.models import (
    BarPointMeta,
    ChartDataset,
    Dataset,
    HeatmapAxes,
    HeatmapCell,
    HeatmapDataset,
    PieSliceMeta,
    ScatterPoint,
    Series,
)
from ..core.random_source import NumpyRandomSource, RandomSource

logger = get_logger(__name__)

CATEGORIES = (
    "Technology",
    "Healthcare",
    "Finance",
    "Education",
    "Manufacturing",
    "Retail",
    "Energy",
    "Transportation",
)
COLORS = (
    "#3b82f6",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#f97316",
    "#06b6d4",
    "#84cc16",
)
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
HOURS = tuple(f"{hour}:00" for hour in range(24))

PIE_SLICES = 6
PIE_TOTAL = 100.0
# Each non-final slice may take up to 1.5x its even share of what remains
PIE_ALLOCATION_FACTOR = 1.5

LINE_SERIES = (
    ("Sales", "#3b82f6", "growth"),
    ("Expenses", "#ef4444", "volatile"),
    ("Profit", "#10b981", "seasonal"),
)
SCATTER_COLORS = {
    ScatterCategory.A: "#3b82f6",
    ScatterCategory.B: "#ef4444",
    ScatterCategory.C: "#10b981",
}
HEATMAP_BASELINE = 0.1


class DataSynthesizer:
    """Produce patterned sample datasets for every chart kind."""

    def __init__(
        self,
        rng: RandomSource | None = None,
        *,
        delay_range_ms: tuple[float, float] = (200.0, 700.0),
        current_month: int | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the synthesizer.

        Args:
            rng: Source of uniform randoms (default: unseeded numpy source)
            delay_range_ms: Bounds of the simulated processing delay; (0, 0) disables it
            current_month: Zero-based month offsetting the seasonal line pattern
                (default: the current calendar month)
            sleep: Coroutine used for the processing delay
        """
        self.rng = rng or NumpyRandomSource()
        self.delay_range_ms = delay_range_ms
        self.current_month = (
            current_month if current_month is not None else date.today().month - 1
        )
        self._sleep = sleep

    async def generate(self, kind: ChartKind | str, point_count: int) -> Dataset:
        """Generate a dataset for ``kind`` after a simulated processing delay.

        Unknown kinds fall back to the bar generator.

        Raises:
            SynthesisError: If point_count is not a positive integer
        """
        self._check_point_count(point_count)
        low, high = self.delay_range_ms
        if high > 0:
            await self._sleep(self.rng.uniform(low, high) / 1000.0)
        return self.generate_now(kind, point_count)

    def generate_now(self, kind: ChartKind | str, point_count: int) -> Dataset:
        """Generate a dataset synchronously, without the processing delay."""
        self._check_point_count(point_count)
        resolved = ChartKind.parse(kind)
        if resolved is None:
            logger.debug(f"Unknown chart kind '{kind}', generating bar data")
            resolved = ChartKind.BAR

        if resolved is ChartKind.BAR:
            dataset: Dataset = self.bar(point_count)
        elif resolved is ChartKind.LINE:
            dataset = self.line(point_count)
        elif resolved is ChartKind.PIE:
            dataset = self.pie()
        elif resolved is ChartKind.SCATTER:
            dataset = self.scatter(point_count)
        elif resolved is ChartKind.HEATMAP:
            dataset = self.heatmap()
        else:
            raise SynthesisError(f"No generator for chart kind '{resolved.value}'")

        logger.debug(
            "Generated dataset", extra={"kind": resolved.value, "points": point_count}
        )
        return dataset

    @staticmethod
    def _check_point_count(point_count: int) -> None:
        if isinstance(point_count, bool) or not isinstance(point_count, int):
            raise SynthesisError(f"Point count must be an integer, got {point_count!r}")
        if point_count <= 0:
            raise SynthesisError(f"Point count must be positive, got {point_count}")

    def bar(self, point_count: int) -> ChartDataset:
        """Revenue by sector with seasonality, an upward trend and noise."""
        rng = self.rng
        pool = len(CATEGORIES)
        points: list[BarPointMeta] = []
        for index, category in enumerate(CATEGORIES[: min(point_count, pool)]):
            base = rng.uniform(20, 100)
            seasonal = math.sin(index / pool * math.pi * 2) * 15
            trend = index * 2
            noise = rng.uniform(-5, 5)
            points.append(
                BarPointMeta(
                    label=category,
                    value=max(0, round_half_up(base + seasonal + trend + noise)),
                    color=COLORS[index % len(COLORS)],
                    trend=TrendDirection.UP if rng.random() > 0.5 else TrendDirection.DOWN,
                    percentage=rng.uniform(-10, 10),
                )
            )

        colors = tuple(p.color for p in points)
        series = Series(
            label="Revenue (in millions)",
            data=tuple(p.value for p in points),
            style={
                "background_color": colors,
                "border_color": colors,
                "border_width": 2,
                "border_radius": 4,
                "tension": 0.4,
            },
        )
        return ChartDataset(
            labels=tuple(p.label for p in points),
            datasets=(series,),
            metadata=tuple(points),
        )

    def _line_value(self, pattern: str, index: int) -> int:
        rng = self.rng
        if pattern == "growth":
            value = 30 + index * 5 + math.sin(index * 0.5) * 10 + rng.uniform(0, 15)
        elif pattern == "volatile":
            value = 40 + math.sin(index * 0.8) * 20 + rng.uniform(0, 25)
        elif pattern == "seasonal":
            value = 35 + math.sin((index + self.current_month) * 0.5) * 15 + rng.uniform(0, 10)
        else:
            value = 50
        return max(0, round_half_up(value))

    def line(self, point_count: int) -> ChartDataset:
        """Monthly Sales (growth), Expenses (volatile) and Profit (seasonal) series."""
        months = MONTHS[: min(point_count, len(MONTHS))]
        datasets = tuple(
            Series(
                label=name,
                data=tuple(self._line_value(pattern, i) for i in range(len(months))),
                style={
                    "border_color": color,
                    "background_color": color + "20",
                    "fill": True,
                    "tension": 0.4,
                    "point_background_color": color,
                    "point_border_color": "#ffffff",
                    "point_border_width": 2,
                    "point_radius": 4,
                },
            )
            for name, color, pattern in LINE_SERIES
        )
        return ChartDataset(labels=months, datasets=datasets)

    def pie(self) -> ChartDataset:
        """Market share across six sectors.

        Each slice but the last takes a random share of what is left of 100;
        the last slice absorbs the remainder. Rounding and the one-unit floor
        mean the emitted values sum to 100 only within +/- one per slice.
        """
        remaining = PIE_TOTAL
        slices: list[PieSliceMeta] = []
        categories = CATEGORIES[:PIE_SLICES]
        for index, category in enumerate(categories):
            if index == len(categories) - 1:
                value = remaining
            else:
                even_share = remaining / (len(categories) - index)
                value = self.rng.random() * even_share * PIE_ALLOCATION_FACTOR
            remaining -= value
            slices.append(
                PieSliceMeta(
                    label=category,
                    value=round_half_up(max(value, 1)),
                    color=COLORS[index % len(COLORS)],
                )
            )

        series = Series(
            label="Market Share",
            data=tuple(s.value for s in slices),
            style={
                "background_color": tuple(s.color for s in slices),
                "border_color": "#ffffff",
                "border_width": 2,
                "hover_border_width": 4,
            },
        )
        return ChartDataset(
            labels=tuple(s.label for s in slices),
            datasets=(series,),
            metadata=tuple(slices),
        )

    def scatter(self, point_count: int) -> ChartDataset:
        """Points with y = 0.7x + noise + 10, split across three categories."""
        rng = self.rng
        categories = list(ScatterCategory)
        points = []
        for i in range(point_count):
            x = rng.uniform(0, 100)
            y = x * 0.7 + rng.uniform(0, 30) + 10
            radius = rng.uniform(5, 20)
            points.append(
                ScatterPoint(
                    x=round_half_up(x),
                    y=round_half_up(y),
                    radius=radius,
                    category=categories[rng.choice_index(len(categories))],
                    label=f"Point {i + 1}",
                )
            )

        datasets = tuple(
            Series(
                label=f"Category {category.value}",
                data=tuple(p for p in points if p.category is category),
                style={
                    "background_color": SCATTER_COLORS[category] + "80",
                    "border_color": SCATTER_COLORS[category],
                    "border_width": 2,
                },
            )
            for category in categories
        )
        return ChartDataset(labels=(), datasets=datasets, metadata=tuple(points))

    def _intensity(self, day_index: int, hour_index: int) -> float:
        rng = self.rng
        if day_index < 5:
            if 9 <= hour_index <= 17:
                return rng.uniform(0.7, 1.0)
            if 18 <= hour_index <= 22:
                return rng.uniform(0.4, 0.7)
        elif 10 <= hour_index <= 14:
            return rng.uniform(0.5, 0.8)
        return HEATMAP_BASELINE

    def heatmap(self) -> HeatmapDataset:
        """Weekly activity: busy weekday office hours, lighter evenings and weekend middays."""
        cells = []
        for row, day in enumerate(DAYS):
            for col, hour in enumerate(HOURS):
                intensity = self._intensity(row, col)
                cells.append(
                    HeatmapCell(
                        col=col,
                        row=row,
                        intensity=intensity,
                        display_value=round_half_up(intensity * 100),
                        day=day,
                        hour=hour,
                    )
                )
        return HeatmapDataset(axes=HeatmapAxes(days=DAYS, hours=HOURS), cells=tuple(cells))
