from __future__ import annotations

import logging
from typing import Any

import pytest

from dataviz_gen.core.events import LOADING_HIDDEN, LOADING_SHOWN, RENDER_ERROR, EventBus
from dataviz_gen.core.random_source import PythonRandomSource
from dataviz_gen.data.synthesizer import DataSynthesizer
from dataviz_gen.render.coordinator import RenderCoordinator


@pytest.fixture(autouse=True)
def restore_logging_state():
    """Undo logging configuration done by CLI runs so handlers bound to a
    closed captured stream do not leak into later tests."""
    loggers = [logging.getLogger(), logging.getLogger("dataviz_gen")]
    saved = [(lg, list(lg.handlers), lg.level, lg.propagate) for lg in loggers]
    yield
    for lg, handlers, level, propagate in saved:
        for handler in lg.handlers:
            if handler not in handlers:
                handler.close()
        lg.handlers[:] = handlers
        lg.setLevel(level)
        lg.propagate = propagate


class RecordingSurface:
    """Drawing surface that records primitives instead of rasterizing them."""

    def __init__(self, width: int = 800, height: int = 600):
        self.width = width
        self.height = height
        self.rects: list[tuple[float, float, float, float, str]] = []
        self.texts: list[dict[str, Any]] = []
        self.clears = 0

    def clear(self) -> None:
        self.clears += 1
        self.rects.clear()
        self.texts.clear()

    def fill_rect(self, x, y, width, height, color) -> None:
        self.rects.append((x, y, width, height, color))

    def fill_text(self, text, x, y, *, color, font_size=10, align="left", baseline="alphabetic"):
        self.texts.append(
            {
                "text": text,
                "x": x,
                "y": y,
                "color": color,
                "font_size": font_size,
                "align": align,
                "baseline": baseline,
            }
        )


class FakeChart:
    def __init__(self, config):
        self.config = config
        self.destroyed = False

    def destroy(self) -> None:
        self.destroyed = True


class FakeChartFactory:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.created: list[FakeChart] = []

    def __call__(self, surface, config) -> FakeChart:
        if self.error is not None:
            raise self.error
        chart = FakeChart(config)
        self.created.append(chart)
        return chart

    @property
    def alive(self) -> list[FakeChart]:
        return [chart for chart in self.created if not chart.destroyed]


@pytest.fixture
def synthesizer() -> DataSynthesizer:
    return DataSynthesizer(PythonRandomSource(42), delay_range_ms=(0.0, 0.0), current_month=0)


@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def chart_factory() -> FakeChartFactory:
    return FakeChartFactory()


@pytest.fixture
def signals() -> tuple[EventBus, list[tuple[str, Any]]]:
    bus = EventBus()
    received: list[tuple[str, Any]] = []
    for name in (LOADING_SHOWN, LOADING_HIDDEN, RENDER_ERROR):
        bus.subscribe(name, lambda payload, name=name: received.append((name, payload)))
    return bus, received


@pytest.fixture
def coordinator(recording_surface, chart_factory, signals) -> RenderCoordinator:
    bus, _ = signals
    return RenderCoordinator(
        recording_surface,
        chart_factory=chart_factory,
        events=bus,
        settle_delay_ms=0,
        processing_delay_ms=0,
    )
