"""Application controller tying synthesis, rendering and live updates together.

DataVizApp is the headless counterpart of the dashboard: it holds the
observable AppState, renders through a single RenderCoordinator, drives the
UpdateScheduler, and reports outcomes through a Notifier.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

from .cli.output import Notifier
from .core.enums import ChartKind
from .core.errors import (
    DataImportError,
    RenderError,
    SchedulerFault,
    SynthesisError,
    describe_error,
)
from .core.events import RENDER_ERROR, EventBus
from .core.logging_config import get_logger
from .core.models import ChartDataset, Dataset, DisplaySettings
from .core.themes import LIGHT, Theme, get_theme, toggle_theme
from .data.importer import load_file as import_file
from .data.synthesizer import DataSynthesizer
from .live.scheduler import UpdateScheduler
from .render.coordinator import RenderCoordinator, RenderOutcome
from .visuals.surface import DrawingSurface

logger = get_logger(__name__)

PREVIEW_ROWS = 10


class AppState:
    """Observable application state.

    ``set_state`` emits ``<key>_changed`` with the old and new value for every
    updated attribute, then a single ``state_changed`` with the state itself.
    """

    def __init__(
        self,
        current_chart: ChartKind = ChartKind.BAR,
        settings: DisplaySettings | None = None,
        theme: Theme = LIGHT,
    ):
        self.events = EventBus()
        self.current_chart = current_chart
        self.data: Dataset | None = None
        self.chart: Any = None
        self.is_realtime = False
        self.theme = theme
        self.settings = settings or DisplaySettings()

    def subscribe(self, event: str, callback) -> None:
        self.events.subscribe(event, callback)

    def set_state(self, **updates: Any) -> None:
        for key in updates:
            if key == "events" or not hasattr(self, key):
                raise AttributeError(f"Unknown state key: {key}")
        for key, value in updates.items():
            old_value = getattr(self, key)
            setattr(self, key, value)
            self.events.emit(f"{key}_changed", {"old_value": old_value, "new_value": value})
        self.events.emit("state_changed", self)


def data_preview(
    dataset: Dataset | None, max_rows: int = PREVIEW_ROWS
) -> tuple[list[tuple[str, str]], int]:
    """First ``max_rows`` label/value rows of the first series, plus how many were left out.

    Scatter and heatmap data have no shared labels and yield no rows.
    """
    if not isinstance(dataset, ChartDataset) or not dataset.labels or not dataset.datasets:
        return [], 0
    values = dataset.datasets[0].data
    rows = [
        (label, str(values[i]) if i < len(values) else "N/A")
        for i, label in enumerate(dataset.labels[:max_rows])
    ]
    return rows, max(0, len(dataset.labels) - max_rows)


class DataVizApp:
    def __init__(
        self,
        surface: DrawingSurface,
        *,
        synthesizer: DataSynthesizer | None = None,
        coordinator: RenderCoordinator | None = None,
        notifier: Notifier | None = None,
        state: AppState | None = None,
    ):
        self.state = state or AppState()
        self.synthesizer = synthesizer or DataSynthesizer()
        self.coordinator = coordinator or RenderCoordinator(surface)
        self.coordinator.settings = self.state.settings
        self.coordinator.theme = self.state.theme
        self.notifier = notifier or Notifier(quiet=True)
        self.scheduler = UpdateScheduler(
            self.synthesizer,
            self._on_live_update,
            kind_provider=lambda: self.state.current_chart,
            settings_provider=lambda: self.state.settings,
            on_fault=self._on_scheduler_fault,
        )
        self.last_outcome: RenderOutcome | None = None
        self.coordinator.events.subscribe(RENDER_ERROR, self._on_render_error)

    @property
    def surface(self) -> DrawingSurface:
        return self.coordinator.surface

    def _on_render_error(self, payload: dict[str, Any]) -> None:
        self.notifier.error(payload["message"])

    def _on_scheduler_fault(self, fault: SchedulerFault) -> None:
        self.state.set_state(is_realtime=False)
        self.notifier.error(describe_error(fault))

    async def _show(self, dataset: Dataset, success_message: str | None = None) -> RenderOutcome:
        self.state.set_state(data=dataset)
        outcome = await self.coordinator.render(dataset, self.state.current_chart)
        self.last_outcome = outcome
        self.state.set_state(chart=outcome.handle)
        if outcome.success and success_message:
            self.notifier.success(success_message)
        return outcome

    async def _on_live_update(self, dataset: Dataset) -> None:
        outcome = await self._show(dataset)
        if not outcome.success:
            # A failed live render faults the scheduler
            raise outcome.error or RenderError("Live render failed")

    async def generate_new_data(self) -> RenderOutcome:
        """Synthesize a dataset for the current chart kind and render it."""
        try:
            dataset = await self.synthesizer.generate(
                self.state.current_chart, self.state.settings.point_count
            )
        except SynthesisError as e:
            logger.error(f"Data generation failed: {e}")
            self.notifier.error(describe_error(e))
            return RenderOutcome(success=False, error=e)
        return await self._show(dataset, "New data generated successfully!")

    async def select_chart_type(self, kind: ChartKind | str) -> RenderOutcome:
        """Switch chart kind and render fresh data for it. Unknown kinds select bar."""
        resolved = ChartKind.parse(kind)
        if resolved is None:
            logger.warning(f"Unknown chart kind '{kind}', using bar")
            resolved = ChartKind.BAR
        self.state.set_state(current_chart=resolved)
        return await self.generate_new_data()

    async def load_file(self, path: Path) -> RenderOutcome:
        """Import a .csv or .json file and render it as the current chart kind."""
        try:
            dataset = import_file(path)
        except DataImportError as e:
            logger.error(f"File import failed: {e}", extra={"path": str(path)})
            self.notifier.error(f"Failed to process file: {e}")
            return RenderOutcome(success=False, error=e)
        return await self._show(dataset, "File uploaded and processed successfully!")

    def clear_data(self) -> None:
        self.coordinator.clear()
        self.state.set_state(data=None, chart=None)
        self.notifier.info("Data cleared")

    def toggle_realtime(self) -> bool:
        """Start or stop live updates. Returns True when live updates are now running.

        Must be called from inside a running event loop.
        """
        if self.scheduler.is_running:
            self.scheduler.stop()
            self.notifier.info("Real-time updates stopped")
        else:
            self.scheduler.start()
            self.notifier.success("Real-time updates started")
        self.state.set_state(is_realtime=self.scheduler.is_running)
        return self.scheduler.is_running

    async def set_theme(self, name: str) -> Theme:
        """Apply a named theme, redrawing the current data when there is any."""
        theme = get_theme(name)
        self.coordinator.theme = theme
        self.state.set_state(theme=theme)
        if self.state.data is not None:
            outcome = await self.coordinator.render(self.state.data, self.state.current_chart)
            self.state.set_state(chart=outcome.handle)
        return theme

    def update_settings(self, **changes: Any) -> DisplaySettings:
        """Replace the display settings with ``changes`` applied.

        Raises:
            ValueError: If a changed value is out of range
            TypeError: If a key names no setting
        """
        settings = replace(self.state.settings, **changes)
        self.coordinator.settings = settings
        self.state.set_state(settings=settings)
        return settings

    async def toggle_theme(self) -> Theme:
        """Switch between the light and dark themes."""
        return await self.set_theme(toggle_theme(self.state.theme).name)
