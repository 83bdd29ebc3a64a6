"""Render coordination for the single chart surface.

RenderCoordinator sequences every render as destroy, settle, then create, so
the surface never hosts two chart objects. Renders are serialized with an
asyncio lock: a request arriving while another is in flight waits for it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..core.enums import ChartKind
from ..core.errors import RenderError, VizError, describe_error
from ..core.events import LOADING_HIDDEN, LOADING_SHOWN, RENDER_ERROR, EventBus
from ..core.logging_config import get_logger
from ..core.models import Dataset, DisplaySettings
from ..core.themes import LIGHT, Theme
from ..visuals.chart_config import ChartConfigBuilder, RenderConfig
from ..visuals.charts import create_chart
from ..visuals.heatmap import HeatmapRenderer
from ..visuals.surface import DrawingSurface
from .slot import ChartSlot, RenderHandle

logger = get_logger(__name__)

ChartFactory = Callable[[Any, RenderConfig], RenderHandle]


@dataclass(frozen=True)
class RenderOutcome:
    """Result of one render call.

    ``handle`` is None both for a successful heatmap (heatmaps own no chart
    object) and for any failure; ``success`` tells the two apart.
    """

    success: bool
    handle: RenderHandle | None = None
    error: VizError | None = None

    @property
    def message(self) -> str:
        return describe_error(self.error) if self.error else ""


class RenderCoordinator:
    def __init__(
        self,
        surface: DrawingSurface,
        *,
        builder: ChartConfigBuilder | None = None,
        heatmap_renderer: HeatmapRenderer | None = None,
        chart_factory: ChartFactory = create_chart,
        events: EventBus | None = None,
        settings: DisplaySettings | None = None,
        theme: Theme = LIGHT,
        settle_delay_ms: float = 50.0,
        processing_delay_ms: float = 200.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the coordinator.

        Args:
            surface: Drawing surface every chart and heatmap is painted on
            builder: Chart configuration builder for non-heatmap kinds
            heatmap_renderer: Rasterizer used for the heatmap kind
            chart_factory: Constructs a live chart on the surface from a RenderConfig
            events: Bus receiving loading_shown / loading_hidden / error signals
            settings: Display settings read at config-build time
            theme: Theme read at config-build and heatmap-label time
            settle_delay_ms: Pause after destroying a chart before reusing the surface
            processing_delay_ms: Simulated processing time before drawing
            sleep: Coroutine used for both delays
        """
        self.surface = surface
        self.slot = ChartSlot(surface)
        self.builder = builder or ChartConfigBuilder()
        self.heatmap_renderer = heatmap_renderer or HeatmapRenderer()
        self.chart_factory = chart_factory
        self.events = events or EventBus()
        self.settings = settings or DisplaySettings()
        self.theme = theme
        self.settle_delay_ms = settle_delay_ms
        self.processing_delay_ms = processing_delay_ms
        self._sleep = sleep
        self._lock = asyncio.Lock()

    @property
    def handle(self) -> RenderHandle | None:
        return self.slot.handle

    async def _pause(self, delay_ms: float) -> None:
        if delay_ms > 0:
            await self._sleep(delay_ms / 1000.0)

    async def render(
        self, dataset: Dataset | Mapping[str, Any], kind: ChartKind | str
    ) -> RenderOutcome:
        """Render ``dataset`` as ``kind`` on the owned surface.

        Failures never raise: they are logged, signalled on the event bus and
        returned as an unsuccessful outcome with no live handle left behind.
        """
        async with self._lock:
            return await self._render(dataset, kind)

    async def _render(
        self, dataset: Dataset | Mapping[str, Any], kind: ChartKind | str
    ) -> RenderOutcome:
        kind_name = kind.value if isinstance(kind, ChartKind) else str(kind)

        shown = False
        try:
            if self.slot.release():
                await self._pause(self.settle_delay_ms)

            self.events.emit(LOADING_SHOWN, {"kind": kind_name})
            shown = True
            if ChartKind.parse(kind) is ChartKind.HEATMAP:
                await self._pause(self.processing_delay_ms)
                self.heatmap_renderer.draw(self.surface, dataset, self.theme)
                outcome = RenderOutcome(success=True)
            else:
                config = self.builder.build(dataset, kind, self.settings, self.theme)
                await self._pause(self.processing_delay_ms)
                try:
                    handle = self.chart_factory(self.surface, config)
                except VizError:
                    raise
                except Exception as e:
                    raise RenderError(f"Chart construction failed: {e}") from e
                self.slot.replace(handle)
                outcome = RenderOutcome(success=True, handle=handle)
        except Exception as e:
            error = e if isinstance(e, VizError) else RenderError(str(e))
            logger.error(
                f"Chart rendering failed: {e}",
                exc_info=True,
                extra={"kind": kind_name, "error_type": type(error).__name__},
            )
            self._reset_surface()
            if not shown:
                self.events.emit(LOADING_SHOWN, {"kind": kind_name})
            self.events.emit(LOADING_HIDDEN, {"kind": kind_name})
            self.events.emit(RENDER_ERROR, {"kind": kind_name, "message": describe_error(error)})
            return RenderOutcome(success=False, error=error)

        self.events.emit(LOADING_HIDDEN, {"kind": kind_name})
        logger.info("Chart rendered", extra={"kind": kind_name})
        return outcome

    def _reset_surface(self) -> None:
        try:
            self.slot.release()
        finally:
            self.surface.clear()

    def clear(self) -> None:
        """Destroy the live chart and blank the surface."""
        self._reset_surface()
        logger.debug("Render surface cleared")
