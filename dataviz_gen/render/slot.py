from __future__ import annotations

from typing import Protocol

from ..core.logging_config import get_logger
from ..visuals.surface import DrawingSurface

logger = get_logger(__name__)


class RenderHandle(Protocol):
    """A live chart object bound to a drawing surface."""

    @property
    def destroyed(self) -> bool: ...

    def destroy(self) -> None: ...


class ChartSlot:
    """Exclusive owner of the single live chart on a surface.

    ``replace()`` is the only way the held handle changes, and it always
    destroys the previous handle before the next one is installed.
    """

    def __init__(self, surface: DrawingSurface):
        self.surface = surface
        self._handle: RenderHandle | None = None

    @property
    def handle(self) -> RenderHandle | None:
        return self._handle

    def replace(self, new_handle: RenderHandle | None) -> None:
        previous, self._handle = self._handle, None
        try:
            if previous is not None and previous is not new_handle:
                previous.destroy()
                logger.debug("Destroyed previous chart handle")
        finally:
            self._handle = new_handle

    def release(self) -> bool:
        """Destroy the held handle, if any. Returns True when one was destroyed."""
        had_handle = self._handle is not None
        self.replace(None)
        return had_handle
