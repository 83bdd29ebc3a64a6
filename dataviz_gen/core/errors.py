"""Error taxonomy for the visualization pipeline."""

from __future__ import annotations


class VizError(Exception):
    """Base exception for visualization pipeline errors."""
    pass


class SynthesisError(VizError):
    """Dataset generation was requested with invalid parameters."""
    pass


class ConfigurationError(VizError):
    """A chart configuration could not be built for the dataset/kind."""
    pass


class RenderError(VizError):
    """Drawing a dataset onto a surface failed."""
    pass


class SchedulerFault(VizError):
    """A scheduled live-update tick failed; the scheduler stopped."""
    pass


class DataImportError(VizError):
    """An imported file could not be turned into a dataset."""
    pass


def describe_error(error: BaseException) -> str:
    """Return the single user-facing message for a failed operation.

    Configuration and import errors carry messages meant for the user; every
    other failure is sanitized so no internal state crosses the boundary.
    """
    if isinstance(error, (ConfigurationError, DataImportError, SynthesisError)):
        return str(error)
    if isinstance(error, RenderError):
        return "Failed to render chart"
    if isinstance(error, SchedulerFault):
        return "Live updates stopped after a failed refresh"
    return "An unexpected error occurred"
