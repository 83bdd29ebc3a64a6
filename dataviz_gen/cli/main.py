from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from .. import __version__
from ..app import DataVizApp, data_preview
from ..core.config import Settings, get_settings
from ..core.enums import ChartKind, ExportFormat
from ..core.errors import VizError, describe_error
from ..core.logging_config import DEFAULT_LOG_FILE, get_logger, setup_logging
from ..core.models import Dataset, HeatmapDataset
from ..core.random_source import NumpyRandomSource
from ..core.themes import get_theme
from ..data.synthesizer import DataSynthesizer
from ..render.coordinator import RenderCoordinator
from ..render.export import ChartExporter, default_filename
from ..visuals.surface import FigureSurface
from . import output as cli_output

app = typer.Typer(help="DataViz Generator CLI")

logger = get_logger(__name__)


@app.callback()
def callback(
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
    log_file: Path = typer.Option(DEFAULT_LOG_FILE, "--log-file", help="Rotating JSON log file"),  # noqa: B008
) -> None:
    """Configure global CLI options."""
    setup_logging(json_output=json_logs, log_level=log_level, log_file=log_file)
    logger.debug("CLI initialized", extra={"json_logs": json_logs, "log_level": log_level})


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(__version__)


def _resolve_kind(kind: str | None, settings: Settings) -> ChartKind:
    if kind is None:
        return settings.chart_kind
    resolved = ChartKind.parse(kind)
    if resolved is None:
        choices = ", ".join(k.value for k in ChartKind)
        cli_output.error(f"Unknown chart kind '{kind}'. Choose one of: {choices}")
        raise typer.Exit(code=1)
    return resolved


def _build_app(
    settings: Settings,
    kind: ChartKind,
    *,
    theme: str | None = None,
    seed: int | None = None,
    points: int | None = None,
    refresh_ms: int | None = None,
    quiet: bool = False,
) -> DataVizApp:
    """Wire a headless app around a fresh figure surface.

    The simulated loading delays only make sense on an interactive dashboard,
    so they are disabled for command-line runs.
    """
    surface = FigureSurface(width=settings.surface_width, height=settings.surface_height)
    synthesizer = DataSynthesizer(
        NumpyRandomSource(seed if seed is not None else settings.seed),
        delay_range_ms=(0.0, 0.0),
    )
    coordinator = RenderCoordinator(surface, settle_delay_ms=0, processing_delay_ms=0)
    viz = DataVizApp(
        surface,
        synthesizer=synthesizer,
        coordinator=coordinator,
        notifier=cli_output.Notifier(quiet=quiet),
    )
    viz.state.set_state(current_chart=kind, theme=get_theme(theme or settings.theme))
    coordinator.theme = viz.state.theme

    base = settings.display_settings()
    viz.update_settings(
        animation_duration_ms=base.animation_duration_ms,
        point_count=points or base.point_count,
        refresh_interval_ms=refresh_ms or base.refresh_interval_ms,
    )
    return viz


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValueError as e:
        cli_output.error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1) from e


def _print_summary(dataset: Dataset, kind: ChartKind) -> None:
    if isinstance(dataset, HeatmapDataset):
        cli_output.data(
            f"{kind.value}: {len(dataset.axes.days)} days x {len(dataset.axes.hours)} hours "
            f"({len(dataset.cells)} cells)"
        )
        return
    cli_output.data(f"{kind.value}: {dataset.point_count()} data points")
    rows, remaining = data_preview(dataset)
    for label, value in rows:
        cli_output.plain(f"  {label:<16} {value}", color=cli_output.OutputColor.WHITE)
    if remaining:
        cli_output.plain(f"  ... and {remaining} more rows")


@app.command()
def generate(
    kind: str | None = typer.Option(None, "--kind", help="Chart kind: bar|line|pie|scatter|heatmap"),
    points: int | None = typer.Option(None, "--points", min=1, help="Number of data points"),
    seed: int | None = typer.Option(None, "--seed", help="Random seed for reproducible data"),
    output: Path | None = typer.Option(None, "--output", help="Write the dataset as JSON to this path"),  # noqa: B008
) -> None:
    """Generate a sample dataset, print a preview and optionally save it as JSON."""
    settings = _load_settings()
    chart_kind = _resolve_kind(kind, settings)
    synthesizer = DataSynthesizer(
        NumpyRandomSource(seed if seed is not None else settings.seed), delay_range_ms=(0.0, 0.0)
    )
    try:
        dataset = synthesizer.generate_now(chart_kind, points or settings.point_count)
    except VizError as e:
        cli_output.error(describe_error(e))
        raise typer.Exit(code=1) from e

    _print_summary(dataset, chart_kind)
    if output is not None:
        path = ChartExporter().export_json(dataset, output)
        cli_output.success(f"Dataset written to {path}")


@app.command()
def render(
    kind: str | None = typer.Option(None, "--kind", help="Chart kind: bar|line|pie|scatter|heatmap"),
    points: int | None = typer.Option(None, "--points", min=1, help="Number of data points"),
    seed: int | None = typer.Option(None, "--seed", help="Random seed for reproducible data"),
    input_file: Path | None = typer.Option(None, "--input", help="Render a .csv or .json file instead of generated data"),  # noqa: B008
    theme: str | None = typer.Option(None, "--theme", help="Theme name (light, dark or one from configs/themes.yaml)"),
    output: Path | None = typer.Option(None, "--output", help="PNG output path (default: chart-<timestamp>.png)"),  # noqa: B008
) -> None:
    """Render a chart to a PNG file."""
    settings = _load_settings()
    chart_kind = _resolve_kind(kind, settings)
    viz = _build_app(settings, chart_kind, theme=theme, seed=seed, points=points, quiet=True)

    if input_file is not None:
        outcome = asyncio.run(viz.load_file(input_file))
    else:
        outcome = asyncio.run(viz.generate_new_data())
    if not outcome.success:
        cli_output.error(describe_error(outcome.error) if outcome.error else "Render failed")
        raise typer.Exit(code=1)

    target = output or Path(default_filename(ExportFormat.PNG))
    try:
        path = ChartExporter(theme=viz.state.theme).export_png(viz.surface, target)
    except VizError as e:
        cli_output.error(describe_error(e))
        raise typer.Exit(code=1) from e
    cli_output.success(f"Chart written to {path}")


@app.command("export")
def export_chart(
    fmt: ExportFormat = typer.Option(ExportFormat.PNG, "--format", case_sensitive=False, help="Export format: png|svg|json"),  # noqa: B008
    kind: str | None = typer.Option(None, "--kind", help="Chart kind: bar|line|pie|scatter|heatmap"),
    points: int | None = typer.Option(None, "--points", min=1, help="Number of data points"),
    seed: int | None = typer.Option(None, "--seed", help="Random seed for reproducible data"),
    input_file: Path | None = typer.Option(None, "--input", help="Export a .csv or .json file instead of generated data"),  # noqa: B008
    output_dir: Path = typer.Option(Path("."), "--output-dir", help="Directory for the exported file"),  # noqa: B008
) -> None:
    """Export the chart or its data as PNG, SVG or JSON."""
    settings = _load_settings()
    chart_kind = _resolve_kind(kind, settings)
    viz = _build_app(settings, chart_kind, seed=seed, points=points, quiet=True)

    if input_file is not None:
        outcome = asyncio.run(viz.load_file(input_file))
    else:
        outcome = asyncio.run(viz.generate_new_data())
    if not outcome.success:
        cli_output.error(describe_error(outcome.error) if outcome.error else "Render failed")
        raise typer.Exit(code=1)

    exporter = ChartExporter(output_dir=output_dir, theme=viz.state.theme)
    try:
        path = exporter.export(
            fmt, dataset=viz.state.data, surface=viz.surface, kind=viz.state.current_chart
        )
    except VizError as e:
        cli_output.error(describe_error(e))
        raise typer.Exit(code=1) from e
    cli_output.success(f"Exported {fmt.value.upper()} to {path}")


async def _run_live(viz: DataVizApp, ticks: int, output_dir: Path) -> list[Path]:
    frames: list[Path] = []
    finished = asyncio.Event()

    def on_realtime(change: dict) -> None:
        if not change["new_value"]:
            finished.set()

    def on_chart(change: dict) -> None:
        outcome = viz.last_outcome
        if viz.state.data is None or outcome is None or not outcome.success:
            return
        frame = output_dir / f"frame-{len(frames) + 1:03d}.png"
        frames.append(viz.surface.save_png(frame))
        cli_output.info(f"Frame {len(frames)}/{ticks} written to {frame}")
        if len(frames) >= ticks:
            viz.scheduler.stop()
            finished.set()

    viz.state.subscribe("chart_changed", on_chart)
    viz.state.subscribe("is_realtime_changed", on_realtime)
    viz.toggle_realtime()
    await finished.wait()
    await viz.scheduler.wait_for_tick()
    return frames


@app.command()
def live(
    kind: str | None = typer.Option(None, "--kind", help="Chart kind: bar|line|pie|scatter|heatmap"),
    ticks: int = typer.Option(5, "--ticks", min=1, help="Number of live updates to capture"),
    interval_ms: int | None = typer.Option(None, "--interval-ms", min=1, help="Refresh interval in milliseconds"),
    points: int | None = typer.Option(None, "--points", min=1, help="Number of data points"),
    seed: int | None = typer.Option(None, "--seed", help="Random seed for reproducible data"),
    output_dir: Path = typer.Option(Path("frames"), "--output-dir", help="Directory for frame PNGs"),  # noqa: B008
) -> None:
    """Run live updates for a number of ticks, writing one PNG frame per tick."""
    settings = _load_settings()
    chart_kind = _resolve_kind(kind, settings)
    viz = _build_app(
        settings, chart_kind, seed=seed, points=points, refresh_ms=interval_ms, quiet=True
    )

    frames = asyncio.run(_run_live(viz, ticks, output_dir))
    if viz.scheduler.last_fault is not None:
        cli_output.error(describe_error(viz.scheduler.last_fault))
        raise typer.Exit(code=1)
    cli_output.success(f"Captured {len(frames)} live frames in {output_dir}")


if __name__ == "__main__":
    app()
