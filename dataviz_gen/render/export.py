"""File exports for the current chart and dataset.

Three formats are supported: the dataset as indented JSON, an SVG summary
card rendered from a Jinja2 template, and a PNG snapshot of the drawing
surface. Without an explicit path, files are named after the export time.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from ..core.enums import ChartKind, ExportFormat
from ..core.errors import RenderError
from ..core.logging_config import get_logger
from ..core.models import Dataset, HeatmapDataset
from ..core.themes import LIGHT, Theme
from ..visuals.chart_config import chart_title
from ..visuals.surface import FigureSurface

logger = get_logger(__name__)

SVG_TEMPLATE = "chart_export.svg.j2"
SVG_WIDTH = 800
SVG_HEIGHT = 400
SVG_MUTED_TEXT = "#6b7280"


def default_filename(fmt: ExportFormat, now: datetime | None = None) -> str:
    """``chart-<ms>.png`` / ``chart-<ms>.svg`` / ``data-<ms>.json``."""
    stamp = int((now or datetime.now()).timestamp() * 1000)
    prefix = "data" if fmt is ExportFormat.JSON else "chart"
    return f"{prefix}-{stamp}.{fmt.value}"


def dataset_point_count(dataset: Dataset | None) -> int:
    if dataset is None:
        return 0
    if isinstance(dataset, HeatmapDataset):
        return len(dataset.cells)
    return dataset.point_count()


class ChartExporter:
    """Write exports into ``output_dir`` (default: the working directory)."""

    def __init__(
        self,
        output_dir: Path | None = None,
        templates_dir: Path | None = None,
        theme: Theme = LIGHT,
    ):
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=lambda name: name is not None and name.endswith(".svg.j2"),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.output_dir = output_dir or Path.cwd()
        self.theme = theme

    def _target(self, fmt: ExportFormat, path: Path | None) -> Path:
        target = path or self.output_dir / default_filename(fmt)
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    def export_json(self, dataset: Dataset, path: Path | None = None) -> Path:
        """Write the dataset in the interchange shape, indented by two spaces."""
        target = self._target(ExportFormat.JSON, path)
        target.write_text(json.dumps(dataset.to_dict(), indent=2), encoding="utf-8")
        logger.info("Exported dataset as JSON", extra={"path": str(target)})
        return target

    def render_svg(
        self, dataset: Dataset | None, kind: ChartKind | str | None = None
    ) -> str:
        """Render the SVG summary card: chart title, export date and point count.

        Raises:
            RenderError: If the SVG template is missing
        """
        try:
            template = self.env.get_template(SVG_TEMPLATE)
        except TemplateNotFound as e:
            logger.error("SVG template not found", extra={"error": str(e)})
            raise RenderError(f"SVG template not found: {e}") from e

        resolved = ChartKind.parse(kind) if kind is not None else None
        return template.render(
            width=SVG_WIDTH,
            height=SVG_HEIGHT,
            background=self.theme.background,
            text_color=self.theme.text,
            muted_color=SVG_MUTED_TEXT,
            title=chart_title(resolved) if resolved else "Chart Export",
            export_date=datetime.now().strftime("%Y-%m-%d"),
            point_count=dataset_point_count(dataset),
            kind=resolved.value if resolved else "",
        )

    def export_svg(
        self,
        dataset: Dataset | None,
        kind: ChartKind | str | None = None,
        path: Path | None = None,
    ) -> Path:
        target = self._target(ExportFormat.SVG, path)
        target.write_text(self.render_svg(dataset, kind), encoding="utf-8")
        logger.info("Exported chart as SVG", extra={"path": str(target)})
        return target

    def export_png(self, surface: FigureSurface, path: Path | None = None) -> Path:
        """Snapshot the drawing surface.

        Raises:
            RenderError: If nothing has been drawn on the surface
        """
        if surface.is_blank():
            raise RenderError("No chart to export")
        target = self._target(ExportFormat.PNG, path)
        surface.save_png(target)
        logger.info("Exported chart as PNG", extra={"path": str(target)})
        return target

    def export(
        self,
        fmt: ExportFormat | str,
        *,
        dataset: Dataset | None = None,
        surface: FigureSurface | None = None,
        kind: ChartKind | str | None = None,
        path: Path | None = None,
    ) -> Path:
        """Dispatch to the exporter for ``fmt``.

        Raises:
            RenderError: If the inputs the format needs are missing
        """
        fmt = ExportFormat(fmt)
        if fmt is ExportFormat.JSON:
            if dataset is None:
                raise RenderError("No data to export")
            return self.export_json(dataset, path)
        if fmt is ExportFormat.SVG:
            return self.export_svg(dataset, kind, path)
        if surface is None:
            raise RenderError("No chart to export")
        return self.export_png(surface, path)
