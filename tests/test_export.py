"""Tests for JSON, SVG and PNG exports."""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from dataviz_gen.core.enums import ChartKind, ExportFormat
from dataviz_gen.core.errors import RenderError
from dataviz_gen.core.themes import Theme
from dataviz_gen.render.export import ChartExporter, dataset_point_count, default_filename
from dataviz_gen.visuals.heatmap import HeatmapRenderer
from dataviz_gen.visuals.surface import FigureSurface


def test_default_filenames_use_millisecond_timestamp() -> None:
    now = datetime(2024, 3, 1, 12, 0, 0)
    stamp = int(now.timestamp() * 1000)
    assert default_filename(ExportFormat.PNG, now) == f"chart-{stamp}.png"
    assert default_filename(ExportFormat.SVG, now) == f"chart-{stamp}.svg"
    assert default_filename(ExportFormat.JSON, now) == f"data-{stamp}.json"


def test_json_export_is_indented_interchange(tmp_path, synthesizer) -> None:
    dataset = synthesizer.line(4)
    path = ChartExporter(output_dir=tmp_path).export_json(dataset)

    assert path.parent == tmp_path
    assert path.name.startswith("data-")
    text = path.read_text(encoding="utf-8")
    assert text.startswith('{\n  "labels"')
    assert json.loads(text) == json.loads(json.dumps(dataset.to_dict()))


def test_svg_export_shows_title_date_and_count(tmp_path, synthesizer) -> None:
    path = ChartExporter(output_dir=tmp_path).export_svg(synthesizer.bar(6), ChartKind.BAR)

    svg = path.read_text(encoding="utf-8")
    assert svg.startswith("<svg")
    assert "Revenue by Industry Sector" in svg
    assert datetime.now().strftime("%Y-%m-%d") in svg
    assert "Data points: 6" in svg


def test_svg_escapes_text(tmp_path) -> None:
    theme = Theme(
        name="odd",
        text="</text><script>",
        grid="#000000",
        border="#000000",
        primary="#000000",
        background="#ffffff",
    )
    svg = ChartExporter(output_dir=tmp_path, theme=theme).render_svg(None)
    assert "<script>" not in svg
    assert "Data points: 0" in svg


def test_png_export_requires_a_drawing(tmp_path) -> None:
    with pytest.raises(RenderError):
        ChartExporter(output_dir=tmp_path).export_png(FigureSurface(width=200, height=150))


def test_png_export_writes_surface(tmp_path, synthesizer) -> None:
    surface = FigureSurface(width=400, height=300)
    HeatmapRenderer().draw(surface, synthesizer.heatmap())

    path = ChartExporter().export_png(surface, tmp_path / "out" / "heatmap.png")

    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_export_dispatch_requires_inputs(tmp_path) -> None:
    exporter = ChartExporter(output_dir=tmp_path)
    with pytest.raises(RenderError, match="No data"):
        exporter.export("json")
    with pytest.raises(RenderError, match="No chart"):
        exporter.export(ExportFormat.PNG)


def test_point_count_per_dataset_shape(synthesizer) -> None:
    assert dataset_point_count(None) == 0
    assert dataset_point_count(synthesizer.heatmap()) == 168
    assert dataset_point_count(synthesizer.scatter(9)) == 9
    assert dataset_point_count(synthesizer.bar(3)) == 3
