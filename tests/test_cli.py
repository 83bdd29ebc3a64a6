from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from dataviz_gen import __version__
from dataviz_gen.cli.main import app
from dataviz_gen.visuals.heatmap import HeatmapRenderer

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(monkeypatch, tmp_path):
    for key in ("DATAVIZ_WIDTH", "DATAVIZ_HEIGHT", "DATAVIZ_SEED", "DATAVIZ_CHART_KIND"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_generate_prints_preview() -> None:
    result = runner.invoke(app, ["generate", "--kind", "bar", "--points", "4", "--seed", "1"])
    assert result.exit_code == 0, result.output
    assert "bar: 4 data points" in result.output
    assert "Technology" in result.output
    assert "Education" in result.output


def test_generate_heatmap_summary() -> None:
    result = runner.invoke(app, ["generate", "--kind", "heatmap"])
    assert result.exit_code == 0, result.output
    assert "7 days x 24 hours (168 cells)" in result.output


def test_generate_writes_json(isolated_cwd) -> None:
    target = isolated_cwd / "bar.json"
    result = runner.invoke(
        app, ["generate", "--kind", "line", "--points", "6", "--output", str(target)]
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert len(payload["labels"]) == 6
    assert [s["label"] for s in payload["datasets"]] == ["Sales", "Expenses", "Profit"]


def test_unknown_kind_exits_with_error() -> None:
    result = runner.invoke(app, ["generate", "--kind", "radar"])
    assert result.exit_code == 1
    assert "Unknown chart kind 'radar'" in result.output


def test_invalid_configuration_exits(monkeypatch) -> None:
    monkeypatch.setenv("DATAVIZ_WIDTH", "wide")
    result = runner.invoke(app, ["render"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_render_writes_png(isolated_cwd) -> None:
    target = isolated_cwd / "pie.png"
    result = runner.invoke(app, ["render", "--kind", "pie", "--seed", "2", "--output", str(target)])
    assert result.exit_code == 0, result.output
    assert target.read_bytes()[:4] == b"\x89PNG"


def test_render_input_file(isolated_cwd) -> None:
    source = isolated_cwd / "sales.csv"
    source.write_text("month,sales\nJan,3\nFeb,5\n", encoding="utf-8")
    target = isolated_cwd / "sales.png"

    result = runner.invoke(
        app, ["render", "--kind", "line", "--input", str(source), "--output", str(target)]
    )

    assert result.exit_code == 0, result.output
    assert target.exists()


def test_render_rejects_unsupported_input(isolated_cwd) -> None:
    source = isolated_cwd / "notes.txt"
    source.write_text("hello", encoding="utf-8")
    result = runner.invoke(app, ["render", "--input", str(source)])
    assert result.exit_code == 1
    assert "Unsupported file format: notes.txt" in result.output


@pytest.mark.parametrize("fmt,prefix", [("svg", "chart-"), ("json", "data-"), ("png", "chart-")])
def test_export_formats(isolated_cwd, fmt, prefix) -> None:
    out_dir = isolated_cwd / "exports"
    result = runner.invoke(
        app, ["export", "--format", fmt, "--kind", "heatmap", "--output-dir", str(out_dir)]
    )
    assert result.exit_code == 0, result.output
    files = list(out_dir.iterdir())
    assert len(files) == 1
    assert files[0].name.startswith(prefix)
    assert files[0].suffix == f".{fmt}"


def test_live_writes_one_frame_per_tick(isolated_cwd) -> None:
    frames = isolated_cwd / "frames"
    result = runner.invoke(
        app,
        [
            "live",
            "--kind",
            "scatter",
            "--ticks",
            "2",
            "--interval-ms",
            "5",
            "--points",
            "10",
            "--output-dir",
            str(frames),
        ],
    )
    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in frames.iterdir()) == ["frame-001.png", "frame-002.png"]
    assert "Captured 2 live frames" in result.output


def test_live_stops_on_render_failure(isolated_cwd, monkeypatch) -> None:
    def broken_draw(self, surface, dataset, theme=None):
        raise RuntimeError("surface lost")

    monkeypatch.setattr(HeatmapRenderer, "draw", broken_draw)
    frames = isolated_cwd / "frames"
    result = runner.invoke(
        app,
        [
            "live",
            "--kind",
            "heatmap",
            "--ticks",
            "3",
            "--interval-ms",
            "5",
            "--output-dir",
            str(frames),
        ],
    )

    assert result.exit_code == 1
    assert "Live updates stopped after a failed refresh" in result.output
    assert not frames.exists()
