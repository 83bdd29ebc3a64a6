"""Tests for the heatmap rasterizer."""

from __future__ import annotations

import pytest
from conftest import RecordingSurface

from dataviz_gen.core.errors import RenderError
from dataviz_gen.core.models import HeatmapAxes, HeatmapCell, HeatmapDataset
from dataviz_gen.core.themes import DARK, LIGHT
from dataviz_gen.visuals.colors import heatmap_color
from dataviz_gen.visuals.heatmap import HeatmapRenderer


class BrokenTextSurface(RecordingSurface):
    def fill_text(self, *args, **kwargs):
        raise RuntimeError("font backend unavailable")


def small_heatmap(hours: int = 12) -> HeatmapDataset:
    days = ("Monday", "Tuesday")
    hour_labels = tuple(f"{h}:00" for h in range(hours))
    cells = tuple(
        HeatmapCell(
            col=col,
            row=row,
            intensity=0.9 if col == 0 else 0.2,
            display_value=90 if col == 0 else 20,
        )
        for row in range(len(days))
        for col in range(hours)
    )
    return HeatmapDataset(axes=HeatmapAxes(days=days, hours=hour_labels), cells=cells)


def test_one_rect_per_cell_with_margins(synthesizer, recording_surface) -> None:
    HeatmapRenderer().draw(recording_surface, synthesizer.heatmap())

    assert len(recording_surface.rects) == 168
    cell_width = (800 - 80) / 24
    cell_height = (600 - 60) / 7
    x, y, width, height, _ = recording_surface.rects[0]
    assert (x, y) == (60, 20)
    assert width == pytest.approx(cell_width - 1)
    assert height == pytest.approx(cell_height - 1)


def test_cell_color_comes_from_interpolator(synthesizer, recording_surface) -> None:
    dataset = synthesizer.heatmap()
    HeatmapRenderer().draw(recording_surface, dataset)
    for cell, rect in zip(dataset.cells, recording_surface.rects, strict=True):
        assert rect[4] == heatmap_color(cell.intensity).hex


def test_values_hidden_when_cells_are_small(synthesizer, recording_surface) -> None:
    # 720px / 24 hours = 30px per column, which is not wider than the threshold
    HeatmapRenderer().draw(recording_surface, synthesizer.heatmap())
    value_texts = [
        t for t in recording_surface.texts if t["align"] == "center" and t["baseline"] == "middle"
    ]
    assert value_texts == []


def test_values_drawn_with_contrasting_color_in_large_cells() -> None:
    surface = RecordingSurface(width=800, height=300)
    HeatmapRenderer().draw(surface, small_heatmap(hours=12))

    value_texts = [
        t for t in surface.texts if t["align"] == "center" and t["baseline"] == "middle"
    ]
    assert len(value_texts) == 24
    by_text = {t["text"]: t["color"] for t in value_texts}
    assert by_text["90"] == "#ffffff"
    assert by_text["20"] == "#000000"


def test_day_labels_are_abbreviated_and_right_aligned(synthesizer, recording_surface) -> None:
    HeatmapRenderer().draw(recording_surface, synthesizer.heatmap())
    day_labels = [t for t in recording_surface.texts if t["align"] == "right"]
    assert [t["text"] for t in day_labels] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert all(t["x"] == 50 for t in day_labels)
    assert all(t["color"] == LIGHT.text for t in day_labels)


def test_every_other_hour_labelled_when_more_than_twelve(synthesizer, recording_surface) -> None:
    HeatmapRenderer().draw(recording_surface, synthesizer.heatmap())
    hour_labels = [t["text"] for t in recording_surface.texts if t["baseline"] == "top"]
    assert hour_labels == [str(h) for h in range(0, 24, 2)]


def test_every_hour_labelled_up_to_twelve() -> None:
    surface = RecordingSurface()
    HeatmapRenderer().draw(surface, small_heatmap(hours=12))
    hour_labels = [t["text"] for t in surface.texts if t["baseline"] == "top"]
    assert hour_labels == [str(h) for h in range(12)]


def test_theme_argument_colors_labels(synthesizer, recording_surface) -> None:
    HeatmapRenderer().draw(recording_surface, synthesizer.heatmap(), DARK)
    labels = [t for t in recording_surface.texts if t["align"] == "right"]
    assert all(t["color"] == DARK.text for t in labels)


def test_label_failure_keeps_cells(synthesizer) -> None:
    surface = BrokenTextSurface()
    HeatmapRenderer().draw(surface, synthesizer.heatmap())
    assert len(surface.rects) == 168


def test_mapping_input_is_accepted(synthesizer, recording_surface) -> None:
    HeatmapRenderer().draw(recording_surface, synthesizer.heatmap().to_dict())
    assert len(recording_surface.rects) == 168


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"cells": []},
        {"axes": {"days": ["Monday"], "hours": ["0:00"]}},
        {"axes": {"days": [], "hours": []}, "cells": []},
    ],
)
def test_invalid_structure_raises_render_error(payload, recording_surface) -> None:
    with pytest.raises(RenderError):
        HeatmapRenderer().draw(recording_surface, payload)
    assert recording_surface.clears == 1
    assert recording_surface.rects == []
