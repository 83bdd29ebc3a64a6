"""Import CSV and JSON files into the chart interchange shape."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any

from ..core.errors import ConfigurationError, DataImportError
from ..core.logging_config import get_logger
from ..core.models import ChartDataset, Dataset, HeatmapDataset, Series

logger = get_logger(__name__)

IMPORT_STYLE: dict[str, Any] = {
    "background_color": "#3b82f6",
    "border_color": "#2563eb",
    "border_width": 2,
}


def _to_number(value: str) -> float | int | None:
    try:
        number = float(value)
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


def parse_csv(content: str) -> ChartDataset:
    """Convert CSV text into a single-series dataset.

    The first column provides the labels and the second column the values.
    Rows without a value column plot as 0.

    Raises:
        DataImportError: If the file has no data rows or a value is not numeric
    """
    rows = [row for row in csv.reader(io.StringIO(content.strip())) if row]
    if len(rows) < 2:
        raise DataImportError("CSV file needs a header row and at least one data row")

    headers = [h.strip() for h in rows[0]]
    value_column = headers[1] if len(headers) > 1 else "value"
    labels: list[str] = []
    values: list[float | int] = []
    for line_no, row in enumerate(rows[1:], start=2):
        cells = [c.strip() for c in row]
        labels.append(cells[0])
        raw = cells[1] if len(cells) > 1 and cells[1] else "0"
        value = _to_number(raw)
        if value is None:
            raise DataImportError(
                f"Line {line_no}: value '{raw}' in column '{value_column}' is not numeric"
            )
        values.append(value)

    series = Series(label="Imported Data", data=tuple(values), style=dict(IMPORT_STYLE))
    return ChartDataset(labels=tuple(labels), datasets=(series,))


def parse_json(content: str) -> Dataset:
    """Parse a JSON export back into a dataset (chart or heatmap shape)."""
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise DataImportError(f"Invalid JSON: {e.msg} (line {e.lineno})") from e
    if not isinstance(payload, dict):
        raise DataImportError("JSON file must contain an object")
    try:
        if "axes" in payload or "cells" in payload:
            return HeatmapDataset.from_dict(payload)
        if "labels" not in payload and payload.get("datasets"):
            # Scatter exports carry points instead of shared labels
            return ChartDataset.from_dict({"labels": [], **payload})
        return ChartDataset.from_dict(payload)
    except ConfigurationError as e:
        raise DataImportError(str(e)) from e


def load_file(path: Path) -> Dataset:
    """Load a dataset from a .csv or .json file.

    Raises:
        DataImportError: On unsupported formats, unreadable files or bad content
    """
    suffix = path.suffix.lower()
    if suffix not in (".csv", ".json"):
        raise DataImportError(f"Unsupported file format: {path.name}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataImportError(f"Failed to read file: {path}") from e

    dataset = parse_csv(content) if suffix == ".csv" else parse_json(content)
    logger.info("Imported dataset", extra={"path": str(path), "format": suffix[1:]})
    return dataset
