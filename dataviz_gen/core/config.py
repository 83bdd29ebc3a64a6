from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .enums import ChartKind
from .models import DisplaySettings


@dataclass
class Settings:
    animation_duration_ms: int
    point_count: int
    refresh_interval_ms: int
    chart_kind: ChartKind
    theme: str
    surface_width: int
    surface_height: int
    seed: int | None

    def display_settings(self) -> DisplaySettings:
        return DisplaySettings(
            animation_duration_ms=self.animation_duration_ms,
            point_count=self.point_count,
            refresh_interval_ms=self.refresh_interval_ms,
        )


ENV_PREFIX = "DATAVIZ_"


def _load_dotenv(path: Path) -> dict[str, str]:
    """Parse KEY=VALUE lines from a .env file.

    Comments, blank lines and lines without ``=`` are skipped; an ``export``
    prefix and surrounding quotes are stripped. A missing or unreadable file
    yields no values.
    """
    values: dict[str, str] = {}
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return values

    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.removeprefix("export ").partition("=")
        if not sep:
            continue
        values[key.strip()] = value.strip().strip("'\"")
    return values


class _EnvReader:
    """Look up DATAVIZ_* keys in the process environment, then in .env."""

    def __init__(self, dotenv: dict[str, str]):
        self.dotenv = dotenv

    def get(self, key: str) -> str | None:
        name = ENV_PREFIX + key
        return os.environ.get(name) or self.dotenv.get(name)

    def get_int(self, key: str, default: int | None) -> int | None:
        raw = self.get(key)
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError as e:
            raise ValueError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}") from e


def get_settings(env_path: Path | None = None) -> Settings:
    """Read settings from DATAVIZ_* variables, falling back to ``.env``.

    Args:
        env_path: .env file to read; defaults to ``.env`` in the working directory

    Raises:
        ValueError: If a numeric setting is not an integer
    """
    env = _EnvReader(_load_dotenv(env_path or Path.cwd() / ".env"))
    return Settings(
        animation_duration_ms=env.get_int("ANIMATION_MS", 800),
        point_count=env.get_int("POINT_COUNT", 20),
        refresh_interval_ms=env.get_int("REFRESH_MS", 1500),
        chart_kind=ChartKind.parse(env.get("CHART_KIND") or "bar") or ChartKind.BAR,
        theme=env.get("THEME") or "light",
        surface_width=env.get_int("WIDTH", 800),
        surface_height=env.get_int("HEIGHT", 600),
        seed=env.get_int("SEED", None),
    )
