from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from .logging_config import get_logger

logger = get_logger(__name__)

THEMES_PATH = Path("configs/themes.yaml")


@dataclass(frozen=True)
class Theme:
    """Semantic colors read when a chart configuration is built."""

    name: str
    text: str
    grid: str
    border: str
    primary: str
    background: str


LIGHT = Theme(
    name="light",
    text="#374151",
    grid="#e5e7eb",
    border="#d1d5db",
    primary="#3b82f6",
    background="#ffffff",
)

DARK = Theme(
    name="dark",
    text="#e5e7eb",
    grid="#374151",
    border="#4b5563",
    primary="#60a5fa",
    background="#111827",
)

BUILTIN_THEMES: dict[str, Theme] = {LIGHT.name: LIGHT, DARK.name: DARK}


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_themes(path: Path | None = None) -> dict[str, Theme]:
    """Return built-in themes merged with overrides from ``configs/themes.yaml``.

    A YAML entry named like a built-in theme overrides only the colors it
    lists; a new name must define every color.
    """
    themes = dict(BUILTIN_THEMES)
    data = _load_yaml(path or THEMES_PATH)
    color_names = {f.name for f in fields(Theme)} - {"name"}
    for name, colors in (data.get("themes") or {}).items():
        colors = {k: str(v) for k, v in (colors or {}).items() if k in color_names}
        if name in themes:
            themes[name] = replace(themes[name], **colors)
        elif color_names <= colors.keys():
            themes[name] = Theme(name=name, **colors)
        else:
            logger.warning(
                "Skipping incomplete theme definition",
                extra={"theme": name, "missing": sorted(color_names - colors.keys())},
            )
    return themes


def get_theme(name: str, path: Path | None = None) -> Theme:
    themes = load_themes(path)
    theme = themes.get(name.lower())
    if theme is None:
        logger.warning(f"Unknown theme '{name}', using light theme")
        return themes["light"]
    return theme


def toggle_theme(current: Theme) -> Theme:
    return DARK if current.name == LIGHT.name else LIGHT
