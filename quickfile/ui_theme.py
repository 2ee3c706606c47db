"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the launcher chrome and result rows.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the renderer."""

    name: str
    reset: str
    reverse: str
    query: str
    query_placeholder: str
    directory: str
    filename: str
    match: str
    status: str
    status_warning: str
    status_error: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    query="\033[1;38;5;81m",
    query_placeholder="\033[2;38;5;250m",
    directory="\033[2;38;5;250m",
    filename="\033[38;5;252m",
    match="\033[1;38;5;214m",
    status="\033[2;38;5;250m",
    status_warning="\033[38;5;214m",
    status_error="\033[1;38;5;203m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    query="\033[1;38;5;45m",
    query_placeholder="\033[2;38;5;110m",
    directory="\033[2;38;5;110m",
    filename="\033[38;5;153m",
    match="\033[1;38;5;39m",
    status="\033[2;38;5;110m",
    status_warning="\033[38;5;215m",
    status_error="\033[1;38;5;204m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    query="",
    query_placeholder="",
    directory="",
    filename="",
    match="",
    status="",
    status_warning="",
    status_error="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]
