"""Rendering for the launcher screen.

Defines render context data and writes fully composed ANSI frames: a query row,
the result list, and a status row. Rendering never mutates session state.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from .ansi import char_display_width, clip_ansi_line, display_width
from .highlight import DIRECTORY, HighlightSegment, segment
from .protocol import ERROR, SearchResult
from .ui_theme import DEFAULT_THEME, UITheme

QUERY_PREFIX = "> "
QUERY_PLACEHOLDER = "type to search files"
SELECTED_MARKER = "▌"
ELLIPSIS = "…"
CHROME_ROWS = 2


@dataclass
class RenderContext:
    query_text: str
    results: tuple[SearchResult, ...]
    selected_index: int
    list_start: int
    total_files: int
    width: int
    max_lines: int
    connected: bool = True
    snapshot_kind: str = "SearchResults"
    error_message: str | None = None
    status_message: str = ""
    theme: UITheme = DEFAULT_THEME


def list_row_count(max_lines: int) -> int:
    """Number of result rows between the query row and the status row."""
    return max(1, max_lines - CHROME_ROWS)


def clamp_list_start(selected_index: int, list_start: int, rows: int, count: int) -> int:
    """Scroll the list just enough to keep ``selected_index`` visible."""
    if selected_index < list_start:
        list_start = selected_index
    elif selected_index >= list_start + rows:
        list_start = selected_index - rows + 1
    return max(0, min(list_start, max(0, count - rows)))


def result_index_for_row(row: int, list_start: int, rows: int) -> int | None:
    """Map a 1-based terminal row to a result index, or ``None`` for chrome.

    Only the ``rows`` list rows between the query row and the status row map
    to results.
    """
    offset = row - 2
    if offset < 0 or offset >= rows:
        return None
    return list_start + offset


def clip_segments_left(segments: list[HighlightSegment], max_cols: int) -> list[HighlightSegment]:
    """Drop leading characters so the row fits, keeping the filename end visible."""
    total = sum(display_width(item.text) for item in segments)
    if total <= max_cols:
        return segments
    budget = max(0, max_cols - display_width(ELLIPSIS))
    kept: list[HighlightSegment] = []
    used = 0
    for item in reversed(segments):
        chars: list[str] = []
        for ch in reversed(item.text):
            w = char_display_width(ch, 0)
            if used + w > budget:
                break
            chars.append(ch)
            used += w
        if chars:
            kept.append(HighlightSegment("".join(reversed(chars)), item.highlighted, item.part))
        if used >= budget or len(chars) < len(item.text):
            break
    kept.reverse()
    return [HighlightSegment(ELLIPSIS, False, DIRECTORY), *kept]


def format_segments(segments: list[HighlightSegment], theme: UITheme) -> str:
    out: list[str] = []
    for item in segments:
        if item.highlighted:
            style = theme.match
        elif item.part == DIRECTORY:
            style = theme.directory
        else:
            style = theme.filename
        out.append(f"{style}{item.text}{theme.reset}" if style else item.text)
    return "".join(out)


def selected_with_ansi(text: str, theme: UITheme) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text or not theme.reverse:
        return text
    # Keep reverse video active even when the text contains internal resets.
    return theme.reverse + text.replace(theme.reset, theme.reset + theme.reverse) + theme.reset


def format_result_row(result: SearchResult, width: int, theme: UITheme, selected: bool) -> str:
    marker = SELECTED_MARKER if selected else " "
    body_cols = max(0, width - 2)
    segments = clip_segments_left(segment(result.display_path, result.match_offsets), body_cols)
    body = format_segments(segments, theme)
    pad = " " * max(0, body_cols - sum(display_width(item.text) for item in segments))
    row = f"{marker} {body}{pad}"
    if selected:
        row = selected_with_ansi(row, theme)
    return clip_ansi_line(row, width)


def format_query_row(query_text: str, width: int, theme: UITheme) -> str:
    if query_text:
        text = f"{theme.query}{QUERY_PREFIX}{query_text}_{theme.reset}"
    else:
        text = f"{theme.query}{QUERY_PREFIX}{theme.reset}{theme.query_placeholder}{QUERY_PLACEHOLDER}{theme.reset}"
    return clip_ansi_line(text, width)


def build_status_text(context: RenderContext) -> tuple[str, str]:
    """Return ``(text, style)`` for the status row."""
    theme = context.theme
    if not context.connected:
        return "connecting to quickfile daemon…", theme.status_warning
    if context.snapshot_kind == ERROR:
        message = context.error_message or "search failed"
        return f"error: {message}", theme.status_error
    if context.status_message:
        return context.status_message, theme.status
    count = len(context.results)
    if count:
        return f"{context.selected_index + 1}/{count} of {context.total_files} files", theme.status
    return f"0 matches of {context.total_files} files", theme.status


def build_frame(context: RenderContext) -> str:
    """Compose one full-screen frame as a string."""
    theme = context.theme
    width = max(1, context.width - 1)
    rows = list_row_count(context.max_lines)
    out: list[str] = ["\033[H\033[J"]
    out.append(format_query_row(context.query_text, width, theme))
    out.append("\r\n")

    for row in range(rows):
        idx = context.list_start + row
        if idx < len(context.results):
            out.append(format_result_row(context.results[idx], width, theme, idx == context.selected_index))
        out.append("\r\n")

    status_text, status_style = build_status_text(context)
    status = clip_ansi_line(status_text, width)
    out.append(f"{status_style}{status}{theme.reset}" if status_style else status)
    return "".join(out)


def render_frame(context: RenderContext) -> None:
    os.write(sys.stdout.fileno(), build_frame(context).encode("utf-8", errors="replace"))
