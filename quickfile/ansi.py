"""Column arithmetic for styled launcher rows.

SGR/CSI escapes pass through untouched and occupy no cells; wide characters
occupy two, combining marks none.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
_WIDE_CLASSES = frozenset({"W", "F"})


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def char_display_width(ch: str, col: int) -> int:
    """Cells taken by ``ch`` when drawn at column ``col`` (tabs depend on it)."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in _WIDE_CLASSES else 1


def display_width(text: str) -> int:
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def _tokens(text: str):
    """Yield ``(is_escape, chunk)`` pairs in order."""
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        for ch in text[pos:match.start()]:
            yield False, ch
        yield True, match.group(0)
        pos = match.end()
    for ch in text[pos:]:
        yield False, ch


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` after ``max_cols`` cells, keeping escapes seen so far.

    Tabs become spaces so the result lines up with the cells actually drawn.
    """
    if max_cols <= 0:
        return ""
    pieces: list[str] = []
    col = 0
    for is_escape, chunk in _tokens(text):
        if is_escape:
            if col >= max_cols:
                break
            pieces.append(chunk)
            continue
        width = char_display_width(chunk, col)
        if col + width > max_cols:
            break
        pieces.append(" " * width if chunk == "\t" else chunk)
        col += width
    return "".join(pieces)
