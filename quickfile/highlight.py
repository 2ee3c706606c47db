"""Split a display path into directory/filename runs with match highlighting.

Pure functions only; the renderer decides colors per segment.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

DIRECTORY = "directory"
FILENAME = "filename"
PATH_SEPARATOR = "/"


@dataclass(frozen=True)
class HighlightSegment:
    text: str
    highlighted: bool
    part: str


def directory_end(display_path: str) -> int:
    """Return the index just past the last path separator, or 0."""
    return display_path.rfind(PATH_SEPARATOR) + 1


def _coalesce(segments: list[HighlightSegment]) -> list[HighlightSegment]:
    merged: list[HighlightSegment] = []
    for segment in segments:
        if not segment.text:
            continue
        if merged and merged[-1].highlighted == segment.highlighted and merged[-1].part == segment.part:
            previous = merged[-1]
            merged[-1] = HighlightSegment(previous.text + segment.text, previous.highlighted, previous.part)
        else:
            merged.append(segment)
    return merged


def segment(display_path: str, match_offsets: Iterable[int]) -> list[HighlightSegment]:
    """Partition ``display_path`` into renderable highlight runs.

    Offsets index into ``display_path``. Only filename characters are ever
    highlighted: offsets inside the directory prefix and offsets at or past
    the end of the string are dropped. Consecutive matched characters come
    back as one highlighted run, and the segment texts always concatenate to
    ``display_path``.
    """
    if not display_path:
        return [HighlightSegment("", False, FILENAME)]

    dir_end = directory_end(display_path)
    directory = display_path[:dir_end]
    filename = display_path[dir_end:]

    segments: list[HighlightSegment] = []
    if dir_end > 0:
        segments.append(HighlightSegment(directory, False, DIRECTORY))

    rebased = sorted(
        {offset - dir_end for offset in match_offsets if 0 <= offset - dir_end < len(filename)}
    )
    if not rebased:
        segments.append(HighlightSegment(filename, False, FILENAME))
        return _coalesce(segments)

    cursor = 0
    for offset in rebased:
        if offset > cursor:
            segments.append(HighlightSegment(filename[cursor:offset], False, FILENAME))
        segments.append(HighlightSegment(filename[offset], True, FILENAME))
        cursor = offset + 1
    if cursor < len(filename):
        segments.append(HighlightSegment(filename[cursor:], False, FILENAME))
    return _coalesce(segments)
