"""Wire types for the request and response channels.

Every frame is one JSON object per line, tagged by its ``type`` field.
Requests are encoded compactly; responses decode into a closed set of frame
classes plus ``UnknownFrame`` for tags this client does not understand.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from .errors import FrameParseError

SEARCH = "Search"
STATUS = "Status"
REFRESH = "Refresh"
REQUEST_KINDS: tuple[str, ...] = (SEARCH, STATUS, REFRESH)

SEARCH_RESULTS = "SearchResults"
ERROR = "Error"
REFRESH_COMPLETE = "RefreshComplete"

DEFAULT_RESULT_LIMIT = 100


@dataclass(frozen=True)
class SearchRequest:
    kind: str
    query: str | None = None
    limit: int | None = None

    @classmethod
    def search(cls, query: str, limit: int = DEFAULT_RESULT_LIMIT) -> SearchRequest:
        return cls(kind=SEARCH, query=query, limit=limit)

    @classmethod
    def status(cls) -> SearchRequest:
        return cls(kind=STATUS)

    @classmethod
    def refresh(cls) -> SearchRequest:
        return cls(kind=REFRESH)

    def to_payload(self) -> dict[str, object]:
        """Return the JSON object for this request.

        Only ``Search`` carries a body; ``limit`` is omitted when unset so the
        daemon applies its own default.
        """
        payload: dict[str, object] = {"type": self.kind}
        if self.kind == SEARCH:
            payload["query"] = self.query or ""
            if self.limit is not None:
                payload["limit"] = self.limit
        return payload


def encode_request(request: SearchRequest) -> str:
    """Serialize ``request`` as one compact JSON line without terminator."""
    return json.dumps(request.to_payload(), separators=(",", ":"), ensure_ascii=False)


def request_for_command(command: str, query: str = "") -> SearchRequest:
    """Build the request for a CLI subcommand name."""
    normalized = command.strip().lower()
    if normalized == "search":
        return SearchRequest.search(query)
    if normalized == "status":
        return SearchRequest.status()
    if normalized == "refresh":
        return SearchRequest.refresh()
    raise ValueError(f"unknown command: {command!r}")


@dataclass(frozen=True)
class SearchResult:
    absolute_path: str
    display_path: str
    match_offsets: frozenset[int] = frozenset()
    score: int = 0


@dataclass(frozen=True)
class SearchResultsFrame:
    results: tuple[SearchResult, ...]
    results_count: int
    total_files: int


@dataclass(frozen=True)
class ErrorFrame:
    message: str


@dataclass(frozen=True)
class StatusFrame:
    files_count: int
    last_updated: int


@dataclass(frozen=True)
class RefreshCompleteFrame:
    files_count: int


@dataclass(frozen=True)
class UnknownFrame:
    type_name: str
    payload: dict[str, object] = field(default_factory=dict)


Frame = SearchResultsFrame | ErrorFrame | StatusFrame | RefreshCompleteFrame | UnknownFrame


@dataclass(frozen=True)
class ResponseSnapshot:
    """Complete result set shown after a response; replaced, never merged."""

    kind: str
    results: tuple[SearchResult, ...] = ()
    total_files: int = 0
    message: str | None = None

    @classmethod
    def empty(cls) -> ResponseSnapshot:
        return cls(kind=SEARCH_RESULTS)

    @classmethod
    def from_results(cls, frame: SearchResultsFrame) -> ResponseSnapshot:
        return cls(kind=SEARCH_RESULTS, results=frame.results, total_files=frame.total_files)

    @classmethod
    def from_error(cls, frame: ErrorFrame) -> ResponseSnapshot:
        return cls(kind=ERROR, results=(), total_files=0, message=frame.message)


def _require_int(payload: dict[str, object], key: str, default: int | None = None) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise FrameParseError(f"field {key!r} must be an integer")
    return value


def _require_str(payload: dict[str, object], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise FrameParseError(f"field {key!r} must be a string")
    return value


def _decode_match_offsets(raw_matches: object) -> frozenset[int]:
    if raw_matches is None:
        return frozenset()
    if not isinstance(raw_matches, list):
        raise FrameParseError("field 'matches' must be a list")
    offsets: set[int] = set()
    for raw_match in raw_matches:
        if not isinstance(raw_match, dict):
            raise FrameParseError("match entries must be objects")
        offset = _require_int(raw_match, "char_index")
        if offset >= 0:
            offsets.add(offset)
    return frozenset(offsets)


def decode_search_result(raw: object) -> SearchResult:
    """Decode one entry of a ``SearchResults.results`` array."""
    if not isinstance(raw, dict):
        raise FrameParseError("result entries must be objects")
    absolute_path = _require_str(raw, "path")
    display_path = raw.get("display_path", absolute_path)
    if not isinstance(display_path, str):
        raise FrameParseError("field 'display_path' must be a string")
    return SearchResult(
        absolute_path=absolute_path,
        display_path=display_path,
        match_offsets=_decode_match_offsets(raw.get("matches")),
        score=_require_int(raw, "score", 0),
    )


def decode_frame(payload: object) -> Frame:
    """Decode an already-parsed JSON value into a frame.

    Unrecognized ``type`` tags produce ``UnknownFrame`` rather than an error.
    Recognized tags with missing or mistyped fields raise ``FrameParseError``.
    """
    if not isinstance(payload, dict):
        raise FrameParseError("frame must be a JSON object")
    type_name = payload.get("type")
    if not isinstance(type_name, str):
        return UnknownFrame(type_name="", payload=payload)

    if type_name == SEARCH_RESULTS:
        raw_results = payload.get("results", [])
        if not isinstance(raw_results, list):
            raise FrameParseError("field 'results' must be a list")
        results = tuple(decode_search_result(raw) for raw in raw_results)
        return SearchResultsFrame(
            results=results,
            results_count=_require_int(payload, "results_count", len(results)),
            total_files=_require_int(payload, "total_files", 0),
        )
    if type_name == ERROR:
        message = payload.get("message", "")
        return ErrorFrame(message=message if isinstance(message, str) else str(message))
    if type_name == STATUS:
        return StatusFrame(
            files_count=_require_int(payload, "files_count", 0),
            last_updated=_require_int(payload, "last_updated", 0),
        )
    if type_name == REFRESH_COMPLETE:
        return RefreshCompleteFrame(files_count=_require_int(payload, "files_count", 0))
    return UnknownFrame(type_name=type_name, payload=payload)


def decode_frame_line(line: str | bytes) -> Frame:
    """Parse one newline-delimited frame; raises ``FrameParseError`` on bad input."""
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FrameParseError(f"frame is not valid UTF-8: {exc}") from exc
    text = line.strip()
    if not text:
        raise FrameParseError("empty frame")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FrameParseError(f"invalid JSON: {exc.msg}") from exc
    return decode_frame(payload)
