"""Query model.

Value types describing a search request (:class:`QueryInfo`) and the
normalized results a plugin extracts from its catalog service
(:class:`QueryResult` and :class:`QueryResultData`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterator, Optional, Sequence, Union

import httpx

from tunefetch.exceptions import InvalidURLError


@dataclass(frozen=True)
class QueryInfo:
    """Information required to make a query.

    Use :meth:`build_detailed` or :meth:`build_raw` rather than the
    constructor. The structured accessors return an empty string when the
    field is absent; use the ``has_*`` properties to tell "absent" from
    "empty". Constructing one directly with an empty structured field, or
    with a ``raw`` that differs from the joined fields, raises ValueError.
    """

    raw: str = ""
    _track_name: Optional[str] = field(default=None, repr=False)
    _artist_name: Optional[str] = field(default=None, repr=False)
    _other_info: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        fields = (self._track_name, self._artist_name, self._other_info)
        if any(value == "" for value in fields):
            raise ValueError("Structured query fields must be absent or non-empty")
        if any(value is not None for value in fields):
            expected = _join_fields(*(value or "" for value in fields))
            if self.raw != expected:
                raise ValueError(f"Raw query {self.raw!r} does not match its fields, expected {expected!r}")

    @classmethod
    def build_detailed(
        cls,
        track_name: str,
        artist_name: str,
        other_info: str,
    ) -> "QueryInfo":
        """Build a query from structured fields.

        Empty strings become absent fields. ``raw`` is set to
        ``"{track_name} {artist_name} {other_info}"`` with absent fields
        left out and surrounding whitespace trimmed.
        """
        return cls(
            raw=_join_fields(track_name, artist_name, other_info),
            _track_name=track_name or None,
            _artist_name=artist_name or None,
            _other_info=other_info or None,
        )

    @classmethod
    def build_raw(cls, text: str) -> "QueryInfo":
        """Build a query from free text, leaving structured fields absent."""
        return cls(raw=text)

    @property
    def track_name(self) -> str:
        return self._track_name or ""

    @property
    def artist_name(self) -> str:
        return self._artist_name or ""

    @property
    def other_info(self) -> str:
        return self._other_info or ""

    @property
    def has_track_name(self) -> bool:
        return self._track_name is not None

    @property
    def has_artist_name(self) -> bool:
        return self._artist_name is not None

    @property
    def has_other_info(self) -> bool:
        return self._other_info is not None

    @property
    def is_detailed(self) -> bool:
        """True if at least one structured field is present."""
        return self.has_track_name or self.has_artist_name or self.has_other_info

    def is_empty(self) -> bool:
        return not self.raw


def _join_fields(*parts: str) -> str:
    return " ".join(part for part in parts if part).strip()


def format_duration(duration: timedelta) -> str:
    """Format a track duration for display.

    Durations below one hour are rendered as ``M:SS`` (``1:05``), anything
    from one hour upward as ``H:MM:SS`` (``1:00:00``). Fractional seconds
    are truncated.
    """
    secs = int(duration.total_seconds())
    hours, remainder = divmod(secs, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


URLLike = Union[str, httpx.URL]


def _absolute_url(field_name: str, value: URLLike) -> httpx.URL:
    try:
        url = value if isinstance(value, httpx.URL) else httpx.URL(value)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidURLError(field_name, str(value)) from e
    if not url.is_absolute_url:
        raise InvalidURLError(field_name, str(value))
    return url


@dataclass(frozen=True)
class QueryResultData:
    """A single track matched by a plugin.

    Attributes:
        track_id: Opaque identifier assigned by the backend
        track_name: Track title
        track_url: Absolute URL of the track page or media
        track_thumbnail: Absolute URL of the track artwork
        artist_name: Artist display name
        artist_thumbnail: Absolute URL of the artist picture
        duration: Track length
    """

    track_id: str
    track_name: str
    track_url: httpx.URL
    track_thumbnail: httpx.URL
    artist_name: str
    artist_thumbnail: httpx.URL
    duration: timedelta

    def __post_init__(self) -> None:
        for name in ("track_url", "track_thumbnail", "artist_thumbnail"):
            object.__setattr__(self, name, _absolute_url(name, getattr(self, name)))
        if self.duration < timedelta(0):
            raise ValueError(f"Track duration must be non-negative, got {self.duration}")

    @property
    def duration_str(self) -> str:
        """Human-readable duration (see :func:`format_duration`)."""
        return format_duration(self.duration)


@dataclass(frozen=True)
class QueryResult:
    """Ordered results pulled from a plugin service.

    The order is the backend's ranking and is never changed.
    """

    data: tuple[QueryResultData, ...] = ()

    def __init__(self, data: Sequence[QueryResultData] = ()) -> None:
        object.__setattr__(self, "data", tuple(data))

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[QueryResultData]:
        return iter(self.data)

    def __getitem__(self, index: int) -> QueryResultData:
        return self.data[index]

    def __bool__(self) -> bool:
        return bool(self.data)
