"""
Data model for a single summary run.

Everything here lives for one request only. Nothing is persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import urlparse

from .errors import GenerationError

if TYPE_CHECKING:
    from .summary_document import SummaryDocument


def parse_bookmark_date(value: Any) -> Optional[datetime]:
    """Parse a bookmark timestamp (epoch milliseconds or ISO-8601 string) into UTC."""
    if value is None or value == '' or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _as_utc(value)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if text.isdigit():
        return parse_bookmark_date(int(text))

    try:
        parsed = datetime.fromisoformat(text.replace('Z', '+00:00'))
    except ValueError:
        return None
    return _as_utc(parsed)


def _as_utc(value: datetime) -> Optional[datetime]:
    # Offsets near year 1 or 9999 overflow when shifted to UTC
    if not value.tzinfo:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def is_http_url(url: Optional[str]) -> bool:
    """True for well-formed http(s) URLs with a host."""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


@dataclass(frozen=True)
class Bookmark:
    """One saved URL, the unit of work for the pipeline."""
    url: str
    title: Optional[str] = None
    date_added: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Bookmark':
        """Build from the browser-extension payload ({url, title, dateAdded})."""
        data = data or {}
        url = data.get('url')
        title = data.get('title')
        return cls(
            url=url.strip() if isinstance(url, str) else '',
            title=title.strip() if isinstance(title, str) and title.strip() else None,
            date_added=parse_bookmark_date(data.get('dateAdded')),
        )

    @property
    def has_valid_url(self) -> bool:
        return is_http_url(self.url)

    def formatted_date(self) -> str:
        d = _as_utc(self.date_added) if self.date_added else None
        if d is None:
            return 'Unknown date'
        return f"{d.month}/{d.day}/{d.year}"


@dataclass(frozen=True)
class ExtractedContent:
    title: str
    text: str


class Speaker(Enum):
    A = 'A'
    B = 'B'


@dataclass(frozen=True)
class DialogueLine:
    speaker: Speaker
    text: str


@dataclass(frozen=True)
class GenerationResult:
    """
    Tagged result of a Gemini call: Ok(text) or Err(reason).

    Built at the response boundary so nothing deeper in the pipeline has to
    poke at the SDK's nested candidate structure.
    """
    ok: bool
    text: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def Ok(cls, text: str) -> 'GenerationResult':
        return cls(ok=True, text=text)

    @classmethod
    def Err(cls, reason: str) -> 'GenerationResult':
        return cls(ok=False, reason=reason)

    def unwrap(self) -> str:
        if not self.ok:
            raise GenerationError(self.reason or 'Unknown generation failure')
        return self.text


class BookmarkState(Enum):
    PENDING = 'pending'
    FETCHED = 'fetched'
    SUMMARIZED = 'summarized'
    SCRIPTED = 'scripted'
    FETCH_FAILED = 'fetch_failed'
    GENERATION_FAILED = 'generation_failed'


@dataclass
class BookmarkOutcome:
    bookmark: Bookmark
    state: BookmarkState = BookmarkState.PENDING
    title: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state == BookmarkState.SCRIPTED


@dataclass
class PipelineResult:
    """Terminal artifact of one batch run: summary document plus optional audio."""
    summary: 'SummaryDocument'
    audio: Optional[bytes] = None
    outcomes: List[BookmarkOutcome] = field(default_factory=list)
    script: str = ''

    @property
    def has_audio(self) -> bool:
        return bool(self.audio)
