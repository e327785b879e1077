from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class SourceKind(StrEnum):
    MANUAL = "manual"
    FILE = "file"


class ImportMode(StrEnum):
    CHANNELS = "channels"
    PLAYLISTS = "playlists"


class TokenKind(StrEnum):
    REFERENCE = "reference"
    PLAYLIST_ID = "playlist_id"
    VIDEO_ID = "video_id"
    UNRECOGNIZED = "unrecognized"


class OutcomeStatus(StrEnum):
    RESOLVED = "resolved"
    FAILED = "failed"
    SKIPPED = "skipped"


DEFAULT_REFERENCE_HOSTS = ("youtu.be", "youtube.com")
DEFAULT_LONG_FORM_HOSTS = ("youtube.com",)
DEFAULT_PLAYLIST_PREFIXES = ("PL", "LL", "UU", "OL", "FL", "RD")
DEFAULT_WATCH_LATER_SENTINEL = "WL"
DEFAULT_HEADER_KEYWORDS = ("url",)
DEFAULT_FREE_SCAN_DELIMITERS = ",;\t"


@dataclass(slots=True)
class IngestConfig:
    schema_version: int
    reference_hosts: tuple[str, ...] = DEFAULT_REFERENCE_HOSTS
    long_form_hosts: tuple[str, ...] = DEFAULT_LONG_FORM_HOSTS
    playlist_prefixes: tuple[str, ...] = DEFAULT_PLAYLIST_PREFIXES
    watch_later_sentinel: str = DEFAULT_WATCH_LATER_SENTINEL
    header_keywords: tuple[str, ...] = DEFAULT_HEADER_KEYWORDS
    free_scan_delimiters: str = DEFAULT_FREE_SCAN_DELIMITERS
    submit_concurrency: int = 4
    resolve_timeout_seconds: float = 10.0
    settle_timeout_seconds: float = 0.0
    max_batch_items: int = 0
    default_import_mode: str = ImportMode.CHANNELS.value


@dataclass(frozen=True, slots=True)
class RawSource:
    display_name: str
    content: bytes | str
    kind: SourceKind = SourceKind.FILE

    @classmethod
    def manual(cls, text: str) -> RawSource:
        return cls(display_name="", content=str(text or ""), kind=SourceKind.MANUAL)

    @classmethod
    def from_bytes(cls, display_name: str, data: bytes) -> RawSource:
        return cls(display_name=str(display_name or "").strip(), content=bytes(data or b""), kind=SourceKind.FILE)

    @classmethod
    def from_text(cls, display_name: str, text: str) -> RawSource:
        return cls(display_name=str(display_name or "").strip(), content=str(text or ""), kind=SourceKind.FILE)


@dataclass(frozen=True, slots=True)
class TabularLayout:
    header_fields: tuple[str, ...]
    reference_column_index: int | None


@dataclass(frozen=True, slots=True)
class ClassifiedToken:
    value: str
    kind: TokenKind


@dataclass(slots=True)
class ImportOutcome:
    token: str
    kind: str
    status: str
    reason: str = ""
    record: object | None = None


@dataclass(slots=True)
class ImportSummary:
    total: int
    resolved: int
    failed: int
    skipped: int
    outcomes: list[ImportOutcome] = field(default_factory=list)

    @property
    def is_partial_failure(self) -> bool:
        return self.failed > 0 or self.skipped > 0


@dataclass(frozen=True, slots=True)
class ResolvedRecord:
    token: str
    kind: str
    title: str = ""
    author_name: str = ""
    url: str = ""
    playlist_title: str = ""
