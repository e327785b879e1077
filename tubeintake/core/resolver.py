from __future__ import annotations

from typing import Protocol

import requests

from .app_metadata import OEMBED_ENDPOINT, PLAYLIST_URL_TEMPLATE, WATCH_URL_TEMPLATE
from .errors import ResolutionError
from .models import ClassifiedToken, ResolvedRecord, TokenKind

OEMBED_DEFAULT_TIMEOUT_SECONDS = 10.0


class ResolutionService(Protocol):
    def resolve(
        self,
        token: ClassifiedToken,
        *,
        timeout_seconds: float | None = None,
        source_label: str = "",
    ) -> object | None: ...


def canonical_url(token: ClassifiedToken) -> str:
    value = str(token.value or "").strip()
    if token.kind == TokenKind.VIDEO_ID:
        return WATCH_URL_TEMPLATE.format(token=value)
    if token.kind == TokenKind.PLAYLIST_ID:
        return PLAYLIST_URL_TEMPLATE.format(token=value)
    if value.startswith("//"):
        return f"https:{value}"
    if "://" not in value:
        return f"https://{value}"
    return value


def playlist_title_for(token: ClassifiedToken, title: str, source_label: str) -> str:
    """Playlist a resolved item is filed under.

    Playlists keep their own title and fall back to the imported file's name.
    Bare video IDs from a file are grouped under a playlist named after it.
    """
    label = str(source_label or "").strip()
    if token.kind == TokenKind.PLAYLIST_ID:
        return str(title or "").strip() or label
    if token.kind == TokenKind.VIDEO_ID:
        return label
    return ""


class OEmbedResolutionService:
    def __init__(self, *, endpoint: str = OEMBED_ENDPOINT, session: requests.Session | None = None) -> None:
        self._endpoint = str(endpoint or OEMBED_ENDPOINT).strip()
        self._session = session

    def _get(self, url: str, *, params: dict[str, str], timeout: float) -> requests.Response:
        if self._session is not None:
            return self._session.get(url, params=params, timeout=timeout)
        return requests.get(url, params=params, timeout=timeout)

    def resolve(
        self,
        token: ClassifiedToken,
        *,
        timeout_seconds: float | None = None,
        source_label: str = "",
    ) -> ResolvedRecord:
        if token.kind == TokenKind.UNRECOGNIZED:
            raise ResolutionError(f"Unsupported token: {token.value}")
        target_url = canonical_url(token)
        timeout = float(timeout_seconds or OEMBED_DEFAULT_TIMEOUT_SECONDS)
        try:
            response = self._get(
                self._endpoint,
                params={"url": target_url, "format": "json"},
                timeout=timeout,
            )
        except requests.Timeout as exc:
            raise ResolutionError(f"Timed out resolving {target_url}") from exc
        except requests.RequestException as exc:
            raise ResolutionError(f"Network error resolving {target_url}: {exc}") from exc

        status = int(response.status_code)
        if status == 404:
            raise ResolutionError(f"HTTP 404: not found ({target_url})")
        if status in {401, 403}:
            raise ResolutionError(f"HTTP {status}: private or sign in required ({target_url})")
        if status == 429:
            raise ResolutionError("HTTP 429: too many requests")
        if status >= 400:
            raise ResolutionError(f"HTTP {status} while resolving {target_url}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise ResolutionError(f"Unexpected response while resolving {target_url}") from exc
        if not isinstance(payload, dict):
            raise ResolutionError(f"Unexpected response while resolving {target_url}")
        title = str(payload.get("title") or "").strip()
        return ResolvedRecord(
            token=token.value,
            kind=token.kind.value,
            title=title,
            author_name=str(payload.get("author_name") or "").strip(),
            url=target_url,
            playlist_title=playlist_title_for(token, title, source_label),
        )
