from __future__ import annotations

import pytest
import requests

from tubeintake.core.errors import ResolutionError
from tubeintake.core.models import ClassifiedToken, TokenKind
from tubeintake.core.resolver import OEmbedResolutionService, canonical_url


class _Response:
    def __init__(self, status_code: int, payload: object = None, *, bad_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self) -> object:
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


def _patch_get(monkeypatch, response=None, exc=None):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append((url, dict(params or {}), timeout))
        if exc is not None:
            raise exc
        return response

    monkeypatch.setattr(requests, "get", fake_get)
    return calls


def test_canonical_url_per_kind():
    assert canonical_url(ClassifiedToken("dQw4w9WgXcQ", TokenKind.VIDEO_ID)) == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert canonical_url(ClassifiedToken("PLabc", TokenKind.PLAYLIST_ID)) == "https://www.youtube.com/playlist?list=PLabc"
    assert canonical_url(ClassifiedToken("youtube.com/@a", TokenKind.REFERENCE)) == "https://youtube.com/@a"
    assert canonical_url(ClassifiedToken("https://youtu.be/x", TokenKind.REFERENCE)) == "https://youtu.be/x"


def test_resolve_returns_record(monkeypatch):
    calls = _patch_get(monkeypatch, _Response(200, {"title": " Never ", "author_name": "Rick"}))
    record = OEmbedResolutionService().resolve(ClassifiedToken("dQw4w9WgXcQ", TokenKind.VIDEO_ID), timeout_seconds=3)
    assert record.title == "Never"
    assert record.author_name == "Rick"
    assert record.url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert calls[0][1] == {"url": record.url, "format": "json"}
    assert calls[0][2] == 3.0


@pytest.mark.parametrize(
    ("status", "fragment"),
    [(404, "HTTP 404"), (403, "private"), (429, "too many requests"), (500, "HTTP 500")],
)
def test_http_errors_raise_resolution_error(monkeypatch, status, fragment):
    _patch_get(monkeypatch, _Response(status))
    with pytest.raises(ResolutionError) as excinfo:
        OEmbedResolutionService().resolve(ClassifiedToken("PLabc", TokenKind.PLAYLIST_ID))
    assert fragment in str(excinfo.value)


def test_network_errors_raise_resolution_error(monkeypatch):
    _patch_get(monkeypatch, exc=requests.ConnectionError("refused"))
    with pytest.raises(ResolutionError, match="Network error"):
        OEmbedResolutionService().resolve(ClassifiedToken("PLabc", TokenKind.PLAYLIST_ID))
    _patch_get(monkeypatch, exc=requests.Timeout("slow"))
    with pytest.raises(ResolutionError, match="Timed out"):
        OEmbedResolutionService().resolve(ClassifiedToken("PLabc", TokenKind.PLAYLIST_ID))


def test_bad_json_raises_resolution_error(monkeypatch):
    _patch_get(monkeypatch, _Response(200, bad_json=True))
    with pytest.raises(ResolutionError, match="Unexpected response"):
        OEmbedResolutionService().resolve(ClassifiedToken("PLabc", TokenKind.PLAYLIST_ID))


def test_unrecognized_tokens_are_not_sent(monkeypatch):
    calls = _patch_get(monkeypatch, _Response(200, {}))
    with pytest.raises(ResolutionError):
        OEmbedResolutionService().resolve(ClassifiedToken("junk", TokenKind.UNRECOGNIZED))
    assert calls == []


def test_playlist_title_falls_back_to_source_label(monkeypatch):
    _patch_get(monkeypatch, _Response(200, {"title": ""}))
    service = OEmbedResolutionService()
    playlist = service.resolve(ClassifiedToken("PLabc", TokenKind.PLAYLIST_ID), source_label="Road trip")
    video = service.resolve(ClassifiedToken("dQw4w9WgXcQ", TokenKind.VIDEO_ID), source_label="Road trip")
    reference = service.resolve(ClassifiedToken("https://youtube.com/@a", TokenKind.REFERENCE), source_label="Road trip")
    assert playlist.playlist_title == "Road trip"
    assert video.playlist_title == "Road trip"
    assert reference.playlist_title == ""


def test_playlist_keeps_its_own_title(monkeypatch):
    _patch_get(monkeypatch, _Response(200, {"title": "Mix"}))
    record = OEmbedResolutionService().resolve(ClassifiedToken("PLabc", TokenKind.PLAYLIST_ID), source_label="Road trip")
    assert record.playlist_title == "Mix"
