from __future__ import annotations

import os
import threading

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from tubeintake.core.models import ClassifiedToken, ResolvedRecord


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    monkeypatch.setenv("TUBEINTAKE_HOME", str(home))
    return home


class FakeResolver:
    def __init__(self, *, failures: dict[str, Exception] | None = None, missing: set[str] | None = None) -> None:
        self.failures = dict(failures or {})
        self.missing = set(missing or ())
        self.calls: list[str] = []
        self.labels: list[str] = []
        self._lock = threading.Lock()

    def resolve(
        self,
        token: ClassifiedToken,
        *,
        timeout_seconds: float | None = None,
        source_label: str = "",
    ) -> ResolvedRecord | None:
        with self._lock:
            self.calls.append(token.value)
            self.labels.append(source_label)
        if token.value in self.failures:
            raise self.failures[token.value]
        if token.value in self.missing:
            return None
        return ResolvedRecord(token=token.value, kind=token.kind.value, title=f"title {token.value}")


class BlockingResolver(FakeResolver):
    def __init__(self, *, block: set[str] | None = None) -> None:
        super().__init__()
        self.block = set(block or ())
        self.release = threading.Event()
        self.entered = threading.Event()

    def resolve(
        self,
        token: ClassifiedToken,
        *,
        timeout_seconds: float | None = None,
        source_label: str = "",
    ) -> ResolvedRecord | None:
        if not self.block or token.value in self.block:
            self.entered.set()
            self.release.wait(10)
        return super().resolve(token, timeout_seconds=timeout_seconds, source_label=source_label)


@pytest.fixture
def fake_resolver() -> FakeResolver:
    return FakeResolver()
