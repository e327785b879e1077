from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from .models import (
    DEFAULT_LONG_FORM_HOSTS,
    DEFAULT_PLAYLIST_PREFIXES,
    DEFAULT_REFERENCE_HOSTS,
    DEFAULT_WATCH_LATER_SENTINEL,
    ClassifiedToken,
    IngestConfig,
    TokenKind,
)

VIDEO_ID_LENGTH = 11
_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
# Eleven lowercase letters and dashes are almost always a slug ("not-a-token"), never a real id.
_PLAIN_WORD_RE = re.compile(r"^[a-z_-]+$")


@dataclass(frozen=True, slots=True)
class ClassificationRules:
    reference_hosts: tuple[str, ...] = DEFAULT_REFERENCE_HOSTS
    long_form_hosts: tuple[str, ...] = DEFAULT_LONG_FORM_HOSTS
    playlist_prefixes: tuple[str, ...] = DEFAULT_PLAYLIST_PREFIXES
    watch_later_sentinel: str = DEFAULT_WATCH_LATER_SENTINEL

    @classmethod
    def from_config(cls, config: IngestConfig) -> ClassificationRules:
        return cls(
            reference_hosts=tuple(config.reference_hosts),
            long_form_hosts=tuple(config.long_form_hosts),
            playlist_prefixes=tuple(config.playlist_prefixes),
            watch_later_sentinel=str(config.watch_later_sentinel),
        )


DEFAULT_RULES = ClassificationRules()


def is_reference(token: str, hosts: Iterable[str]) -> bool:
    lowered = str(token or "").lower()
    return any(host and host in lowered for host in hosts)


def is_playlist_id(token: str, rules: ClassificationRules = DEFAULT_RULES) -> bool:
    value = str(token or "")
    if len(value) < 2:
        return False
    if value == rules.watch_later_sentinel:
        return True
    return any(value.startswith(prefix) for prefix in rules.playlist_prefixes)


def is_video_id(token: str) -> bool:
    """Eleven characters from ``[A-Za-z0-9_-]`` that are not a plain lowercase word.

    All-lowercase values such as ``abcdefghijk`` or ``not-a-token`` are
    rejected even though the alphabet allows them, so prose slugs in a pasted
    list are not mistaken for video ids.
    """
    value = str(token or "")
    if len(value) != VIDEO_ID_LENGTH or not _VIDEO_ID_RE.match(value):
        return False
    return not _PLAIN_WORD_RE.match(value)


TokenRule = tuple[TokenKind, Callable[[str, ClassificationRules], bool]]

TOKEN_RULES: tuple[TokenRule, ...] = (
    (TokenKind.REFERENCE, lambda token, rules: is_reference(token, rules.reference_hosts)),
    (TokenKind.PLAYLIST_ID, is_playlist_id),
    (TokenKind.VIDEO_ID, lambda token, _rules: is_video_id(token)),
)


def classify_token(token: str, rules: ClassificationRules = DEFAULT_RULES) -> ClassifiedToken:
    value = str(token or "")
    for kind, matches in TOKEN_RULES:
        if matches(value, rules):
            return ClassifiedToken(value=value, kind=kind)
    return ClassifiedToken(value=value, kind=TokenKind.UNRECOGNIZED)


def classify_row_token(token: str, rules: ClassificationRules = DEFAULT_RULES) -> ClassifiedToken:
    """Row-mode columns hold full references only; anything else is rejected outright."""
    value = str(token or "")
    if is_reference(value, rules.long_form_hosts):
        return ClassifiedToken(value=value, kind=TokenKind.REFERENCE)
    return ClassifiedToken(value=value, kind=TokenKind.UNRECOGNIZED)


def classify_tokens(
    tokens: Iterable[str],
    rules: ClassificationRules = DEFAULT_RULES,
    *,
    row_mode: bool = False,
) -> Iterator[ClassifiedToken]:
    classify = classify_row_token if row_mode else classify_token
    for token in tokens:
        yield classify(token, rules)
