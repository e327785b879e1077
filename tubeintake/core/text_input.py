from __future__ import annotations

from collections.abc import Iterator

_LINE_SEPARATORS = ("\r", "\x85", "\u2028", "\u2029")


def split_lines(text: str) -> list[str]:
    # str.splitlines also breaks on \x0b, \x1c and friends; CSV cells may carry those.
    normalized = str(text or "").replace("\r\n", "\n")
    for separator in _LINE_SEPARATORS:
        normalized = normalized.replace(separator, "\n")
    return normalized.split("\n")


def iter_non_empty_lines(text: str) -> Iterator[str]:
    for raw_line in split_lines(text):
        value = str(raw_line or "").strip()
        if value:
            yield value


def first_non_empty_line(text: str) -> str:
    return next(iter_non_empty_lines(text), "")


def strip_wrapping(value: str, chars: str) -> str:
    return str(value or "").strip().strip(chars)
