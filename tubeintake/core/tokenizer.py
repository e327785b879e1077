from __future__ import annotations

import re
from collections.abc import Iterator, Sequence

from .models import DEFAULT_FREE_SCAN_DELIMITERS, TabularLayout
from .text_input import strip_wrapping
from .structure import non_empty_lines

_DOUBLE_QUOTE = '"'
_ANY_QUOTE = "\"'"


def _delimiter_pattern(delimiters: str) -> re.Pattern[str]:
    chars = "".join(dict.fromkeys(str(delimiters or "") or DEFAULT_FREE_SCAN_DELIMITERS))
    return re.compile(f"[{re.escape(chars)}]")


def iter_row_tokens(lines: Sequence[str], layout: TabularLayout) -> Iterator[str]:
    """Yield the reference cell of every data row, one token per row."""
    column = layout.reference_column_index
    if column is None:
        return
    for line in non_empty_lines(lines)[1:]:
        fields = line.split(",")
        if len(fields) <= column:
            continue
        token = strip_wrapping(fields[column], _DOUBLE_QUOTE).strip()
        if token:
            yield token


def iter_free_scan_tokens(lines: Sequence[str], delimiters: str = DEFAULT_FREE_SCAN_DELIMITERS) -> Iterator[str]:
    pattern = _delimiter_pattern(delimiters)
    for raw_line in lines:
        line = str(raw_line or "").strip()
        if not line:
            continue
        for field in pattern.split(line):
            token = strip_wrapping(field, _ANY_QUOTE).strip()
            if token:
                yield token


def tokenize(
    lines: Sequence[str],
    layout: TabularLayout | None,
    *,
    delimiters: str = DEFAULT_FREE_SCAN_DELIMITERS,
) -> list[str]:
    if layout is not None:
        return list(iter_row_tokens(lines, layout))
    return list(iter_free_scan_tokens(lines, delimiters))
