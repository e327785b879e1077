from __future__ import annotations

from collections.abc import Callable, Sequence

from .errors import StructuralError
from .models import DEFAULT_HEADER_KEYWORDS, TabularLayout

HeaderRule = Callable[[Sequence[str]], int | None]

NO_REFERENCE_COLUMN_MESSAGE = "no identifiable reference column"
NOT_ENOUGH_LINES_MESSAGE = "expected a header line followed by at least one data line"


def split_header(line: str) -> tuple[str, ...]:
    return tuple(str(line or "").split(","))


def header_keyword_rule(keywords: Sequence[str]) -> HeaderRule:
    """Match the first header field (left to right) containing any keyword.

    Localized headers such as "Channel URL" or "Kanal URL" share the "url"
    fragment, so one keyword covers them.
    """
    needles = tuple(str(item or "").strip().lower() for item in keywords if str(item or "").strip())

    def rule(header_fields: Sequence[str]) -> int | None:
        for index, field in enumerate(header_fields):
            clean = str(field or "").strip().lower()
            if any(needle in clean for needle in needles):
                return index
        return None

    return rule


def second_column_rule(header_fields: Sequence[str]) -> int | None:
    return 1 if len(header_fields) >= 2 else None


def build_header_rules(keywords: Sequence[str] = DEFAULT_HEADER_KEYWORDS) -> tuple[HeaderRule, ...]:
    return (header_keyword_rule(keywords), second_column_rule)


DEFAULT_HEADER_RULES = build_header_rules()


def non_empty_lines(lines: Sequence[str]) -> list[str]:
    return [line for line in lines if str(line or "").strip()]


def locate_reference_column(
    header_fields: Sequence[str],
    rules: Sequence[HeaderRule] = DEFAULT_HEADER_RULES,
) -> int:
    for rule in rules:
        index = rule(header_fields)
        if index is not None:
            return int(index)
    raise StructuralError(NO_REFERENCE_COLUMN_MESSAGE)


def detect_layout(
    lines: Sequence[str],
    rules: Sequence[HeaderRule] = DEFAULT_HEADER_RULES,
) -> TabularLayout | None:
    """Return the tabular layout of ``lines`` or ``None`` for unstructured input.

    Fewer than two non-empty lines never form a table. A table whose header
    matches no rule raises StructuralError.
    """
    candidates = non_empty_lines(lines)
    if len(candidates) < 2:
        return None
    header_fields = split_header(candidates[0])
    column = locate_reference_column(header_fields, rules)
    return TabularLayout(header_fields=header_fields, reference_column_index=column)


def require_layout(
    lines: Sequence[str],
    rules: Sequence[HeaderRule] = DEFAULT_HEADER_RULES,
) -> TabularLayout:
    layout = detect_layout(lines, rules)
    if layout is None:
        raise StructuralError(NOT_ENOUGH_LINES_MESSAGE)
    return layout
